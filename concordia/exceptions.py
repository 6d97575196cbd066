# Copyright 2025 TIER IV, inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""Custom exceptions for the Concordia schema system."""


class ConcordiaError(Exception):
    """Base exception for all schema and data validation errors."""
    pass


class SchemaValidationError(ConcordiaError):
    """Exception raised when a schema is malformed or invalid."""
    pass


class AmbiguousArrayFormError(SchemaValidationError):
    """Exception raised when an array defines both or neither of constType/constLength."""
    pass


class MissingFieldsError(SchemaValidationError):
    """Exception raised when an object schema has no fields list."""
    pass


class UnknownSchemaTypeError(SchemaValidationError):
    """Exception raised when a schema declares an unsupported type."""
    pass


class ReferenceUnreachableError(SchemaValidationError):
    """Exception raised when a referenced schema cannot be resolved."""

    def __init__(self, message: str, url: str = None):
        super().__init__(message)
        self.url = url


class ReferenceFetchError(ReferenceUnreachableError):
    """Exception raised when a referenced schema cannot be fetched."""
    pass


class ReferenceEmptyBodyError(ReferenceUnreachableError):
    """Exception raised when a referenced schema location returns no content."""
    pass


class ReferenceNotJsonError(ReferenceUnreachableError):
    """Exception raised when a referenced schema is not valid JSON."""
    pass


class DataValidationError(ConcordiaError):
    """Exception raised when data does not conform to a schema."""
    pass


class DocumentRootError(ConcordiaError):
    """Exception raised when the root of a schema document is not allowed."""
    pass


class RootKindError(DocumentRootError):
    """Exception raised when the root schema is neither an object nor an array."""
    pass


class RootOptionalError(DocumentRootError):
    """Exception raised when the root schema is marked optional."""
    pass


class DocumentLoadError(ConcordiaError):
    """Exception raised when a JSON or YAML document cannot be read or decoded."""
    pass
