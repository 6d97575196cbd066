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

"""Concordia: a small schema language for JSON data and its validator."""

__version__ = "0.1.0"

from .config import ConcordiaConfig, concordia_config
from .document import SchemaDocument
from .exceptions import (
    AmbiguousArrayFormError,
    ConcordiaError,
    DataValidationError,
    DocumentLoadError,
    DocumentRootError,
    MissingFieldsError,
    ReferenceEmptyBodyError,
    ReferenceFetchError,
    ReferenceNotJsonError,
    ReferenceUnreachableError,
    RootKindError,
    RootOptionalError,
    SchemaValidationError,
    UnknownSchemaTypeError,
)
from .models import SchemaKind
from .resolvers import ReferenceResolver
from .validator import (
    DataValidator,
    SchemaValidator,
    ValidationController,
    ValidationControllerBuilder,
    get_default_controller,
)

__all__ = [
    "__version__",
    "ConcordiaConfig",
    "concordia_config",
    "SchemaDocument",
    "SchemaKind",
    "ReferenceResolver",
    "DataValidator",
    "SchemaValidator",
    "ValidationController",
    "ValidationControllerBuilder",
    "get_default_controller",
    "ConcordiaError",
    "SchemaValidationError",
    "AmbiguousArrayFormError",
    "MissingFieldsError",
    "UnknownSchemaTypeError",
    "ReferenceUnreachableError",
    "ReferenceFetchError",
    "ReferenceEmptyBodyError",
    "ReferenceNotJsonError",
    "DataValidationError",
    "DocumentRootError",
    "RootKindError",
    "RootOptionalError",
    "DocumentLoadError",
]
