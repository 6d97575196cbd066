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

"""The schema document: a validated root schema and its controller."""

from __future__ import annotations

import json
import logging
import threading
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from .exceptions import RootKindError, RootOptionalError
from .models.schema import ReferenceSchema, Schema, SchemaKind
from .parsers.document_loader import FORMAT_JSON, document_loader
from .parsers.schema_parser import SchemaParser
from .resolvers.reference_resolver import ReferenceResolver
from .validator.controller import ValidationController, get_default_controller
from .validator.extension import validate_extension

logger = logging.getLogger(__name__)

ROOT_KINDS = (SchemaKind.OBJECT, SchemaKind.ARRAY)

# Guards controller swaps across every document reachable from the one being
# updated.
_CONTROLLER_LOCK = threading.Lock()


class SchemaDocument:
    """A validated schema whose root is a required object or array.

    The tree is immutable. The controller is the only attribute that changes
    after construction, and only through :meth:`set_controller`, which
    carries the new controller into every referenced document as well.
    """

    def __init__(self, root: Schema, controller: Optional[ValidationController] = None):
        controller = controller or get_default_controller()

        controller.validate_schema(root)

        if root.kind not in ROOT_KINDS:
            raise RootKindError(
                f"The root of a schema document must be an object or an array, not '{root.kind.value}'."
            )
        if root.optional:
            raise RootOptionalError("The root of a schema document cannot be optional.")

        self._root = root
        self._controller = controller
        # Referenced documents were built with their resolver's controller.
        self.set_controller(controller)
        logger.debug(f"Created schema document with {root.kind.value} root")

    # ---- construction helpers ----------------------------------------------

    @classmethod
    def from_value(
        cls,
        value: Any,
        controller: Optional[ValidationController] = None,
        resolver: Optional[ReferenceResolver] = None,
    ) -> "SchemaDocument":
        """Build a document from a decoded JSON/YAML schema value."""
        root = SchemaParser(resolver).parse(value)
        return cls(root, controller)

    @classmethod
    def from_string(
        cls,
        content: str,
        fmt: str = FORMAT_JSON,
        controller: Optional[ValidationController] = None,
        resolver: Optional[ReferenceResolver] = None,
    ) -> "SchemaDocument":
        return cls.from_value(document_loader.load_from_string(content, fmt), controller, resolver)

    @classmethod
    def from_file(
        cls,
        file_path: Union[str, Path],
        controller: Optional[ValidationController] = None,
        resolver: Optional[ReferenceResolver] = None,
    ) -> "SchemaDocument":
        return cls.from_value(document_loader.load_file(file_path), controller, resolver)

    @classmethod
    def from_url(
        cls,
        url: str,
        controller: Optional[ValidationController] = None,
        resolver: Optional[ReferenceResolver] = None,
    ) -> "SchemaDocument":
        """Fetch a JSON schema document and build it.

        Raises:
            ReferenceUnreachableError: If the document cannot be fetched or is
                not JSON
        """
        resolver = resolver or ReferenceResolver()
        return cls.from_value(resolver.load(url), controller, resolver)

    # ---- accessors ---------------------------------------------------------

    @property
    def root(self) -> Schema:
        return self._root

    @property
    def controller(self) -> ValidationController:
        return self._controller

    def referenced_documents(self) -> List["SchemaDocument"]:
        """Every document reachable through references, depth-first, excluding this one."""
        found: List[SchemaDocument] = []
        seen = {id(self)}

        def _walk(schema: Optional[Schema]) -> None:
            if schema is None:
                return
            if isinstance(schema, ReferenceSchema):
                document = schema.document
                if document is not None and id(document) not in seen:
                    seen.add(id(document))
                    found.append(document)
                _walk(schema.resolved)
                return
            for sub_schema in schema.sub_schemas():
                _walk(sub_schema)

        _walk(self._root)
        return found

    def set_controller(self, controller: ValidationController) -> None:
        """Swap the controller here and in every referenced document."""
        documents = [self] + self.referenced_documents()
        with _CONTROLLER_LOCK:
            for document in documents:
                document._controller = controller
        logger.debug(f"Propagated controller to {len(documents)} schema document(s)")

    # ---- validation --------------------------------------------------------

    def validate_data(self, data: Any) -> None:
        """Raise DataValidationError unless ``data`` conforms to this schema."""
        controller = self._controller
        controller.validate_data(self._root, data)

    def validate_json(self, content: str) -> Any:
        """Parse a JSON data document, validate it and return the value."""
        data = document_loader.load_from_string(content, FORMAT_JSON)
        self.validate_data(data)
        return data

    def conforms_to(self, original: Union["SchemaDocument", Schema]) -> None:
        """Raise SchemaValidationError unless this schema extends ``original``."""
        original_root = original.root if isinstance(original, SchemaDocument) else original
        validate_extension(original_root, self._root)

    # ---- serialization -----------------------------------------------------

    def to_value(self) -> Dict[str, Any]:
        return self._root.to_value()

    def to_json(self, indent: Optional[int] = 2) -> str:
        return json.dumps(self.to_value(), indent=indent)

    def __repr__(self) -> str:
        return f"SchemaDocument(root={self._root.kind.value}, controller={self._controller!r})"
