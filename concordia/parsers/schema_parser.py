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

"""Builds schema trees from decoded schema documents."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple

from ..exceptions import SchemaValidationError, UnknownSchemaTypeError
from ..models.meta_schema import JsonPointer, join_pointer, check_node_keywords, format_schema_issues
from ..models.schema import (
    COMMON_KEYS,
    KEY_CONST_LENGTH,
    KEY_CONST_TYPE,
    KEY_DOC,
    KEY_FIELDS,
    KEY_NAME,
    KEY_OPTIONAL,
    KEY_REFERENCE,
    KEY_TYPE,
    ArraySchema,
    BooleanSchema,
    NumberSchema,
    ObjectSchema,
    ReferenceSchema,
    Schema,
    SchemaKind,
    StringSchema,
)

if TYPE_CHECKING:
    from ..resolvers.reference_resolver import ReferenceResolver

logger = logging.getLogger(__name__)


_KIND_KEYS: Dict[SchemaKind, Tuple[str, ...]] = {
    SchemaKind.BOOLEAN: (),
    SchemaKind.NUMBER: (),
    SchemaKind.STRING: (),
    SchemaKind.OBJECT: (KEY_FIELDS,),
    SchemaKind.ARRAY: (KEY_CONST_TYPE, KEY_CONST_LENGTH),
    SchemaKind.REFERENCE: (KEY_REFERENCE,),
}


def _where(path: JsonPointer) -> str:
    return f" (path={path})" if path else ""


class SchemaParser:
    """Turns a decoded schema document into a tree of schema nodes.

    References are resolved as they are met, through ``resolver``.
    """

    def __init__(self, resolver: Optional["ReferenceResolver"] = None):
        self._resolver = resolver

    @property
    def resolver(self) -> "ReferenceResolver":
        if self._resolver is None:
            from ..resolvers.reference_resolver import ReferenceResolver

            self._resolver = ReferenceResolver()
        return self._resolver

    def parse(self, raw: Any, *, path: JsonPointer = "") -> Schema:
        """Build a schema node (and its children) from ``raw``.

        Raises:
            SchemaValidationError: If the document does not follow the grammar
            ReferenceUnreachableError: If a referenced schema cannot be resolved
        """
        if not isinstance(raw, dict):
            raise SchemaValidationError(f"A schema must be a JSON object{_where(path)}")

        kind = self._detect_kind(raw, path)
        known_keys = COMMON_KEYS + _KIND_KEYS[kind]

        issues = check_node_keywords(raw, keys=known_keys, path=path)
        if issues:
            raise SchemaValidationError(
                f"Invalid {kind.value} schema:\n{format_schema_issues(issues)}"
            )

        common: Dict[str, Any] = {
            "doc": raw.get(KEY_DOC),
            "optional": raw.get(KEY_OPTIONAL, False),
            "name": raw.get(KEY_NAME),
            "extensions": {k: v for k, v in raw.items() if k not in known_keys},
        }

        if kind is SchemaKind.BOOLEAN:
            return BooleanSchema(**common)
        if kind is SchemaKind.NUMBER:
            return NumberSchema(**common)
        if kind is SchemaKind.STRING:
            return StringSchema(**common)
        if kind is SchemaKind.OBJECT:
            return ObjectSchema(fields=self._parse_list(raw.get(KEY_FIELDS), join_pointer(path, KEY_FIELDS)), **common)
        if kind is SchemaKind.ARRAY:
            const_type = raw.get(KEY_CONST_TYPE)
            return ArraySchema(
                const_type=self.parse(const_type, path=join_pointer(path, KEY_CONST_TYPE)) if const_type is not None else None,
                const_length=self._parse_list(raw.get(KEY_CONST_LENGTH), join_pointer(path, KEY_CONST_LENGTH)),
                **common,
            )

        url = raw[KEY_REFERENCE]
        logger.debug(f"Resolving reference '{url}'{_where(path)}")
        document = self.resolver.resolve(url)
        return ReferenceSchema(locator=url, document=document, **common)

    def _parse_list(self, raw_list: Optional[List[Any]], path: JsonPointer) -> Optional[List[Optional[Schema]]]:
        if raw_list is None:
            return None
        # Null entries are kept so that schema validation can report them.
        return [
            self.parse(item, path=join_pointer(path, index)) if item is not None else None
            for index, item in enumerate(raw_list)
        ]

    @staticmethod
    def _detect_kind(raw: Dict[str, Any], path: JsonPointer) -> SchemaKind:
        if KEY_TYPE not in raw:
            if KEY_REFERENCE in raw:
                return SchemaKind.REFERENCE
            raise SchemaValidationError(
                f"A schema must define '{KEY_TYPE}' or '{KEY_REFERENCE}'{_where(path)}"
            )

        type_name = raw[KEY_TYPE]
        if type_name not in SchemaKind.declarable():
            raise UnknownSchemaTypeError(
                f"Unknown schema type {type_name!r}{_where(path)}. "
                f"Valid types: {SchemaKind.declarable()}"
            )
        return SchemaKind(type_name)
