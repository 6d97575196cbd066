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

"""Schema model: the six schema kinds and their builders.

Schema nodes are immutable once built. To change a node, take a builder from
it, change the builder and build a new node; construction invariants are
re-checked on every build.
"""

from __future__ import annotations

import copy
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, ClassVar, Dict, List, Mapping, Optional, Sequence

from ..exceptions import AmbiguousArrayFormError, MissingFieldsError, SchemaValidationError

if TYPE_CHECKING:
    from ..document import SchemaDocument


KEY_TYPE = "type"
KEY_DOC = "doc"
KEY_OPTIONAL = "optional"
KEY_NAME = "name"
KEY_FIELDS = "fields"
KEY_CONST_TYPE = "constType"
KEY_CONST_LENGTH = "constLength"
KEY_REFERENCE = "$ref"
KEY_DEFINITION = "definition"

COMMON_KEYS = (KEY_TYPE, KEY_DOC, KEY_OPTIONAL, KEY_NAME)


class SchemaKind(str, Enum):
    """Discriminator tag of a schema node."""

    BOOLEAN = "boolean"
    NUMBER = "number"
    STRING = "string"
    OBJECT = "object"
    ARRAY = "array"
    REFERENCE = "reference"

    @classmethod
    def get_all_kinds(cls) -> List["SchemaKind"]:
        return list(cls)

    @classmethod
    def declarable(cls) -> List[str]:
        """Kinds that may appear as the value of a ``type`` keyword."""
        return [kind.value for kind in cls if kind is not cls.REFERENCE]


@dataclass(frozen=True)
class Schema(ABC):
    """Common attributes shared by every schema node."""

    KIND: ClassVar[SchemaKind]

    doc: Optional[str] = None
    optional: bool = False
    name: Optional[str] = None
    extensions: Mapping[str, Any] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        # Extensions are copied so that later changes to the caller's dict
        # cannot reach into the node.
        object.__setattr__(
            self, "extensions", MappingProxyType(copy.deepcopy(dict(self.extensions or {})))
        )

    @property
    def kind(self) -> SchemaKind:
        return self.KIND

    @abstractmethod
    def sub_schemas(self) -> List["Schema"]:
        """Return the direct children of this node, in declaration order."""

    @abstractmethod
    def builder(self) -> "SchemaBuilder":
        """Return a mutable builder seeded with this node's attributes."""

    def _common_value(self) -> Dict[str, Any]:
        value: Dict[str, Any] = {KEY_TYPE: self.kind.value}
        if self.doc is not None:
            value[KEY_DOC] = self.doc
        if self.optional:
            value[KEY_OPTIONAL] = True
        if self.name is not None:
            value[KEY_NAME] = self.name
        return value

    def to_value(self) -> Dict[str, Any]:
        """Serialize this node back into its document form."""
        value = copy.deepcopy(dict(self.extensions))
        value.update(self._common_value())
        return value


@dataclass(frozen=True)
class BooleanSchema(Schema):
    KIND: ClassVar[SchemaKind] = SchemaKind.BOOLEAN

    def sub_schemas(self) -> List[Schema]:
        return []

    def builder(self) -> "BooleanSchemaBuilder":
        return BooleanSchemaBuilder(self)


@dataclass(frozen=True)
class NumberSchema(Schema):
    KIND: ClassVar[SchemaKind] = SchemaKind.NUMBER

    def sub_schemas(self) -> List[Schema]:
        return []

    def builder(self) -> "NumberSchemaBuilder":
        return NumberSchemaBuilder(self)


@dataclass(frozen=True)
class StringSchema(Schema):
    KIND: ClassVar[SchemaKind] = SchemaKind.STRING

    def sub_schemas(self) -> List[Schema]:
        return []

    def builder(self) -> "StringSchemaBuilder":
        return StringSchemaBuilder(self)


@dataclass(frozen=True)
class ObjectSchema(Schema):
    """An object whose fields are described, in order, by ``fields``."""

    KIND: ClassVar[SchemaKind] = SchemaKind.OBJECT

    fields: Optional[Sequence[Optional[Schema]]] = None

    def __post_init__(self) -> None:
        super().__post_init__()
        if self.fields is None:
            raise MissingFieldsError(f"The list of fields, '{KEY_FIELDS}', was not supplied.")
        object.__setattr__(self, "fields", tuple(self.fields))

    def sub_schemas(self) -> List[Schema]:
        return list(self.fields)

    def field_names(self) -> List[str]:
        """Return the flattened field names of this object.

        Nameless reference fields contribute the field names of the object
        they resolve to.
        """
        names: List[str] = []
        for field_schema in self.fields:
            if isinstance(field_schema, ReferenceSchema):
                names.extend(field_schema.field_names())
            else:
                names.append(field_schema.name)
        return names

    def builder(self) -> "ObjectSchemaBuilder":
        return ObjectSchemaBuilder(self)

    def to_value(self) -> Dict[str, Any]:
        value = super().to_value()
        value[KEY_FIELDS] = [f.to_value() for f in self.fields]
        return value


@dataclass(frozen=True)
class ArraySchema(Schema):
    """An array in exactly one of two forms.

    - constant-type: every element conforms to ``const_type``.
    - constant-length: the array has ``len(const_length)`` elements and
      element ``i`` conforms to ``const_length[i]``.
    """

    KIND: ClassVar[SchemaKind] = SchemaKind.ARRAY

    const_type: Optional[Schema] = None
    const_length: Optional[Sequence[Optional[Schema]]] = None

    def __post_init__(self) -> None:
        super().__post_init__()
        if self.const_type is None and self.const_length is None:
            raise AmbiguousArrayFormError(
                f"An array must define either '{KEY_CONST_TYPE}' or '{KEY_CONST_LENGTH}'."
            )
        if self.const_type is not None and self.const_length is not None:
            raise AmbiguousArrayFormError(
                f"Both '{KEY_CONST_TYPE}' and '{KEY_CONST_LENGTH}' were defined for the same array."
            )
        if self.const_length is not None:
            object.__setattr__(self, "const_length", tuple(self.const_length))

    @property
    def is_const_type(self) -> bool:
        return self.const_type is not None

    def sub_schemas(self) -> List[Schema]:
        if self.const_type is not None:
            return [self.const_type]
        return list(self.const_length)

    def builder(self) -> "ArraySchemaBuilder":
        return ArraySchemaBuilder(self)

    def to_value(self) -> Dict[str, Any]:
        value = super().to_value()
        if self.const_type is not None:
            value[KEY_CONST_TYPE] = self.const_type.to_value()
        else:
            value[KEY_CONST_LENGTH] = [s.to_value() for s in self.const_length]
        return value


@dataclass(frozen=True)
class ReferenceSchema(Schema):
    """A schema defined elsewhere.

    ``resolved`` is the referenced schema. When the reference was resolved
    from a URL, ``document`` is the schema document that was built from it and
    ``resolved`` is that document's root.
    """

    KIND: ClassVar[SchemaKind] = SchemaKind.REFERENCE

    locator: Optional[str] = None
    resolved: Optional[Schema] = None
    document: Optional["SchemaDocument"] = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        super().__post_init__()
        if self.resolved is None and self.document is not None:
            object.__setattr__(self, "resolved", self.document.root)
        if self.resolved is None:
            raise SchemaValidationError("The referenced sub-schema is missing.")

    def sub_schemas(self) -> List[Schema]:
        return self.resolved.sub_schemas()

    def field_names(self) -> List[str]:
        """Names this reference contributes to an enclosing object."""
        if self.name is not None:
            return [self.name]
        if isinstance(self.resolved, ObjectSchema):
            return self.resolved.field_names()
        raise SchemaValidationError(
            f"A nameless reference must resolve to an object: {self.locator or self.resolved!r}"
        )

    def builder(self) -> "ReferenceSchemaBuilder":
        return ReferenceSchemaBuilder(self)

    def to_value(self) -> Dict[str, Any]:
        value = super().to_value()
        # A reference is identified by its "$ref" key, not by "type".
        value.pop(KEY_TYPE, None)
        if self.locator is not None:
            value[KEY_REFERENCE] = self.locator
        else:
            value[KEY_DEFINITION] = self.resolved.to_value()
        return value


# -------------------------
# Builders
# -------------------------


class SchemaBuilder(ABC):
    """Mutable snapshot of a schema node's attributes."""

    def __init__(self, original: Schema):
        self.doc: Optional[str] = original.doc
        self.optional: bool = original.optional
        self.name: Optional[str] = original.name
        self.extensions: Dict[str, Any] = copy.deepcopy(dict(original.extensions))

    def set_doc(self, doc: Optional[str]) -> "SchemaBuilder":
        self.doc = doc
        return self

    def set_optional(self, optional: bool) -> "SchemaBuilder":
        self.optional = optional
        return self

    def set_name(self, name: Optional[str]) -> "SchemaBuilder":
        self.name = name
        return self

    def set_extension(self, key: str, value: Any) -> "SchemaBuilder":
        self.extensions[key] = value
        return self

    def _common(self) -> Dict[str, Any]:
        return {
            "doc": self.doc,
            "optional": self.optional,
            "name": self.name,
            "extensions": self.extensions,
        }

    @abstractmethod
    def build(self) -> Schema:
        """Build a new schema node, re-checking construction invariants."""


class BooleanSchemaBuilder(SchemaBuilder):
    def build(self) -> BooleanSchema:
        return BooleanSchema(**self._common())


class NumberSchemaBuilder(SchemaBuilder):
    def build(self) -> NumberSchema:
        return NumberSchema(**self._common())


class StringSchemaBuilder(SchemaBuilder):
    def build(self) -> StringSchema:
        return StringSchema(**self._common())


class ObjectSchemaBuilder(SchemaBuilder):
    def __init__(self, original: ObjectSchema):
        super().__init__(original)
        self.fields: Optional[List[Schema]] = list(original.fields)

    def set_fields(self, fields: Optional[Sequence[Schema]]) -> "ObjectSchemaBuilder":
        self.fields = list(fields) if fields is not None else None
        return self

    def add_field(self, field_schema: Schema) -> "ObjectSchemaBuilder":
        if self.fields is None:
            self.fields = []
        self.fields.append(field_schema)
        return self

    def build(self) -> ObjectSchema:
        return ObjectSchema(fields=self.fields, **self._common())


class ArraySchemaBuilder(SchemaBuilder):
    def __init__(self, original: ArraySchema):
        super().__init__(original)
        self.const_type: Optional[Schema] = original.const_type
        self.const_length: Optional[List[Schema]] = (
            list(original.const_length) if original.const_length is not None else None
        )

    def set_const_type(self, const_type: Optional[Schema]) -> "ArraySchemaBuilder":
        self.const_type = const_type
        return self

    def set_const_length(self, const_length: Optional[Sequence[Schema]]) -> "ArraySchemaBuilder":
        self.const_length = list(const_length) if const_length is not None else None
        return self

    def build(self) -> ArraySchema:
        return ArraySchema(const_type=self.const_type, const_length=self.const_length, **self._common())


class ReferenceSchemaBuilder(SchemaBuilder):
    def __init__(self, original: ReferenceSchema):
        super().__init__(original)
        self.locator: Optional[str] = original.locator
        self.resolved: Optional[Schema] = original.resolved
        self.document: Optional["SchemaDocument"] = original.document

    def set_resolved(self, resolved: Schema) -> "ReferenceSchemaBuilder":
        # A directly supplied schema no longer belongs to the fetched document.
        self.resolved = resolved
        self.locator = None
        self.document = None
        return self

    def build(self) -> ReferenceSchema:
        return ReferenceSchema(
            locator=self.locator,
            resolved=self.resolved,
            document=self.document,
            **self._common(),
        )


def flatten_references(schema: Schema) -> Schema:
    """Follow references until a non-reference schema is reached."""
    while isinstance(schema, ReferenceSchema):
        schema = schema.resolved
    return schema

