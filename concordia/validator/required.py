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

"""Required validators, one per schema kind.

Every controller installs these before any custom validator.
"""

from __future__ import annotations

import json
import numbers
from collections.abc import Mapping
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Dict, Set

from ..exceptions import DataValidationError, SchemaValidationError
from ..models.schema import (
    KEY_NAME,
    ArraySchema,
    ObjectSchema,
    ReferenceSchema,
    Schema,
    SchemaKind,
)
from .base import DataValidator, SchemaValidator

if TYPE_CHECKING:
    from .controller import ValidationController


def describe_schema(schema: Schema) -> str:
    if schema.name is not None:
        return f"'{schema.name}' ({schema.kind.value})"
    return schema.kind.value


def describe_data(data: Any) -> str:
    try:
        return json.dumps(data)
    except (TypeError, ValueError):
        return repr(data)


def is_missing(data: Any) -> bool:
    return data is None


def is_boolean(data: Any) -> bool:
    return isinstance(data, bool)


def is_number(data: Any) -> bool:
    # bool is an int subclass but never a JSON number.
    return isinstance(data, (numbers.Real, Decimal)) and not isinstance(data, bool)


def is_string(data: Any) -> bool:
    return isinstance(data, str)


def is_object(data: Any) -> bool:
    return isinstance(data, Mapping)


def is_array(data: Any) -> bool:
    return isinstance(data, (list, tuple))


class RequiredValidator(SchemaValidator, DataValidator):
    """Base for the required validators.

    Handles the missing-value rule shared by every kind: a missing or null
    value passes only when the schema is optional.
    """

    KIND: SchemaKind

    def validate_schema(self, schema: Schema, controller: "ValidationController") -> None:
        pass

    def validate_data(self, schema: Schema, data: Any, controller: "ValidationController") -> None:
        if is_missing(data):
            if schema.optional:
                return
            raise DataValidationError(f"value missing but not optional: {describe_schema(schema)}")
        self.validate_present(schema, data, controller)

    def validate_present(self, schema: Schema, data: Any, controller: "ValidationController") -> None:
        pass


class BooleanValidator(RequiredValidator):
    KIND = SchemaKind.BOOLEAN

    def validate_present(self, schema: Schema, data: Any, controller: "ValidationController") -> None:
        if not is_boolean(data):
            raise DataValidationError(f"The data was not a boolean value: {describe_data(data)}")


class NumberValidator(RequiredValidator):
    KIND = SchemaKind.NUMBER

    def validate_present(self, schema: Schema, data: Any, controller: "ValidationController") -> None:
        if not is_number(data):
            raise DataValidationError(f"The data was not a number value: {describe_data(data)}")


class StringValidator(RequiredValidator):
    KIND = SchemaKind.STRING

    def validate_present(self, schema: Schema, data: Any, controller: "ValidationController") -> None:
        if not is_string(data):
            raise DataValidationError(f"The data was not a string value: {describe_data(data)}")


class ObjectValidator(RequiredValidator):
    KIND = SchemaKind.OBJECT

    def validate_schema(self, schema: ObjectSchema, controller: "ValidationController") -> None:
        names: Set[str] = set()

        def _add(name: str) -> None:
            if not isinstance(name, str) or not name:
                raise SchemaValidationError(
                    f"Every field of an object must have a non-empty '{KEY_NAME}'."
                )
            if name in names:
                raise SchemaValidationError(f"duplicate field name: {name}")
            names.add(name)

        for index, field_schema in enumerate(schema.fields):
            if field_schema is None:
                raise SchemaValidationError(f"The field at index {index} is null.")

            controller.validate_schema(field_schema)

            if field_schema.name is not None:
                _add(field_schema.name)
            elif isinstance(field_schema, ReferenceSchema):
                # A nameless reference spreads the referenced object's fields
                # into this object.
                for name in field_schema.field_names():
                    _add(name)
            else:
                raise SchemaValidationError(
                    f"The field at index {index} is missing a '{KEY_NAME}': {describe_schema(field_schema)}"
                )

    def validate_present(self, schema: ObjectSchema, data: Any, controller: "ValidationController") -> None:
        if not is_object(data):
            raise DataValidationError(f"The data was not an object value: {describe_data(data)}")

        for field_schema in schema.fields:
            if field_schema.name is None:
                controller.validate_data(field_schema, data)
            else:
                controller.validate_data(field_schema, data.get(field_schema.name))


class ArrayValidator(RequiredValidator):
    KIND = SchemaKind.ARRAY

    def validate_schema(self, schema: ArraySchema, controller: "ValidationController") -> None:
        if schema.const_type is not None:
            controller.validate_schema(schema.const_type)
            return

        for index, index_schema in enumerate(schema.const_length):
            if index_schema is None:
                raise SchemaValidationError(f"The schema for index {index} was null.")
            controller.validate_schema(index_schema)

    def validate_present(self, schema: ArraySchema, data: Any, controller: "ValidationController") -> None:
        if not is_array(data):
            raise DataValidationError(f"The data was not an array value: {describe_data(data)}")

        if schema.const_type is not None:
            for item in data:
                controller.validate_data(schema.const_type, item)
            return

        if len(schema.const_length) != len(data):
            raise DataValidationError(
                f"length mismatch: the schema defines {len(schema.const_length)} elements "
                f"but the data has {len(data)}"
            )
        for index_schema, item in zip(schema.const_length, data):
            controller.validate_data(index_schema, item)


class ReferenceValidator(RequiredValidator):
    KIND = SchemaKind.REFERENCE

    def validate_present(self, schema: ReferenceSchema, data: Any, controller: "ValidationController") -> None:
        controller.validate_data(schema.resolved, data)


REQUIRED_VALIDATORS: Dict[SchemaKind, RequiredValidator] = {
    validator.KIND: validator
    for validator in (
        BooleanValidator(),
        NumberValidator(),
        StringValidator(),
        ObjectValidator(),
        ArrayValidator(),
        ReferenceValidator(),
    )
}
