"""Checks that one schema extends another.

A schema extends an original when every value that conforms to it also
carries, with the same shape, everything the original requires.
"""

from __future__ import annotations

from typing import Optional

from ..exceptions import SchemaValidationError
from ..models.schema import ArraySchema, ObjectSchema, ReferenceSchema, Schema, flatten_references
from .required import describe_schema


def find_field(schema: ObjectSchema, name: str) -> Optional[Schema]:
    """Look up a field by name, descending into nameless reference fields."""
    for field_schema in schema.fields:
        if field_schema.name == name:
            return field_schema
        if field_schema.name is None and isinstance(field_schema, ReferenceSchema):
            resolved = flatten_references(field_schema)
            if isinstance(resolved, ObjectSchema):
                found = find_field(resolved, name)
                if found is not None:
                    return found
    return None


def validate_extension(original: Schema, extender: Schema) -> None:
    """Raise SchemaValidationError unless ``extender`` extends ``original``."""
    if not original.optional and extender.optional:
        raise SchemaValidationError(
            f"The original schema defined {describe_schema(original)} as required, "
            f"but the extending schema made it optional."
        )

    original_target = flatten_references(original)
    extender_target = flatten_references(extender)

    if original_target.kind is not extender_target.kind:
        raise SchemaValidationError(
            f"The original schema defined a {original_target.kind.value}, but the "
            f"extending schema defined a {extender_target.kind.value}: {describe_schema(extender)}"
        )

    if isinstance(original_target, ObjectSchema):
        _validate_object_extension(original_target, extender_target)
    elif isinstance(original_target, ArraySchema):
        _validate_array_extension(original_target, extender_target)


def _validate_object_extension(original: ObjectSchema, extender: ObjectSchema) -> None:
    for original_field in original.fields:
        if original_field.name is None:
            # A nameless reference: its fields must appear in the extender.
            _validate_object_extension(flatten_references(original_field), extender)
            continue

        extender_field = find_field(extender, original_field.name)
        if extender_field is None:
            if original_field.optional:
                continue
            raise SchemaValidationError(
                f"The original schema has a field that is not optional and not found "
                f"in the extending schema: '{original_field.name}'"
            )
        validate_extension(original_field, extender_field)


def _validate_array_extension(original: ArraySchema, extender: ArraySchema) -> None:
    if original.is_const_type:
        if not extender.is_const_type:
            raise SchemaValidationError(
                "The original schema defined a constant-type array, but the extending schema did not."
            )
        validate_extension(original.const_type, extender.const_type)
        return

    if extender.is_const_type:
        raise SchemaValidationError(
            "The original schema defined a constant-length array, but the extending schema did not."
        )
    if len(original.const_length) != len(extender.const_length):
        raise SchemaValidationError(
            f"The original schema and the extending schema are different lengths: "
            f"{len(original.const_length)} != {len(extender.const_length)}"
        )
    for original_item, extender_item in zip(original.const_length, extender.const_length):
        validate_extension(original_item, extender_item)
