"""Schema model.

The six schema kinds, their builders and the keyword checks applied to raw
schema documents.
"""

from .meta_schema import SchemaIssue, check_node_keywords, format_schema_issues
from .schema import (
    ArraySchema,
    ArraySchemaBuilder,
    BooleanSchema,
    BooleanSchemaBuilder,
    NumberSchema,
    NumberSchemaBuilder,
    ObjectSchema,
    ObjectSchemaBuilder,
    ReferenceSchema,
    ReferenceSchemaBuilder,
    Schema,
    SchemaBuilder,
    SchemaKind,
    StringSchema,
    StringSchemaBuilder,
    flatten_references,
)

__all__ = [
    "ArraySchema",
    "ArraySchemaBuilder",
    "BooleanSchema",
    "BooleanSchemaBuilder",
    "NumberSchema",
    "NumberSchemaBuilder",
    "ObjectSchema",
    "ObjectSchemaBuilder",
    "ReferenceSchema",
    "ReferenceSchemaBuilder",
    "Schema",
    "SchemaBuilder",
    "SchemaKind",
    "StringSchema",
    "StringSchemaBuilder",
    "flatten_references",
    "SchemaIssue",
    "check_node_keywords",
    "format_schema_issues",
]
