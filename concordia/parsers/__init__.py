"""Document loading and schema parsing."""

from .document_loader import (
    DocumentLoader,
    document_loader,
    load_document_file,
    load_document_from_bytes,
    load_document_from_string,
)
from .schema_parser import SchemaParser

__all__ = [
    "DocumentLoader",
    "document_loader",
    "load_document_file",
    "load_document_from_bytes",
    "load_document_from_string",
    "SchemaParser",
]
