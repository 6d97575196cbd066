"""Keyword-level checks for raw schema documents.

The grammar refuses to coerce keyword values: ``doc``, ``name`` and ``$ref``
must be strings, ``optional`` must be a boolean, and so on. Those rules are
written down as a JSON Schema and checked with ``jsonschema`` before a schema
node is built from a raw document value.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

import jsonschema

from .schema import (
    KEY_CONST_LENGTH,
    KEY_CONST_TYPE,
    KEY_DOC,
    KEY_FIELDS,
    KEY_NAME,
    KEY_OPTIONAL,
    KEY_REFERENCE,
    KEY_TYPE,
)


JsonPointer = str


@dataclass(frozen=True)
class SchemaIssue:
    message: str
    path: Optional[JsonPointer] = None


# Only the node's own keywords are described here. Children are checked when
# the parser descends into them, so the nested item schemas stay shallow.
NODE_META_SCHEMA: Dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "type": "object",
    "properties": {
        KEY_TYPE: {"type": "string"},
        KEY_DOC: {"type": "string"},
        KEY_OPTIONAL: {"type": "boolean"},
        KEY_NAME: {"type": "string"},
        KEY_REFERENCE: {"type": "string"},
        KEY_FIELDS: {
            "type": "array",
            "items": {"type": ["object", "null"]},
        },
        KEY_CONST_TYPE: {"type": "object"},
        KEY_CONST_LENGTH: {
            "type": "array",
            "items": {"type": ["object", "null"]},
        },
    },
}

_VALIDATOR = jsonschema.Draft7Validator(NODE_META_SCHEMA)


def _jp_escape(token: str) -> str:
    return token.replace("~", "~0").replace("/", "~1")


def join_pointer(base: Optional[JsonPointer], token: Any) -> JsonPointer:
    if not base:
        return f"/{_jp_escape(str(token))}"
    return f"{base}/{_jp_escape(str(token))}"


def check_node_keywords(
    raw: Any, *, keys: Optional[Iterable[str]] = None, path: JsonPointer = ""
) -> List[SchemaIssue]:
    """Check the keywords of a single raw schema node.

    Only ``keys`` are checked when given; other keys of the node are
    extensions and may hold any value.

    Returns:
        List of SchemaIssue objects, empty when the keywords are well-typed.
    """
    if not isinstance(raw, dict):
        return [SchemaIssue(message="A schema must be a JSON object", path=path)]

    if keys is not None:
        keys = set(keys)
        raw = {k: v for k, v in raw.items() if k in keys}

    issues: List[SchemaIssue] = []
    for error in sorted(_VALIDATOR.iter_errors(raw), key=lambda e: [str(p) for p in e.absolute_path]):
        issue_path = path
        for token in error.absolute_path:
            issue_path = join_pointer(issue_path, token)
        issues.append(SchemaIssue(message=error.message, path=issue_path))
    return issues


def format_schema_issues(issues: List[SchemaIssue]) -> str:
    return "\n".join(
        f"  - {i.message}" + (f" (path={i.path})" if i.path else "")
        for i in issues
    )
