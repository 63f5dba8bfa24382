"""Render schemas back into ``@openapi`` comment lines.

The inverse of `parse_annotation` for fields and operations: an existing
OpenAPI document can be turned into the comments a template needs, e.g. to
fill in the keys listed by the coverage report.

    >>> render_field("status", {"type": "string", "enum": ["active", "on hold"]})
    '# @openapi status:string enum:[active,"on hold"]'
    >>> render_operation({"summary": "List posts", "tags": ["Posts"]})
    '# @openapi_operation summary:"List posts" tags:[Posts]'

Values are written so they parse back unchanged: descriptions are always
double-quoted, other values only when they contain whitespace. The comment
grammar has no escapes, so double quotes inside a value become single
quotes and commas cannot appear inside list elements.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from jbschema.annotations.data import MISSING_DESCRIPTION

_NEEDS_QUOTES_RE = re.compile(r'\s|^$|^["\[]')

# Numeric bounds and similar keywords written verbatim after the known keys.
_PASSTHROUGH_KEYS = ("minimum", "maximum", "pattern", "nullable")


def render_field(name: str, schema: Mapping[str, Any], required: bool = True) -> str:
    """Render one property schema as ``# @openapi name:type ...``.

    Args:
        name: Key the property is emitted under.
        schema: OpenAPI property schema.
        required: Whether the parent lists the key as required; only
            ``False`` is written.
    """
    schema_type = schema.get("type") or "string"
    parts = [f"{name}:{schema_type}"]

    items = schema.get("items")
    if schema_type == "array" and isinstance(items, Mapping) and items.get("type"):
        parts.append(f"items:{items['type']}")
    if not required:
        parts.append("required:false")

    description = schema.get("description")
    if description and description != MISSING_DESCRIPTION:
        parts.append(f"description:{_quoted(description)}")
    if schema.get("enum"):
        parts.append(f"enum:{_list(schema['enum'])}")
    if schema.get("format"):
        parts.append(f"format:{_value(schema['format'])}")
    if "example" in schema:
        parts.append(f"example:{_value(schema['example'])}")
    for key in _PASSTHROUGH_KEYS:
        if key in schema:
            parts.append(f"{key}:{_value(schema[key])}")

    return f"# @openapi {' '.join(parts)}"


def render_operation(operation: Mapping[str, Any]) -> str | None:
    """Render an operation object as ``# @openapi_operation ...``.

    Returns:
        The comment line, or None when the operation has no summary,
        description, operationId or tags.
    """
    parts: list[str] = []
    if operation.get("summary"):
        parts.append(f"summary:{_quoted(operation['summary'])}")
    if operation.get("description"):
        parts.append(f"description:{_quoted(operation['description'])}")
    if operation.get("operationId"):
        parts.append(f"operationId:{_value(operation['operationId'])}")
    if operation.get("tags"):
        parts.append(f"tags:{_list(operation['tags'])}")

    if not parts:
        return None
    return f"# @openapi_operation {' '.join(parts)}"


def render_properties(schema: Mapping[str, Any], prefix: str = "") -> dict[str, str]:
    """Comment lines for every property of a schema, keyed by document path.

    Paths follow the coverage report: dots for nested objects and ``[]`` for
    array items (``posts[].title``), so the two can be joined directly.
    """
    lines: dict[str, str] = {}
    _render_into(schema, prefix, lines)
    return lines


def _render_into(schema: Mapping[str, Any], prefix: str, lines: dict[str, str]) -> None:
    if schema.get("type") == "array":
        items = schema.get("items")
        if isinstance(items, Mapping):
            _render_into(items, f"{prefix}[]", lines)
        return

    properties = schema.get("properties")
    if not isinstance(properties, Mapping):
        return
    required = set(schema.get("required", ()))
    for name, child in properties.items():
        if not isinstance(child, Mapping):
            continue
        path = f"{prefix}.{name}" if prefix else name
        lines[path] = render_field(name, child, name in required)
        _render_into(child, path, lines)


def _text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def _quoted(value: Any) -> str:
    return '"' + _text(value).replace('"', "'") + '"'


def _value(value: Any) -> str:
    text = _text(value)
    return _quoted(text) if _NEEDS_QUOTES_RE.search(text) else text


def _list(values: Any) -> str:
    elements = []
    for value in values:
        text = _text(value).replace(",", " ").replace("]", ")").strip()
        if text:
            elements.append(_value(text))
    return f"[{','.join(elements)}]"
