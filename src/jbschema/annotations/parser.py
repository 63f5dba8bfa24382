"""Parser for ``@openapi`` annotation comments.

One comment line in, one typed declaration (or None) out:

    # @openapi id:integer description:"User ID"            -> FieldDeclaration
    # @openapi status:string enum:[active,"on hold"]        -> FieldDeclaration
    # @openapi conditional:true                             -> ConditionalMarker
    # @openapi_operation summary:"Show user" tags:[Users]   -> OperationDeclaration
    # @openapi_param id:integer description:"User ID"       -> ParameterDeclaration(path)
    # @openapi_query page:integer min:1                     -> ParameterDeclaration(query)
    # @openapi_body name:string required:true               -> ParameterDeclaration(body)

Token grammar after the directive keyword: whitespace-separated
``key:value`` pairs where value is a bare token, a double-quoted string, or a
bracketed comma-separated list. For field and parameter declarations the
first pair is ``subject:type``. Unknown keys are kept verbatim in ``extra``.

The parser never raises. A line without a recognized directive, or with a
directive but no pairs, yields None and is discarded as a whole.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Literal

from jbschema.annotations.data import AnnotationData

_DIRECTIVE_RE = re.compile(r"@openapi(?:_(\w+))?\s+(.+)$")
_CONDITIONAL_RE = re.compile(r"@openapi\s+conditional:true\s*$")
_PAIR_RE = re.compile(r'(\w+):("[^"]*"|\[[^\]]*\]|\S+)')
_INT_RE = re.compile(r"-?\d+")

ParameterLocation = Literal["path", "query", "body"]

_PARAMETER_DIRECTIVES: dict[str, ParameterLocation] = {
    "param": "path",
    "query": "query",
    "body": "body",
}

_STATUS_KEYS = frozenset({"status", "statusCode", "status_code"})


@dataclass(frozen=True, slots=True)
class FieldDeclaration:
    """``@openapi name:type ...`` attached to one emitted key."""

    name: str
    annotation: AnnotationData


@dataclass(frozen=True, slots=True)
class ConditionalMarker:
    """Bare ``@openapi conditional:true`` line."""


@dataclass(frozen=True, slots=True)
class OperationDeclaration:
    """Operation-level metadata for the endpoint a template renders."""

    summary: str | None = None
    description: str | None = None
    operation_id: str | None = None
    tags: tuple[str, ...] = ()
    status: str | None = None
    extra: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class ParameterDeclaration:
    """Request parameter declared with ``@openapi_param/query/body``."""

    location: ParameterLocation
    name: str
    type: str = "string"
    required: bool | None = None
    description: str | None = None
    enum: tuple[str, ...] | None = None
    format: str | None = None
    minimum: int | None = None
    maximum: int | None = None
    example: str | None = None
    extra: dict[str, str] = field(default_factory=dict)

    def to_schema(self) -> dict[str, Any]:
        """Render as an OpenAPI parameter object.

        Path parameters are always required; the others are required unless
        declared ``required:false``.
        """
        schema: dict[str, Any] = {"type": self.type}
        if self.enum:
            schema["enum"] = list(self.enum)
        if self.format:
            schema["format"] = self.format
        if self.minimum is not None:
            schema["minimum"] = self.minimum
        if self.maximum is not None:
            schema["maximum"] = self.maximum
        if self.example is not None:
            schema["example"] = self.example

        parameter: dict[str, Any] = {
            "name": self.name,
            "in": self.location,
            "required": self.location == "path" or self.required is not False,
        }
        if self.description:
            parameter["description"] = self.description
        parameter["schema"] = schema
        return parameter


Annotation = FieldDeclaration | ConditionalMarker | OperationDeclaration | ParameterDeclaration


def parse_annotation(line: str) -> Annotation | None:
    """Parse one comment line into a declaration.

    Args:
        line: Raw comment text, with or without the leading ``#``.

    Returns:
        The declaration, or None when the line holds no usable directive.
    """
    if _CONDITIONAL_RE.search(line):
        return ConditionalMarker()

    match = _DIRECTIVE_RE.search(line)
    if match is None:
        return None

    kind, content = match.group(1), match.group(2).strip()
    pairs = [(key, _clean(value)) for key, value in _PAIR_RE.findall(content)]
    if not pairs:
        return None

    if kind is None:
        return _field_declaration(pairs)
    if kind == "operation":
        return _operation_declaration(pairs)
    location = _PARAMETER_DIRECTIVES.get(kind)
    if location is None:
        return None
    return _parameter_declaration(location, pairs)


def _field_declaration(pairs: list[tuple[str, str]]) -> FieldDeclaration:
    (name, type_), rest = pairs[0], pairs[1:]
    values: dict[str, Any] = {"type": type_}
    extra: dict[str, str] = {}

    for key, value in rest:
        if key == "required":
            values["required"] = _truthy(value, default=True)
        elif key == "conditional":
            values["conditional"] = value.lower() == "true"
        elif key == "description":
            values["description"] = value
        elif key == "enum":
            values["enum"] = _parse_list(value)
        elif key == "items":
            values["items"] = {"type": value}
        elif key in ("format", "example"):
            values[key] = value
        else:
            extra[key] = value

    return FieldDeclaration(name=name, annotation=AnnotationData(**values, extra=extra))


def _operation_declaration(pairs: list[tuple[str, str]]) -> OperationDeclaration:
    values: dict[str, Any] = {}
    extra: dict[str, str] = {}

    for key, value in pairs:
        if key in ("summary", "description"):
            values[key] = value
        elif key == "operationId":
            values["operation_id"] = value
        elif key == "tags":
            values["tags"] = _parse_list(value)
        elif key in _STATUS_KEYS:
            values["status"] = value
        else:
            extra[key] = value

    return OperationDeclaration(**values, extra=extra)


def _parameter_declaration(
    location: ParameterLocation, pairs: list[tuple[str, str]]
) -> ParameterDeclaration:
    (name, type_), rest = pairs[0], pairs[1:]
    values: dict[str, Any] = {}
    extra: dict[str, str] = {}

    for key, value in rest:
        if key == "required":
            values["required"] = _truthy(value, default=True)
        elif key == "enum":
            values["enum"] = _parse_list(value)
        elif key in ("description", "format", "example"):
            values[key] = value
        elif key in ("minimum", "min", "maximum", "max") and _INT_RE.fullmatch(value):
            values["minimum" if key.startswith("min") else "maximum"] = int(value)
        else:
            extra[key] = value

    return ParameterDeclaration(location=location, name=name, type=type_, **values, extra=extra)


def _clean(value: str) -> str:
    """Strip surrounding whitespace and double quotes."""
    value = value.strip()
    if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
        return value[1:-1]
    return value


def _parse_list(value: str) -> tuple[str, ...]:
    """Parse ``[a, "b c"]`` into a tuple; a bare token becomes a 1-tuple."""
    if not (value.startswith("[") and value.endswith("]")):
        return (value,)
    inner = value[1:-1]
    return tuple(_clean(item) for item in inner.split(",") if item.strip())


def _truthy(value: str, *, default: bool) -> bool:
    lowered = value.lower()
    if lowered == "false":
        return False
    if lowered == "true":
        return True
    return default
