"""Schema compiler: node tree to schema document.

A bottom-up visitor with one method per node variant, dispatched by class
name through a dict. The two compilers differ only in how a kept partial
reference is rendered:

- `SchemaCompiler` expands it inline
- `ComponentSchemaCompiler` emits a placeholder object, leaving the
  partial to be described once as a component
"""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from jbschema.analysis.visitor import iter_children
from jbschema.annotations import AnnotationData
from jbschema.nodes import ArrayNode, Node, ObjectNode, PartialNode, PropertyNode

Schema = dict[str, Any]

_INTEGER_RE = re.compile(r"[-+]?\d+")
_NUMBER_RE = re.compile(r"[-+]?(\d+\.?\d*|\.\d+)([eE][-+]?\d+)?")


@dataclass(frozen=True, slots=True)
class SchemaDocument:
    """Compiled schema plus what the caller needs to decide on emitting it.

    Attributes:
        schema: Top-level schema mapping.
        is_root_array: Whether the top level is an array.
        degenerate: True for an object without keys or an array with
            neither item nodes nor declared items; callers usually skip these.
    """

    schema: Schema
    is_root_array: bool
    degenerate: bool


class SchemaCompiler:
    """Compile node trees to schema mappings, expanding partials inline.

    Example:
        >>> document = SchemaCompiler().compile(result.root)
        >>> document.schema["type"]
        'object'

    """

    __slots__ = ("_dispatch",)

    def __init__(self) -> None:
        self._dispatch: dict[str, Callable[[Any], Schema]] = {
            "PropertyNode": self._visit_property,
            "ObjectNode": self._visit_object,
            "ArrayNode": self._visit_array,
            "PartialNode": self._visit_partial,
        }

    def compile(self, root: Node) -> SchemaDocument:
        schema = self.visit(root)
        is_root_array = schema.get("type") == "array"
        return SchemaDocument(
            schema=schema,
            is_root_array=is_root_array,
            degenerate=_is_degenerate(root),
        )

    def visit(self, node: Node) -> Schema:
        handler = self._dispatch.get(type(node).__name__)
        if handler is None:
            raise TypeError(f"Cannot compile {type(node).__name__} to a schema")
        return handler(node)

    def _visit_property(self, node: PropertyNode) -> Schema:
        annotation = node.annotation
        schema: Schema = {"type": annotation.schema_type}
        if annotation.description:
            schema["description"] = annotation.description
        if annotation.enum:
            schema["enum"] = [coerce_example(value, schema["type"]) for value in annotation.enum]
        schema_format = annotation.schema_format
        if schema_format:
            schema["format"] = schema_format
        if annotation.example is not None:
            schema["example"] = coerce_example(annotation.example, schema["type"])
        if schema["type"] == "array":
            schema["items"] = item_schema(annotation)
        return schema

    def _visit_object(self, node: ObjectNode) -> Schema:
        schema: Schema = {"type": "object"}
        _describe(schema, node.annotation)

        properties: Schema = {}
        required: dict[str, bool] = {}
        for child in node.children:
            name = getattr(child, "name", None)
            if name is None:
                continue
            # Later occurrences (e.g. an else branch) replace earlier ones
            properties[name] = self.visit(child)
            required[name] = child.required

        if properties:
            schema["properties"] = properties
        names = [name for name, is_required in required.items() if is_required]
        if names:
            schema["required"] = names
        return schema

    def _visit_array(self, node: ArrayNode) -> Schema:
        schema: Schema = {"type": "array"}
        _describe(schema, node.annotation)

        items = [self.visit(item) for item in node.items]
        if len(items) == 1:
            schema["items"] = items[0]
        elif items:
            schema["items"] = {"oneOf": items}
        else:
            schema["items"] = item_schema(node.annotation)
        return schema

    def _visit_partial(self, node: PartialNode) -> Schema:
        children = tuple(node.resolved_children)
        if len(children) == 1 and isinstance(children[0], ArrayNode) and children[0].name is None:
            return self.visit(children[0])
        return self._visit_object(
            ObjectNode(node.lineno, node.col_offset, node.name, children, node.annotation)
        )


class ComponentSchemaCompiler(SchemaCompiler):
    """Schema compiler that leaves kept partial references unexpanded."""

    __slots__ = ()

    def _visit_partial(self, node: PartialNode) -> Schema:
        schema: Schema = {"type": "object"}
        _describe(schema, node.annotation)
        return schema


def item_schema(annotation: AnnotationData) -> Schema:
    """Item schema declared by ``items:<type>``, else a bare object."""
    if not annotation.items:
        return {"type": "object"}
    declared = AnnotationData(type=annotation.items.get("type"))
    schema: Schema = {"type": declared.schema_type}
    if declared.schema_format:
        schema["format"] = declared.schema_format
    return schema


def coerce_example(text: str, schema_type: str) -> Any:
    """Convert an example to the JSON type its schema declares, when it parses."""
    if schema_type == "integer" and _INTEGER_RE.fullmatch(text):
        return int(text)
    if schema_type == "number" and _NUMBER_RE.fullmatch(text):
        return float(text)
    if schema_type == "boolean" and text.lower() in ("true", "false"):
        return text.lower() == "true"
    return text


def _describe(schema: Schema, annotation: AnnotationData) -> None:
    if annotation.description and not annotation.missing:
        schema["description"] = annotation.description


def _is_degenerate(root: Node) -> bool:
    """Whether the root describes nothing: no keys, or no item schema at all."""
    if isinstance(root, ArrayNode):
        return not root.items and not root.annotation.items
    if isinstance(root, PartialNode):
        children = tuple(root.resolved_children)
        if len(children) == 1 and isinstance(children[0], ArrayNode) and children[0].name is None:
            return _is_degenerate(children[0])
    else:
        children = tuple(iter_children(root))
    return not any(getattr(child, "name", None) is not None for child in children)
