"""Annotation coverage of a compiled node tree.

Lists every key that was emitted without an ``@openapi`` comment, with a
path that locates it in the JSON document:

    id                   top-level key
    author.name          key of a nested object
    posts[].title        key of the objects inside an array

Kept partial references (component mode) are not keys of the document and
are not descended into; their keys are reported by running the check on
the matching entry of ``CompilationResult.components``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from jbschema.analysis.visitor import iter_children
from jbschema.nodes import ArrayNode, Node, ObjectNode, PartialNode, PropertyNode

NodeKind = Literal["property", "object", "array"]

_KINDS: dict[type, NodeKind] = {
    PropertyNode: "property",
    ObjectNode: "object",
    ArrayNode: "array",
}


@dataclass(frozen=True, slots=True)
class MissingAnnotation:
    """One unannotated key."""

    path: str
    name: str
    kind: NodeKind
    lineno: int


def find_missing_annotations(root: Node) -> list[MissingAnnotation]:
    """Collect unannotated named nodes below ``root``, in source order."""
    found: list[MissingAnnotation] = []
    _collect(root, "", found)
    return found


def _collect(node: Node, prefix: str, found: list[MissingAnnotation]) -> None:
    if isinstance(node, PartialNode):
        return

    name = getattr(node, "name", None)
    path = prefix
    if name is not None:
        path = f"{prefix}.{name}" if prefix else name
        if node.annotation.missing:  # type: ignore[attr-defined]
            found.append(MissingAnnotation(path, name, _KINDS[type(node)], node.lineno))

    if isinstance(node, ArrayNode):
        path = f"{path}[]"
    for child in iter_children(node):
        _collect(child, path, found)
