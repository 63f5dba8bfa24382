"""Indented, colored rendering of a node tree for debugging.

Example:
    >>> print(format_tree(result.root))
    ObjectNode
      PropertyNode id: integer
      ArrayNode tags: array
        ObjectNode
          PropertyNode name MISSING
"""

from __future__ import annotations

from jbschema.analysis.visitor import iter_children
from jbschema.environment import terminal
from jbschema.nodes import ArrayNode, Node, PartialNode


def format_tree(root: Node, indent: str = "  ") -> str:
    """Render ``root`` and its descendants, one node per line."""
    lines: list[str] = []
    _format(root, 0, indent, lines)
    return "\n".join(lines)


def _format(node: Node, depth: int, indent: str, lines: list[str]) -> None:
    parts = [terminal.node_kind(type(node).__name__)]

    name = getattr(node, "name", None)
    annotation = getattr(node, "annotation", None)
    if name is not None:
        label = terminal.node_name(name)
        if annotation is not None and not annotation.missing:
            label = f"{label}: {annotation.schema_type}"
        parts.append(label)
    if isinstance(node, PartialNode):
        parts.append(terminal.dim_text(f"<{node.path}>"))
    if isinstance(node, ArrayNode) and node.is_root_array:
        parts.append(terminal.dim_text("(root)"))
    if annotation is not None:
        if annotation.missing and name is not None:
            parts.append(terminal.missing("MISSING"))
        if annotation.is_conditional:
            parts.append(terminal.conditional("conditional"))
        elif name is not None and not node.required:
            parts.append(terminal.dim_text("optional"))

    lines.append(f"{indent * depth}{' '.join(parts)}")
    for child in iter_children(node):
        _format(child, depth + 1, indent, lines)
