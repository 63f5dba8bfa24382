"""Shared traversal for the node tree.

Provides CHILD_ATTRS and iter_children for generic walking. Used by the
coverage report and the debug printer.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from jbschema.nodes import Node

# Sequence attributes that hold child nodes, per variant
CHILD_ATTRS = ("children", "items", "resolved_children")


def iter_children(node: Node) -> Iterator[Node]:
    """Yield the direct children of a node in source order."""
    for attr in CHILD_ATTRS:
        children = getattr(node, attr, None)
        if children:
            yield from children


def walk(node: Node) -> Iterator[Node]:
    """Yield a node and all its descendants, depth-first, pre-order."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(list(iter_children(current))))
