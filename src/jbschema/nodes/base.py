"""Base node class for the jbschema node tree."""

from __future__ import annotations

from dataclasses import dataclass

from jbschema.annotations.data import MISSING_ANNOTATION, AnnotationData


@dataclass(frozen=True, slots=True)
class Node:
    """Base class for all node tree nodes.

    All nodes track the source position of the call that produced them.
    Nodes are immutable; children are tuples built bottom-up.

    """

    lineno: int
    col_offset: int

    @property
    def required(self) -> bool:
        """Effective requiredness: declared required and not conditional."""
        annotation: AnnotationData = getattr(self, "annotation", MISSING_ANNOTATION)
        return annotation.is_required
