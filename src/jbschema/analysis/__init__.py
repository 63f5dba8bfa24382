"""Analysis of compiled node trees: traversal, coverage and debug output."""

from jbschema.analysis.coverage import MissingAnnotation, find_missing_annotations
from jbschema.analysis.debug import format_tree
from jbschema.analysis.visitor import CHILD_ATTRS, iter_children, walk

__all__ = [
    "CHILD_ATTRS",
    "MissingAnnotation",
    "find_missing_annotations",
    "format_tree",
    "iter_children",
    "walk",
]
