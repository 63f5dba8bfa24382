"""Node variants describing the JSON shape a template emits.

The set is closed: a compiled template is a tree of these four classes and
nothing else.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from jbschema.annotations.data import MISSING_ANNOTATION, AnnotationData
from jbschema.nodes.base import Node


@dataclass(frozen=True, slots=True)
class PropertyNode(Node):
    """Scalar key: ``json.id @user.id``"""

    name: str
    annotation: AnnotationData = MISSING_ANNOTATION


@dataclass(frozen=True, slots=True)
class ObjectNode(Node):
    """Nested object: ``json.author do ... end``

    ``name`` is None for the tree root and for array item objects.
    """

    name: str | None
    children: Sequence[Node] = ()
    annotation: AnnotationData = MISSING_ANNOTATION


@dataclass(frozen=True, slots=True)
class ArrayNode(Node):
    """Array: ``json.array! ...`` or ``json.posts @posts do |post| ... end``

    ``items`` holds the captured item nodes; when empty the annotation's
    ``items`` schema (or a bare object) describes the elements.
    """

    name: str | None
    items: Sequence[Node] = ()
    annotation: AnnotationData = MISSING_ANNOTATION
    is_root_array: bool = False


@dataclass(frozen=True, slots=True)
class PartialNode(Node):
    """Kept partial reference (component mode): ``json.partial! 'users/user'``"""

    name: str
    path: str
    resolved_children: Sequence[Node] = ()
    annotation: AnnotationData = MISSING_ANNOTATION
