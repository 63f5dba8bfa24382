"""Node tree for compiled Jbuilder templates."""

from jbschema.nodes.base import Node
from jbschema.nodes.tree import ArrayNode, ObjectNode, PartialNode, PropertyNode

__all__ = ["ArrayNode", "Node", "ObjectNode", "PartialNode", "PropertyNode"]
