"""Call classification.

Maps a `CallShape` onto one of the templating primitives. Matching is an
ordered table of pure predicates; the first predicate that accepts the shape
decides, so the priority order is the table order:

1. ``json.array! ...``                  ARRAY_DECLARATION
2. ``json.partial! ...`` / ``partial!`` PARTIAL_REFERENCE
3. ``json.author do ... end``           OBJECT_BLOCK
4. ``json.id @user.id`` and friends     PROPERTY_CALL
5. ``json.cache! ... do ... end``       NO_OP_DIRECTIVE

Anything else is unclassified and returns None.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from jbschema.classifier.shapes import CallShape
from jbschema.environment.config import DEFAULT_CONFIG, CompilerConfig


class Primitive(Enum):
    """Templating primitives the template compiler understands."""

    PROPERTY_CALL = "property_call"
    OBJECT_BLOCK = "object_block"
    ARRAY_DECLARATION = "array_declaration"
    PARTIAL_REFERENCE = "partial_reference"
    NO_OP_DIRECTIVE = "no_op_directive"


Predicate = Callable[[CallShape, CompilerConfig], bool]


@dataclass(frozen=True, slots=True)
class CallMatcher:
    """One row of the classification table."""

    primitive: Primitive
    predicate: Predicate
    description: str

    def matches(self, shape: CallShape, config: CompilerConfig) -> bool:
        return self.predicate(shape, config)


def _on_root(shape: CallShape, config: CompilerConfig) -> bool:
    return shape.receiver == config.root_receiver


def _is_array(shape: CallShape, config: CompilerConfig) -> bool:
    return _on_root(shape, config) and shape.name == config.array_method


def _is_partial(shape: CallShape, config: CompilerConfig) -> bool:
    return shape.name == config.partial_method and (
        shape.receiver is None or _on_root(shape, config)
    )


def _is_property(shape: CallShape, config: CompilerConfig) -> bool:
    return (
        _on_root(shape, config)
        and bool(shape.name)
        and shape.name not in config.directive_methods
        and not shape.name.endswith("!")
    )


def _is_object_block(shape: CallShape, config: CompilerConfig) -> bool:
    return _is_property(shape, config) and shape.has_block and not shape.block_params


def _is_directive(shape: CallShape, config: CompilerConfig) -> bool:
    return _on_root(shape, config) and shape.name in config.directive_methods


MATCHERS: tuple[CallMatcher, ...] = (
    CallMatcher(Primitive.ARRAY_DECLARATION, _is_array, "json.array! with or without a block"),
    CallMatcher(Primitive.PARTIAL_REFERENCE, _is_partial, "json.partial! or bare partial!"),
    CallMatcher(Primitive.OBJECT_BLOCK, _is_object_block, "json.key do ... end"),
    CallMatcher(Primitive.PROPERTY_CALL, _is_property, "json.key value, iteration or extract"),
    CallMatcher(Primitive.NO_OP_DIRECTIVE, _is_directive, "cache!, key_format! and friends"),
)


def classify(shape: CallShape, config: CompilerConfig = DEFAULT_CONFIG) -> Primitive | None:
    """Return the primitive for a call, or None when it is not a builder call."""
    for matcher in MATCHERS:
        if matcher.matches(shape, config):
            return matcher.primitive
    return None
