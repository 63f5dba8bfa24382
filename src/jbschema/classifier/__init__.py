"""Classification of builder calls into templating primitives."""

from jbschema.classifier.matchers import MATCHERS, CallMatcher, Primitive, classify
from jbschema.classifier.shapes import CallArgument, CallShape

__all__ = ["MATCHERS", "CallArgument", "CallMatcher", "CallShape", "Primitive", "classify"]
