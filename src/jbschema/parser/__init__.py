"""Source adapter over the tree-sitter Ruby grammar."""

from jbschema.parser.ruby import (
    CALL_TYPES,
    CONDITIONAL_TYPES,
    RUBY_LANGUAGE,
    Comment,
    SourceTree,
    block_statements,
    branches,
    call_operands,
    call_shape,
    is_call,
    new_parser,
    node_text,
    parse_source,
)

__all__ = [
    "CALL_TYPES",
    "CONDITIONAL_TYPES",
    "RUBY_LANGUAGE",
    "Comment",
    "SourceTree",
    "block_statements",
    "branches",
    "call_operands",
    "call_shape",
    "is_call",
    "new_parser",
    "node_text",
    "parse_source",
]
