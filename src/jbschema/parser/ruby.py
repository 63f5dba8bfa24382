"""tree-sitter adapter for Jbuilder (Ruby) sources.

Everything that knows about tree-sitter node types lives here. The compiler
walks raw tree-sitter nodes for structure (statements, conditionals, blocks)
but reads every call through `call_shape`, so classification works on plain
`CallShape` values.

Example:
    >>> tree = parse_source("json.id @user.id # @openapi id:integer\\n")
    >>> call = tree.root.named_children[0]
    >>> call_shape(call).name
    'id'
    >>> tree.comments[1].trailing
    True
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

import tree_sitter_ruby
from tree_sitter import Language, Node, Parser

from jbschema.classifier.shapes import CallArgument, CallShape

RUBY_LANGUAGE = Language(tree_sitter_ruby.language())

CALL_TYPES = frozenset({"call", "method_call", "command", "command_call"})

# Branching constructs; every branch is compiled as conditional.
CONDITIONAL_TYPES = frozenset(
    {"if", "unless", "elsif", "else", "if_modifier", "unless_modifier", "conditional", "case"}
)

# Children that hold the tested expression rather than a branch.
_CONDITION_FIELDS = ("condition", "value")

_BLOCK_BODY_TYPES = frozenset({"body_statement", "block_body"})
_BLOCK_PARAMETER_TYPES = frozenset({"block_parameters", "lambda_parameters"})
_SYMBOL_TYPES = frozenset({"simple_symbol", "hash_key_symbol"})


@dataclass(frozen=True, slots=True)
class Comment:
    """One ``#`` comment and where it sits."""

    lineno: int
    text: str
    trailing: bool


@dataclass(frozen=True, slots=True)
class SourceTree:
    """A parsed template.

    Attributes:
        root: The ``program`` node.
        lines: Source lines, without line endings.
        comments: Comments by 1-based line number.
        has_error: Whether tree-sitter had to recover from syntax errors.
    """

    root: Node
    lines: tuple[str, ...]
    comments: dict[int, Comment] = field(default_factory=dict)
    has_error: bool = False


def new_parser() -> Parser:
    """Create a Ruby parser. Parsers are not shared between threads."""
    return Parser(RUBY_LANGUAGE)


def parse_source(source: str, parser: Parser | None = None) -> SourceTree:
    """Parse Jbuilder source into a `SourceTree`.

    Syntax errors do not raise; tree-sitter returns a best-effort tree with
    ``has_error`` set.
    """
    parser = parser or new_parser()
    data = source.encode("utf-8")
    tree = parser.parse(data)
    lines = tuple(source.splitlines())

    comments: dict[int, Comment] = {}
    for node in _iter_comments(tree.root_node):
        row, col = node.start_point
        # start_point columns are byte offsets
        prefix = lines[row].encode("utf-8")[:col] if row < len(lines) else b""
        comments[row + 1] = Comment(
            lineno=row + 1,
            text=node_text(node),
            trailing=bool(prefix.strip()),
        )

    return SourceTree(
        root=tree.root_node,
        lines=lines,
        comments=comments,
        has_error=tree.root_node.has_error,
    )


def _iter_comments(node: Node) -> Iterator[Node]:
    stack = [node]
    while stack:
        current = stack.pop()
        if current.type == "comment":
            yield current
            continue
        stack.extend(current.named_children)


def node_text(node: Node | None) -> str:
    if node is None or node.text is None:
        return ""
    return node.text.decode("utf-8", errors="replace")


def is_call(node: Node) -> bool:
    return node.type in CALL_TYPES


def branches(node: Node) -> list[Node]:
    """Children of a conditional construct, minus the tested expression."""
    skipped = [node.child_by_field_name(name) for name in _CONDITION_FIELDS]
    return [
        child
        for child in node.named_children
        if not any(child == other for other in skipped if other is not None)
    ]


def call_shape(node: Node) -> CallShape:
    """Describe a call node as a `CallShape`."""
    receiver = node.child_by_field_name("receiver")
    method = node.child_by_field_name("method")
    arguments = node.child_by_field_name("arguments")
    block = node.child_by_field_name("block")

    block_params: tuple[str, ...] = ()
    if block is not None:
        for child in block.named_children:
            if child.type in _BLOCK_PARAMETER_TYPES:
                block_params = tuple(
                    node_text(param) for param in child.named_children if param.type != "comment"
                )

    row, col = node.start_point
    return CallShape(
        receiver=node_text(receiver) if receiver is not None else None,
        name=node_text(method),
        arguments=_arguments(arguments),
        has_block=block is not None,
        block_params=block_params,
        lineno=row + 1,
        col_offset=col,
    )


def block_statements(node: Node) -> list[Node]:
    """Body statements of a call's ``do ... end`` or ``{ ... }`` block."""
    block = node.child_by_field_name("block")
    if block is None:
        return []
    statements: list[Node] = []
    for child in block.named_children:
        if child.type in _BLOCK_PARAMETER_TYPES:
            continue
        if child.type in _BLOCK_BODY_TYPES:
            statements.extend(child.named_children)
        else:
            statements.append(child)
    return statements


def call_operands(node: Node) -> list[Node]:
    """Receiver, argument and block-body nodes of a call, in source order."""
    operands: list[Node] = []
    receiver = node.child_by_field_name("receiver")
    if receiver is not None:
        operands.append(receiver)
    arguments = node.child_by_field_name("arguments")
    if arguments is not None:
        operands.extend(arguments.named_children)
    operands.extend(block_statements(node))
    return operands


def _arguments(node: Node | None) -> tuple[CallArgument, ...]:
    if node is None:
        return ()
    result: list[CallArgument] = []
    keywords: list[tuple[str, CallArgument]] = []
    for child in node.named_children:
        if child.type == "comment":
            continue
        if child.type == "pair":
            keywords.append(_pair(child))
        else:
            result.append(_argument(child))
    if keywords:
        result.append(CallArgument(kind="hash", value="", pairs=tuple(keywords)))
    return tuple(result)


def _argument(node: Node) -> CallArgument:
    kind = node.type
    if kind == "string":
        if any(child.type == "interpolation" for child in node.named_children):
            return CallArgument(kind="expression", value=node_text(node))
        content = "".join(
            node_text(child) for child in node.named_children if child.type == "string_content"
        )
        return CallArgument(kind="string", value=content)
    if kind in _SYMBOL_TYPES:
        return CallArgument(kind="symbol", value=node_text(node).lstrip(":"))
    if kind == "hash":
        pairs = tuple(_pair(child) for child in node.named_children if child.type == "pair")
        return CallArgument(kind="hash", value=node_text(node), pairs=pairs)
    if kind == "parenthesized_statements" and node.named_child_count == 1:
        return _argument(node.named_children[0])
    return CallArgument(kind="expression", value=node_text(node))


def _pair(node: Node) -> tuple[str, CallArgument]:
    key = node.child_by_field_name("key")
    value = node.child_by_field_name("value")
    if key is None:
        name = ""
    elif key.type == "string":
        name = _argument(key).value
    else:
        name = node_text(key).strip(":")
    if value is None:
        return name, CallArgument(kind="expression")
    return name, _argument(value)
