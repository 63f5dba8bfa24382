"""Parser-neutral view of one builder call.

The classifier and the template compiler only look at these shapes, never at
tree-sitter nodes, so both can be exercised with hand-built values.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Literal

ArgumentKind = Literal["string", "symbol", "hash", "expression"]


@dataclass(frozen=True, slots=True)
class CallArgument:
    """One call argument.

    Attributes:
        kind: ``string`` (literal without interpolation), ``symbol``,
            ``hash`` (explicit hash or trailing keyword arguments) or
            ``expression`` (anything else).
        value: String content, symbol name, or the raw source text.
        pairs: Key/value pairs for hashes, keys without the colon.
    """

    kind: ArgumentKind
    value: str = ""
    pairs: Sequence[tuple[str, CallArgument]] = ()


@dataclass(frozen=True, slots=True)
class CallShape:
    """Receiver, method name, arguments and block facts of one call."""

    receiver: str | None
    name: str
    arguments: Sequence[CallArgument] = ()
    has_block: bool = False
    block_params: Sequence[str] = ()
    lineno: int = 1
    col_offset: int = 0

    def first_string(self) -> str | None:
        """Content of the first string-literal argument, if any."""
        for argument in self.arguments:
            if argument.kind == "string":
                return argument.value
        return None

    def option(self, key: str) -> CallArgument | None:
        """Value of ``key:`` in a hash argument, if present."""
        for argument in self.arguments:
            if argument.kind != "hash":
                continue
            for pair_key, value in argument.pairs:
                if pair_key == key:
                    return value
        return None

    def has_option(self, key: str) -> bool:
        return self.option(key) is not None

    @property
    def positional(self) -> tuple[CallArgument, ...]:
        """Arguments other than hashes."""
        return tuple(a for a in self.arguments if a.kind != "hash")
