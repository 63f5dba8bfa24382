"""Compilation state threaded through the template walk.

Three levels, from widest to narrowest:

- `CompileSession`: one per top-level compilation. Holds the inclusion
  chain used to stop cyclic partials, the components compiled so far and
  the partial names that could not be loaded.
- `SourceFile`: one per parsed file. Holds the source lines, the parsed
  annotation comments and the comment lines already claimed by a call.
- `Frame`: one per nesting level. Immutable; a nested block gets a new
  frame with its own sink.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Literal

from jbschema.annotations import (
    MISSING_ANNOTATION,
    Annotation,
    AnnotationData,
    ConditionalMarker,
    FieldDeclaration,
    OperationDeclaration,
    parse_annotation,
)
from jbschema.nodes import Node
from jbschema.parser import SourceTree

LineKind = Literal["blank", "comment", "code"]


@dataclass(slots=True)
class CompileSession:
    """Mutable state shared by every file of one compilation."""

    active: list[str] = field(default_factory=list)
    components: dict[str, Node] = field(default_factory=dict)
    unresolved: list[str] = field(default_factory=list)
    operation: OperationDeclaration | None = None

    @property
    def depth(self) -> int:
        """Number of files on the current inclusion chain."""
        return len(self.active)

    def record_unresolved(self, name: str) -> None:
        if name not in self.unresolved:
            self.unresolved.append(name)


@dataclass(slots=True)
class SourceFile:
    """One parsed template and its annotation comments."""

    name: str
    lines: tuple[str, ...]
    annotations: dict[int, Annotation]
    trailing: frozenset[int]
    claimed: set[int] = field(default_factory=set)

    @classmethod
    def from_tree(cls, name: str, tree: SourceTree) -> SourceFile:
        annotations: dict[int, Annotation] = {}
        trailing: set[int] = set()
        for lineno, comment in tree.comments.items():
            parsed = parse_annotation(comment.text)
            if parsed is None:
                continue
            annotations[lineno] = parsed
            if comment.trailing:
                trailing.add(lineno)
        return cls(name=name, lines=tree.lines, annotations=annotations, trailing=frozenset(trailing))

    def line_kind(self, lineno: int) -> LineKind:
        if lineno < 1 or lineno > len(self.lines):
            return "blank"
        text = self.lines[lineno - 1].strip()
        if not text:
            return "blank"
        if text.startswith("#"):
            return "comment"
        return "code"

    def first_operation(self) -> OperationDeclaration | None:
        for lineno in sorted(self.annotations):
            annotation = self.annotations[lineno]
            if isinstance(annotation, OperationDeclaration):
                return annotation
        return None

    def lookup(self, lineno: int, window: int) -> AnnotationData:
        """Find and claim the annotation for a call starting on ``lineno``.

        A trailing comment on the call's own line wins. Otherwise up to
        ``window`` lines above are scanned; blank lines and comments that
        are not field annotations are passed over, while a code line or an
        already claimed comment ends the scan. A bare conditional marker is
        claimed and the scan goes on, so a field annotation above it still
        applies, merged with ``conditional``.
        """
        candidates: list[int] = []
        if lineno in self.trailing and lineno not in self.claimed:
            candidates.append(lineno)
        for candidate in range(lineno - 1, max(lineno - 1 - window, 0), -1):
            if candidate in self.claimed or self.line_kind(candidate) == "code":
                break
            candidates.append(candidate)

        conditional = False
        for candidate in candidates:
            annotation = self.annotations.get(candidate)
            if isinstance(annotation, FieldDeclaration):
                self.claimed.add(candidate)
                if conditional:
                    return annotation.annotation.merge(AnnotationData(conditional=True))
                return annotation.annotation
            if isinstance(annotation, ConditionalMarker) and not conditional:
                self.claimed.add(candidate)
                conditional = True

        if conditional:
            return MISSING_ANNOTATION.as_conditional()
        return MISSING_ANNOTATION


@dataclass(frozen=True, slots=True)
class Frame:
    """Where emitted nodes go, and whether they sit in a conditional branch.

    Attributes:
        file: File being walked.
        session: Compilation-wide state.
        sink: Nodes collected for the parent currently being built.
        conditional_depth: Number of enclosing conditional branches.
    """

    file: SourceFile
    session: CompileSession
    sink: list[Node]
    conditional_depth: int = 0

    @property
    def in_conditional(self) -> bool:
        return self.conditional_depth > 0

    def nested(self, sink: list[Node]) -> Frame:
        """Frame for a block body collecting into ``sink``."""
        return replace(self, sink=sink)

    def branch(self) -> Frame:
        """Frame for one branch of a conditional."""
        return replace(self, conditional_depth=self.conditional_depth + 1)
