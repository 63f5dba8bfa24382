"""Annotation metadata attached to compiled nodes.

`AnnotationData` is the typed form of one ``# @openapi name:type ...``
comment. Unset fields are stored as ``None`` so two instances can be merged
with right-hand non-null values winning; the documented defaults (type
``string``, required, not conditional) are applied by the read-side
properties.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any

MISSING_DESCRIPTION = "TODO: MISSING COMMENT"

# Types that are not valid schema types, mapped to the format they imply.
FORMAT_ALIASES: dict[str, str] = {
    "date-time": "date-time",
    "datetime": "date-time",
    "date": "date",
    "time": "time",
}


@dataclass(frozen=True, slots=True)
class AnnotationData:
    """Schema metadata for one node.

    Attributes:
        type: Declared type; reads as "string" when unset.
        description: Human description.
        required: Declared requiredness; reads as True when unset.
        enum: Allowed values, in declaration order.
        items: Item type schema for arrays, e.g. ``{"type": "string"}``.
        format: Explicit format.
        example: Example value as written in the comment.
        conditional: Whether the node is emitted only on some branches.
        missing: True for the marker attached to unannotated nodes.
        extra: Unknown attribute keys, preserved verbatim.
    """

    type: str | None = None
    description: str | None = None
    required: bool | None = None
    enum: tuple[str, ...] | None = None
    items: dict[str, Any] | None = None
    format: str | None = None
    example: str | None = None
    conditional: bool | None = None
    missing: bool = False
    extra: dict[str, str] = field(default_factory=dict)

    @property
    def schema_type(self) -> str:
        """Type usable in a schema document (format aliases become string)."""
        if self.type is None or self.type in FORMAT_ALIASES:
            return "string"
        return self.type

    @property
    def schema_format(self) -> str | None:
        """Explicit format, else the one implied by a date/time alias type."""
        if self.format:
            return self.format
        if self.type is not None:
            return FORMAT_ALIASES.get(self.type)
        return None

    @property
    def is_conditional(self) -> bool:
        return self.conditional is True

    @property
    def is_required(self) -> bool:
        """Effective requiredness: declared required and not conditional."""
        return self.required is not False and not self.is_conditional

    def merge(self, other: AnnotationData) -> AnnotationData:
        """Merge with another annotation; the other's non-null fields win."""
        return AnnotationData(
            type=_pick(other.type, self.type),
            description=_pick(other.description, self.description),
            required=_pick(other.required, self.required),
            enum=_pick(other.enum, self.enum),
            items=_pick(other.items, self.items),
            format=_pick(other.format, self.format),
            example=_pick(other.example, self.example),
            conditional=_pick(other.conditional, self.conditional),
            missing=self.missing and other.missing,
            extra={**self.extra, **other.extra},
        )

    def as_conditional(self) -> AnnotationData:
        """Copy of this annotation forced to conditional."""
        if self.conditional is True:
            return self
        return replace(self, conditional=True)


def _pick(preferred: Any, fallback: Any) -> Any:
    return fallback if preferred is None else preferred


MISSING_ANNOTATION = AnnotationData(
    type="string",
    description=MISSING_DESCRIPTION,
    missing=True,
)
