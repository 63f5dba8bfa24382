"""Compiler configuration.

A single frozen dataclass carries every knob the classifier and template
compiler consult. Instances are immutable and safe to share between
compilers; derive variants with `dataclasses.replace()`.

Example:
    >>> from dataclasses import replace
    >>> from jbschema.environment.config import DEFAULT_CONFIG
    >>> components = replace(DEFAULT_CONFIG, inline_partials=False)
"""

from __future__ import annotations

from dataclasses import dataclass

from jbschema.environment.exceptions import ConfigurationError

# Jbuilder methods that only change runtime output (caching, key casing,
# nil handling, raw merges), never the declared shape.
DIRECTIVE_METHODS: frozenset[str] = frozenset(
    {
        "cache!",
        "cache_if!",
        "cache_root!",
        "key_format!",
        "deep_format_keys!",
        "ignore_nil!",
        "nil!",
        "null!",
        "merge!",
        "set!",
        "child!",
    }
)


@dataclass(frozen=True, slots=True)
class CompilerConfig:
    """Configuration for call classification and template compilation.

    Attributes:
        root_receiver: Name of the implicit builder receiver (``json``).
        array_method: Call emitting a JSON array (``array!``).
        partial_method: Call including a partial (``partial!``).
        partial_key: Hash option naming a partial (``partial: '...'``).
        collection_key: Hash option turning a partial into an array.
        directive_methods: Builder calls classified as no-op directives.
        template_extension: Suffix appended to resolved partial names.
        annotation_window: How many lines above a call may hold its annotation.
        inline_partials: Splice partial nodes into the parent (True) or keep
            them as PartialNode references (component mode).
        max_partial_depth: Deepest partial inclusion chain that is followed.
    """

    root_receiver: str = "json"
    array_method: str = "array!"
    partial_method: str = "partial!"
    partial_key: str = "partial"
    collection_key: str = "collection"
    directive_methods: frozenset[str] = DIRECTIVE_METHODS
    template_extension: str = ".json.jbuilder"
    annotation_window: int = 2
    inline_partials: bool = True
    max_partial_depth: int = 16

    def __post_init__(self) -> None:
        if self.annotation_window < 0:
            raise ConfigurationError(
                f"annotation_window must be >= 0, got {self.annotation_window}"
            )
        if self.max_partial_depth < 1:
            raise ConfigurationError(
                f"max_partial_depth must be >= 1, got {self.max_partial_depth}"
            )
        if not self.template_extension.startswith("."):
            raise ConfigurationError(
                f"template_extension must start with '.', got {self.template_extension!r}"
            )


DEFAULT_CONFIG = CompilerConfig()
