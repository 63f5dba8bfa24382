"""Exceptions for jbschema.

Exception Hierarchy:
SchemaGenError (base)
├── TemplateNotFoundError     # Template not found by loader
└── ConfigurationError        # Invalid CompilerConfig value

Compilation itself never raises: unclassifiable calls, missing annotations,
unresolved partials and cyclic includes all degrade to a best-effort tree.
These exceptions cover the edges the caller controls, namely asking for a
template that does not exist and building an invalid configuration.

Example:
    ```
    J-TPL-001: Template 'api/users/show.json.jbuilder' not found in: app/views
      Docs: https://jbschema.readthedocs.io/en/latest/errors.html#j-tpl-001
    ```

"""

from __future__ import annotations

from enum import Enum

# ---------------------------------------------------------------------------
# Error codes
# ---------------------------------------------------------------------------

_DOCS_BASE = "https://jbschema.readthedocs.io/en/latest/errors.html"


class ErrorCode(Enum):
    """Searchable error codes for jbschema errors.

    Format: J-{CATEGORY}-{NUMBER}
    Categories: TPL (template loading), CFG (configuration)
    """

    # Template loading errors (J-TPL-xxx)
    TEMPLATE_NOT_FOUND = "J-TPL-001"

    # Configuration errors (J-CFG-xxx)
    INVALID_CONFIG = "J-CFG-001"

    @property
    def docs_url(self) -> str:
        """Documentation URL for this error code."""
        return f"{_DOCS_BASE}#{self.value.lower()}"

    @property
    def category(self) -> str:
        """Error category (e.g., 'template', 'config')."""
        prefix = self.value.split("-")[1]
        return {
            "TPL": "template",
            "CFG": "config",
        }.get(prefix, "unknown")


class SchemaGenError(Exception):
    """Base exception for all jbschema errors.

    Attributes:
        code: Optional ErrorCode for searchable error identification.
    """

    code: ErrorCode | None = None

    def format_compact(self) -> str:
        """Format error as a one-line header plus docs link.

        Returns:
            Multi-line string with error code, message and documentation URL.
        """
        header = str(self)
        if self.code and self.code.value not in header:
            header = f"{self.code.value}: {header}"
        parts = [header]
        if self.code:
            parts.append(f"  Docs: {self.code.docs_url}")
        return "\n".join(parts)


class TemplateNotFoundError(SchemaGenError):
    """Template not found by any configured loader.

    Raised by loaders. The template compiler only lets it escape for the
    top-level template; a missing partial is recorded on the compilation
    result instead.
    """

    code: ErrorCode | None = ErrorCode.TEMPLATE_NOT_FOUND


class ConfigurationError(SchemaGenError):
    """A CompilerConfig field holds an unusable value."""

    code: ErrorCode | None = ErrorCode.INVALID_CONFIG
