"""Terminal color utilities for debug output.

Provides ANSI color codes with automatic TTY detection and NO_COLOR support.
Used by `jbschema.analysis.debug.format_tree` to tell node kinds, names and
annotation state apart at a glance.
"""

from __future__ import annotations

import os
import re
import sys
from typing import Literal

# ANSI color codes
_COLORS = {
    "reset": "\033[0m",
    "bold": "\033[1m",
    "dim": "\033[2m",
    "red": "\033[31m",
    "green": "\033[32m",
    "yellow": "\033[33m",
    "blue": "\033[34m",
    "magenta": "\033[35m",
    "cyan": "\033[36m",
}

ColorName = Literal["reset", "bold", "dim", "red", "green", "yellow", "blue", "magenta", "cyan"]

_ANSI_ESCAPE = re.compile(r"\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])")


def _should_use_colors() -> bool:
    """Check if terminal supports colors and user allows them.

    Respects:
        - NO_COLOR environment variable (https://no-color.org/)
        - FORCE_COLOR environment variable (overrides NO_COLOR)
        - sys.stdout.isatty() for TTY detection
    """
    if os.environ.get("FORCE_COLOR"):
        return True
    if os.environ.get("NO_COLOR"):
        return False
    return sys.stdout.isatty()


# Cache the color decision
_USE_COLORS = _should_use_colors()


def supports_color() -> bool:
    """Check if current terminal supports color output."""
    return _USE_COLORS


def colorize(text: str, *colors: ColorName) -> str:
    """Apply ANSI color codes to text.

    Example:
        >>> colorize("ObjectNode", "blue", "bold")
        '\033[34m\033[1mObjectNode\033[0m'  # if colors supported
        'ObjectNode'  # if colors not supported
    """
    if not _USE_COLORS or not colors:
        return text

    prefix = "".join(_COLORS.get(color, "") for color in colors)
    if not prefix:
        return text
    return f"{prefix}{text}{_COLORS['reset']}"


def strip_colors(text: str) -> str:
    """Remove ANSI color codes from text."""
    return _ANSI_ESCAPE.sub("", text)


# Semantic color helpers for tree output
def node_kind(text: str) -> str:
    """Color text as a node kind (blue + bold)."""
    return colorize(text, "blue", "bold")


def node_name(text: str) -> str:
    """Color text as a property name (cyan)."""
    return colorize(text, "cyan")


def missing(text: str) -> str:
    """Color text flagging a missing annotation (red)."""
    return colorize(text, "red")


def conditional(text: str) -> str:
    """Color text flagging a conditional node (yellow)."""
    return colorize(text, "yellow")


def dim_text(text: str) -> str:
    """Color text as dimmed/secondary (dim)."""
    return colorize(text, "dim")
