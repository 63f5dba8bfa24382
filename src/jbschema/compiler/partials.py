"""Partial name resolution.

Jbuilder refers to partials without the leading underscore and extension:

    json.partial! "api/users/user"   ->  api/users/_user.json.jbuilder
    json.partial! "user"             ->  <current directory>/_user.json.jbuilder
"""

from __future__ import annotations

import posixpath
import re

_WORD_SPLIT = re.compile(r"[_\-\s]+")


def resolve_partial_name(path: str, current: str, extension: str = ".json.jbuilder") -> str:
    """Turn a partial reference into a loader template name.

    Args:
        path: Path as written in the template.
        current: Template name of the file holding the reference.
        extension: Template extension to append.
    """
    path = path.strip().lstrip("/")
    if path.endswith(extension):
        return path

    directory, _, basename = path.rpartition("/")
    if not basename.startswith("_"):
        basename = f"_{basename}"
    if not directory:
        directory = posixpath.dirname(current)
    filename = f"{basename}{extension}"
    return posixpath.join(directory, filename) if directory else filename


def _strip_extension(name: str, extension: str) -> str:
    if name.endswith(extension):
        return name[: -len(extension)]
    return name


def component_name(template: str, extension: str = ".json.jbuilder") -> str:
    """PascalCase component name for a partial.

    Example:
        >>> component_name("api/users/_user_profile.json.jbuilder")
        'ApiUsersUserProfile'
    """
    parts = _strip_extension(template, extension).split("/")
    words = (word for part in parts for word in _WORD_SPLIT.split(part.lstrip("_")) if word)
    return "".join(word[:1].upper() + word[1:] for word in words)


def partial_property_name(path: str, extension: str = ".json.jbuilder") -> str:
    """Key a kept partial reference is emitted under: its basename.

    Example:
        >>> partial_property_name("users/_user.json.jbuilder")
        'user'
    """
    basename = posixpath.basename(_strip_extension(path.strip(), extension))
    return basename.lstrip("_")
