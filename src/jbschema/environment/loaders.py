"""Template loaders for jbschema.

Loaders hand Jbuilder source to the template compiler. They implement
`get_source(name)` returning `(source, filename)` and raise
`TemplateNotFoundError` when the name is unknown. Names are relative to the
views root, e.g. ``api/users/show.json.jbuilder``; partial references are
resolved to such names before the loader is asked.

Built-in Loaders:
- `FileSystemLoader`: Load from one or more views directories
- `DictLoader`: Load from an in-memory dictionary (testing/embedded)
- `ChoiceLoader`: Try multiple loaders in order (engine/app fallback)

Custom Loaders:
Implement the Loader protocol:
    ```python
    class GitTreeLoader:
        def get_source(self, name: str) -> tuple[str, str | None]:
            blob = tree.get(f"app/views/{name}")
            if blob is None:
                raise TemplateNotFoundError(f"Template '{name}' not found")
            return blob.data.decode(), f"git://{name}"

        def list_templates(self) -> list[str]:
            return sorted(tree.paths("app/views"))
    ```

"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from jbschema.environment.exceptions import TemplateNotFoundError

TEMPLATE_GLOB = "*.json.jbuilder"


class Loader(Protocol):
    """Structural type for template loaders."""

    def get_source(self, name: str) -> tuple[str, str | None]: ...

    def list_templates(self) -> list[str]: ...


class FileSystemLoader:
    """Load templates from views directories.

    Searches one or more directories for templates by name. The first
    matching file is returned.

    Search Order:
        Directories are searched in order. First match wins:
            ```python
            loader = FileSystemLoader(["app/views/", "engines/billing/app/views/"])
            ```

    Example:
            >>> loader = FileSystemLoader("app/views")
            >>> source, filename = loader.get_source("users/show.json.jbuilder")
            >>> print(filename)
            'app/views/users/show.json.jbuilder'

    Raises:
        TemplateNotFoundError: If template not found in any search path

    """

    __slots__ = ("_encoding", "_paths")

    def __init__(
        self,
        paths: str | Path | list[str | Path],
        encoding: str = "utf-8",
    ):
        if isinstance(paths, (str, Path)):
            paths = [paths]
        self._paths = [Path(p) for p in paths]
        self._encoding = encoding

    def get_source(self, name: str) -> tuple[str, str]:
        """Load template source from the filesystem."""
        for base in self._paths:
            path = base / name
            if path.is_file():
                return path.read_text(self._encoding), str(path)

        raise TemplateNotFoundError(
            f"Template '{name}' not found in: {', '.join(str(p) for p in self._paths)}"
        )

    def list_templates(self) -> list[str]:
        """List all Jbuilder templates (partials included) in search paths."""
        templates = set()
        for base in self._paths:
            if base.is_dir():
                for path in base.rglob(TEMPLATE_GLOB):
                    templates.add(path.relative_to(base).as_posix())
        return sorted(templates)


class DictLoader:
    """Load templates from an in-memory dictionary.

    Maps template names to source strings. Useful for tests and for
    templates generated on the fly.

    Note:
        Returns `None` as filename since templates are not file-backed.

    Example:
            >>> loader = DictLoader({
            ...     "users/show.json.jbuilder": "json.partial! 'users/user'",
            ...     "users/_user.json.jbuilder": "json.id @user.id",
            ... })
            >>> compiler = TemplateCompiler(loader)
            >>> compiler.compile("users/show.json.jbuilder").root.children[0].name
            'id'

    Raises:
        TemplateNotFoundError: If template name not in mapping
    """

    __slots__ = ("_mapping",)

    def __init__(self, mapping: dict[str, str]):
        self._mapping = mapping

    def get_source(self, name: str) -> tuple[str, None]:
        if name not in self._mapping:
            from difflib import get_close_matches

            available = sorted(self._mapping.keys())
            msg = f"Template '{name}' not found"
            matches = get_close_matches(name, available, n=1, cutoff=0.6)
            if matches:
                msg += f". Did you mean '{matches[0]}'?"
            elif available:
                msg += f". Available: {', '.join(available[:10])}"
                if len(available) > 10:
                    msg += f" ... ({len(available)} total)"
            raise TemplateNotFoundError(msg)
        return self._mapping[name], None

    def list_templates(self) -> list[str]:
        return sorted(self._mapping.keys())


class ChoiceLoader:
    """Try multiple loaders in order, returning the first match.

    Useful when an application overrides a subset of the templates an
    engine ships:
        ```python
        loader = ChoiceLoader([
            FileSystemLoader("app/views/"),
            FileSystemLoader("vendor/engine/app/views/"),
        ])
        ```

    Raises:
        TemplateNotFoundError: If no loader can find the template
    """

    __slots__ = ("_loaders",)

    def __init__(self, loaders: list[FileSystemLoader | DictLoader | ChoiceLoader]):
        self._loaders = loaders

    def get_source(self, name: str) -> tuple[str, str | None]:
        """Try each loader in order, return first match."""
        for loader in self._loaders:
            try:
                return loader.get_source(name)
            except TemplateNotFoundError:
                continue
        raise TemplateNotFoundError(
            f"Template '{name}' not found in any of {len(self._loaders)} loaders"
        )

    def list_templates(self) -> list[str]:
        """Merge template lists from all loaders (deduplicated, sorted)."""
        templates: set[str] = set()
        for loader in self._loaders:
            templates.update(loader.list_templates())
        return sorted(templates)
