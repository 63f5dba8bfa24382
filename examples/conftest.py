"""Shared pytest configuration for jbschema examples.

Each example directory holds an ``app.py`` that compiles its own ``views/``
tree at import time. ``example_app`` executes that file in a fresh module so
tests read the module-level results (``documents``, ``paths``, ...) directly.
"""

import importlib.util
from pathlib import Path

import pytest


def _load_app(app_path: Path):
    module_name = f"example_{app_path.parent.name}"
    spec = importlib.util.spec_from_file_location(module_name, app_path)
    if spec is None or spec.loader is None:
        raise ImportError(f"Cannot load example app from {app_path}")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def example_app(request: pytest.FixtureRequest):
    """Compile the example app that sits next to the requesting test file."""
    return _load_app(Path(request.path).parent / "app.py")
