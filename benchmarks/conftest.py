from __future__ import annotations

import json
import os
import platform
import sys
from pathlib import Path

import pytest

from jbschema import DictLoader, TemplateCompiler

try:
    import importlib.metadata as importlib_metadata
except ModuleNotFoundError:  # pragma: no cover
    import importlib_metadata  # type: ignore


BASE_DIR = Path(__file__).resolve().parent
BENCHMARK_OUTPUT_DIR = BASE_DIR.parent / ".benchmarks"
BENCHMARK_OUTPUT_DIR.mkdir(exist_ok=True)

POST_PARTIAL = """\
# @openapi id:integer description:"Post ID"
json.id post.id
# @openapi title:string
json.title post.title
# @openapi published_at:datetime required:false
json.published_at post.published_at
json.author do
  json.partial! "users/user", user: post.author
end
"""

USER_PARTIAL = """\
# @openapi id:integer
json.id user.id
# @openapi name:string
json.name user.name
"""


def _version(dist: str) -> str:
    try:
        return importlib_metadata.version(dist)
    except importlib_metadata.PackageNotFoundError:
        return "unknown"


def collect_environment_metadata() -> dict[str, object]:
    """Capture reproducibility metadata for each benchmark run."""
    return {
        "python": {
            "version": platform.python_version(),
            "implementation": platform.python_implementation(),
            "executable": sys.executable,
        },
        "os": {
            "system": platform.system(),
            "release": platform.release(),
            "machine": platform.machine(),
        },
        "cpu": {
            "processor": platform.processor(),
            "count": os.cpu_count(),
        },
        "jbschema": _version("jbschema"),
        "tree-sitter": _version("tree-sitter"),
        "tree-sitter-ruby": _version("tree-sitter-ruby"),
    }


@pytest.fixture(scope="session")
def environment_metadata() -> dict[str, object]:
    """Write environment metadata to .benchmarks for ingestion."""
    metadata = collect_environment_metadata()
    (BENCHMARK_OUTPUT_DIR / "environment.json").write_text(json.dumps(metadata, indent=2))
    return metadata


@pytest.fixture(scope="session")
def partial_views() -> dict[str, str]:
    return {
        "posts/_post.json.jbuilder": POST_PARTIAL,
        "users/_user.json.jbuilder": USER_PARTIAL,
    }


@pytest.fixture(scope="session")
def compiler(partial_views: dict[str, str]) -> TemplateCompiler:
    return TemplateCompiler(DictLoader(partial_views))
