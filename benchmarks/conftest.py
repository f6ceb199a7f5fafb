from __future__ import annotations

import json
import os
import platform
import sys
from pathlib import Path

import pytest

from vellum import DictLoader, Environment

try:
    import importlib.metadata as importlib_metadata
except ModuleNotFoundError:  # pragma: no cover
    import importlib_metadata  # type: ignore


BASE_DIR = Path(__file__).resolve().parent
BENCHMARK_OUTPUT_DIR = BASE_DIR.parent / ".benchmarks"

TEMPLATES: dict[str, str] = {
    "minimal.html": "Hello, {{ name }}!",
    "row.html": "<li class=\"{{ item.kind | slug }}\">{{ item.title | ucwords }}</li>\n",
    "card.html": "<div class=\"card\"><h3>{{ title }}</h3>{{ body | truncate:80 }}</div>\n",
    "nav.html": "<nav>{{ site.name }}</nav>\n",
    "base.html": (
        "<!DOCTYPE html>\n<html>\n<head><title>{{section 'title'}}{{ site.name }}{{endsection}}"
        "{{fill 'title'}}</title></head>\n<body>\n{{include 'nav.html'}}"
        "{{fill 'content'}}\n</body>\n</html>\n"
    ),
    "list.html": (
        "{{extends 'base.html'}}\n"
        "{{section 'title'}}{{ heading }}{{endsection}}\n"
        "{{section 'content'}}\n"
        "<h1>{{ heading | upper }}</h1>\n"
        "{{if user.admin}}<a href=\"/admin\">Admin</a>{{elseif user}}Hi {{ user.name }}"
        "{{else}}Log in{{endif}}\n"
        "<ul>{{each item in items using 'row.html'}}</ul>\n"
        "{{embed 'card.html' with ['title' => featured.title, 'body' => featured.body]}}\n"
        "{{endsection}}\n"
    ),
}


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
        "vellum": _version("vellum"),
    }


@pytest.fixture(scope="session")
def environment_metadata() -> dict[str, object]:
    """Write environment metadata to .benchmarks for ingestion."""
    BENCHMARK_OUTPUT_DIR.mkdir(exist_ok=True)
    metadata = collect_environment_metadata()
    (BENCHMARK_OUTPUT_DIR / "environment.json").write_text(json.dumps(metadata, indent=2))
    return metadata


@pytest.fixture(scope="session")
def vellum_env() -> Environment:
    return Environment(loader=DictLoader(TEMPLATES), globals={"site": {"name": "Bench"}})


def _items(count: int) -> list[dict[str, str]]:
    kinds = ["News Item", "Blog Post", "Release Note"]
    return [{"title": f"entry number {i}", "kind": kinds[i % 3]} for i in range(count)]


def _context(count: int) -> dict[str, object]:
    return {
        "heading": "Latest entries",
        "user": {"name": "Ada", "admin": False},
        "items": _items(count),
        "featured": {"title": "Featured", "body": "Lorem ipsum dolor sit amet " * 10},
    }


@pytest.fixture(scope="session")
def small_context() -> dict[str, object]:
    return _context(5)


@pytest.fixture(scope="session")
def large_context() -> dict[str, object]:
    return _context(1000)
