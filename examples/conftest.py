"""Fixtures for the runnable vellum examples.

Each example directory holds an ``app.py`` that renders at import time and
a ``test_*.py`` beside it. ``example_app`` runs that ``app.py`` as a fresh
module; ``example_env`` gives an Environment over the example's
``templates/`` directory for rendering single views in isolation.
"""

from __future__ import annotations

import importlib.util
import types
from pathlib import Path

import pytest

from vellum import Environment


def _example_dir(request: pytest.FixtureRequest) -> Path:
    return Path(request.path).parent


def _run_app(app_path: Path) -> types.ModuleType:
    """Execute ``app_path`` under a module name unique to its example."""
    spec = importlib.util.spec_from_file_location(f"vellum_example_{app_path.parent.name}", app_path)
    if spec is None or spec.loader is None:
        raise ImportError(f"Cannot load example module {app_path}")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def example_app(request: pytest.FixtureRequest) -> types.ModuleType:
    """The sibling ``app.py``, re-executed for every test."""
    return _run_app(_example_dir(request) / "app.py")


@pytest.fixture
def example_env(request: pytest.FixtureRequest) -> Environment:
    """Environment loading from the example's ``templates/`` directory."""
    templates = _example_dir(request) / "templates"
    if not templates.is_dir():
        pytest.skip(f"{templates.parent.name} has no templates directory")
    return Environment(path=templates)
