"""Pytest configuration and fixtures for Vellum tests."""

import pytest

from vellum import DictLoader, Environment
from vellum.environment import terminal


@pytest.fixture(autouse=True)
def _plain_diagnostics(monkeypatch):
    """Keep error messages free of ANSI codes regardless of FORCE_COLOR."""
    monkeypatch.setattr(terminal, "_USE_COLORS", False)


@pytest.fixture
def env():
    """Create a basic Vellum Environment."""
    return Environment()


@pytest.fixture
def env_with_loader():
    """Create a Vellum Environment with DictLoader and test templates."""
    loader = DictLoader(
        {
            "layout.html": "<html><body>{{fill 'body'}}</body></html>",
            "page.html": (
                "{{extends 'layout.html'}}{{section 'body'}}Hello {{name}}{{endsection}}"
            ),
            "row.html": "<li>{{item.title}}</li>",
            "nav.html": "<nav>{{site.name}}</nav>",
            "card.html": "<div>{{title}}|{{body}}</div>",
        }
    )
    return Environment(loader=loader)


@pytest.fixture
def make_env():
    """Factory for an Environment over an in-memory set of templates."""

    def _make(templates: dict[str, str], **kwargs) -> Environment:
        return Environment(loader=DictLoader(templates), **kwargs)

    return _make


def assert_template_equal(template_result: str, expected: str) -> None:
    """Assert template result equals expected, normalizing whitespace.

    Args:
        template_result: The actual template rendering result.
        expected: The expected output.
    """
    actual_normalized = " ".join(template_result.split())
    expected_normalized = " ".join(expected.split())
    assert actual_normalized == expected_normalized, (
        f"Template output mismatch:\n"
        f"  Actual: {actual_normalized!r}\n"
        f"  Expected: {expected_normalized!r}"
    )


def assert_contains(template_result: str, *expected_parts: str) -> None:
    """Assert template result contains all expected parts.

    Args:
        template_result: The actual template rendering result.
        expected_parts: Strings that should all be present in the result.
    """
    for part in expected_parts:
        assert part in template_result, (
            f"Template output missing expected content:\n"
            f"  Missing: {part!r}\n"
            f"  Actual: {template_result!r}"
        )
