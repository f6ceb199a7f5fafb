"""ANSI styling for diagnostic messages.

Colors are applied only when the output is a TTY. ``NO_COLOR`` disables
them and ``FORCE_COLOR`` wins over everything (https://no-color.org/).
"""

from __future__ import annotations

import os
import re
import sys

_RESET = "\033[0m"

# Semantic role -> ANSI sequence
_STYLES: dict[str, str] = {
    "code": "\033[91m\033[1m",
    "location": "\033[36m",
    "lineno": "\033[33m",
    "error": "\033[91m",
    "hint": "\033[32m",
    "suggestion": "\033[92m\033[1m",
    "dim": "\033[2m",
}

_ANSI_RE = re.compile(r"\x1B(?:[@-Z\\-_]|\[[0-?]*[ -/]*[@-~])")


def _should_use_colors() -> bool:
    if os.environ.get("FORCE_COLOR"):
        return True
    if os.environ.get("NO_COLOR"):
        return False
    return sys.stdout.isatty()


_USE_COLORS = _should_use_colors()


def supports_color() -> bool:
    """Return True when diagnostics are colorized."""
    return _USE_COLORS


def paint(role: str, text: str) -> str:
    """Wrap ``text`` in the ANSI style registered for ``role``.

    Unknown roles and non-color terminals return the text unchanged.
    """
    style = _STYLES.get(role)
    if not _USE_COLORS or style is None:
        return text
    return f"{style}{text}{_RESET}"


def strip_colors(text: str) -> str:
    """Remove ANSI escape sequences."""
    return _ANSI_RE.sub("", text)


def location(text: str) -> str:
    return paint("location", text)


def hint(text: str) -> str:
    return paint("hint", text)


def suggestion(text: str) -> str:
    return paint("suggestion", text)


def dim_text(text: str) -> str:
    return paint("dim", text)


def format_error_header(code: str | None, message: str) -> str:
    """Prefix ``message`` with a highlighted error code, if any."""
    if code:
        return f"{paint('code', code)}: {message}"
    return message


def format_source_line(lineno: int, content: str, is_error: bool = False) -> str:
    """Render one numbered source line; the error line gets a ``>`` marker."""
    marker = ">" if is_error else " "
    number = paint("lineno", f"{marker}{lineno:>3}")
    body = paint("error", content) if is_error else dim_text(content)
    return f"{number} | {body}"
