"""Pure string helpers backing the built-in filters.

Every function takes and returns ``str`` and has no side effects.
"""

from __future__ import annotations

import codecs
import re

_NON_ALNUM_ASCII_RE = re.compile(r"[^a-z0-9]+")
_NON_WORD_RE = re.compile(r"[\W_]+")
_WHITESPACE_RE = re.compile(r"\s+")
_DELIMITER_RE = re.compile(r"[-_\s]")
_WORD_START_RE = re.compile(r"(^|[ \t\r\n\f\v])(\S)")
_NON_ALPHA_RE = re.compile(r"[^a-zA-Z]")
_NEWLINE_RE = re.compile(r"(\r\n|\n\r|\n|\r)")


def reverse(value: str) -> str:
    """Reverse by code point."""
    return value[::-1]


def slugify(value: str) -> str:
    """Lowercase, collapse runs of non ``[a-z0-9]`` into ``-``, trim dashes.

    >>> slugify("Hello, World!")
    'hello-world'
    """
    return _NON_ALNUM_ASCII_RE.sub("-", value.lower()).strip("-")


def camel_case(value: str) -> str:
    """Convert a ``-``/``_``/space delimited string to camelCase.

    Strings without delimiters are assumed to already be camel or Pascal
    cased and only get their first character lowercased.

    >>> camel_case("hello_big world")
    'helloBigWorld'
    >>> camel_case("HelloWorld")
    'helloWorld'
    """
    if not _DELIMITER_RE.search(value):
        return lcfirst(value)
    words = value.replace("-", " ").replace("_", " ")
    return lcfirst(ucwords(words).replace(" ", ""))


def snake_case(value: str) -> str:
    """Replace runs of non letter/digit characters with ``_`` and lowercase."""
    return _NON_WORD_RE.sub("_", value).strip("_").lower()


def kebab_case(value: str) -> str:
    """Replace runs of non letter/digit characters with ``-`` and lowercase."""
    return _NON_WORD_RE.sub("-", value).strip("-").lower()


def clean(value: str) -> str:
    """Collapse whitespace runs to one space and trim."""
    return _WHITESPACE_RE.sub(" ", value).strip()


# Same behaviour, kept under both names used by templates.
normalize_whitespace = clean


def truncate(value: str, length: int, ellipsis: str = "…") -> str:
    """Cut ``value`` to ``length`` characters including ``ellipsis``.

    >>> truncate("Hello World", 5, "")
    'Hello'
    >>> truncate("Hello World", 6)
    'Hello…'
    """
    if len(value) <= length:
        return value
    keep = max(length - len(ellipsis), 0)
    return value[:keep] + ellipsis


def rot13(value: str) -> str:
    return codecs.encode(value, "rot_13")


def only_alpha(value: str) -> str:
    """Drop everything except ASCII letters."""
    return _NON_ALPHA_RE.sub("", value)


def ucfirst(value: str) -> str:
    return value[:1].upper() + value[1:]


def lcfirst(value: str) -> str:
    return value[:1].lower() + value[1:]


def ucwords(value: str) -> str:
    """Uppercase the first character of each whitespace-separated word.

    Unlike ``str.title`` the rest of each word is left untouched.
    """
    return _WORD_START_RE.sub(lambda m: m.group(1) + m.group(2).upper(), value)


def nl2br(value: str) -> str:
    """Insert ``<br />`` before every line break, keeping the break itself."""
    return _NEWLINE_RE.sub(lambda m: "<br />" + m.group(1), value)
