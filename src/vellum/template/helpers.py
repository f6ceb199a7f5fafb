"""Pure runtime helpers injected into the compiled template namespace.

These functions are called by compiled template code at render time.
None of them close over Environment state.

Thread-Safety:
All functions are stateless and safe for concurrent use.

"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from typing import Any, Final


class _Absent:
    """Marker for a value that could not be resolved.

    Falsy and prints as ``""`` so a missing variable never breaks output,
    but stays distinguishable from an explicit ``None`` when that matters.
    """

    __slots__ = ()
    _instance: _Absent | None = None

    def __new__(cls) -> _Absent:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __str__(self) -> str:
        return ""

    def __repr__(self) -> str:
        return "ABSENT"


ABSENT: Final = _Absent()


def is_absent(value: Any) -> bool:
    """True for ``ABSENT`` and ``None`` alike (both mean "no value")."""
    return value is ABSENT or value is None


def split_path(path: str) -> tuple[str, ...]:
    """Split ``"a.b.c"`` into its segments, dropping surrounding whitespace."""
    return tuple(part.strip() for part in path.strip().split("."))


def resolve(ctx: Mapping[str, Any], path: str | Sequence[str]) -> Any:
    """Resolve a dotted path against ``ctx``.

    Mappings are walked by key, lists and tuples by integer index. The
    first missing key, out-of-range index or non-container value returns
    ``ABSENT``; this function never raises.

    Complexity: O(len(path))

    Example:
        >>> resolve({"user": {"tags": ["a", "b"]}}, "user.tags.1")
        'b'
        >>> resolve({"user": None}, "user.name")
        ABSENT
    """
    segments = split_path(path) if isinstance(path, str) else path
    value: Any = ctx
    for segment in segments:
        if isinstance(value, Mapping):
            if segment not in value:
                return ABSENT
            value = value[segment]
        elif isinstance(value, Sequence) and not isinstance(value, (str, bytes)):
            try:
                value = value[int(segment)]
            except (ValueError, IndexError):
                return ABSENT
        else:
            return ABSENT
    return value


def str_safe(value: Any) -> str:
    """Convert a value for output, treating ``None`` and ``ABSENT`` as ``""``."""
    if value is None or value is ABSENT:
        return ""
    if isinstance(value, str):
        return value
    return str(value)


def default(value: Any, fallback: Any) -> Any:
    """Null-coalesce: ``fallback`` only when ``value`` is absent or ``None``.

    Falsy but present values (``0``, ``""``, ``[]``) are kept.
    """
    return fallback if is_absent(value) else value


_ORDERING_OPS: Final = frozenset({"<", "<=", ">", ">="})


def compare(op: str, left: Any, right: Any) -> bool:
    """Relational comparison used by ``{{if}}`` conditions.

    ``ABSENT`` compares equal to ``None``. Ordering comparisons with a
    missing operand are false instead of raising ``TypeError``.
    """
    if left is ABSENT:
        left = None
    if right is ABSENT:
        right = None
    if op == "==":
        return bool(left == right)
    if op == "!=":
        return bool(left != right)
    if op in _ORDERING_OPS and (left is None or right is None):
        return False
    if op == "<":
        return bool(left < right)
    if op == "<=":
        return bool(left <= right)
    if op == ">":
        return bool(left > right)
    if op == ">=":
        return bool(left >= right)
    raise ValueError(f"Unknown comparison operator: {op!r}")


def iter_items(collection: Any) -> Iterator[Any]:
    """Elements visited by ``{{each}}``.

    Mappings yield their values, lists and tuples their elements. Anything
    else (including strings and missing values) yields nothing.
    """
    if isinstance(collection, Mapping):
        yield from collection.values()
    elif isinstance(collection, Sequence) and not isinstance(collection, (str, bytes)):
        yield from collection


# Entries shared by every compiled template namespace; copied once per
# Template. Read-only after module load.
STATIC_NAMESPACE: dict[str, Any] = {
    "__builtins__": {},
    "_str": str_safe,
    "_resolve": resolve,
    "_compare": compare,
}
