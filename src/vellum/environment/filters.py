"""Built-in filters and the filter pipeline.

A filter is any callable ``(value, arg) -> value`` where ``arg`` is the
optional string written after ``:`` in the template (``None`` when
omitted)::

    {{ title | lower | truncate:'20' | default:'Untitled' }}

Resolution order for a filter name:
1. ``default`` is reserved: it null-coalesces instead of calling anything.
2. Filters registered on the Environment.
3. ``BUILTIN_FILTERS``.
4. Nothing matched: the value passes through unchanged.

Filters never turn an unknown name into a render failure.

Built-ins tolerate ``ABSENT``/``None`` input by treating it as ``""`` (or
an empty collection, where that is the natural reading).

"""

from __future__ import annotations

import html
import json
import logging
import re
from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import Any

from vellum.template.helpers import ABSENT, default, is_absent
from vellum.utils import strings

logger = logging.getLogger(__name__)

FilterFunc = Callable[[Any, str | None], Any]

DEFAULT_FILTER = "default"

_LEADING_INT_RE = re.compile(r"\s*([+-]?\d+)")


def _text(value: Any) -> str:
    if is_absent(value):
        return ""
    return value if isinstance(value, str) else str(value)


def _to_int(arg: str | None) -> int:
    """Leading integer of ``arg``; ``0`` when there is none."""
    if arg is None:
        return 0
    match = _LEADING_INT_RE.match(arg)
    return int(match.group(1)) if match else 0


def _is_list(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


def _text_filter(func: Callable[[str], str]) -> FilterFunc:
    """Adapt a ``str -> str`` helper to the filter signature."""

    def apply(value: Any, arg: str | None = None) -> str:
        return func(_text(value))

    apply.__name__ = func.__name__
    apply.__doc__ = func.__doc__
    return apply


def _filter_reverse(value: Any, arg: str | None = None) -> Any:
    if _is_list(value):
        return list(reversed(value))
    return strings.reverse(_text(value))


def _filter_keys(value: Any, arg: str | None = None) -> list[Any]:
    if isinstance(value, Mapping):
        return list(value.keys())
    if _is_list(value):
        return list(range(len(value)))
    return []


def _filter_values(value: Any, arg: str | None = None) -> list[Any]:
    if isinstance(value, Mapping):
        return list(value.values())
    if _is_list(value):
        return list(value)
    return []


def _filter_join(value: Any, arg: str | None = None) -> Any:
    separator = ", " if arg is None else arg
    if isinstance(value, Mapping):
        value = list(value.values())
    if _is_list(value):
        return separator.join(_text(item) for item in value)
    return value


def _filter_escape(value: Any, arg: str | None = None) -> str:
    return html.escape(_text(value), quote=True)


def _filter_truncate(value: Any, arg: str | None = None) -> str:
    return strings.truncate(_text(value), _to_int(arg), "")


def _filter_length(value: Any, arg: str | None = None) -> int:
    if isinstance(value, (str, Mapping)) or _is_list(value):
        return len(value)
    return 0


def _filter_json(value: Any, arg: str | None = None) -> str:
    if value is ABSENT:
        value = None
    return json.dumps(value, indent=4, default=str)


BUILTIN_FILTERS: dict[str, FilterFunc] = {
    # Case
    "upper": _text_filter(str.upper),
    "lower": _text_filter(str.lower),
    "ucfirst": _text_filter(strings.ucfirst),
    "lcfirst": _text_filter(strings.lcfirst),
    "ucwords": _text_filter(strings.ucwords),
    "camel": _text_filter(strings.camel_case),
    "snake": _text_filter(strings.snake_case),
    "kebab": _text_filter(strings.kebab_case),
    # Cleanup
    "trim": _text_filter(str.strip),
    "clean": _text_filter(strings.clean),
    "normalize-whitespace": _text_filter(strings.normalize_whitespace),
    "only-alpha": _text_filter(strings.only_alpha),
    "slug": _text_filter(strings.slugify),
    "slugify": _text_filter(strings.slugify),
    "truncate": _filter_truncate,
    "rot13": _text_filter(strings.rot13),
    # HTML
    "e": _filter_escape,
    "escape": _filter_escape,
    "nl2br": _text_filter(strings.nl2br),
    # Collections
    "reverse": _filter_reverse,
    "keys": _filter_keys,
    "values": _filter_values,
    "join": _filter_join,
    "length": _filter_length,
    # Serialization
    "json": _filter_json,
}


def apply_filter(
    name: str,
    value: Any,
    arg: str | None = None,
    registry: Mapping[str, FilterFunc] | None = None,
) -> Any:
    """Apply one named filter step.

    Args:
        name: Filter name as written in the template
        value: Accumulated value so far
        arg: Optional string argument
        registry: User-registered filters, consulted before built-ins

    Returns:
        The transformed value, or ``value`` unchanged for unknown names
    """
    if name == DEFAULT_FILTER:
        return default(value, arg)
    func = registry.get(name) if registry is not None else None
    if func is None:
        func = BUILTIN_FILTERS.get(name)
    if func is None:
        logger.debug("Unknown filter %r, passing value through", name)
        return value
    return func(value, arg)


def apply_chain(
    chain: Iterable[tuple[str, str | None]],
    value: Any,
    registry: Mapping[str, FilterFunc] | None = None,
) -> Any:
    """Apply ``(name, arg)`` steps strictly left to right.

    Example:
        >>> apply_chain([("upper", None), ("truncate", "3")], "hello")
        'HEL'
        >>> apply_chain([("default", "X")], 0)
        0
    """
    for name, arg in chain:
        value = apply_filter(name, value, arg, registry)
    return value
