"""Filter registry for the Vellum environment.

Provides a dict-like interface for user filters:

    env.filters["shout"] = lambda value, arg: str(value).upper() + "!"
    env.filters.update({"wrap": wrap})
    "shout" in env.filters

Built-in filters are not stored here; they live in
``vellum.environment.filters.BUILTIN_FILTERS`` and are consulted after
this registry on every lookup.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from vellum.environment.filters import FilterFunc


class FilterRegistry(Mapping[str, "FilterFunc"]):
    """Read-mostly mapping of filter name to ``(value, arg) -> value`` callable.

    All mutations use copy-on-write: a render that already grabbed the
    registry keeps a consistent view while another thread registers a
    new filter.
    """

    __slots__ = ("_filters",)

    def __init__(self, filters: Mapping[str, FilterFunc] | None = None):
        self._filters: dict[str, FilterFunc] = {}
        if filters:
            self.update(filters)

    def __getitem__(self, name: str) -> FilterFunc:
        return self._filters[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._filters)

    def __len__(self) -> int:
        return len(self._filters)

    def __setitem__(self, name: str, func: FilterFunc) -> None:
        self.register(name, func)

    def register(self, name: str, func: FilterFunc) -> None:
        """Register (or replace) a filter.

        Raises:
            ValueError: If ``name`` is ``default``, which is reserved
            TypeError: If ``func`` is not callable
        """
        self.update({name: func})

    def update(self, mapping: Mapping[str, FilterFunc]) -> None:
        """Batch register filters."""
        for name, func in mapping.items():
            if name == "default":
                raise ValueError("'default' is a reserved filter name")
            if not callable(func):
                raise TypeError(f"Filter {name!r} must be callable, got {type(func).__name__}")
        new = self._filters.copy()
        new.update(mapping)
        self._filters = new

    def copy(self) -> dict[str, FilterFunc]:
        """Return a copy of the underlying dict."""
        return self._filters.copy()

    def __repr__(self) -> str:
        return f"<FilterRegistry {sorted(self._filters)}>"
