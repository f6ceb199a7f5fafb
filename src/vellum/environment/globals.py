"""Shared data merged into every render context.

Values stored here are visible to every template rendered by the owning
Environment, underneath the caller's own context:

    env.globals.set_all({"site": {"name": "Docs"}, "year": 2026})
    env.globals.set_one("nav", ["Home", "About"])

    # In any template:
    # {{site.name}} - {{year}}

Precedence (lowest first): globals, caller context, local bindings
(``each`` item, ``embed`` bindings).

Thread-Safety:
Writes replace the backing dict (copy-on-write), so a render that already
took a snapshot keeps seeing a consistent set of values.

"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import Any


class GlobalData(Mapping[str, Any]):
    """Copy-on-write store of values shared by all renders.

    Example:
            >>> data = GlobalData()
            >>> data.set_all({"a": 1, "b": 2})
            >>> data.set_all({"b": 3})
            >>> dict(data)
        {'a': 1, 'b': 3}
    """

    __slots__ = ("_data",)

    def __init__(self, initial: Mapping[str, Any] | None = None):
        self._data: dict[str, Any] = dict(initial) if initial else {}

    def __getitem__(self, key: str) -> Any:
        return self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def set_all(self, values: Mapping[str, Any]) -> None:
        """Merge ``values`` into the store; existing keys are overwritten."""
        new = self._data.copy()
        new.update(values)
        self._data = new

    def set_one(self, key: str, value: Any) -> None:
        """Store a single value under ``key``."""
        self.set_all({key: value})

    def __setitem__(self, key: str, value: Any) -> None:
        self.set_one(key, value)

    def clear(self) -> None:
        self._data = {}

    def snapshot(self) -> dict[str, Any]:
        """Return the current values as a new dict."""
        return self._data.copy()

    def __repr__(self) -> str:
        return f"<GlobalData {sorted(self._data)}>"
