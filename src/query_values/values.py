"""QueryValues — ordered multi-map of query parameter names to values."""

from __future__ import annotations

from typing import TYPE_CHECKING
from urllib.parse import urlencode

if TYPE_CHECKING:
    from collections.abc import Iterable


class QueryValues(dict[str, list[str]]):
    """
    Multi-map of parameter name -> list of string values.

    The order of values under a single key is the order they were added.
    Being a plain ``dict`` subclass, it compares equal to an ordinary
    ``{"q": ["foo"]}`` mapping.
    """

    def add(self, key: str, value: str) -> None:
        """Append *value* to the values already stored under *key*."""
        self.setdefault(key, []).append(value)

    def set(self, key: str, value: str) -> None:
        """Replace any existing values under *key* with *value*."""
        self[key] = [value]

    def get_first(self, key: str, default: str = "") -> str:
        """First value for *key*, or *default*."""
        vals = super().get(key)
        return vals[0] if vals else default

    def getlist(self, key: str) -> list[str]:
        """All values for *key* (a copy)."""
        return list(super().get(key) or [])

    def delete(self, key: str) -> None:
        self.pop(key, None)

    def has(self, key: str) -> bool:
        return key in self

    def items_flat(self) -> list[tuple[str, str]]:
        """All key/value pairs, flattened in insertion order."""
        return [(k, v) for k, vals in self.items() for v in vals]

    def extend(self, pairs: Iterable[tuple[str, str]]) -> None:
        for key, value in pairs:
            self.add(key, value)

    def encode(self, *, sort_keys: bool = True) -> str:
        """
        URL-encode as ``application/x-www-form-urlencoded``.

        Keys are sorted by default so the output is stable regardless of
        field declaration order.
        """
        keys = sorted(self) if sort_keys else list(self)
        return urlencode([(k, v) for k in keys for v in self[k]])

    def __repr__(self) -> str:
        return f"QueryValues({dict.__repr__(self)})"
