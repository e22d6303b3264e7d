"""Explicit expiring cache objects.

Callers that memoize weather lookups or chat responses own one of these and
pass resolved values into the engines; nothing in :mod:`goldilocks.core`
reads a cache.
"""

from __future__ import annotations

import time
from collections.abc import Callable, Hashable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class ExpiringValue(Generic[T]):
    value: T
    expires_at: float

    def is_valid(self, now: float) -> bool:
        return now < self.expires_at


class TTLCache:
    """Key/value cache whose entries expire ``ttl_seconds`` after being set."""

    def __init__(self, ttl_seconds: float, *, clock: Callable[[], float] = time.monotonic) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[Hashable, ExpiringValue[Any]] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: Hashable, default: Any = None) -> Any:
        entry = self._entries.get(key)
        if entry is None:
            return default
        if not entry.is_valid(self._clock()):
            del self._entries[key]
            return default
        return entry.value

    def get_entry(self, key: Hashable) -> ExpiringValue[Any] | None:
        """Return the raw entry, expired or not (useful for serving stale data)."""

        return self._entries.get(key)

    def set(self, key: Hashable, value: Any) -> ExpiringValue[Any]:
        entry = ExpiringValue(value=value, expires_at=self._clock() + self.ttl_seconds)
        self._entries[key] = entry
        return entry

    def get_or_set(self, key: Hashable, factory: Callable[[], Any]) -> Any:
        sentinel = object()
        value = self.get(key, sentinel)
        if value is sentinel:
            value = factory()
            self.set(key, value)
        return value

    def invalidate(self, key: Hashable) -> None:
        self._entries.pop(key, None)

    def clear(self) -> None:
        self._entries.clear()


__all__ = ["ExpiringValue", "TTLCache"]
