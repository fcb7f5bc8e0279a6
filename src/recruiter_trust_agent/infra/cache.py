"""In-memory cache utilities."""

from __future__ import annotations

import time


class TTLCache:
    """Small per-process cache for lookups that are safe to reuse for a while."""

    def __init__(self, ttl_s: float = 300.0, max_entries: int = 1024) -> None:
        self._ttl_s = max(0.0, float(ttl_s))
        self._max_entries = max(1, int(max_entries))
        self._store: dict[str, tuple[float, object]] = {}

    def get(self, key: str, default: object | None = None) -> object | None:
        entry = self._store.get(key)
        if entry is None:
            return default
        stored_at, value = entry
        if time.monotonic() - stored_at > self._ttl_s:
            self._store.pop(key, None)
            return default
        return value

    def set(self, key: str, value: object) -> None:
        if key not in self._store and len(self._store) >= self._max_entries:
            oldest = next(iter(self._store))
            self._store.pop(oldest, None)
        self._store[key] = (time.monotonic(), value)

    def __len__(self) -> int:
        return len(self._store)
