"""
In-memory TTL cache for catalog reads.

Entries expire lazily: an expired entry is dropped the next time it is read.
There is no size bound and no background sweep.
"""
from __future__ import annotations

import time
from threading import Lock
from typing import Any, Callable, Final

PRODUCTS_PREFIX: Final[str] = "product_"
COLLECTION_PREFIX: Final[str] = "collection_"
COLLECTIONS_KEY: Final[str] = "collections"


class _Miss:
    def __repr__(self) -> str:
        return "MISS"

    def __bool__(self) -> bool:
        return False


MISS: Final = _Miss()


def product_key(handle: str) -> str:
    return f"{PRODUCTS_PREFIX}{handle}"


def collection_key(handle: str) -> str:
    return f"{COLLECTION_PREFIX}{handle}"


class TTLCache:
    def __init__(self, default_ttl: float = 300.0, clock: Callable[[], float] = time.monotonic) -> None:
        self._default_ttl = float(default_ttl)
        self._clock = clock
        self._lock = Lock()
        self._entries: dict[str, tuple[Any, float]] = {}

    def get(self, key: str) -> Any:
        """
        Return the cached value, or ``MISS`` if absent or expired.
        """
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return MISS
            value, expires_at = entry
            if self._clock() < expires_at:
                return value
            del self._entries[key]
            return MISS

    def set(self, key: str, value: Any, ttl: float | None = None) -> None:
        """
        Store ``value`` until ``now + ttl`` seconds, replacing any existing entry.
        """
        ttl = self._default_ttl if ttl is None else float(ttl)
        with self._lock:
            self._entries[key] = (value, self._clock() + ttl)

    def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
