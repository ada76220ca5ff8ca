"""Resilience – cache provider port and the in-memory adapter."""
from __future__ import annotations

import dataclasses
import threading
from typing import Any, Protocol

from mp_resilience.kernel.time import Clock, SystemClock


@dataclasses.dataclass(frozen=True)
class CacheEntry:
    key: str
    value: Any
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at


class CacheProvider(Protocol):
    """Port: key/value store with per-entry TTL.

    ``get`` returns ``None`` for absent and expired keys alike.
    """

    async def get(self, key: str) -> CacheEntry | None: ...
    async def set(self, key: str, value: Any, ttl: float) -> None: ...


class InMemoryCacheProvider:
    """Process-local cache provider.

    Expired entries are evicted lazily when read; :meth:`purge_expired`
    sweeps the whole map. One instance may be shared by several
    :class:`~mp_resilience.resilience.cache.policy.CachePolicy` objects
    to share memoised results.
    """

    def __init__(self, clock: Clock | None = None) -> None:
        self._clock = clock or SystemClock()
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    async def get(self, key: str) -> CacheEntry | None:
        now = self._clock.monotonic()
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if entry.is_expired(now):
                del self._entries[key]
                return None
            return entry

    async def set(self, key: str, value: Any, ttl: float) -> None:
        entry = CacheEntry(key=key, value=value, expires_at=self._clock.monotonic() + ttl)
        with self._lock:
            self._entries[key] = entry

    async def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def purge_expired(self) -> int:
        """Drop every expired entry; returns how many were removed."""
        now = self._clock.monotonic()
        with self._lock:
            stale = [k for k, e in self._entries.items() if e.is_expired(now)]
            for key in stale:
                del self._entries[key]
        return len(stale)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries


__all__ = ["CacheEntry", "CacheProvider", "InMemoryCacheProvider"]
