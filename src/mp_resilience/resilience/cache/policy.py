"""Resilience – CacheOptions and CachePolicy (cache-aside over an ExecutionContext key)."""
from __future__ import annotations

import asyncio
import contextlib
import dataclasses
import threading
from typing import Any, AsyncIterator, Callable, ClassVar, TypeVar

from mp_resilience.config.settings import Settings
from mp_resilience.observability.logging import get_logger
from mp_resilience.resilience.cache.provider import CacheProvider, InMemoryCacheProvider
from mp_resilience.resilience.context import ExecutionContext
from mp_resilience.resilience.outcome import Outcome, Success
from mp_resilience.resilience.policy import Policy, capture, fire_hook

T = TypeVar("T")
logger = get_logger(__name__)


@dataclasses.dataclass
class CacheOptions(Settings):
    _prefix: ClassVar[str] = "RESILIENCE_CACHE"

    ttl: float = 300.0
    key_fn: Callable[[ExecutionContext], str | None] | None = None
    on_hit: Callable[[ExecutionContext, str], Any] | None = None
    on_miss: Callable[[ExecutionContext, str], Any] | None = None
    on_put: Callable[[ExecutionContext, str], Any] | None = None

    def _validate(self) -> None:
        self._require("ttl", self.ttl > 0, "must be > 0")


class _KeyLock:
    __slots__ = ("lock", "users")

    def __init__(self) -> None:
        self.lock = asyncio.Lock()
        self.users = 0


class CachePolicy(Policy[T]):
    """Returns a memoised value for the context's cache key.

    Calls without a key bypass the cache. Only successful outcomes are
    stored. Concurrent misses on one key are serialised so the operation
    runs at most once per key at a time; waiters re-check the cache after
    the first build completes.

    The per-key locks are asyncio primitives, so one is kept per event
    loop and key. A lock is dropped as soon as no caller holds or awaits
    it.
    """

    def __init__(
        self,
        provider: CacheProvider | None = None,
        options: CacheOptions | None = None,
        *,
        name: str | None = None,
    ) -> None:
        super().__init__(name)
        self.provider = provider if provider is not None else InMemoryCacheProvider()
        self.options = options or CacheOptions()
        self._locks: dict[tuple[asyncio.AbstractEventLoop, str], _KeyLock] = {}
        self._guard = threading.Lock()

    @property
    def pending_keys(self) -> int:
        """Number of keys with a build in progress or awaited."""
        with self._guard:
            return len(self._locks)

    def key_for(self, context: ExecutionContext) -> str | None:
        if self.options.key_fn is not None:
            return self.options.key_fn(context)
        return context.cache_key

    async def _execute(self, operation: Callable[[], Any], context: ExecutionContext) -> Outcome[T]:
        key = self.key_for(context)
        if key is None:
            return await capture(operation)

        hit = await self._lookup(key, context)
        if hit is not None:
            return hit

        async with self._key_lock(key):
            hit = await self._lookup(key, context)
            if hit is not None:
                return hit
            fire_hook(self.options.on_miss, context, key)
            outcome = await capture(operation)
            if isinstance(outcome, Success):
                await self.provider.set(key, outcome.value, self.options.ttl)
                logger.debug("cache.put", policy=self.name, key=key, ttl=self.options.ttl)
                fire_hook(self.options.on_put, context, key)
        return outcome

    @contextlib.asynccontextmanager
    async def _key_lock(self, key: str) -> AsyncIterator[None]:
        slot_key = (asyncio.get_running_loop(), key)
        with self._guard:
            slot = self._locks.get(slot_key)
            if slot is None:
                slot = self._locks[slot_key] = _KeyLock()
            slot.users += 1
        try:
            async with slot.lock:
                yield
        finally:
            with self._guard:
                slot.users -= 1
                if slot.users == 0:
                    del self._locks[slot_key]

    async def _lookup(self, key: str, context: ExecutionContext) -> Outcome[T] | None:
        entry = await self.provider.get(key)
        if entry is None:
            return None
        logger.debug("cache.hit", policy=self.name, key=key)
        fire_hook(self.options.on_hit, context, key)
        return Success(entry.value)


__all__ = ["CacheOptions", "CachePolicy"]
