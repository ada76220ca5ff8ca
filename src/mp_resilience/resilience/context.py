"""Resilience – ExecutionContext and CancellationToken."""
from __future__ import annotations

import asyncio
import contextlib
import dataclasses
import threading
from collections.abc import Iterator
from contextvars import ContextVar
from uuid import uuid4


class CancellationToken:
    """Caller-owned cancellation signal.

    ``cancel()`` is thread-safe and wakes every coroutine suspended in
    :meth:`wait` on its own event loop. Cancellation is one-way.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._cancelled = False
        self._waiters: set[asyncio.Future[None]] = set()

    @property
    def is_cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        with self._lock:
            if self._cancelled:
                return
            self._cancelled = True
            waiters = list(self._waiters)
            self._waiters.clear()
        for fut in waiters:
            fut.get_loop().call_soon_threadsafe(_resolve, fut)

    async def wait(self) -> None:
        """Suspend until the token is cancelled."""
        fut: asyncio.Future[None] = asyncio.get_running_loop().create_future()
        with self._lock:
            if self._cancelled:
                return
            self._waiters.add(fut)
        try:
            await fut
        finally:
            with self._lock:
                self._waiters.discard(fut)

    async def wait_for(self, seconds: float) -> bool:
        """Sleep up to *seconds*; return ``True`` if cancelled in the meantime."""
        if self._cancelled:
            return True
        try:
            await asyncio.wait_for(self.wait(), timeout=seconds)
        except TimeoutError:
            return False
        return True

    def __repr__(self) -> str:
        return f"CancellationToken(cancelled={self._cancelled})"


def _resolve(fut: asyncio.Future[None]) -> None:
    if not fut.done():
        fut.set_result(None)


@dataclasses.dataclass(frozen=True)
class ExecutionContext:
    """Per-call context threaded through every policy layer."""
    cache_key: str | None = None
    correlation_id: str = dataclasses.field(default_factory=lambda: str(uuid4()))
    cancellation: CancellationToken = dataclasses.field(default_factory=CancellationToken, compare=False)

    @classmethod
    def new(
        cls,
        cache_key: str | None = None,
        *,
        cancellation: CancellationToken | None = None,
    ) -> "ExecutionContext":
        return cls(cache_key=cache_key, cancellation=cancellation or CancellationToken())

    def with_cache_key(self, cache_key: str | None) -> "ExecutionContext":
        """Copy sharing this context's correlation id and cancellation token."""
        return dataclasses.replace(self, cache_key=cache_key)

    @staticmethod
    def current() -> "ExecutionContext | None":
        """The context of the policy execution in progress, if any."""
        return _CTX_VAR.get()

    @staticmethod
    @contextlib.contextmanager
    def scoped(ctx: "ExecutionContext") -> Iterator["ExecutionContext"]:
        token = _CTX_VAR.set(ctx)
        try:
            yield ctx
        finally:
            _CTX_VAR.reset(token)


_CTX_VAR: ContextVar[ExecutionContext | None] = ContextVar("_mp_execution_ctx", default=None)


__all__ = ["CancellationToken", "ExecutionContext"]
