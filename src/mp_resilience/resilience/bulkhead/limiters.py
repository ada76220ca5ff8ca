"""Resilience – QueueLimiter: bounded execution slots with a bounded FIFO wait queue."""
from __future__ import annotations

import asyncio
import contextlib
import threading
from collections import deque
from collections.abc import AsyncIterator

from mp_resilience.resilience.bulkhead.errors import BulkheadRejectedError
from mp_resilience.resilience.context import CancellationToken
from mp_resilience.resilience.errors import CancellationRequestedError


class _Waiter:
    __slots__ = ("future", "granted")

    def __init__(self, future: asyncio.Future[None]) -> None:
        self.future = future
        self.granted = False


def _grant(fut: asyncio.Future[None]) -> None:
    if not fut.done():
        fut.set_result(None)


class QueueLimiter:
    """Limits concurrent executions and the number of callers waiting for one.

    Counters and the wait queue change together under one lock. A
    released slot is handed directly to the oldest waiter, so admission
    is FIFO and a newcomer can never overtake the queue.
    """

    def __init__(self, name: str, max_concurrency: int, max_queue_length: int) -> None:
        self.name = name
        self.max_concurrency = max_concurrency
        self.max_queue_length = max_queue_length
        self._active = 0
        self._queue: deque[_Waiter] = deque()
        self._lock = threading.Lock()

    @property
    def active_count(self) -> int:
        return self._active

    @property
    def queued_count(self) -> int:
        return len(self._queue)

    @property
    def available_slots(self) -> int:
        return self.max_concurrency - self._active

    @property
    def available_queue(self) -> int:
        return self.max_queue_length - len(self._queue)

    async def acquire(self, cancellation: CancellationToken) -> None:
        """Take a slot, queueing if necessary.

        Raises :class:`BulkheadRejectedError` when slots and queue are both
        full, :class:`CancellationRequestedError` if *cancellation* fires
        while queued.
        """
        with self._lock:
            if self._active < self.max_concurrency and not self._queue:
                self._active += 1
                return
            if len(self._queue) >= self.max_queue_length:
                raise BulkheadRejectedError(self.name, self.max_concurrency, self.max_queue_length)
            waiter = _Waiter(asyncio.get_running_loop().create_future())
            self._queue.append(waiter)

        cancel_waiter = asyncio.ensure_future(cancellation.wait())
        try:
            await asyncio.wait({waiter.future, cancel_waiter}, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            if not self._withdraw(waiter):
                self.release()
            raise
        finally:
            cancel_waiter.cancel()

        if not self._withdraw(waiter):
            return
        raise CancellationRequestedError(f"Cancelled while queued in bulkhead '{self.name}'")

    def release(self) -> None:
        with self._lock:
            if not self._queue:
                self._active -= 1
                return
            waiter = self._queue.popleft()
            waiter.granted = True
        waiter.future.get_loop().call_soon_threadsafe(_grant, waiter.future)

    def _withdraw(self, waiter: _Waiter) -> bool:
        """Drop *waiter* from the queue; ``False`` if a slot was already handed to it."""
        with self._lock:
            if waiter.granted:
                return False
            with contextlib.suppress(ValueError):
                self._queue.remove(waiter)
            return True

    @contextlib.asynccontextmanager
    async def slot(self, cancellation: CancellationToken) -> AsyncIterator["QueueLimiter"]:
        await self.acquire(cancellation)
        try:
            yield self
        finally:
            self.release()


__all__ = ["QueueLimiter"]
