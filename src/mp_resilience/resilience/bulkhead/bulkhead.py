"""Resilience – BulkheadOptions and BulkheadPolicy."""
from __future__ import annotations

import dataclasses
from typing import Any, Callable, ClassVar, TypeVar

from mp_resilience.config.settings import Settings
from mp_resilience.observability.logging import get_logger
from mp_resilience.resilience.bulkhead.errors import BulkheadRejectedError
from mp_resilience.resilience.bulkhead.limiters import QueueLimiter
from mp_resilience.resilience.context import ExecutionContext
from mp_resilience.resilience.errors import CancellationRequestedError, ErrorKind
from mp_resilience.resilience.outcome import Failure, Outcome
from mp_resilience.resilience.policy import Policy, capture, fire_hook

T = TypeVar("T")
logger = get_logger(__name__)


@dataclasses.dataclass
class BulkheadOptions(Settings):
    _prefix: ClassVar[str] = "RESILIENCE_BULKHEAD"

    max_concurrency: int = 10
    max_queue_length: int = 5
    on_rejected: Callable[[ExecutionContext], Any] | None = None

    def _validate(self) -> None:
        self._require("max_concurrency", self.max_concurrency >= 1, "must be >= 1")
        self._require("max_queue_length", self.max_queue_length >= 0, "must be >= 0")


class BulkheadPolicy(Policy[T]):
    """Caps concurrent executions; overflow waits in a bounded FIFO queue.

    A call that finds both the slots and the queue full is rejected
    immediately with ``BULKHEAD_REJECTED``. A queued call whose context is
    cancelled leaves the queue with ``CANCELLATION_REQUESTED``.
    """

    def __init__(self, options: BulkheadOptions | None = None, *, name: str | None = None) -> None:
        super().__init__(name)
        self.options = options or BulkheadOptions()
        self._limiter = QueueLimiter(self.name, self.options.max_concurrency, self.options.max_queue_length)

    @property
    def active_count(self) -> int:
        return self._limiter.active_count

    @property
    def queued_count(self) -> int:
        return self._limiter.queued_count

    @property
    def available_slots(self) -> int:
        return self._limiter.available_slots

    @property
    def available_queue(self) -> int:
        return self._limiter.available_queue

    async def _execute(self, operation: Callable[[], Any], context: ExecutionContext) -> Outcome[T]:
        try:
            await self._limiter.acquire(context.cancellation)
        except BulkheadRejectedError as exc:
            logger.warning(
                "bulkhead.rejected",
                name=self.name,
                max_concurrency=self.options.max_concurrency,
                max_queue_length=self.options.max_queue_length,
            )
            fire_hook(self.options.on_rejected, context)
            return Failure(ErrorKind.BULKHEAD_REJECTED, exc.with_detail(correlation_id=context.correlation_id))
        except CancellationRequestedError as exc:
            return Failure(ErrorKind.CANCELLATION_REQUESTED, exc)

        try:
            return await capture(operation)
        finally:
            self._limiter.release()


__all__ = ["BulkheadOptions", "BulkheadPolicy"]
