"""Resilience – RetryOptions and RetryPolicy."""
from __future__ import annotations

import asyncio
import dataclasses
from typing import Any, Callable, ClassVar, Sequence, TypeVar

from mp_resilience.config.settings import Settings
from mp_resilience.observability.logging import get_logger
from mp_resilience.resilience.context import ExecutionContext
from mp_resilience.resilience.errors import ErrorKind
from mp_resilience.resilience.outcome import Failure, Outcome, Success
from mp_resilience.resilience.policy import Policy, ResultPredicate, cancelled, capture, fire_hook, handles
from mp_resilience.resilience.retry.backoff import BackoffStrategy, FunctionBackoff, ScheduleBackoff
from mp_resilience.resilience.retry.errors import RetryExhaustedError
from mp_resilience.resilience.retry.jitter import JitterStrategy, NoJitter

T = TypeVar("T")
logger = get_logger(__name__)


@dataclasses.dataclass
class RetryOptions(Settings):
    """Configuration for :class:`RetryPolicy`.

    ``max_attempts`` counts every invocation including the first one;
    ``None`` retries until the outcome stops matching or the context is
    cancelled. Waits come from ``delays`` when given, otherwise from
    ``backoff``; with neither the retry is immediate.
    """

    _prefix: ClassVar[str] = "RESILIENCE_RETRY"

    max_attempts: int | None = 3
    delays: tuple[float, ...] = ()
    backoff: BackoffStrategy | Callable[[int], float] | None = None
    jitter: JitterStrategy | None = None
    handle: tuple[type[BaseException], ...] = (Exception,)
    handle_kinds: frozenset[ErrorKind] = frozenset()
    handle_result: ResultPredicate | None = None
    on_retry: Callable[[Outcome[Any], int, float], Any] | None = None

    def _validate(self) -> None:
        self._require(
            "max_attempts",
            self.max_attempts is None or self.max_attempts >= 0,
            "must be >= 0, or None for unlimited",
        )
        self._require("delays", all(d >= 0 for d in self.delays), "delays must be non-negative")

    @classmethod
    def forever(cls, **kwargs: Any) -> "RetryOptions":
        return cls(max_attempts=None, **kwargs)

    @classmethod
    def wait_and_retry(cls, delays: Sequence[float], **kwargs: Any) -> "RetryOptions":
        """One retry per entry in *delays*, waiting that long before it."""
        return cls(max_attempts=len(delays) + 1, delays=tuple(delays), **kwargs)


class RetryPolicy(Policy[T]):
    """Re-invokes the operation while its outcome matches the retry predicate."""

    def __init__(self, options: RetryOptions | None = None, *, name: str | None = None) -> None:
        super().__init__(name)
        self.options = options or RetryOptions()
        self._backoff = self._resolve_backoff()
        self._jitter = self.options.jitter or NoJitter()

    def _resolve_backoff(self) -> BackoffStrategy | None:
        opts = self.options
        if opts.delays:
            return ScheduleBackoff(opts.delays)
        if opts.backoff is None or isinstance(opts.backoff, BackoffStrategy):
            return opts.backoff
        return FunctionBackoff(opts.backoff)

    def _should_retry(self, outcome: Outcome[Any]) -> bool:
        opts = self.options
        return handles(outcome, opts.handle, opts.handle_result, kinds=opts.handle_kinds)

    def _has_attempts_left(self, attempt: int) -> bool:
        return self.options.max_attempts is None or attempt < self.options.max_attempts

    def delay_for(self, attempt: int) -> float:
        """Seconds to wait after the *attempt*-th invocation failed."""
        if self._backoff is None:
            return 0.0
        return max(0.0, self._jitter.apply(self._backoff.compute(attempt)))

    async def _execute(self, operation: Callable[[], Any], context: ExecutionContext) -> Outcome[T]:
        attempt = 0
        while True:
            attempt += 1
            outcome = await capture(operation)
            if not self._should_retry(outcome):
                return outcome
            if not self._has_attempts_left(attempt):
                return self._exhausted(outcome, attempt)

            delay = self.delay_for(attempt)
            logger.info(
                "retry.attempt",
                policy=self.name,
                attempt=attempt,
                delay=delay,
                kind=outcome.kind.value if outcome.kind else None,
            )
            fire_hook(self.options.on_retry, outcome, attempt, delay)

            if delay > 0:
                if await context.cancellation.wait_for(delay):
                    return cancelled(f"Retry '{self.name}' cancelled while waiting after attempt {attempt}")
            elif context.cancellation.is_cancelled:
                return cancelled(f"Retry '{self.name}' cancelled after attempt {attempt}")
            else:
                # let other tasks (including a canceller) run between immediate retries
                await asyncio.sleep(0)

    def _exhausted(self, outcome: Outcome[T], attempts: int) -> Outcome[T]:
        if isinstance(outcome, Success):
            logger.info("retry.gave_up", policy=self.name, attempts=attempts)
            return outcome
        logger.warning("retry.exhausted", policy=self.name, attempts=attempts, error=repr(outcome.cause))
        return Failure(ErrorKind.RETRY_EXHAUSTED, RetryExhaustedError(attempts, outcome.cause))


__all__ = ["RetryOptions", "RetryPolicy"]
