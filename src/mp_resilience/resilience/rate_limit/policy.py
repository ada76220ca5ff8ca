"""Resilience – RateLimiterOptions and RateLimiterPolicy."""
from __future__ import annotations

import dataclasses
from typing import Any, Callable, ClassVar, TypeVar

from mp_resilience.config.settings import Settings
from mp_resilience.kernel.time import Clock
from mp_resilience.observability.logging import get_logger
from mp_resilience.resilience.context import ExecutionContext
from mp_resilience.resilience.errors import ErrorKind
from mp_resilience.resilience.outcome import Failure, Outcome
from mp_resilience.resilience.policy import Policy, capture
from mp_resilience.resilience.rate_limit.errors import RateLimitRejectedError
from mp_resilience.resilience.rate_limit.token_bucket import TokenBucket

T = TypeVar("T")
logger = get_logger(__name__)


@dataclasses.dataclass
class RateLimiterOptions(Settings):
    """Token bucket parameters.

    ``retry_after_factory(retry_after_seconds, context)``, when set, is
    invoked instead of rejecting; whatever it returns (or raises) becomes
    the outcome.
    """

    _prefix: ClassVar[str] = "RESILIENCE_RATE_LIMITER"

    capacity: int = 10
    refill_tokens: float = 10.0
    refill_interval: float = 1.0
    retry_after_factory: Callable[[float, ExecutionContext], Any] | None = None

    def _validate(self) -> None:
        self._require("capacity", self.capacity >= 1, "must be >= 1")
        self._require("refill_tokens", self.refill_tokens >= 0, "must be >= 0")
        self._require("refill_interval", self.refill_interval > 0, "must be > 0")

    @classmethod
    def per_second(cls, rate: float, *, burst: int | None = None, **kwargs: Any) -> "RateLimiterOptions":
        return cls(capacity=burst or max(1, int(rate)), refill_tokens=rate, refill_interval=1.0, **kwargs)


class RateLimiterPolicy(Policy[T]):
    """Admits one call per token; rejects with ``RATE_LIMIT_REJECTED`` when the bucket is empty."""

    def __init__(
        self,
        options: RateLimiterOptions | None = None,
        *,
        name: str | None = None,
        clock: Clock | None = None,
    ) -> None:
        super().__init__(name)
        self.options = options or RateLimiterOptions()
        self.bucket = TokenBucket(
            self.options.capacity,
            self.options.refill_tokens,
            self.options.refill_interval,
            clock=clock,
        )

    async def _execute(self, operation: Callable[[], Any], context: ExecutionContext) -> Outcome[T]:
        if self.bucket.try_acquire():
            return await capture(operation)

        retry_after = self.bucket.retry_after()
        logger.warning("rate_limiter.rejected", policy=self.name, retry_after=retry_after)
        factory = self.options.retry_after_factory
        if factory is not None:
            return await capture(lambda: factory(retry_after, context))
        return Failure(ErrorKind.RATE_LIMIT_REJECTED, RateLimitRejectedError(retry_after))


__all__ = ["RateLimiterOptions", "RateLimiterPolicy"]
