"""Resilience – thread-safe token bucket driven by an injected clock."""
from __future__ import annotations

import threading

from mp_resilience.kernel.time import Clock, SystemClock


class TokenBucket:
    """Token bucket holding at most *capacity* tokens.

    ``refill_tokens`` are added every ``refill_interval`` seconds, credited
    continuously. The bucket starts full. Refill only ever moves forward:
    a clock reading earlier than the last refill adds nothing.
    """

    def __init__(
        self,
        capacity: float,
        refill_tokens: float,
        refill_interval: float = 1.0,
        *,
        clock: Clock | None = None,
    ) -> None:
        if capacity < 1:
            raise ValueError("capacity must be >= 1")
        if refill_tokens < 0 or refill_interval <= 0:
            raise ValueError("refill_tokens must be >= 0 and refill_interval > 0")
        self.capacity = float(capacity)
        self.rate = refill_tokens / refill_interval
        self._clock = clock or SystemClock()
        self._tokens = self.capacity
        self._last_refill = self._clock.monotonic()
        self._lock = threading.Lock()

    @property
    def tokens(self) -> float:
        with self._lock:
            self._refill()
            return self._tokens

    def _refill(self) -> None:
        now = self._clock.monotonic()
        elapsed = now - self._last_refill
        if elapsed <= 0:
            return
        self._tokens = min(self.capacity, self._tokens + elapsed * self.rate)
        self._last_refill = now

    def try_acquire(self, tokens: float = 1.0) -> bool:
        with self._lock:
            self._refill()
            if self._tokens >= tokens:
                self._tokens -= tokens
                return True
            return False

    def retry_after(self, tokens: float = 1.0) -> float:
        """Seconds until *tokens* will be available (``inf`` if the bucket never refills)."""
        with self._lock:
            self._refill()
            needed = tokens - self._tokens
        if needed <= 0:
            return 0.0
        if self.rate <= 0:
            return float("inf")
        return needed / self.rate

    def __repr__(self) -> str:
        return f"TokenBucket(capacity={self.capacity}, rate={self.rate}/s, tokens={self._tokens:.3f})"


__all__ = ["TokenBucket"]
