"""Resilience – rate limiter specific errors."""
from __future__ import annotations

from typing import Any

from mp_resilience.resilience.errors import ErrorKind, ResilienceError


class RateLimitRejectedError(ResilienceError):
    """No token was available; ``retry_after_seconds`` estimates when one will be."""

    default_code = "rate_limit_rejected"
    kind = ErrorKind.RATE_LIMIT_REJECTED

    def __init__(self, retry_after_seconds: float = 0.0, message: str | None = None) -> None:
        super().__init__(message or f"Rate limit exceeded – retry after {retry_after_seconds:.3f}s")
        self.retry_after_seconds = retry_after_seconds

    def to_dict(self) -> dict[str, Any]:
        base = super().to_dict()
        base["retry_after_seconds"] = self.retry_after_seconds
        return base


__all__ = ["RateLimitRejectedError"]
