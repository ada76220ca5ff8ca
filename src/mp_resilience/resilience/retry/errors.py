"""Resilience – retry specific errors."""
from __future__ import annotations

from typing import Any

from mp_resilience.resilience.errors import ErrorKind, ResilienceError


class RetryExhaustedError(ResilienceError):
    """Raised when every configured attempt failed with a retryable failure.

    Attributes
    ----------
    attempts:
        Number of times the operation was invoked.
    last_error:
        The failure cause of the final attempt (also chained as ``__cause__``).
    """

    default_code = "retry_exhausted"
    kind = ErrorKind.RETRY_EXHAUSTED

    def __init__(self, attempts: int, last_error: BaseException) -> None:
        super().__init__(
            f"Retry exhausted after {attempts} attempt(s): {last_error!r}",
            cause=last_error,
            detail={"attempts": attempts},
        )
        self.attempts = attempts
        self.last_error = last_error

    def to_dict(self) -> dict[str, Any]:
        base = super().to_dict()
        base["attempts"] = self.attempts
        return base


__all__ = ["RetryExhaustedError"]
