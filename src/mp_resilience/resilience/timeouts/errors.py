"""Resilience – timeout specific errors."""
from __future__ import annotations

from typing import Any

from mp_resilience.resilience.errors import ErrorKind, ResilienceError


class TimeoutRejectedError(ResilienceError):
    """The operation did not finish within its time budget.

    The caller must not assume the operation's side effects were avoided:
    in race mode the operation keeps running in the background.
    """

    default_code = "timeout_rejected"
    kind = ErrorKind.TIMEOUT_REJECTED

    def __init__(self, timeout_seconds: float, message: str | None = None) -> None:
        super().__init__(message or f"Operation timed out after {timeout_seconds}s")
        self.timeout_seconds = timeout_seconds

    def to_dict(self) -> dict[str, Any]:
        base = super().to_dict()
        base["timeout_seconds"] = self.timeout_seconds
        return base


__all__ = ["TimeoutRejectedError"]
