"""Resilience – ErrorKind tags and the shared error base.

Every rejection a policy produces is a :class:`ResilienceError` subclass
whose ``kind`` is the tag carried by the resulting
:class:`~mp_resilience.resilience.outcome.Failure`. Policy-specific errors
live beside their policy (``circuit_breaker/errors.py`` and so on).
"""
from __future__ import annotations

from enum import Enum
from typing import Any, ClassVar

from mp_resilience.kernel.errors import ApplicationError


class ErrorKind(str, Enum):
    TIMEOUT_REJECTED = "TIMEOUT_REJECTED"
    CIRCUIT_OPEN_REJECTED = "CIRCUIT_OPEN_REJECTED"
    BULKHEAD_REJECTED = "BULKHEAD_REJECTED"
    RATE_LIMIT_REJECTED = "RATE_LIMIT_REJECTED"
    RETRY_EXHAUSTED = "RETRY_EXHAUSTED"
    CANCELLATION_REQUESTED = "CANCELLATION_REQUESTED"
    OPERATION_FAILED = "OPERATION_FAILED"


class ResilienceError(ApplicationError):
    """Base class for failures produced by a policy rather than by the operation."""

    default_code = "resilience_error"
    kind: ClassVar[ErrorKind] = ErrorKind.OPERATION_FAILED

    def to_dict(self) -> dict[str, Any]:
        base = super().to_dict()
        base["kind"] = self.kind.value
        return base


class CancellationRequestedError(ResilienceError):
    """The caller cancelled the execution context while a policy was suspended."""

    default_code = "cancellation_requested"
    kind = ErrorKind.CANCELLATION_REQUESTED

    def __init__(self, message: str = "Execution was cancelled", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


class OperationFailedError(ResilienceError):
    """Classified wrapper around an exception raised by the operation itself."""

    default_code = "operation_failed"
    kind = ErrorKind.OPERATION_FAILED

    def __init__(self, cause: BaseException) -> None:
        super().__init__(f"Operation failed: {cause!r}", cause=cause)


__all__ = [
    "CancellationRequestedError",
    "ErrorKind",
    "OperationFailedError",
    "ResilienceError",
]
