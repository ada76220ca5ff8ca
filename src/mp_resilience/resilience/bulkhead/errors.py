"""Resilience – BulkheadRejectedError."""
from __future__ import annotations

from typing import Any

from mp_resilience.resilience.errors import ErrorKind, ResilienceError


class BulkheadRejectedError(ResilienceError):
    """Raised when every execution slot and every queue position is taken."""

    default_code = "bulkhead_rejected"
    kind = ErrorKind.BULKHEAD_REJECTED

    def __init__(self, bulkhead_name: str, max_concurrency: int, max_queue_length: int) -> None:
        super().__init__(
            f"Bulkhead '{bulkhead_name}' is full "
            f"({max_concurrency} executing, {max_queue_length} queued)"
        )
        self.bulkhead_name = bulkhead_name
        self.max_concurrency = max_concurrency
        self.max_queue_length = max_queue_length

    def to_dict(self) -> dict[str, Any]:
        base = super().to_dict()
        base["bulkhead_name"] = self.bulkhead_name
        return base


__all__ = ["BulkheadRejectedError"]
