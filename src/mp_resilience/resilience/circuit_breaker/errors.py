"""Resilience – circuit-breaker specific errors."""
from __future__ import annotations

from typing import Any

from mp_resilience.resilience.errors import ErrorKind, ResilienceError


class CircuitOpenError(ResilienceError):
    """Returned when a circuit breaker rejects a call without invoking it.

    Attributes
    ----------
    circuit_name:
        Name of the circuit breaker that rejected the call.
    retry_after_seconds:
        Time left until the breaker admits a trial call (``0`` while a
        half-open trial is already in flight).
    """

    default_code = "circuit_open"
    kind = ErrorKind.CIRCUIT_OPEN_REJECTED

    def __init__(
        self,
        circuit_name: str,
        message: str | None = None,
        *,
        retry_after_seconds: float = 0.0,
    ) -> None:
        self.circuit_name = circuit_name
        self.retry_after_seconds = retry_after_seconds
        super().__init__(message or f"Circuit breaker '{circuit_name}' is OPEN")

    def to_dict(self) -> dict[str, Any]:
        base = super().to_dict()
        base["circuit_name"] = self.circuit_name
        base["retry_after_seconds"] = self.retry_after_seconds
        return base


__all__ = ["CircuitOpenError"]
