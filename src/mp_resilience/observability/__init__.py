"""Observability – structured logging for policy state transitions."""
from mp_resilience.observability.logging import CorrelationProcessor, JsonLoggerFactory, get_logger

__all__ = ["CorrelationProcessor", "JsonLoggerFactory", "get_logger"]
