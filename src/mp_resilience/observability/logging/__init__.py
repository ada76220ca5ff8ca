"""Observability – structlog configuration and helpers."""
from mp_resilience.observability.logging.factory import JsonLoggerFactory
from mp_resilience.observability.logging.processors import CorrelationProcessor, get_logger

__all__ = [
    "CorrelationProcessor",
    "JsonLoggerFactory",
    "get_logger",
]
