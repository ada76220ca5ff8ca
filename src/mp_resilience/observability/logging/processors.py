"""Observability – structlog processors and get_logger helper.

``CorrelationProcessor`` injects the active execution's correlation id
into log events; ``get_logger(name)`` returns a bound structlog logger.
"""
from __future__ import annotations

from typing import Any

import structlog


class CorrelationProcessor:
    """structlog processor that injects ``correlation_id`` from the current
    :class:`~mp_resilience.resilience.context.ExecutionContext`.

    Events logged outside of a policy execution are left untouched, and an
    explicitly bound ``correlation_id`` always wins.

    Usage::

        import structlog
        from mp_resilience.observability.logging import CorrelationProcessor

        structlog.configure(processors=[CorrelationProcessor(), ...])
    """

    def __call__(
        self,
        logger: Any,           # noqa: ARG002
        method_name: str,      # noqa: ARG002
        event_dict: dict[str, Any],
    ) -> dict[str, Any]:
        from mp_resilience.resilience.context import ExecutionContext

        ctx = ExecutionContext.current()
        if ctx is not None:
            event_dict.setdefault("correlation_id", ctx.correlation_id)
            if ctx.cache_key is not None:
                event_dict.setdefault("cache_key", ctx.cache_key)
        return event_dict


def get_logger(name: str | None = None, **initial_values: Any) -> Any:
    """Return a bound structlog logger.

    Parameters
    ----------
    name:
        Logger name (typically ``__name__`` of the calling module).
    **initial_values:
        Key-value pairs to bind on the returned logger.
    """
    logger = structlog.get_logger(name)
    if initial_values:
        logger = logger.bind(**initial_values)
    return logger


__all__ = ["CorrelationProcessor", "get_logger"]
