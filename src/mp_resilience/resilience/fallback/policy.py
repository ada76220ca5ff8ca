"""Resilience – FallbackOptions and FallbackPolicy."""
from __future__ import annotations

import dataclasses
from typing import Any, Callable, ClassVar, TypeVar

from mp_resilience.config.settings import Settings
from mp_resilience.observability.logging import get_logger
from mp_resilience.resilience.context import ExecutionContext
from mp_resilience.resilience.errors import ErrorKind
from mp_resilience.resilience.outcome import Outcome
from mp_resilience.resilience.policy import Policy, ResultPredicate, capture, fire_hook, handles

T = TypeVar("T")
logger = get_logger(__name__)


@dataclasses.dataclass
class FallbackOptions(Settings):
    """Substitute used when the inner outcome matches ``handle``/``handle_result``.

    *fallback* may be a plain value, a zero-argument callable or a
    zero-argument coroutine function. ``handle_kinds`` matches failures by
    their ErrorKind; pass ``handle=()`` to match on kinds alone.
    """

    _prefix: ClassVar[str] = "RESILIENCE_FALLBACK"

    fallback: Any = None
    handle: tuple[type[BaseException], ...] = (Exception,)
    handle_kinds: frozenset[ErrorKind] = frozenset()
    handle_result: ResultPredicate | None = None
    on_fallback: Callable[[Outcome[Any]], Any] | None = None


class FallbackPolicy(Policy[T]):
    """Replaces a matched outcome with the configured substitute.

    Failures that do not match propagate unchanged; cancellation never
    matches.
    """

    def __init__(self, options: FallbackOptions | Any = None, *, name: str | None = None) -> None:
        super().__init__(name)
        self.options = options if isinstance(options, FallbackOptions) else FallbackOptions(fallback=options)

    async def _execute(self, operation: Callable[[], Any], context: ExecutionContext) -> Outcome[T]:  # noqa: ARG002
        outcome = await capture(operation)
        opts = self.options
        if not handles(outcome, opts.handle, opts.handle_result, kinds=opts.handle_kinds):
            return outcome

        logger.info(
            "fallback.applied",
            policy=self.name,
            kind=outcome.kind.value if outcome.kind else None,
        )
        fire_hook(opts.on_fallback, outcome)
        substitute = opts.fallback
        if callable(substitute):
            return await capture(substitute)
        return await capture(lambda: substitute)


__all__ = ["FallbackOptions", "FallbackPolicy"]
