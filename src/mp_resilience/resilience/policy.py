"""Resilience – Policy contract, NoOpPolicy and shared helpers.

Every policy exposes ``execute(operation, context) -> Outcome``. The
operation is a zero-argument callable returning a value or an awaitable.
Exceptions it raises become ``Failure(OPERATION_FAILED, exc)``; an
``Outcome`` it returns (typically an inner policy's result) passes
through untouched, which is what lets policies nest.
"""
from __future__ import annotations

import abc
import asyncio
import inspect
from typing import Any, Awaitable, Callable, Generic, TypeVar

from mp_resilience.observability.logging import get_logger
from mp_resilience.resilience.context import ExecutionContext
from mp_resilience.resilience.errors import CancellationRequestedError, ErrorKind
from mp_resilience.resilience.outcome import Failure, Outcome, Success

T = TypeVar("T")

Operation = Callable[[], "Awaitable[T] | T"]
ResultPredicate = Callable[[Any], bool]

logger = get_logger(__name__)

_background_tasks: set[asyncio.Task[Any]] = set()


async def capture(operation: Callable[[], Any]) -> Outcome[Any]:
    """Invoke *operation* and fold its result or exception into an Outcome."""
    try:
        result = operation()
        if inspect.isawaitable(result):
            result = await result
    except Exception as exc:
        return Failure.from_exception(exc)
    if isinstance(result, (Success, Failure)):
        return result
    return Success(result)


def _causes(outcome: Failure) -> list[BaseException]:
    """The failure's cause followed by the last errors wrapped by exhausted retries."""
    chain = [outcome.cause]
    cause: BaseException | None = outcome.cause
    while getattr(cause, "kind", None) is ErrorKind.RETRY_EXHAUSTED:
        cause = getattr(cause, "last_error", None)
        if cause is None:
            break
        chain.append(cause)
    return chain


def handles(
    outcome: Outcome[Any],
    exceptions: tuple[type[BaseException], ...],
    result_predicate: ResultPredicate | None = None,
    excluded: tuple[type[BaseException], ...] = (),
    kinds: frozenset[ErrorKind] = frozenset(),
) -> bool:
    """Does *outcome* match a policy's handled-failure configuration?

    Failures match when their kind is in *kinds* or their cause is one of
    *exceptions*. A ``RetryExhaustedError`` cause is also matched through
    the last error it wraps, so an outer policy configured for
    ``ConnectionError`` still sees an inner retry giving up on one.
    Successes match only when *result_predicate* returns ``True`` for the
    value. Cancellation is never handled.
    """
    if isinstance(outcome, Success):
        return result_predicate is not None and bool(result_predicate(outcome.value))
    if outcome.kind is ErrorKind.CANCELLATION_REQUESTED:
        return False
    causes = _causes(outcome)
    if excluded and any(isinstance(c, excluded) for c in causes):
        return False
    if outcome.kind in kinds:
        return True
    return any(isinstance(c, exceptions) for c in causes)


def cancelled(message: str = "Execution was cancelled") -> Failure:
    return Failure(ErrorKind.CANCELLATION_REQUESTED, CancellationRequestedError(message))


def fire_hook(hook: Callable[..., Any] | None, *args: Any) -> None:
    """Invoke a notification hook without letting it block or break the caller.

    Coroutine hooks are scheduled on the running loop, or dropped when the
    hook fires from synchronous code with no loop running. Errors raised
    by a hook are logged and do not propagate.
    """
    if hook is None:
        return
    name = getattr(hook, "__qualname__", repr(hook))
    try:
        result = hook(*args)
    except Exception:
        logger.exception("policy.hook_failed", hook=name)
        return
    if inspect.isawaitable(result):
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            if inspect.iscoroutine(result):
                result.close()
            logger.warning("policy.hook_dropped", hook=name, reason="no running event loop")
            return
        task = asyncio.ensure_future(result, loop=loop)
        _background_tasks.add(task)
        task.add_done_callback(_finish_hook)


def _finish_hook(task: asyncio.Task[Any]) -> None:
    _background_tasks.discard(task)
    if not task.cancelled() and task.exception() is not None:
        logger.error("policy.hook_failed", error=repr(task.exception()))


class Policy(abc.ABC, Generic[T]):
    """A composable wrapper adding one resilience behaviour to an operation."""

    def __init__(self, name: str | None = None) -> None:
        self.name = name or type(self).__name__

    async def execute(
        self,
        operation: Callable[[], Any],
        context: ExecutionContext | None = None,
    ) -> Outcome[T]:
        ctx = context or ExecutionContext.current() or ExecutionContext.new()
        if ctx.cancellation.is_cancelled:
            return cancelled(f"Execution was cancelled before '{self.name}' started")
        with ExecutionContext.scoped(ctx):
            return await self._execute(operation, ctx)

    async def call(
        self,
        operation: Callable[[], Any],
        context: ExecutionContext | None = None,
    ) -> T:
        """Execute and return the value, raising the failure's cause otherwise."""
        return (await self.execute(operation, context)).unwrap()

    @abc.abstractmethod
    async def _execute(self, operation: Callable[[], Any], context: ExecutionContext) -> Outcome[T]: ...

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


class NoOpPolicy(Policy[T]):
    """Identity policy: runs the operation and returns its outcome verbatim."""

    async def _execute(self, operation: Callable[[], Any], context: ExecutionContext) -> Outcome[T]:  # noqa: ARG002
        return await capture(operation)


__all__ = [
    "NoOpPolicy",
    "Operation",
    "Policy",
    "ResultPredicate",
    "cancelled",
    "capture",
    "fire_hook",
    "handles",
]
