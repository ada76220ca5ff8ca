"""Resilience – TenacityRetryPolicy adapter.

Optional dependency: ``tenacity``.  Install with::

    pip install mp-resilience[tenacity]
"""
from __future__ import annotations

from typing import Any, Callable, TypeVar

from mp_resilience.resilience.context import ExecutionContext
from mp_resilience.resilience.errors import CancellationRequestedError, ErrorKind
from mp_resilience.resilience.outcome import Failure, Outcome, Success
from mp_resilience.resilience.policy import Policy, capture
from mp_resilience.resilience.retry.errors import RetryExhaustedError

T = TypeVar("T")


def _retryable(exc: BaseException) -> bool:
    return isinstance(exc, Exception) and not isinstance(exc, CancellationRequestedError)


class TenacityRetryPolicy(Policy[T]):
    """Retry policy whose schedule is driven by the ``tenacity`` library.

    Produces the same outcomes as
    :class:`~mp_resilience.resilience.retry.policy.RetryPolicy`, so the two
    are interchangeable inside a pipeline: a retryable failure on the last
    attempt becomes ``RETRY_EXHAUSTED``, a success the retry predicate
    still rejects is returned as-is.

    Parameters
    ----------
    max_attempts:
        Maximum number of call attempts (including the first call);
        ``None`` never stops.
    wait:
        A ``tenacity`` wait strategy, e.g.
        ``tenacity.wait_exponential(multiplier=1, max=10)``.
        Defaults to ``wait_none()``.
    retry:
        A ``tenacity`` retry predicate, e.g.
        ``tenacity.retry_if_exception_type(IOError)``.
        Defaults to retrying on any exception except cancellation.
    kwargs:
        Additional keyword arguments forwarded to
        :class:`tenacity.AsyncRetrying`.

    Waits are interrupted by the execution context's cancellation token.

    Example
    -------
    ::

        from tenacity import wait_exponential, retry_if_exception_type
        policy = TenacityRetryPolicy(
            max_attempts=5,
            wait=wait_exponential(multiplier=0.5, max=8),
            retry=retry_if_exception_type(IOError),
        )
        outcome = await policy.execute(my_async_fn)
    """

    def __init__(
        self,
        max_attempts: int | None = 3,
        wait: Any = None,
        retry: Any = None,
        *,
        name: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(name)
        try:
            import tenacity  # noqa: F401
        except ImportError as exc:
            raise ImportError(
                "Install 'tenacity' (pip install tenacity) to use TenacityRetryPolicy"
            ) from exc

        import tenacity as ten

        self._max_attempts = max_attempts
        self._wait = wait or ten.wait_none()
        self._retry = retry or ten.retry_if_exception(_retryable)
        self._extra_kwargs = kwargs

    def _build_async_retrying(self, context: ExecutionContext) -> Any:
        import tenacity as ten

        async def _sleep(seconds: float) -> None:
            if await context.cancellation.wait_for(seconds):
                raise CancellationRequestedError(f"Retry '{self.name}' cancelled while waiting")

        stop = ten.stop_never if self._max_attempts is None else ten.stop_after_attempt(self._max_attempts)
        return ten.AsyncRetrying(
            stop=stop,
            wait=self._wait,
            retry=self._retry,
            sleep=_sleep,
            reraise=False,
            **self._extra_kwargs,
        )

    async def _execute(self, operation: Callable[[], Any], context: ExecutionContext) -> Outcome[T]:
        import tenacity as ten

        async def _attempt() -> Any:
            return (await capture(operation)).unwrap()

        try:
            value = await self._build_async_retrying(context)(_attempt)
        except ten.RetryError as exc:
            last = exc.last_attempt
            if last.failed:
                error = last.exception()
                return Failure(ErrorKind.RETRY_EXHAUSTED, RetryExhaustedError(last.attempt_number, error))
            return Success(last.result())
        except Exception as exc:
            return Failure.from_exception(exc)
        return Success(value)


__all__ = ["TenacityRetryPolicy"]
