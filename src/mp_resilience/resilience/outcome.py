"""Outcome[T]: Success and Failure variants returned by every policy."""

from __future__ import annotations

from typing import Any, Callable, Generic, NoReturn, TypeVar

from mp_resilience.resilience.errors import ErrorKind, OperationFailedError, ResilienceError

T = TypeVar("T")
U = TypeVar("U")


class Success(Generic[T]):
    """Successful outcome variant."""

    __slots__ = ("_value",)

    def __init__(self, value: T) -> None:
        self._value = value

    @property
    def value(self) -> T:
        return self._value

    @property
    def kind(self) -> None:
        return None

    def is_success(self) -> bool:
        return True

    def is_failure(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self._value

    def unwrap_or(self, default: T) -> T:  # noqa: ARG002
        return self._value

    def map(self, func: Callable[[T], U]) -> "Success[U]":
        return Success(func(self._value))

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Success) and other._value == self._value

    def __repr__(self) -> str:
        return f"Success({self._value!r})"


class Failure:
    """Failed outcome variant, tagged with an :class:`ErrorKind`.

    ``cause`` is the exception that produced the failure: the operation's
    own exception for ``OPERATION_FAILED``, otherwise the policy's
    :class:`ResilienceError`.
    """

    __slots__ = ("_kind", "_cause")

    def __init__(self, kind: ErrorKind, cause: BaseException) -> None:
        self._kind = kind
        self._cause = cause

    @classmethod
    def from_exception(cls, exc: BaseException) -> "Failure":
        """Classify *exc* by its ``kind`` attribute; foreign exceptions are ``OPERATION_FAILED``."""
        if isinstance(exc, ResilienceError):
            return cls(exc.kind, exc)
        return cls(ErrorKind.OPERATION_FAILED, exc)

    @property
    def kind(self) -> ErrorKind:
        return self._kind

    @property
    def cause(self) -> BaseException:
        return self._cause

    @property
    def error(self) -> ResilienceError:
        """The failure as a :class:`ResilienceError`, wrapping foreign causes."""
        if isinstance(self._cause, ResilienceError):
            return self._cause
        return OperationFailedError(self._cause)

    def is_success(self) -> bool:
        return False

    def is_failure(self) -> bool:
        return True

    def unwrap(self) -> NoReturn:
        raise self._cause

    def unwrap_or(self, default: T) -> T:
        return default

    def map(self, func: Callable[[Any], Any]) -> "Failure":  # noqa: ARG002
        return self

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Failure) and other._kind is self._kind and other._cause is self._cause

    def __repr__(self) -> str:
        return f"Failure({self._kind.value}, {self._cause!r})"


type Outcome[T] = Success[T] | Failure

__all__ = ["Failure", "Outcome", "Success"]
