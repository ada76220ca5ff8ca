"""Root error class for the mp-resilience error hierarchy."""

from __future__ import annotations

from typing import Any, ClassVar, Self


class BaseError(Exception):
    """Root of every error mp-resilience raises or carries in a ``Failure``.

    Args:
        message: Human-readable description.
        code: Stable machine-readable slug; subclasses set ``default_code``.
        detail: Structured context, copied so callers may reuse their dict.
        cause: Underlying exception, also chained as ``__cause__``.
    """

    default_code: ClassVar[str] = "base_error"

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        detail: dict[str, Any] | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.detail: dict[str, Any] = dict(detail or {})
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    def with_detail(self, **extra: Any) -> Self:
        """Attach more structured context and return ``self`` for chaining."""
        self.detail.update(extra)
        return self

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def __repr__(self) -> str:
        return f"{type(self).__name__}(code={self.code!r}, message={self.message!r})"

    def to_dict(self) -> dict[str, Any]:
        """Plain-dict form for structured log fields."""
        payload: dict[str, Any] = {
            "type": type(self).__name__,
            "code": self.code,
            "message": self.message,
            "detail": dict(self.detail),
        }
        if self.cause is not None:
            payload["cause"] = repr(self.cause)
        return payload


__all__ = ["BaseError"]
