"""Resilience – PolicyPipeline: ordered composition of policies."""
from __future__ import annotations

import functools
from collections.abc import Iterable
from typing import Any, Callable, TypeVar

from mp_resilience.resilience.context import ExecutionContext
from mp_resilience.resilience.outcome import Outcome
from mp_resilience.resilience.policy import NoOpPolicy, Policy

T = TypeVar("T")


class PolicyPipeline(Policy[T]):
    """Nests *policies* so that ``policies[0]`` is the outermost layer.

    Each layer receives the next layer's ``execute`` as its operation, so
    ``PolicyPipeline([a, b]).execute(op)`` behaves exactly like
    ``a.execute(lambda: b.execute(op))``. The order given is kept as-is.
    An empty pipeline behaves like :class:`NoOpPolicy`.
    """

    def __init__(self, policies: Iterable[Policy[Any]], *, name: str | None = None) -> None:
        super().__init__(name)
        self.policies: tuple[Policy[Any], ...] = tuple(policies) or (NoOpPolicy(),)

    @classmethod
    def from_policies(cls, *policies: Policy[Any]) -> "PolicyPipeline[Any]":
        return cls(policies)

    async def _execute(self, operation: Callable[[], Any], context: ExecutionContext) -> Outcome[T]:
        call = operation
        for policy in reversed(self.policies[1:]):
            call = functools.partial(policy.execute, call, context)
        return await self.policies[0].execute(call, context)

    def __len__(self) -> int:
        return len(self.policies)

    def __repr__(self) -> str:
        inner = ", ".join(repr(p) for p in self.policies)
        return f"PolicyPipeline([{inner}])"


def wrap(*policies: Policy[Any]) -> PolicyPipeline[Any]:
    """Compose *policies* outermost-first into one policy."""
    return PolicyPipeline(policies)


__all__ = ["PolicyPipeline", "wrap"]
