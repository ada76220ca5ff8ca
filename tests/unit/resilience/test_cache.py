"""Unit tests for CachePolicy and InMemoryCacheProvider."""

from __future__ import annotations

import asyncio

import pytest

from mp_resilience.config.validation import InvalidSettingValueError
from mp_resilience.resilience import ErrorKind, ExecutionContext, Success
from mp_resilience.resilience.cache import CacheOptions, CachePolicy, InMemoryCacheProvider
from mp_resilience.testing import FakeClock, ScriptedOperation


def make_policy(clock, ttl: float = 60.0, **kwargs) -> CachePolicy:
    return CachePolicy(InMemoryCacheProvider(clock), CacheOptions(ttl=ttl, **kwargs))


# ---------------------------------------------------------------------------
# InMemoryCacheProvider
# ---------------------------------------------------------------------------


class TestInMemoryCacheProvider:
    def test_get_set(self) -> None:
        async def run() -> None:
            cache = InMemoryCacheProvider(FakeClock())
            await cache.set("k", {"v": 1}, ttl=10)
            entry = await cache.get("k")
            assert entry is not None
            assert entry.value == {"v": 1}
            assert await cache.get("missing") is None

        asyncio.run(run())

    def test_expired_entry_is_evicted_on_read(self) -> None:
        async def run() -> None:
            clock = FakeClock()
            cache = InMemoryCacheProvider(clock)
            await cache.set("k", 1, ttl=10)
            clock.advance(seconds=10)
            assert await cache.get("k") is None
            assert "k" not in cache

        asyncio.run(run())

    def test_purge_expired(self) -> None:
        async def run() -> None:
            clock = FakeClock()
            cache = InMemoryCacheProvider(clock)
            await cache.set("short", 1, ttl=5)
            await cache.set("long", 2, ttl=50)
            clock.advance(seconds=6)
            assert cache.purge_expired() == 1
            assert len(cache) == 1
            assert "long" in cache

        asyncio.run(run())

    def test_stores_none_values(self) -> None:
        async def run() -> None:
            cache = InMemoryCacheProvider(FakeClock())
            await cache.set("k", None, ttl=5)
            entry = await cache.get("k")
            assert entry is not None and entry.value is None

        asyncio.run(run())


# ---------------------------------------------------------------------------
# CachePolicy
# ---------------------------------------------------------------------------


class TestCachePolicy:
    def test_ttl_must_be_positive(self) -> None:
        with pytest.raises(InvalidSettingValueError):
            CacheOptions(ttl=0)

    def test_hit_within_ttl_and_miss_after_expiry(self) -> None:
        async def run() -> None:
            clock = FakeClock()
            policy = make_policy(clock, ttl=60)
            op = ScriptedOperation(["first", "second"])
            ctx = ExecutionContext.new("user:1")

            a = await policy.execute(op, ctx)
            clock.advance(seconds=59)
            b = await policy.execute(op, ctx)
            assert a == b == Success("first")
            assert op.calls == 1

            clock.advance(seconds=1)
            c = await policy.execute(op, ctx)
            assert c == Success("second")
            assert op.calls == 2

        asyncio.run(run())

    def test_missing_key_bypasses_cache(self) -> None:
        async def run() -> None:
            policy = make_policy(FakeClock())
            op = ScriptedOperation([1, 2])
            ctx = ExecutionContext.new()
            assert (await policy.execute(op, ctx)) == Success(1)
            assert (await policy.execute(op, ctx)) == Success(2)
            assert len(policy.provider) == 0

        asyncio.run(run())

    def test_failures_are_not_cached(self) -> None:
        async def run() -> None:
            policy = make_policy(FakeClock())
            op = ScriptedOperation([RuntimeError("down"), "up"])
            ctx = ExecutionContext.new("k")
            assert (await policy.execute(op, ctx)).kind is ErrorKind.OPERATION_FAILED
            assert (await policy.execute(op, ctx)) == Success("up")
            assert (await policy.execute(op, ctx)) == Success("up")
            assert op.calls == 2

        asyncio.run(run())

    def test_concurrent_misses_build_once(self) -> None:
        async def run() -> None:
            policy = make_policy(FakeClock())
            op = ScriptedOperation(["value"], delay=0.01)
            ctx = ExecutionContext.new("hot")
            outcomes = await asyncio.gather(*(policy.execute(op, ctx) for _ in range(5)))
            assert all(o == Success("value") for o in outcomes)
            assert op.calls == 1

        asyncio.run(run())

    def test_reused_across_event_loops(self) -> None:
        clock = FakeClock()
        policy = make_policy(clock, ttl=10)
        op = ScriptedOperation(["v"], delay=0.01)
        ctx = ExecutionContext.new("k")

        async def burst() -> list:
            return await asyncio.gather(policy.execute(op, ctx), policy.execute(op, ctx))

        assert asyncio.run(burst()) == [Success("v"), Success("v")]
        clock.advance(seconds=10)
        assert asyncio.run(burst()) == [Success("v"), Success("v")]
        assert op.calls == 2
        assert policy.pending_keys == 0

    def test_key_locks_are_released_after_build(self) -> None:
        async def run() -> None:
            policy = make_policy(FakeClock())
            for i in range(200):
                await policy.execute(lambda: i, ExecutionContext.new(f"key-{i}"))
            assert policy.pending_keys == 0

            op = ScriptedOperation(["value"], delay=0.01)
            ctx = ExecutionContext.new("hot")
            await asyncio.gather(*(policy.execute(op, ctx) for _ in range(5)))
            assert policy.pending_keys == 0

        asyncio.run(run())

    def test_key_lock_is_released_after_failed_build(self) -> None:
        async def run() -> None:
            policy = make_policy(FakeClock())
            outcome = await policy.execute(ScriptedOperation([RuntimeError("x")]), ExecutionContext.new("k"))
            assert outcome.kind is ErrorKind.OPERATION_FAILED
            assert policy.pending_keys == 0

        asyncio.run(run())

    def test_shared_provider_shares_results(self) -> None:
        async def run() -> None:
            provider = InMemoryCacheProvider(FakeClock())
            first = CachePolicy(provider, CacheOptions(ttl=30))
            second = CachePolicy(provider, CacheOptions(ttl=30))
            ctx = ExecutionContext.new("shared")
            await first.execute(lambda: "memo", ctx)
            assert (await second.execute(lambda: "fresh", ctx)) == Success("memo")

        asyncio.run(run())

    def test_key_fn_and_hooks(self) -> None:
        events: list[tuple[str, str]] = []

        async def run() -> None:
            policy = make_policy(
                FakeClock(),
                key_fn=lambda ctx: f"cid:{ctx.correlation_id}",
                on_hit=lambda ctx, key: events.append(("hit", key)),
                on_miss=lambda ctx, key: events.append(("miss", key)),
                on_put=lambda ctx, key: events.append(("put", key)),
            )
            ctx = ExecutionContext.new()
            await policy.execute(lambda: 1, ctx)
            await policy.execute(lambda: 2, ctx)
            key = f"cid:{ctx.correlation_id}"
            assert events == [("miss", key), ("put", key), ("hit", key)]

        asyncio.run(run())
