"""Unit tests for structlog integration."""

from __future__ import annotations

import asyncio
import json
import logging

import pytest
import structlog
from structlog.testing import capture_logs

from mp_resilience.observability.logging import CorrelationProcessor, JsonLoggerFactory, get_logger
from mp_resilience.resilience import (
    BulkheadOptions,
    BulkheadPolicy,
    CircuitBreakerOptions,
    CircuitBreakerPolicy,
    ExecutionContext,
    FallbackPolicy,
    RetryOptions,
    RetryPolicy,
)
from mp_resilience.testing import FakeClock, ScriptedOperation


class TestCorrelationProcessor:
    def test_injects_current_context(self) -> None:
        ctx = ExecutionContext.new("user:1")
        with ExecutionContext.scoped(ctx):
            event = CorrelationProcessor()(None, "info", {"event": "x"})
        assert event["correlation_id"] == ctx.correlation_id
        assert event["cache_key"] == "user:1"

    def test_untouched_outside_execution(self) -> None:
        assert CorrelationProcessor()(None, "info", {"event": "x"}) == {"event": "x"}

    def test_explicit_value_wins(self) -> None:
        with ExecutionContext.scoped(ExecutionContext.new()):
            event = CorrelationProcessor()(None, "info", {"event": "x", "correlation_id": "mine"})
        assert event["correlation_id"] == "mine"


class TestPolicyEvents:
    def test_retry_attempt_events(self) -> None:
        op = ScriptedOperation([RuntimeError("x"), "ok"])
        with capture_logs() as logs:
            asyncio.run(RetryPolicy(RetryOptions(max_attempts=2), name="orders").execute(op))
        attempts = [e for e in logs if e["event"] == "retry.attempt"]
        assert len(attempts) == 1
        assert attempts[0]["policy"] == "orders"
        assert attempts[0]["attempt"] == 1

    def test_circuit_opened_event(self) -> None:
        breaker = CircuitBreakerPolicy(CircuitBreakerOptions(failure_threshold=1), name="db", clock=FakeClock())
        with capture_logs() as logs:
            asyncio.run(breaker.execute(ScriptedOperation([RuntimeError("down")])))
        opened = [e for e in logs if e["event"] == "circuit_breaker.opened"]
        assert opened and opened[0]["name"] == "db"
        assert opened[0]["log_level"] == "error"

    def test_fallback_applied_event(self) -> None:
        with capture_logs() as logs:
            asyncio.run(FallbackPolicy(0).execute(ScriptedOperation([RuntimeError("x")])))
        assert any(e["event"] == "fallback.applied" for e in logs)

    def test_bulkhead_rejected_event(self) -> None:
        async def run() -> None:
            policy = BulkheadPolicy(BulkheadOptions(max_concurrency=1, max_queue_length=0))
            gate = asyncio.Event()
            first = asyncio.create_task(policy.execute(gate.wait))
            await asyncio.sleep(0)
            await policy.execute(lambda: None)
            gate.set()
            await first

        with capture_logs() as logs:
            asyncio.run(run())
        assert [e["event"] for e in logs] == ["bulkhead.rejected"]


class TestJsonLoggerFactory:
    def test_renders_json_with_correlation_id(self, capsys: pytest.CaptureFixture[str]) -> None:
        root = logging.getLogger()
        handlers, level = list(root.handlers), root.level
        try:
            JsonLoggerFactory.configure(logging.INFO)
            ctx = ExecutionContext.new()
            with ExecutionContext.scoped(ctx):
                get_logger("test").info("retry.attempt", attempt=2)
        finally:
            structlog.reset_defaults()
            root.handlers[:] = handlers
            root.setLevel(level)

        payload = json.loads(capsys.readouterr().err.strip().splitlines()[-1])
        assert payload["event"] == "retry.attempt"
        assert payload["attempt"] == 2
        assert payload["correlation_id"] == ctx.correlation_id
        assert payload["level"] == "info"
