"""Unit tests for policy options loading and validation."""

import dataclasses
from typing import ClassVar

import pytest

from mp_resilience.config import (
    ConfigError,
    EnvSettingsLoader,
    InvalidSettingValueError,
    MissingRequiredSettingError,
    Settings,
)
from mp_resilience.resilience.bulkhead import BulkheadOptions
from mp_resilience.resilience.circuit_breaker import CircuitBreakerOptions
from mp_resilience.resilience.retry import RetryOptions
from mp_resilience.resilience.timeouts import TimeoutMode, TimeoutOptions


@dataclasses.dataclass
class AppSettings(Settings):
    _prefix: ClassVar[str] = "APP"

    host: str = "localhost"
    port: int = 8080
    debug: bool = False


# ---------------------------------------------------------------------------
# EnvSettingsLoader
# ---------------------------------------------------------------------------


class TestEnvSettingsLoader:
    def test_defaults_when_env_is_empty(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("APP_HOST", raising=False)
        settings = EnvSettingsLoader().load(AppSettings)
        assert settings.host == "localhost"
        assert settings.port == 8080

    def test_loads_scalars(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("APP_HOST", "example.com")
        monkeypatch.setenv("APP_PORT", "9000")
        monkeypatch.setenv("APP_DEBUG", "true")
        settings = EnvSettingsLoader().load(AppSettings)
        assert settings.host == "example.com"
        assert settings.port == 9000
        assert settings.debug is True

    def test_overrides_win_over_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("APP_PORT", "9000")
        assert EnvSettingsLoader().load(AppSettings, port=1234).port == 1234

    def test_bad_int_raises_invalid_value(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("APP_PORT", "eighty")
        with pytest.raises(InvalidSettingValueError) as info:
            EnvSettingsLoader().load(AppSettings)
        assert info.value.setting_name == "APP_PORT"

    def test_timeout_options_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("RESILIENCE_TIMEOUT_TIMEOUT_SECONDS", "2.5")
        monkeypatch.setenv("RESILIENCE_TIMEOUT_MODE", "race")
        opts = EnvSettingsLoader().load(TimeoutOptions)
        assert opts.timeout_seconds == 2.5
        assert opts.mode is TimeoutMode.RACE

    def test_missing_required_setting(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("RESILIENCE_TIMEOUT_TIMEOUT_SECONDS", raising=False)
        with pytest.raises(MissingRequiredSettingError) as info:
            EnvSettingsLoader().load(TimeoutOptions)
        assert info.value.setting_name == "RESILIENCE_TIMEOUT_TIMEOUT_SECONDS"

    def test_retry_delays_and_unbounded_attempts(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("RESILIENCE_RETRY_MAX_ATTEMPTS", "none")
        monkeypatch.setenv("RESILIENCE_RETRY_DELAYS", "0.1, 0.5,2")
        opts = EnvSettingsLoader().load(RetryOptions)
        assert opts.max_attempts is None
        assert opts.delays == (0.1, 0.5, 2.0)

    def test_optional_float(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("RESILIENCE_CIRCUIT_BREAKER_FAILURE_RATE_THRESHOLD", "0.25")
        opts = EnvSettingsLoader().load(CircuitBreakerOptions)
        assert opts.failure_rate_threshold == 0.25

    def test_env_value_is_validated(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("RESILIENCE_BULKHEAD_MAX_CONCURRENCY", "0")
        with pytest.raises(InvalidSettingValueError):
            EnvSettingsLoader().load(BulkheadOptions)

    def test_callables_cannot_come_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("RESILIENCE_BULKHEAD_ON_REJECTED", "print")
        with pytest.raises(InvalidSettingValueError):
            EnvSettingsLoader().load(BulkheadOptions)

    def test_hooks_passed_as_overrides(self) -> None:
        def hook(ctx) -> None:
            return None

        opts = EnvSettingsLoader().load(BulkheadOptions, on_rejected=hook)
        assert opts.on_rejected is hook


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class TestConfigErrors:
    def test_invalid_value_is_config_error(self) -> None:
        err = InvalidSettingValueError("port", -1, "must be positive")
        assert isinstance(err, ConfigError)
        assert err.detail == {"setting": "port", "reason": "must be positive"}
        assert err.code == "invalid_setting_value"

    def test_missing_setting_message(self) -> None:
        err = MissingRequiredSettingError("DB_URL")
        assert "DB_URL" in str(err)
