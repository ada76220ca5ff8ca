"""Config settings – SettingsLoader port and EnvSettingsLoader."""
from __future__ import annotations

import abc
import dataclasses
import os
from typing import Any, TypeVar

from mp_resilience.config.settings.base import Settings
from mp_resilience.config.validation import (
    ConfigError,
    InvalidSettingValueError,
    MissingRequiredSettingError,
)

T = TypeVar("T", bound=Settings)

_SCALARS = {"bool", "int", "float", "str"}


class SettingsLoader(abc.ABC):
    """Port: load settings from an external source."""

    @abc.abstractmethod
    def load(self, settings_class: type[T], **overrides: Any) -> T: ...


class EnvSettingsLoader(SettingsLoader):
    """Load scalar options from OS environment variables.

    Only ``bool``/``int``/``float``/``str`` fields (optionally ``| None``)
    and ``tuple[float, ...]`` delay lists are read from the environment.
    Callables such as predicates and hooks, and ErrorKind sets, are passed
    as *overrides*.
    """

    def load(self, settings_class: type[T], **overrides: Any) -> T:
        prefix = getattr(settings_class, "_prefix", "").upper()
        kwargs: dict[str, Any] = {}

        for field in dataclasses.fields(settings_class):  # type: ignore[arg-type]
            if field.name in overrides or not field.init:
                continue
            env_key = f"{prefix}_{field.name}".upper().lstrip("_")
            raw = os.environ.get(env_key)

            if raw is None:
                if (
                    field.default is dataclasses.MISSING
                    and field.default_factory is dataclasses.MISSING  # type: ignore[misc]
                ):
                    raise MissingRequiredSettingError(env_key)
                continue

            kwargs[field.name] = self._coerce(env_key, raw, field)

        kwargs.update(overrides)
        try:
            return settings_class(**kwargs)
        except ConfigError:
            raise
        except Exception as exc:
            raise ConfigError(f"Failed to load settings: {exc}", cause=exc) from exc

    def _coerce(self, env_key: str, value: str, field: dataclasses.Field[Any]) -> Any:  # noqa: PLR0911
        type_hint = field.type
        hint = type_hint if isinstance(type_hint, str) else getattr(type_hint, "__name__", str(type_hint))
        hint = hint.replace(" ", "")
        optional = hint.endswith("|None")
        if optional:
            hint = hint[: -len("|None")]
            if value.strip().lower() in ("", "none", "null"):
                return None
        try:
            if hint == "bool":
                return value.lower() in ("1", "true", "yes", "on")
            if hint == "int":
                return int(value)
            if hint == "float":
                return float(value)
            if hint.startswith("tuple[float"):
                return tuple(float(v) for v in value.split(",") if v.strip())
        except ValueError as exc:
            raise InvalidSettingValueError(env_key, value, str(exc)) from exc
        if hint in _SCALARS or isinstance(field.default, str):
            # str-valued enums are converted by the options class itself
            return value
        raise InvalidSettingValueError(env_key, value, f"type '{type_hint}' cannot be read from the environment")


__all__ = ["EnvSettingsLoader", "SettingsLoader"]
