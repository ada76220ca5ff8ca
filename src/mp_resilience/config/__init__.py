"""Config – env-loadable policy options and validation errors."""

from mp_resilience.config.settings import EnvSettingsLoader, Settings, SettingsLoader
from mp_resilience.config.validation import (
    ConfigError,
    InvalidSettingValueError,
    MissingRequiredSettingError,
)

__all__ = [
    "ConfigError",
    "EnvSettingsLoader",
    "InvalidSettingValueError",
    "MissingRequiredSettingError",
    "Settings",
    "SettingsLoader",
]
