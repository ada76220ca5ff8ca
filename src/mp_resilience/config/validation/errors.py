"""Config validation errors raised by policy options and the env loader."""
from mp_resilience.kernel.errors import ApplicationError


class ConfigError(ApplicationError):
    """Policy options could not be built."""
    default_code = "config_error"


class MissingRequiredSettingError(ConfigError):
    """An option without a default was neither in the environment nor overridden."""
    default_code = "missing_required_setting"

    def __init__(self, setting_name: str) -> None:
        super().__init__(
            f"Required setting '{setting_name}' is missing",
            detail={"setting": setting_name},
        )
        self.setting_name = setting_name


class InvalidSettingValueError(ConfigError):
    """An option value failed parsing or an options class's ``_validate`` check."""
    default_code = "invalid_setting_value"

    def __init__(self, setting_name: str, value: object, reason: str) -> None:
        super().__init__(
            f"Setting '{setting_name}' has invalid value {value!r}: {reason}",
            detail={"setting": setting_name, "reason": reason},
        )
        self.setting_name = setting_name
        self.value = value
        self.reason = reason


__all__ = ["ConfigError", "InvalidSettingValueError", "MissingRequiredSettingError"]
