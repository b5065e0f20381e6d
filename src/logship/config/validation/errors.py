"""Config validation errors raised while a shipper is being configured."""
from __future__ import annotations

from logship.kernel.errors import ApplicationError


class ConfigurationError(ApplicationError):
    """The shipper cannot be configured; it stays unconfigured.

    ``setting_name`` names the offending option (field name, camelCase
    option or environment variable, whichever the caller used).
    """
    default_code = "config_error"

    def __init__(self, message: str, *, setting_name: str | None = None) -> None:
        super().__init__(message)
        self.setting_name = setting_name


class MissingRequiredSettingError(ConfigurationError):
    """No customer token (or other required option) was given."""
    default_code = "missing_required_setting"

    def __init__(self, setting_name: str) -> None:
        super().__init__(f"{setting_name} is required", setting_name=setting_name)


class InvalidSettingValueError(ConfigurationError):
    """An option is present but unusable, e.g. a token that is not 36 characters."""
    default_code = "invalid_setting_value"

    def __init__(self, setting_name: str, value: object, reason: str) -> None:
        super().__init__(f"{setting_name}={value!r}: {reason}", setting_name=setting_name)
        self.value = value


__all__ = ["ConfigurationError", "InvalidSettingValueError", "MissingRequiredSettingError"]
