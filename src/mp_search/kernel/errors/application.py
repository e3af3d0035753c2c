"""Application-layer errors — configuration that cannot be loaded or is rejected.

These surface at process start, while ``SearchConfiguration`` is being
built, never while a request is handled.
"""

from __future__ import annotations

from typing import Any

from mp_search.kernel.errors.base import BaseError


class ApplicationError(BaseError):
    """Wiring problem in the host application."""

    default_code = "application_error"


class ConfigError(ApplicationError):
    """A settings source failed or produced an unusable settings object."""

    default_code = "config_error"


class MissingRequiredSettingError(ConfigError):
    """A setting without a default was not provided by any source.

    ``setting_name`` is the environment key (``SEARCH_IDENTIFIER_FIELD``) when
    raised by an environment loader, the field name otherwise.
    """

    default_code = "missing_required_setting"

    def __init__(self, setting_name: str, **kwargs: Any) -> None:
        super().__init__(
            f"Required setting '{setting_name}' is missing",
            detail={"setting": setting_name},
            **kwargs,
        )
        self.setting_name = setting_name


class InvalidSettingValueError(ConfigError):
    """A setting is present but cannot be coerced or fails validation."""

    default_code = "invalid_setting_value"

    def __init__(self, setting_name: str, value: object, reason: str, **kwargs: Any) -> None:
        super().__init__(
            f"Setting '{setting_name}' has invalid value {value!r}: {reason}",
            detail={"setting": setting_name, "value": value, "reason": reason},
            **kwargs,
        )
        self.setting_name = setting_name
        self.value = value
        self.reason = reason


__all__ = [
    "ApplicationError",
    "ConfigError",
    "InvalidSettingValueError",
    "MissingRequiredSettingError",
]
