"""Configuration package."""

from hsa_analyzer.config.settings import (
    AppSettings,
    LoggingSettings,
    SETTINGS_GROUPS,
    Settings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "LoggingSettings",
    "SETTINGS_GROUPS",
    "Settings",
    "get_settings",
    "validate_all_settings",
]
