"""
Configuration Management for the HSA Receipt Analyzer

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Command-line flags override these values; the settings only provide
defaults so a user can point the tool at the same folder every time.
"""

from functools import lru_cache
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from HSA_* environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="HSA_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    receipts_dir: Optional[str] = Field(
        default=None,
        description="Directory scanned when --dir-path is not given"
    )
    by_category: bool = Field(
        default=False,
        description="Show the per-category breakdown by default"
    )
    summary_only: bool = Field(
        default=False,
        description="Skip the report tree and charts by default"
    )
    chart_width: int = Field(
        default=20,
        ge=5,
        le=100,
        description="Width of the terminal bar charts in cells"
    )


class LoggingSettings(BaseSettings):
    """Structured logging configuration."""

    model_config = SettingsConfigDict(
        env_prefix="HSA_LOG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    level: str = Field(
        default="ERROR",
        description="Minimum log level"
    )
    json_output: bool = Field(
        default=True,
        description="Render log lines as JSON (console renderer otherwise)"
    )

    @field_validator('level')
    @classmethod
    def validate_level(cls, v: str) -> str:
        """Only accept standard logging level names."""
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"Unsupported log level: {v}. Allowed: {sorted(allowed)}")
        return v.upper()


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Sub-settings are loaded lazily so one bad group does not
    # break the others

    @property
    def app(self) -> AppSettings:
        return AppSettings()

    @property
    def logging(self) -> LoggingSettings:
        return LoggingSettings()


# Settings groups checked by validate_all_settings
SETTINGS_GROUPS = ("app", "logging")


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, plus
    {setting_name}_error entries for the ones that failed.
    """
    results = {}

    settings = get_settings()

    for name in SETTINGS_GROUPS:
        try:
            getattr(settings, name)
            results[name] = True
        except ValueError as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
