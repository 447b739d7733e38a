"""
Configuration Management for FlowTrack

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
The storage location, the persisted key names and the display defaults
are all visible in one place and validated at startup.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Key-value storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="FLOWTRACK_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    backend: str = Field(
        default="json_file",
        pattern="^(json_file|memory)$",
        description="Key-value backend to use"
    )
    path: Path = Field(
        default=Path.home() / ".flowtrack" / "store.json",
        description="Location of the JSON store file (json_file backend only)"
    )

    # Keys inside the store
    transactions_key: str = Field(
        default="@flowtrack_transactions",
        min_length=1,
        description="Key holding the JSON array of transactions"
    )
    categories_key: str = Field(
        default="@flowtrack_categories",
        min_length=1,
        description="Key holding the JSON array of categories"
    )
    currency_key: str = Field(
        default="@FlowTrack_currency",
        min_length=1,
        description="Key holding the selected currency code"
    )

    @field_validator('path')
    @classmethod
    def expand_path(cls, v: Path) -> Path:
        return v.expanduser()


class DisplaySettings(BaseSettings):
    """Formatting and report defaults."""

    model_config = SettingsConfigDict(
        env_prefix="FLOWTRACK_DISPLAY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    default_currency: str = Field(
        default="PKR",
        min_length=3,
        max_length=3,
        description="Currency used until the user picks one"
    )
    date_format: str = Field(
        default="%m/%d/%Y",
        description="strftime format for dates in text exports"
    )
    dashboard_window_days: int = Field(
        default=7,
        ge=1,
        le=31,
        description="Number of days (including today) shown on the dashboard"
    )

    @field_validator('default_currency')
    @classmethod
    def upper_currency(cls, v: str) -> str:
        return v.upper()


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    # Environment
    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$",
        description="Minimum level for structured logs"
    )
    log_json: bool = Field(
        default=True,
        description="Render logs as JSON lines (False = console renderer)"
    )

    @field_validator('log_level', mode='before')
    @classmethod
    def upper_level(cls, v):
        return v.upper() if isinstance(v, str) else v


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

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def display(self) -> DisplaySettings:
        return DisplaySettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


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

    Returns a dict of {setting_name: is_valid}, plus a
    "<name>_error" entry for each section that failed to load.
    """
    results = {}

    settings = get_settings()

    for name in ("storage", "display", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
