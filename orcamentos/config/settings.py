"""
Configuration Management for Orçamentos

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
This makes it easy to see where data lives and how the app logs,
and ensures configuration is validated at startup.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Local key-value storage configuration."""

    model_config = SettingsConfigDict(
        env_prefix="ORCAMENTOS_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    backend: Literal["file", "memory"] = Field(
        default="file",
        description="Key-value backend: a JSON file on disk, or in-memory only"
    )
    data_path: Path = Field(
        default=Path("data/local_storage.json"),
        description="Path of the JSON file backing the key-value store"
    )
    # Must match the key used by previously stored data
    key: str = Field(
        default="orcamentos_v1",
        min_length=1,
        description="Key under which the budget collection is stored"
    )

    @field_validator('data_path')
    @classmethod
    def validate_data_path(cls, v: Path) -> Path:
        """Reject a path that points at an existing directory."""
        if v.exists() and v.is_dir():
            raise ValueError(f"Storage path {v} is a directory, expected a file")
        return v


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
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Minimum level for application logs"
    )

    @field_validator('log_level', mode='before')
    @classmethod
    def normalize_log_level(cls, v):
        if isinstance(v, str):
            return v.strip().upper()
        return v


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

    Returns a dict of {setting_name: is_valid}, plus "<name>_error"
    entries holding the message for sections that failed.
    """
    results = {}

    settings = get_settings()

    sections = {
        "storage": lambda: settings.storage,
        "app": lambda: settings.app,
    }

    for name, load in sections.items():
        try:
            load()
            results[name] = True
        except ValueError as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
