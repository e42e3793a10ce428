"""Environment-based configuration using pydantic-settings.

Example:
    >>> from byethrow.settings import get_settings
    >>> get_settings().log_level
    'INFO'

    # Or with environment variables:
    # BYETHROW_LOG_LEVEL=DEBUG
    # BYETHROW_LOG_FORMAT=json
    # BYETHROW_FORBID_NESTED=true
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ByethrowSettings(BaseSettings):
    """Root settings, loaded from ``BYETHROW_`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="BYETHROW_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        validate_default=True,
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["console", "json", "none"] = "console"
    forbid_nested: bool = Field(
        default=False,
        description="Reject succeed()/fail() payloads that are themselves outcomes",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_level(cls, v: str) -> str:
        return v.upper() if isinstance(v, str) else v


@lru_cache(maxsize=1)
def get_settings() -> ByethrowSettings:
    """Get the global settings instance (cached)."""
    return ByethrowSettings()


def clear_settings_cache() -> None:
    """Clear the settings cache so the next get_settings() re-reads the environment."""
    get_settings.cache_clear()
