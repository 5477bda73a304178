"""
Configuration management using pydantic-settings.

Loads configuration from environment variables and .env files.
Validates limits and provides typed access to settings.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_NAMESPACE = "local"


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Optional:
        CACHE_NAMESPACE: Namespace prefix qualifying partition names
        CACHE_ENABLED: Whether backing partitions report themselves available
        CACHE_ITEM_SIZE_LIMIT: Per-item size limit of the backing store, in bytes
        CACHE_DB_PATH: SQLite file backing org-wide partitions
        LOG_LEVEL: Logging level
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    CACHE_NAMESPACE: str | None = Field(
        default=None,
        description="Namespace prefix for partition names (defaults to 'local')",
    )
    CACHE_ENABLED: bool = Field(
        default=True, description="Whether the platform cache is available"
    )
    CACHE_ITEM_SIZE_LIMIT: int = Field(
        default=100_000,
        ge=64,
        description="Maximum serialized size of one cached item, in bytes",
    )
    CACHE_DB_PATH: Path = Field(
        default=Path(".cache/partitions.db"),
        description="SQLite database for org-wide partitions",
    )

    # Logging
    LOG_LEVEL: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Logging level"
    )

    @field_validator("CACHE_NAMESPACE")
    @classmethod
    def validate_namespace(cls, v: str | None) -> str | None:
        """Normalize blank namespaces to None and reject separators."""
        if v is None:
            return None
        v = v.strip()
        if not v:
            return None
        if "." in v:
            raise ValueError("CACHE_NAMESPACE must not contain '.'")
        return v

    @property
    def namespace(self) -> str:
        """Get the configured namespace, or the default one."""
        return self.CACHE_NAMESPACE or DEFAULT_NAMESPACE

    def ensure_directories(self) -> None:
        """Create the database directory if it doesn't exist."""
        self.CACHE_DB_PATH.parent.mkdir(parents=True, exist_ok=True)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings singleton.

    Returns:
        Settings instance loaded from environment.

    Raises:
        ValidationError: If settings are invalid.
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache (useful for testing)."""
    get_settings.cache_clear()
