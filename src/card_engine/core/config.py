"""Configuration management for the card engine.

Settings are loaded with pydantic-settings from environment variables and an
optional ``.env`` file. They feed the explicitly constructed default
capability registry (seeded randomness, storage namespace) and logging setup.

Example:
    >>> from card_engine.core.config import get_settings
    >>> settings = get_settings()
    >>> settings.log_level
    'INFO'

Environment Variables:
    CARD_ENGINE_DEBUG: Force DEBUG logging
    CARD_ENGINE_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    CARD_ENGINE_JSON_LOGS: Emit JSON log lines instead of console output
    CARD_ENGINE_RANDOM_SEED: Integer seed for the default random capability
    CARD_ENGINE_STORAGE_NAMESPACE: Key prefix used by the in-memory storage
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from card_engine.core.exceptions import ConfigurationError


class RandomSettings(BaseSettings):
    """Configuration for the deterministic random capability.

    Attributes:
        seed: Integer seed. ``None`` draws a fresh seed at registry build time.
    """

    model_config = SettingsConfigDict(
        env_prefix="CARD_ENGINE_RANDOM_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    seed: int | None = Field(
        default=None,
        description="Seed for reproducible randomness",
    )


class StorageSettings(BaseSettings):
    """Configuration for the in-memory storage capability.

    Attributes:
        namespace: Prefix prepended to every storage key.
    """

    model_config = SettingsConfigDict(
        env_prefix="CARD_ENGINE_STORAGE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    namespace: str = Field(
        default="",
        max_length=64,
        description="Key prefix for stored values",
    )

    @field_validator("namespace", mode="after")
    @classmethod
    def validate_namespace(cls, value: str) -> str:
        """Reject namespaces containing whitespace.

        Args:
            value: The namespace to validate.

        Returns:
            The validated namespace.

        Raises:
            ConfigurationError: If the namespace contains whitespace.
        """
        if any(ch.isspace() for ch in value):
            raise ConfigurationError(
                f"Storage namespace must not contain whitespace: {value!r}",
                config_key="namespace",
            )
        return value


class Settings(BaseSettings):
    """Main application settings.

    Attributes:
        app_name: Application name, stamped on log records.
        app_version: Application version, stamped on log records.
        debug: Force DEBUG logging.
        log_level: Application logging level.
        json_logs: Render logs as JSON.
        random: Random capability settings.
        storage: Storage capability settings.
    """

    model_config = SettingsConfigDict(
        env_prefix="CARD_ENGINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        env_nested_delimiter="__",
    )

    app_name: str = Field(
        default="Card Engine",
        description="Application name",
    )
    app_version: str = Field(
        default="0.1.0",
        description="Application version",
    )
    debug: bool = Field(
        default=False,
        description="Force DEBUG logging",
    )
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Logging level",
    )
    json_logs: bool = Field(
        default=False,
        description="Emit JSON log lines",
    )

    random: RandomSettings = Field(default_factory=RandomSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the cached application settings.

    Returns:
        The application Settings instance.

    Raises:
        ConfigurationError: If configuration is missing or invalid.
    """
    try:
        return Settings()
    except ConfigurationError:
        raise
    except Exception as exc:
        raise ConfigurationError(
            f"Failed to load application settings: {exc}",
            details={"original_error": str(exc)},
        ) from exc


def clear_settings_cache() -> None:
    """Clear the settings cache, forcing a reload on next access."""
    get_settings.cache_clear()


__all__ = [
    "RandomSettings",
    "StorageSettings",
    "Settings",
    "get_settings",
    "clear_settings_cache",
]
