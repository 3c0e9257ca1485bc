"""Core module providing configuration, logging, and base exceptions.

Exports:
    Exceptions:
        CardEngineError: Base exception for all engine errors.
        FailureReason: Structured cause attached to failed effect results.

    Configuration:
        Settings: Main application settings class.
        get_settings: Get the cached settings.
        clear_settings_cache: Force settings reload.

    Logging:
        configure_logging: Set up application logging.
        configure_logging_from_settings: Set up logging from Settings.
        get_logger: Get a configured logger instance.
        bind_context: Add context to log entries.
        clear_context: Clear logging context.
"""

from __future__ import annotations

from card_engine.core.config import (
    RandomSettings,
    Settings,
    StorageSettings,
    clear_settings_cache,
    get_settings,
)
from card_engine.core.exceptions import (
    CapabilityError,
    CapabilityNotFoundError,
    CapabilityTypeError,
    CardEngineError,
    ConfigurationError,
    ContextValueError,
    EffectDefinitionError,
    EffectError,
    FailureReason,
    StateValidationError,
)
from card_engine.core.logging import (
    bind_context,
    clear_context,
    configure_logging,
    configure_logging_from_settings,
    get_logger,
)


__all__ = [
    # Exceptions
    "CardEngineError",
    "FailureReason",
    "ConfigurationError",
    "CapabilityError",
    "CapabilityNotFoundError",
    "CapabilityTypeError",
    "EffectError",
    "EffectDefinitionError",
    "ContextValueError",
    "StateValidationError",
    # Configuration
    "Settings",
    "RandomSettings",
    "StorageSettings",
    "get_settings",
    "clear_settings_cache",
    # Logging
    "configure_logging",
    "configure_logging_from_settings",
    "get_logger",
    "bind_context",
    "clear_context",
]
