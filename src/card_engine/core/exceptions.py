"""Custom exception hierarchy for the card engine.

Gameplay failures never raise: they travel inside ``EffectResult`` as
``success=False`` plus a message. The exceptions below cover the other kind of
failure, mistakes made while wiring the engine together (an unregistered
capability, a malformed effect definition, a bad configuration value).

Example:
    >>> from card_engine.core.exceptions import CapabilityNotFoundError
    >>> raise CapabilityNotFoundError("No provider registered", capability_id="storage")
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any


class CardEngineError(Exception):
    """Base exception for all card engine errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary containing additional error context.
    """

    def __init__(self, message: str, *, details: dict[str, Any] | None = None) -> None:
        """Initialize the base exception.

        Args:
            message: Human-readable error description.
            details: Optional dictionary containing additional error context.
        """
        self.message = message
        self.details = details or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the exception message with optional details.

        Returns:
            Formatted error message including any provided details.
        """
        if self.details:
            detail_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            return f"{self.message} [{detail_str}]"
        return self.message

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message={self.message!r}, details={self.details!r})"


# =============================================================================
# Gameplay Failure Reasons
# =============================================================================


class FailureReason(StrEnum):
    """Structured cause attached to a failed ``EffectResult``.

    Stored under ``metadata["failure"]``. The human-readable message is
    unchanged; this only lets callers branch without parsing text.
    """

    TARGET_NOT_FOUND = "target_not_found"
    """A required target player could not be resolved."""

    INSUFFICIENT_RESOURCE = "insufficient_resource"
    """A spend operation asked for more than the player holds."""

    CHILD_FAILED = "child_failed"
    """A combinator stopped because one of its children failed."""


# =============================================================================
# Configuration Exceptions
# =============================================================================


class ConfigurationError(CardEngineError):
    """Raised when application configuration is invalid."""

    def __init__(
        self,
        message: str,
        *,
        config_key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize configuration error with the offending key.

        Args:
            message: Human-readable error description.
            config_key: The configuration key that caused the error.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if config_key:
            combined_details["config_key"] = config_key
        super().__init__(message, details=combined_details)


# =============================================================================
# Capability Registry Exceptions
# =============================================================================


class CapabilityError(CardEngineError):
    """Base exception for capability registry errors."""

    def __init__(
        self,
        message: str,
        *,
        capability_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        combined_details = details or {}
        if capability_id:
            combined_details["capability_id"] = capability_id
        super().__init__(message, details=combined_details)


class CapabilityNotFoundError(CapabilityError):
    """Raised by ``provide()`` for an id never registered on the lineage.

    This is a wiring mistake, not a gameplay condition, and is left fatal.
    """


class CapabilityTypeError(CapabilityError):
    """Raised when a provided capability is not of the requested type."""

    def __init__(
        self,
        message: str,
        *,
        capability_id: str | None = None,
        expected: str | None = None,
        actual: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the type mismatch error.

        Args:
            message: Human-readable error description.
            capability_id: The capability that was requested.
            expected: Name of the type the caller asked for.
            actual: Name of the type the factory produced.
            details: Optional dictionary containing additional error context.
        """
        combined_details = details or {}
        if expected:
            combined_details["expected"] = expected
        if actual:
            combined_details["actual"] = actual
        super().__init__(message, capability_id=capability_id, details=combined_details)


# =============================================================================
# Effect Exceptions
# =============================================================================


class EffectError(CardEngineError):
    """Base exception for effect authoring errors."""


class EffectDefinitionError(EffectError):
    """Raised when an effect tree is built from invalid arguments.

    Examples are an unsupported target for a primitive, a negative amount,
    or a chain continuation that does not return an effect.
    """

    def __init__(
        self,
        message: str,
        *,
        effect_kind: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        combined_details = details or {}
        if effect_kind:
            combined_details["effect_kind"] = effect_kind
        super().__init__(message, details=combined_details)


class ContextValueError(EffectError):
    """Raised when an ephemeral context value is missing or has the wrong type."""

    def __init__(
        self,
        message: str,
        *,
        key: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        combined_details = details or {}
        if key:
            combined_details["key"] = key
        super().__init__(message, details=combined_details)


# =============================================================================
# State Exceptions
# =============================================================================


class StateValidationError(CardEngineError):
    """Raised when a state helper is asked to build an inconsistent state."""

    def __init__(
        self,
        message: str,
        *,
        player_id: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        combined_details = details or {}
        if player_id:
            combined_details["player_id"] = player_id
        super().__init__(message, details=combined_details)


__all__ = [
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
]
