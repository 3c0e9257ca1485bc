"""Capability registry and the services it supplies to effects."""

from __future__ import annotations

from card_engine.capabilities.defaults import create_default_registry
from card_engine.capabilities.registry import CapabilityId, CapabilityRegistry, Factory
from card_engine.capabilities.services import (
    EventBus,
    EventHandler,
    GameStorage,
    Logger,
    LogLevel,
    MemoryStorage,
    RandomSource,
    SeededRandom,
    SimpleEventBus,
    StructlogLogger,
)


__all__ = [
    # Registry
    "CapabilityId",
    "CapabilityRegistry",
    "Factory",
    "create_default_registry",
    # Contracts
    "Logger",
    "LogLevel",
    "RandomSource",
    "GameStorage",
    "EventBus",
    "EventHandler",
    # Reference services
    "StructlogLogger",
    "SeededRandom",
    "MemoryStorage",
    "SimpleEventBus",
]
