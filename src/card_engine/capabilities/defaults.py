"""Construction of the reference capability registry.

There is no process-wide registry. An entry point builds one with
``create_default_registry`` and threads it to whatever needs it, extending or
forking it per game or per turn.
"""

from __future__ import annotations

from card_engine.capabilities.registry import CapabilityId, CapabilityRegistry
from card_engine.capabilities.services import (
    MemoryStorage,
    SeededRandom,
    SimpleEventBus,
    StructlogLogger,
)
from card_engine.core.config import Settings, get_settings
from card_engine.core.logging import get_logger


logger = get_logger(__name__)


def create_default_registry(settings: Settings | None = None) -> CapabilityRegistry:
    """Build a registry with the four reference capabilities.

    Args:
        settings: Settings to read the random seed and storage namespace
            from. Defaults to ``get_settings()``.

    Returns:
        A registry providing ``logger``, ``random``, ``storage`` and
        ``event_bus``. Nothing is instantiated until first ``provide``.
    """
    settings = settings or get_settings()
    seed = settings.random.seed
    namespace = settings.storage.namespace

    logger.info("Building default capability registry", seed=seed, namespace=namespace)

    return (
        CapabilityRegistry()
        .register(CapabilityId.LOGGER, StructlogLogger)
        .register(CapabilityId.RANDOM, lambda: SeededRandom(seed))
        .register(CapabilityId.STORAGE, lambda: MemoryStorage(namespace))
        .register(CapabilityId.EVENT_BUS, SimpleEventBus)
    )


__all__ = ["create_default_registry"]
