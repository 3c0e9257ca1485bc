"""Capability contracts and their reference implementations.

Contracts:
    Logger: Leveled logging sink.
    RandomSource: Seeded, reproducible randomness (not cryptographic).
    GameStorage: Asynchronous key-value persistence.
    EventBus: Synchronous publish/subscribe.

Reference implementations:
    StructlogLogger, SeededRandom, MemoryStorage, SimpleEventBus.

External backends implement the abstract contracts and are plugged in through
``CapabilityRegistry.register``.
"""

from __future__ import annotations

import copy
import random as _random
from abc import ABC, abstractmethod
from enum import StrEnum
from typing import Any, Callable, ClassVar, Sequence, TypeVar

from card_engine.capabilities.registry import CapabilityId
from card_engine.core.logging import get_logger


logger = get_logger(__name__)

T = TypeVar("T")

EventHandler = Callable[[Any], None]


class LogLevel(StrEnum):
    """Levels accepted by ``Logger.log``."""

    DEBUG = "debug"
    INFO = "info"
    WARN = "warn"
    ERROR = "error"


# =============================================================================
# Contracts
# =============================================================================


class Logger(ABC):
    """Leveled logging capability."""

    capability_id: ClassVar[str] = CapabilityId.LOGGER

    @abstractmethod
    def log(self, level: LogLevel | str, message: str, **metadata: Any) -> None:
        """Record ``message`` at ``level`` with optional structured metadata."""

    def debug(self, message: str, **metadata: Any) -> None:
        self.log(LogLevel.DEBUG, message, **metadata)

    def info(self, message: str, **metadata: Any) -> None:
        self.log(LogLevel.INFO, message, **metadata)

    def warn(self, message: str, **metadata: Any) -> None:
        self.log(LogLevel.WARN, message, **metadata)

    def error(self, message: str, **metadata: Any) -> None:
        self.log(LogLevel.ERROR, message, **metadata)


class RandomSource(ABC):
    """Deterministic randomness capability."""

    capability_id: ClassVar[str] = CapabilityId.RANDOM

    @abstractmethod
    def random(self) -> float:
        """Return a uniform float in ``[0, 1)``."""

    @abstractmethod
    def randint(self, low: int, high: int) -> int:
        """Return a uniform integer in ``[low, high]``, both inclusive."""

    def shuffle(self, items: Sequence[T]) -> list[T]:
        """Return a Fisher-Yates shuffled copy of ``items``."""
        result = list(items)
        for i in range(len(result) - 1, 0, -1):
            j = self.randint(0, i)
            result[i], result[j] = result[j], result[i]
        return result

    def pick(self, items: Sequence[T]) -> T:
        """Return one element of ``items`` chosen uniformly.

        Raises:
            ValueError: If ``items`` is empty.
        """
        if not items:
            raise ValueError("Cannot pick from an empty sequence")
        return items[self.randint(0, len(items) - 1)]


class GameStorage(ABC):
    """Asynchronous key-value persistence capability.

    Loading an absent key returns ``None`` rather than raising.
    """

    capability_id: ClassVar[str] = CapabilityId.STORAGE

    @abstractmethod
    async def save(self, key: str, value: Any) -> None:
        """Store ``value`` under ``key``."""

    @abstractmethod
    async def load(self, key: str) -> Any | None:
        """Return the value under ``key``, or ``None`` if absent."""

    @abstractmethod
    async def exists(self, key: str) -> bool:
        """Check whether ``key`` holds a value."""

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Remove ``key``; deleting an absent key is a no-op."""


class EventBus(ABC):
    """Synchronous publish/subscribe capability."""

    capability_id: ClassVar[str] = CapabilityId.EVENT_BUS

    @abstractmethod
    def emit(self, event: str, data: Any = None) -> None:
        """Deliver ``data`` to every current subscriber of ``event``."""

    @abstractmethod
    def subscribe(self, event: str, handler: EventHandler) -> Callable[[], None]:
        """Subscribe ``handler`` and return a callable that unsubscribes it."""


# =============================================================================
# Reference Implementations
# =============================================================================


class StructlogLogger(Logger):
    """Logger capability backed by structlog.

    Example:
        >>> StructlogLogger().info("Card played", card_id="fireball")
    """

    def __init__(self, name: str = "card_engine.capabilities") -> None:
        self._logger = get_logger(name)

    def log(self, level: LogLevel | str, message: str, **metadata: Any) -> None:
        level = LogLevel(level)
        method = "warning" if level is LogLevel.WARN else level.value
        getattr(self._logger, method)(message, **metadata)


class SeededRandom(RandomSource):
    """Reproducible pseudo-random generator.

    Two instances built from the same seed produce the same sequence for
    every method. Without a seed, a fresh one is drawn and exposed as
    ``seed`` so a run can be replayed.
    """

    def __init__(self, seed: int | None = None) -> None:
        if seed is None:
            seed = _random.SystemRandom().randrange(2**32)
        self.seed = seed
        self._rng = _random.Random(seed)

    def random(self) -> float:
        return self._rng.random()

    def randint(self, low: int, high: int) -> int:
        if low > high:
            raise ValueError(f"Empty range: low ({low}) > high ({high})")
        return low + int(self._rng.random() * (high - low + 1))

    def __repr__(self) -> str:
        return f"SeededRandom(seed={self.seed})"


class MemoryStorage(GameStorage):
    """In-memory storage with a deep-copy boundary.

    Values are deep-copied on the way in and on the way out, so neither the
    caller's object nor a loaded copy ever aliases what is stored.
    """

    def __init__(self, namespace: str = "") -> None:
        self.namespace = namespace
        self._data: dict[str, Any] = {}

    def _key(self, key: str) -> str:
        return f"{self.namespace}:{key}" if self.namespace else key

    async def save(self, key: str, value: Any) -> None:
        self._data[self._key(key)] = copy.deepcopy(value)
        logger.debug("Value saved", key=key, namespace=self.namespace)

    async def load(self, key: str) -> Any | None:
        full_key = self._key(key)
        if full_key not in self._data:
            return None
        return copy.deepcopy(self._data[full_key])

    async def exists(self, key: str) -> bool:
        return self._key(key) in self._data

    async def delete(self, key: str) -> None:
        self._data.pop(self._key(key), None)

    async def keys(self) -> list[str]:
        """Stored keys in this namespace, without the prefix."""
        prefix = f"{self.namespace}:" if self.namespace else ""
        return [k[len(prefix):] for k in self._data if k.startswith(prefix)]


class SimpleEventBus(EventBus):
    """In-process event bus.

    ``emit`` calls subscribers synchronously in subscription order. A handler
    that raises is logged and skipped; the remaining handlers still run and
    the emitter never sees the error.
    """

    def __init__(self) -> None:
        # ordered, duplicate-free handler sets; values are subscription tokens
        self._handlers: dict[str, dict[EventHandler, object]] = {}

    def emit(self, event: str, data: Any = None) -> None:
        handlers = self._handlers.get(event)
        if not handlers:
            return
        for handler in list(handlers):
            try:
                handler(data)
            except Exception:
                logger.exception("Error in event handler", event_name=event, handler=repr(handler))

    def subscribe(self, event: str, handler: EventHandler) -> Callable[[], None]:
        handlers = self._handlers.setdefault(event, {})
        token = handlers.setdefault(handler, object())

        def unsubscribe() -> None:
            # a handle only removes the subscription it was issued for
            if handlers.get(handler) is not token:
                return
            del handlers[handler]
            if not handlers and self._handlers.get(event) is handlers:
                del self._handlers[event]

        return unsubscribe

    def subscriber_count(self, event: str) -> int:
        """Number of handlers currently subscribed to ``event``."""
        return len(self._handlers.get(event, {}))

    @property
    def events(self) -> list[str]:
        """Events with at least one subscriber."""
        return list(self._handlers)


__all__ = [
    "LogLevel",
    "Logger",
    "RandomSource",
    "GameStorage",
    "EventBus",
    "EventHandler",
    "StructlogLogger",
    "SeededRandom",
    "MemoryStorage",
    "SimpleEventBus",
]
