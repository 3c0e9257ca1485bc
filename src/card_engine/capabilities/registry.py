"""Copy-on-write capability registry.

The registry maps capability ids to factories and memoized instances. It is
how effects and drivers reach logging, randomness, storage and the event bus
without module-level singletons.

- ``register`` never touches the receiver; it returns a new registry holding
  every factory and cached instance of the receiver plus the new factory.
- ``provide`` memoizes per registry value: the first call on a registry runs
  the factory, later calls on that same registry return the cached instance.
- ``fork`` snapshots factories and instances; afterwards the fork and the
  original evolve independently.

Registrations are append-only along a lineage, so a capability registered on
an ancestor stays visible on every descendant.

Example:
    >>> registry = CapabilityRegistry().register("random", lambda: SeededRandom(7))
    >>> registry.provide("random") is registry.provide("random")
    True
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any, Callable, TypeVar

from card_engine.core.exceptions import CapabilityNotFoundError, CapabilityTypeError
from card_engine.core.logging import get_logger


logger = get_logger(__name__)

T = TypeVar("T")

Factory = Callable[[], Any]


class CapabilityId(StrEnum):
    """Ids of the reference capabilities."""

    LOGGER = "logger"
    RANDOM = "random"
    STORAGE = "storage"
    EVENT_BUS = "event_bus"


class CapabilityRegistry:
    """Mapping from capability id to a lazily built, memoized service."""

    def __init__(
        self,
        factories: dict[str, Factory] | None = None,
        instances: dict[str, Any] | None = None,
    ) -> None:
        self._factories: dict[str, Factory] = dict(factories or {})
        self._instances: dict[str, Any] = dict(instances or {})

    def register(self, capability_id: str, factory: Factory) -> CapabilityRegistry:
        """Return a new registry with ``factory`` registered under ``capability_id``.

        Args:
            capability_id: The capability id.
            factory: Zero-argument callable building the service.

        Returns:
            A new registry; this one is left unchanged.
        """
        if not callable(factory):
            raise TypeError(f"Factory for {capability_id!r} must be callable")

        logger.debug("Capability registered", capability_id=str(capability_id))
        registry = self.fork()
        registry._factories[capability_id] = factory
        return registry

    def provide(self, capability_id: str, expected_type: type[T] | None = None) -> Any:
        """Return the service for ``capability_id``, building it on first use.

        Args:
            capability_id: The capability id.
            expected_type: Optional type the service must be an instance of.

        Returns:
            The cached or newly built service.

        Raises:
            CapabilityNotFoundError: If no provider was ever registered.
            CapabilityTypeError: If the service is not an ``expected_type``.
        """
        if capability_id in self._instances:
            service = self._instances[capability_id]
        else:
            factory = self._factories.get(capability_id)
            if factory is None:
                raise CapabilityNotFoundError(
                    f"No provider registered for service: {capability_id}",
                    capability_id=str(capability_id),
                )
            service = factory()
            self._instances[capability_id] = service
            logger.debug(
                "Capability instantiated",
                capability_id=str(capability_id),
                service=type(service).__name__,
            )

        if expected_type is not None and not isinstance(service, expected_type):
            raise CapabilityTypeError(
                f"Capability {capability_id} has the wrong type",
                capability_id=str(capability_id),
                expected=expected_type.__name__,
                actual=type(service).__name__,
            )
        return service

    def has(self, capability_id: str) -> bool:
        """Check whether a factory or cached instance exists."""
        return capability_id in self._factories or capability_id in self._instances

    def fork(self) -> CapabilityRegistry:
        """Snapshot this registry's factories and cached instances."""
        return CapabilityRegistry(self._factories, self._instances)

    @property
    def registered_ids(self) -> list[str]:
        """Every id with a factory or cached instance, registration order first."""
        ids = list(self._factories)
        ids.extend(cid for cid in self._instances if cid not in self._factories)
        return ids

    def __contains__(self, capability_id: object) -> bool:
        return isinstance(capability_id, str) and self.has(capability_id)

    def __repr__(self) -> str:
        return f"CapabilityRegistry(ids={self.registered_ids!r})"


__all__ = [
    "CapabilityId",
    "CapabilityRegistry",
    "Factory",
]
