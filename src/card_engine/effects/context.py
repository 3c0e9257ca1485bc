"""Execution context handed to effects.

``GameContext`` is read-only. Combinators derive new contexts with
``with_state`` (threading a state through a pipeline) or ``with_value``
(ephemeral key/value pairs visible only to a subtree). Extra values are kept
in a side mapping and read back through the typed ``value`` accessor, so the
context's own fields stay fixed.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Callable, Mapping, TypeVar

from card_engine.core.exceptions import ContextValueError
from card_engine.models.state import GameState, PlayerState


if TYPE_CHECKING:
    from card_engine.capabilities.registry import CapabilityRegistry


T = TypeVar("T")

_MISSING: Any = object()


def _discard(message: str) -> None:
    return None


@dataclass(frozen=True)
class GameContext:
    """Read-only environment for one effect execution.

    Attributes:
        player_id: The acting player.
        game_state: State snapshot the effect reads from.
        random: Uniform float source in ``[0, 1)``.
        log: Sink for human-readable log lines.
        extras: Ephemeral values injected by ``ContextualEffect``.
    """

    player_id: str
    game_state: GameState
    random: Callable[[], float]
    log: Callable[[str], None] = _discard
    extras: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    @property
    def acting_player(self) -> PlayerState | None:
        """The acting player's state, if present in the snapshot."""
        return self.game_state.get_player(self.player_id)

    def with_state(self, state: GameState) -> GameContext:
        """Return a copy of this context reading from ``state``."""
        if state is self.game_state:
            return self
        return replace(self, game_state=state)

    def with_value(self, key: str, value: Any) -> GameContext:
        """Return a copy of this context with one extra value set."""
        return replace(self, extras=MappingProxyType({**self.extras, key: value}))

    def has_value(self, key: str) -> bool:
        """Check whether an extra value is visible."""
        return key in self.extras

    def value(
        self,
        key: str,
        expected_type: type[T] | None = None,
        default: Any = _MISSING,
    ) -> Any:
        """Read an extra value, validating its type at the read site.

        Args:
            key: The value's key.
            expected_type: Optional type the value must be an instance of.
            default: Returned when the key is absent. Without it a missing key
                raises.

        Returns:
            The stored value, or ``default``.

        Raises:
            ContextValueError: On a missing key without default, or a value of
                the wrong type.
        """
        if key not in self.extras:
            if default is _MISSING:
                raise ContextValueError(f"No context value for {key!r}", key=key)
            return default

        found = self.extras[key]
        if expected_type is not None and not isinstance(found, expected_type):
            raise ContextValueError(
                f"Context value {key!r} is {type(found).__name__}, "
                f"expected {expected_type.__name__}",
                key=key,
            )
        return found


def build_context(
    registry: CapabilityRegistry,
    player_id: str,
    state: GameState,
) -> GameContext:
    """Build a context whose randomness and logging come from a registry.

    Args:
        registry: Registry providing the ``random`` and ``logger`` capabilities.
        player_id: The acting player.
        state: The state snapshot to execute against.

    Returns:
        A fresh ``GameContext``.

    Raises:
        CapabilityNotFoundError: If either capability is not registered.
    """
    from card_engine.capabilities.services import Logger, RandomSource
    from card_engine.capabilities.registry import CapabilityId

    rng = registry.provide(CapabilityId.RANDOM, RandomSource)
    capability_logger = registry.provide(CapabilityId.LOGGER, Logger)

    def log(message: str) -> None:
        capability_logger.info(message, player_id=player_id)

    return GameContext(
        player_id=player_id,
        game_state=state,
        random=rng.random,
        log=log,
    )


__all__ = [
    "GameContext",
    "build_context",
]
