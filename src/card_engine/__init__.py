"""Card Engine - composable effect algebra for card games.

Effects are immutable trees executed against a read-only context; each
execution returns a new game state that shares every unchanged substructure
with the old one. Logging, randomness, persistence and events reach effects
through an explicitly constructed, copy-on-write capability registry.

Example:
    >>> from card_engine import (
    ...     DamageEffect, GameState, PlayerState, ResourceEffect,
    ...     build_context, create_default_registry,
    ... )
    >>>
    >>> state = GameState(
    ...     players={
    ...         "A": PlayerState(id="A", health=100, max_health=100, resources={"mana": 3}),
    ...         "B": PlayerState(id="B", health=100, max_health=100),
    ...     },
    ...     current_player="A",
    ... )
    >>> registry = create_default_registry()
    >>> fireball = ResourceEffect.spend("mana", 2).compose(DamageEffect(30))
    >>> result = fireball.execute(build_context(registry, "A", state))
    >>> result.new_state.players["B"].health
    70

Modules:
    core: Configuration, logging, and base exceptions.
    models: Frozen pydantic state models.
    effects: Effect contract, combinators, primitives and introspection.
    capabilities: Capability registry and reference services.
"""

from __future__ import annotations

from card_engine.capabilities import (
    CapabilityId,
    CapabilityRegistry,
    EventBus,
    GameStorage,
    Logger,
    MemoryStorage,
    RandomSource,
    SeededRandom,
    SimpleEventBus,
    StructlogLogger,
    create_default_registry,
)
from card_engine.core import (
    CardEngineError,
    FailureReason,
    Settings,
    configure_logging,
    configure_logging_from_settings,
    get_logger,
    get_settings,
)
from card_engine.effects import (
    ChainedEffect,
    CompositeEffect,
    ConditionalEffect,
    ContextualEffect,
    DamageEffect,
    DrawCardEffect,
    Effect,
    EffectKind,
    EffectResult,
    GameContext,
    HealEffect,
    ParallelEffect,
    RepeatedEffect,
    ResourceEffect,
    ResourceOperation,
    SequentialEffect,
    TargetType,
    build_context,
    render_tree,
)
from card_engine.models import Card, GamePhase, GameState, PlayerState


__version__ = "0.1.0"
__all__ = [
    "__version__",
    # Core
    "CardEngineError",
    "FailureReason",
    "Settings",
    "get_settings",
    "configure_logging",
    "configure_logging_from_settings",
    "get_logger",
    # Models
    "Card",
    "GamePhase",
    "GameState",
    "PlayerState",
    # Effects
    "Effect",
    "EffectKind",
    "EffectResult",
    "GameContext",
    "build_context",
    "CompositeEffect",
    "SequentialEffect",
    "ParallelEffect",
    "ChainedEffect",
    "ConditionalEffect",
    "RepeatedEffect",
    "ContextualEffect",
    "TargetType",
    "ResourceOperation",
    "DamageEffect",
    "HealEffect",
    "DrawCardEffect",
    "ResourceEffect",
    "render_tree",
    # Capabilities
    "CapabilityId",
    "CapabilityRegistry",
    "Logger",
    "RandomSource",
    "GameStorage",
    "EventBus",
    "StructlogLogger",
    "SeededRandom",
    "MemoryStorage",
    "SimpleEventBus",
    "create_default_registry",
]
