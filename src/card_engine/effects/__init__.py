"""Effect algebra: the effect contract, combinators and primitive effects."""

from __future__ import annotations

from card_engine.effects.base import Effect, EffectKind, EffectResult
from card_engine.effects.combinators import (
    ChainedEffect,
    CompositeEffect,
    ConditionalEffect,
    ContextualEffect,
    ParallelEffect,
    RepeatedEffect,
    SequentialEffect,
    merge_states,
)
from card_engine.effects.context import GameContext, build_context
from card_engine.effects.introspection import children_of, count_kinds, render_tree, walk
from card_engine.effects.primitives import (
    DamageEffect,
    DrawCardEffect,
    HealEffect,
    ResourceEffect,
    ResourceOperation,
    TargetResolution,
    TargetType,
    resolve_targets,
)


__all__ = [
    # Contract
    "Effect",
    "EffectKind",
    "EffectResult",
    "GameContext",
    "build_context",
    # Combinators
    "CompositeEffect",
    "SequentialEffect",
    "ParallelEffect",
    "ChainedEffect",
    "ConditionalEffect",
    "RepeatedEffect",
    "ContextualEffect",
    "merge_states",
    # Primitives
    "TargetType",
    "ResourceOperation",
    "TargetResolution",
    "resolve_targets",
    "DamageEffect",
    "HealEffect",
    "DrawCardEffect",
    "ResourceEffect",
    # Introspection
    "children_of",
    "walk",
    "render_tree",
    "count_kinds",
]
