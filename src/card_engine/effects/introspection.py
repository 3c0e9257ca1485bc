"""Static inspection of effect trees.

``children_of`` is the single exhaustive dispatch over ``EffectKind``; the
rest of the module builds on it. A chained effect only exposes its first
effect, since the follow-up is chosen at execution time.
"""

from __future__ import annotations

from collections import Counter
from typing import Iterator, cast

from card_engine.effects.base import Effect, EffectKind
from card_engine.effects.combinators import (
    ChainedEffect,
    CompositeEffect,
    ConditionalEffect,
    ContextualEffect,
    ParallelEffect,
    RepeatedEffect,
    SequentialEffect,
)


def children_of(effect: Effect) -> tuple[Effect, ...]:
    """Return the statically known children of ``effect``.

    Raises:
        TypeError: If the effect carries a kind outside ``EffectKind``.
    """
    match effect.kind:
        case EffectKind.DAMAGE | EffectKind.HEAL | EffectKind.DRAW | EffectKind.RESOURCE:
            return ()
        case EffectKind.COMPOSITE | EffectKind.SEQUENTIAL | EffectKind.PARALLEL:
            return cast("CompositeEffect | SequentialEffect | ParallelEffect", effect).effects
        case EffectKind.CHAINED:
            return (cast(ChainedEffect, effect).first,)
        case EffectKind.CONDITIONAL | EffectKind.REPEATED | EffectKind.CONTEXTUAL:
            return (cast("ConditionalEffect | RepeatedEffect | ContextualEffect", effect).effect,)
        case _:
            raise TypeError(f"Unknown effect kind: {effect.kind!r}")


def walk(effect: Effect, depth: int = 0) -> Iterator[tuple[int, Effect]]:
    """Yield ``(depth, node)`` pairs in depth-first pre-order."""
    yield depth, effect
    for child in children_of(effect):
        yield from walk(child, depth + 1)


def render_tree(effect: Effect, indent: str = "  ") -> str:
    """Render the tree as indented ``kind: description`` lines.

    Example:
        >>> print(render_tree(DamageEffect(2).repeat(3)))
        repeated: Repeat 3x: Deal 2 damage to opponent
          damage: Deal 2 damage to opponent
    """
    return "\n".join(
        f"{indent * depth}{node.kind.value}: {node.description}"
        for depth, node in walk(effect)
    )


def count_kinds(effect: Effect) -> Counter[EffectKind]:
    """Count the nodes of each kind in the static tree."""
    return Counter(node.kind for _, node in walk(effect))


__all__ = [
    "children_of",
    "walk",
    "render_tree",
    "count_kinds",
]
