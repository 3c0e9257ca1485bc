"""Effect contract for the card engine.

An effect is a node in an immutable tree. Executing it against a
``GameContext`` yields an ``EffectResult``; nothing is mutated along the way.
Leaves (damage, heal, draw, resource) derive new states, combinators thread
or merge the states their children produce.

The set of node kinds is closed (``EffectKind``); ``introspection.children_of``
is the one place that matches exhaustively over it.

Example:
    >>> from card_engine.effects import DamageEffect, HealEffect
    >>> combo = DamageEffect(3).compose(HealEffect(2))
    >>> combo.description
    'Composite: Deal 3 damage to opponent, Heal 2 to self'
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import StrEnum
from typing import TYPE_CHECKING, Any, Callable, ClassVar, Sequence

from pydantic import BaseModel, ConfigDict, Field

from card_engine.core.exceptions import FailureReason
from card_engine.models.state import GameState


if TYPE_CHECKING:
    from card_engine.effects.combinators import (
        ChainedEffect,
        CompositeEffect,
        ConditionalEffect,
        ContextualEffect,
        ParallelEffect,
        RepeatedEffect,
        SequentialEffect,
    )
    from card_engine.effects.context import GameContext


class EffectKind(StrEnum):
    """Discriminant carried by every effect node."""

    # Leaves
    DAMAGE = "damage"
    HEAL = "heal"
    DRAW = "draw"
    RESOURCE = "resource"

    # Combinators
    COMPOSITE = "composite"
    SEQUENTIAL = "sequential"
    PARALLEL = "parallel"
    CHAINED = "chained"
    CONDITIONAL = "conditional"
    REPEATED = "repeated"
    CONTEXTUAL = "contextual"


class EffectResult(BaseModel):
    """Outcome of executing an effect.

    Attributes:
        success: Whether the effect applied.
        new_state: The resulting state. On failure this is the input state of
            the failing step, untouched.
        messages: Human-readable log lines in causal order.
        metadata: Optional open mapping. Failures carry ``"failure"``.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    success: bool
    new_state: GameState
    messages: tuple[str, ...] = Field(default=())
    metadata: dict[str, Any] | None = Field(default=None)

    @classmethod
    def ok(cls, state: GameState, *messages: str) -> EffectResult:
        """Build a successful result."""
        return cls(success=True, new_state=state, messages=messages)

    @classmethod
    def fail(
        cls,
        state: GameState,
        *messages: str,
        reason: FailureReason | None = None,
    ) -> EffectResult:
        """Build a failed result, optionally tagged with a structured reason."""
        metadata = {"failure": reason} if reason is not None else None
        return cls(success=False, new_state=state, messages=messages, metadata=metadata)

    @property
    def failure_reason(self) -> FailureReason | None:
        """The structured failure reason, if any."""
        if not self.metadata:
            return None
        return self.metadata.get("failure")


class Effect(ABC):
    """Base class for every effect node.

    Subclasses set ``kind`` and compute ``description`` once in ``__init__``.
    The composition helpers only build new nodes, they never execute.
    """

    kind: ClassVar[EffectKind]
    description: str

    @abstractmethod
    def execute(self, context: GameContext) -> EffectResult:
        """Apply the effect to ``context.game_state``.

        Gameplay failures are reported through the result, never raised.
        """

    # -------------------------------------------------------------------------
    # Composition
    # -------------------------------------------------------------------------

    def compose(self, other: Effect) -> CompositeEffect:
        """Run ``other`` after this effect, stopping on failure."""
        from card_engine.effects.combinators import CompositeEffect

        return CompositeEffect([self, other])

    def chain(self, fn: Callable[[EffectResult], Effect]) -> ChainedEffect:
        """Pick the follow-up effect from this effect's result."""
        from card_engine.effects.combinators import ChainedEffect

        return ChainedEffect(self, fn)

    def conditional(self, predicate: Callable[[GameContext], bool]) -> ConditionalEffect:
        """Only run when ``predicate`` holds for the incoming context."""
        from card_engine.effects.combinators import ConditionalEffect

        return ConditionalEffect(self, predicate)

    def repeat(self, times: int) -> RepeatedEffect:
        """Run this effect ``times`` times in a row."""
        from card_engine.effects.combinators import RepeatedEffect

        return RepeatedEffect(self, times)

    def with_context(self, key: str, value: Any) -> ContextualEffect:
        """Expose an extra context value to this subtree."""
        from card_engine.effects.combinators import ContextualEffect

        return ContextualEffect(self, key, value)

    @staticmethod
    def all(effects: Sequence[Effect]) -> CompositeEffect:
        """Wrap effects in a composite pipeline."""
        from card_engine.effects.combinators import CompositeEffect

        return CompositeEffect(effects)

    @staticmethod
    def sequence(effects: Sequence[Effect]) -> SequentialEffect:
        """Wrap effects in a sequential pipeline."""
        from card_engine.effects.combinators import SequentialEffect

        return SequentialEffect(effects)

    @staticmethod
    def parallel(effects: Sequence[Effect]) -> ParallelEffect:
        """Wrap effects in a parallel group."""
        from card_engine.effects.combinators import ParallelEffect

        return ParallelEffect(effects)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.description!r}>"


__all__ = [
    "EffectKind",
    "EffectResult",
    "Effect",
]
