"""Effect combinators.

Combinators build bigger effects out of smaller ones:

- ``CompositeEffect`` / ``SequentialEffect``: ordered pipelines. State is
  threaded child to child; the first failing child stops the pipeline.
- ``ParallelEffect``: every child sees the same input state; results are
  merged field by field, later children winning.
- ``ChainedEffect``: the second effect is chosen from the first result.
- ``ConditionalEffect``: gated by a predicate on the incoming context.
- ``RepeatedEffect``: bounded repetition with the pipeline stop rule.
- ``ContextualEffect``: injects an ephemeral value for its subtree.

Composite and Sequential currently share one contract. They stay separate
node kinds so the two can diverge without re-authoring content.
"""

from __future__ import annotations

from itertools import repeat
from typing import Any, Callable, Iterable, Sequence

from card_engine.core.exceptions import EffectDefinitionError, FailureReason
from card_engine.core.logging import get_logger
from card_engine.effects.base import Effect, EffectKind, EffectResult
from card_engine.effects.context import GameContext
from card_engine.models.state import GameState


logger = get_logger(__name__)


def _run_pipeline(effects: Iterable[Effect], context: GameContext) -> EffectResult:
    """Thread state through ``effects`` in order, stopping at the first failure."""
    current_state = context.game_state
    messages: list[str] = []

    for effect in effects:
        result = effect.execute(context.with_state(current_state))
        current_state = result.new_state
        messages.extend(result.messages)

        if not result.success:
            return EffectResult.fail(
                current_state,
                *messages,
                reason=result.failure_reason or FailureReason.CHILD_FAILED,
            )

    return EffectResult.ok(current_state, *messages)


def merge_states(base: GameState, states: Sequence[GameState]) -> GameState:
    """Shallow-merge sibling states into ``base``, left to right.

    Each state contributes the top-level fields it changed relative to
    ``base``. A later state's value for a field replaces an earlier one
    outright; nested structures (such as the ``players`` mapping) are never
    combined.
    """
    fields = GameState.top_level_fields()
    merged: dict[str, Any] = {}
    for state in states:
        for name in fields:
            value = getattr(state, name)
            if value is not getattr(base, name):
                merged[name] = value

    if not merged:
        return base
    return base.evolve(**merged)


class CompositeEffect(Effect):
    """Ordered pipeline over a list of effects.

    There is no rollback: on failure ``new_state`` is the state produced by
    the children before the failing one, not the input state.
    """

    kind = EffectKind.COMPOSITE

    def __init__(self, effects: Sequence[Effect]) -> None:
        self.effects: tuple[Effect, ...] = tuple(effects)
        self.description = f"Composite: {', '.join(e.description for e in self.effects)}"

    def execute(self, context: GameContext) -> EffectResult:
        return _run_pipeline(self.effects, context)


class SequentialEffect(Effect):
    """Ordered pipeline over a list of effects.

    Same contract as ``CompositeEffect``.
    """

    kind = EffectKind.SEQUENTIAL

    def __init__(self, effects: Sequence[Effect]) -> None:
        self.effects: tuple[Effect, ...] = tuple(effects)
        self.description = f"Sequential: {' -> '.join(e.description for e in self.effects)}"

    def execute(self, context: GameContext) -> EffectResult:
        return _run_pipeline(self.effects, context)


class ParallelEffect(Effect):
    """Run every child against the same input and merge the results.

    Success is the AND over all children. Messages are concatenated in list
    order whether or not a child succeeded. If any child fails, every
    sibling's changes are dropped and the input state is returned.
    """

    kind = EffectKind.PARALLEL

    def __init__(self, effects: Sequence[Effect]) -> None:
        self.effects: tuple[Effect, ...] = tuple(effects)
        self.description = f"Parallel: {' | '.join(e.description for e in self.effects)}"

    def execute(self, context: GameContext) -> EffectResult:
        results = [effect.execute(context) for effect in self.effects]
        messages = [message for result in results for message in result.messages]

        failed = [result for result in results if not result.success]
        if failed:
            logger.debug(
                "Parallel group failed",
                failed=len(failed),
                total=len(results),
            )
            return EffectResult.fail(
                context.game_state,
                *messages,
                reason=failed[0].failure_reason or FailureReason.CHILD_FAILED,
            )

        final_state = merge_states(context.game_state, [r.new_state for r in results])
        return EffectResult.ok(final_state, *messages)


class ChainedEffect(Effect):
    """Run ``first``, then the effect ``next_fn`` picks from its result."""

    kind = EffectKind.CHAINED

    def __init__(self, first: Effect, next_fn: Callable[[EffectResult], Effect]) -> None:
        self.first = first
        self.next_fn = next_fn
        self.description = f"Chained: {first.description} -> (dynamic)"

    def execute(self, context: GameContext) -> EffectResult:
        first_result = self.first.execute(context)
        if not first_result.success:
            return first_result

        next_effect = self.next_fn(first_result)
        if not isinstance(next_effect, Effect):
            raise EffectDefinitionError(
                f"Chain continuation returned {type(next_effect).__name__}, expected Effect",
                effect_kind=self.kind,
            )

        second_result = next_effect.execute(context.with_state(first_result.new_state))
        return EffectResult(
            success=second_result.success,
            new_state=second_result.new_state,
            messages=(*first_result.messages, *second_result.messages),
            metadata=second_result.metadata,
        )


class ConditionalEffect(Effect):
    """Delegate to ``effect`` only when ``predicate(context)`` holds.

    A false predicate is not a failure: the result is a success with the
    state untouched and a single explanatory message.
    """

    kind = EffectKind.CONDITIONAL

    def __init__(self, effect: Effect, predicate: Callable[[GameContext], bool]) -> None:
        self.effect = effect
        self.predicate = predicate
        self.description = f"Conditional: {effect.description}"

    def execute(self, context: GameContext) -> EffectResult:
        if self.predicate(context):
            return self.effect.execute(context)

        return EffectResult.ok(
            context.game_state,
            f"Condition not met for: {self.effect.description}",
        )


class RepeatedEffect(Effect):
    """Run ``effect`` ``times`` times, threading state, stopping on failure.

    Like ``CompositeEffect``, a failure keeps the iterations that succeeded.
    """

    kind = EffectKind.REPEATED

    def __init__(self, effect: Effect, times: int) -> None:
        self.effect = effect
        self.times = times
        self.description = f"Repeat {times}x: {effect.description}"

    def execute(self, context: GameContext) -> EffectResult:
        return _run_pipeline(repeat(self.effect, max(self.times, 0)), context)


class ContextualEffect(Effect):
    """Expose ``key -> value`` to the wrapped subtree only."""

    kind = EffectKind.CONTEXTUAL

    def __init__(self, effect: Effect, key: str, value: Any) -> None:
        self.effect = effect
        self.key = key
        self.value = value
        self.description = f"With context [{key}]: {effect.description}"

    def execute(self, context: GameContext) -> EffectResult:
        return self.effect.execute(context.with_value(self.key, self.value))


__all__ = [
    "CompositeEffect",
    "SequentialEffect",
    "ParallelEffect",
    "ChainedEffect",
    "ConditionalEffect",
    "RepeatedEffect",
    "ContextualEffect",
    "merge_states",
]
