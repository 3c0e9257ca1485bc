"""Primitive (leaf) effects.

Every leaf follows the same pattern:

1. Resolve the target player ids from ``context.player_id`` and the state's
   player mapping.
2. If a required target cannot be resolved, fail with the input state
   untouched.
3. Otherwise derive a new state that shares everything except the players
   that actually changed.

Target resolution is deterministic: ``opponent`` and ``ally`` both mean the
first player, in mapping order, whose id differs from the acting player.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from card_engine.core.exceptions import EffectDefinitionError, FailureReason
from card_engine.core.logging import get_logger
from card_engine.effects.base import Effect, EffectKind, EffectResult
from card_engine.effects.context import GameContext
from card_engine.models.state import GameState, PlayerState


logger = get_logger(__name__)


class TargetType(StrEnum):
    """Who a primitive effect applies to."""

    SELF = "self"
    OPPONENT = "opponent"
    ALLY = "ally"
    ALL = "all"


class ResourceOperation(StrEnum):
    """How a resource effect changes the stored amount."""

    GAIN = "gain"
    SPEND = "spend"
    SET = "set"


# =============================================================================
# Target Resolution
# =============================================================================


@dataclass(frozen=True)
class TargetResolution:
    """Outcome of resolving a target.

    Attributes:
        player_ids: Resolved ids in mapping order.
        error: Diagnostic message when resolution failed.
    """

    player_ids: tuple[str, ...] = ()
    error: str | None = None

    @property
    def resolved(self) -> bool:
        return self.error is None


def _first_other(state: GameState, player_id: str) -> str | None:
    return next((pid for pid in state.players if pid != player_id), None)


def resolve_targets(context: GameContext, target: TargetType) -> TargetResolution:
    """Resolve ``target`` against the context's acting player and state.

    Args:
        context: The execution context.
        target: The target to resolve.

    Returns:
        The resolved ids, or a resolution carrying an error message.
    """
    state = context.game_state
    match target:
        case TargetType.SELF:
            if context.player_id in state.players:
                return TargetResolution(player_ids=(context.player_id,))
            return TargetResolution(error=f"Player {context.player_id} not found")
        case TargetType.OPPONENT | TargetType.ALLY:
            other = _first_other(state, context.player_id)
            if other is not None:
                return TargetResolution(player_ids=(other,))
            return TargetResolution(error=f"No {target.value} found")
        case TargetType.ALL:
            return TargetResolution(player_ids=tuple(state.players))


def _coerce_target(
    kind: EffectKind,
    target: TargetType | str,
    allowed: tuple[TargetType, ...],
) -> TargetType:
    try:
        resolved = TargetType(target)
    except ValueError as exc:
        raise EffectDefinitionError(
            f"Unknown target {target!r}",
            effect_kind=kind,
        ) from exc
    if resolved not in allowed:
        raise EffectDefinitionError(
            f"Target {resolved.value!r} is not supported by {kind.value} effects",
            effect_kind=kind,
            details={"allowed": [t.value for t in allowed]},
        )
    return resolved


def _require_non_negative(kind: EffectKind, name: str, value: int) -> int:
    if value < 0:
        raise EffectDefinitionError(
            f"{name} must be non-negative, got {value}",
            effect_kind=kind,
        )
    return value


def _unresolved(context: GameContext, kind: EffectKind, error: str) -> EffectResult:
    logger.debug("Target not resolved", kind=kind, player_id=context.player_id, error=error)
    context.log(error)
    return EffectResult.fail(context.game_state, error, reason=FailureReason.TARGET_NOT_FOUND)


def _finish(
    context: GameContext,
    updated: list[PlayerState],
    messages: list[str],
) -> EffectResult:
    for message in messages:
        context.log(message)
    state = context.game_state
    new_state = state.with_players(updated) if updated else state
    return EffectResult.ok(new_state, *messages)


# =============================================================================
# Damage / Heal
# =============================================================================


class DamageEffect(Effect):
    """Reduce health, flooring at 0.

    Targets: ``self``, ``opponent``, ``all``.
    """

    kind = EffectKind.DAMAGE
    allowed_targets = (TargetType.SELF, TargetType.OPPONENT, TargetType.ALL)

    def __init__(self, amount: int, target: TargetType | str = TargetType.OPPONENT) -> None:
        self.amount = _require_non_negative(self.kind, "amount", amount)
        self.target = _coerce_target(self.kind, target, self.allowed_targets)
        self.description = f"Deal {amount} damage to {self.target.value}"

    @classmethod
    def create(cls, amount: int, target: TargetType | str = TargetType.OPPONENT) -> DamageEffect:
        return cls(amount, target)

    def execute(self, context: GameContext) -> EffectResult:
        resolution = resolve_targets(context, self.target)
        if not resolution.resolved:
            return _unresolved(context, self.kind, resolution.error)

        updated: list[PlayerState] = []
        messages: list[str] = []
        for player_id in resolution.player_ids:
            player = context.game_state.players[player_id]
            actual = min(self.amount, player.health)
            if actual:
                updated.append(player.evolve(health=player.health - actual))
            messages.append(f"{player_id} takes {actual} damage")

        return _finish(context, updated, messages)


class HealEffect(Effect):
    """Restore health, capped at ``max_health``.

    Targets: ``self``, ``ally``, ``all``.
    """

    kind = EffectKind.HEAL
    allowed_targets = (TargetType.SELF, TargetType.ALLY, TargetType.ALL)

    def __init__(self, amount: int, target: TargetType | str = TargetType.SELF) -> None:
        self.amount = _require_non_negative(self.kind, "amount", amount)
        self.target = _coerce_target(self.kind, target, self.allowed_targets)
        self.description = f"Heal {amount} to {self.target.value}"

    @classmethod
    def create(cls, amount: int, target: TargetType | str = TargetType.SELF) -> HealEffect:
        return cls(amount, target)

    def execute(self, context: GameContext) -> EffectResult:
        resolution = resolve_targets(context, self.target)
        if not resolution.resolved:
            return _unresolved(context, self.kind, resolution.error)

        updated: list[PlayerState] = []
        messages: list[str] = []
        for player_id in resolution.player_ids:
            player = context.game_state.players[player_id]
            actual = min(self.amount, player.max_health - player.health)
            if actual:
                updated.append(player.evolve(health=player.health + actual))
            messages.append(f"{player_id} heals {actual} health")

        return _finish(context, updated, messages)


# =============================================================================
# Draw
# =============================================================================


class DrawCardEffect(Effect):
    """Move cards from the tail of the deck to the tail of the hand.

    An empty deck takes the whole discard pile, order preserved, before the
    next draw. Running out of cards ends the draw early but is not a failure.

    Targets: ``self``, ``opponent``.
    """

    kind = EffectKind.DRAW
    allowed_targets = (TargetType.SELF, TargetType.OPPONENT)

    def __init__(self, count: int = 1, target: TargetType | str = TargetType.SELF) -> None:
        self.count = _require_non_negative(self.kind, "count", count)
        self.target = _coerce_target(self.kind, target, self.allowed_targets)
        self.description = f"Draw {count} card{'s' if count > 1 else ''} ({self.target.value})"

    @classmethod
    def create(cls, count: int = 1, target: TargetType | str = TargetType.SELF) -> DrawCardEffect:
        return cls(count, target)

    def execute(self, context: GameContext) -> EffectResult:
        resolution = resolve_targets(context, self.target)
        if not resolution.resolved:
            return _unresolved(context, self.kind, resolution.error)

        player_id = resolution.player_ids[0]
        player = context.game_state.players[player_id]
        deck = list(player.deck)
        hand = list(player.hand)
        discard = list(player.discard_pile)
        messages: list[str] = []
        drawn = 0
        reshuffled = False

        for _ in range(self.count):
            if not deck:
                if not discard:
                    messages.append(f"{player_id} cannot draw - no cards available")
                    break
                deck, discard = discard, []
                reshuffled = True
                messages.append(f"{player_id} shuffles discard pile into deck")

            hand.append(deck.pop())
            drawn += 1

        if drawn:
            messages.append(f"{player_id} draws {drawn} card{'s' if drawn > 1 else ''}")

        changes: dict[str, tuple] = {}
        if drawn:
            changes["deck"] = tuple(deck)
            changes["hand"] = tuple(hand)
        if reshuffled:
            changes["discard_pile"] = ()
        updated = [player.evolve(**changes)] if changes else []

        return _finish(context, updated, messages)


# =============================================================================
# Resource
# =============================================================================


class ResourceEffect(Effect):
    """Gain, spend or set a named resource.

    ``spend`` fails, leaving the state untouched, when the player holds less
    than ``amount``.

    Targets: ``self``, ``opponent``.
    """

    kind = EffectKind.RESOURCE
    allowed_targets = (TargetType.SELF, TargetType.OPPONENT)

    def __init__(
        self,
        resource_type: str,
        amount: int,
        operation: ResourceOperation | str = ResourceOperation.GAIN,
        target: TargetType | str = TargetType.SELF,
    ) -> None:
        if not resource_type:
            raise EffectDefinitionError("resource_type must not be empty", effect_kind=self.kind)
        try:
            self.operation = ResourceOperation(operation)
        except ValueError as exc:
            raise EffectDefinitionError(
                f"Unknown resource operation {operation!r}",
                effect_kind=self.kind,
            ) from exc
        self.resource_type = resource_type
        self.amount = _require_non_negative(self.kind, "amount", amount)
        self.target = _coerce_target(self.kind, target, self.allowed_targets)
        self.description = f"{self.operation.value} {amount} {resource_type} ({self.target.value})"

    @classmethod
    def gain(cls, resource_type: str, amount: int, target: TargetType | str = TargetType.SELF) -> ResourceEffect:
        return cls(resource_type, amount, ResourceOperation.GAIN, target)

    @classmethod
    def spend(cls, resource_type: str, amount: int, target: TargetType | str = TargetType.SELF) -> ResourceEffect:
        return cls(resource_type, amount, ResourceOperation.SPEND, target)

    @classmethod
    def set(cls, resource_type: str, amount: int, target: TargetType | str = TargetType.SELF) -> ResourceEffect:
        return cls(resource_type, amount, ResourceOperation.SET, target)

    def execute(self, context: GameContext) -> EffectResult:
        resolution = resolve_targets(context, self.target)
        if not resolution.resolved:
            return _unresolved(context, self.kind, resolution.error)

        player_id = resolution.player_ids[0]
        player = context.game_state.players[player_id]
        current = player.resource(self.resource_type)
        name = self.resource_type

        match self.operation:
            case ResourceOperation.GAIN:
                new_amount = current + self.amount
                message = f"{player_id} gains {self.amount} {name}"
            case ResourceOperation.SPEND:
                if current < self.amount:
                    message = f"{player_id} doesn't have enough {name} ({current}/{self.amount})"
                    context.log(message)
                    return EffectResult.fail(
                        context.game_state,
                        message,
                        reason=FailureReason.INSUFFICIENT_RESOURCE,
                    )
                new_amount = current - self.amount
                message = f"{player_id} spends {self.amount} {name}"
            case ResourceOperation.SET:
                new_amount = self.amount
                message = f"{player_id} {name} set to {self.amount}"

        updated = [player.evolve(resources={**player.resources, name: new_amount})]
        return _finish(context, updated, [message])


__all__ = [
    "TargetType",
    "ResourceOperation",
    "TargetResolution",
    "resolve_targets",
    "DamageEffect",
    "HealEffect",
    "DrawCardEffect",
    "ResourceEffect",
]
