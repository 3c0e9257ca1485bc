"""Immutable state models for the card engine.

Every model here is a frozen pydantic model. Effects never mutate a state in
place: they derive a new value with ``evolve()``, which is a shallow
``model_copy``. Untouched fields keep pointing at the very same objects as the
predecessor, so two states share every substructure that did not change.
Since ``model_copy`` skips validation, ``evolve`` re-checks the invariants the
change can break and raises ``StateValidationError``.

Models:
    Card: An authored card and its behavior tree.
    PlayerState: One player's health, zones and resources.
    GameState: The full table: players by id, turn, phase.
"""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING, Annotated, Any, Self

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)

from card_engine.core.exceptions import StateValidationError


if TYPE_CHECKING:
    from card_engine.effects.base import Effect


_ZONES = frozenset({"hand", "deck", "discard_pile"})


def _reject_unknown_fields(
    model: type[BaseModel],
    changes: dict[str, Any],
    player_id: str | None = None,
) -> None:
    unknown = sorted(set(changes) - set(model.model_fields))
    if unknown:
        raise StateValidationError(
            f"Unknown {model.__name__} fields: {', '.join(unknown)}",
            player_id=player_id,
        )


def _player_problem(player: PlayerState, *, check_zones: bool = True) -> str | None:
    """Describe the first broken player invariant, or return None."""
    if player.health < 0:
        return f"health ({player.health}) must not be negative"
    if player.health > player.max_health:
        return f"health ({player.health}) must not exceed max_health ({player.max_health})"
    if check_zones:
        seen: set[str] = set()
        for card in (*player.hand, *player.deck, *player.discard_pile):
            if card.id in seen:
                return f"Card {card.id!r} appears in more than one zone"
            seen.add(card.id)
    return None


def _game_problem(state: GameState, *, check_players: bool = True) -> str | None:
    """Describe the first broken game invariant, or return None."""
    if state.turn < 0:
        return f"turn ({state.turn}) must not be negative"
    if check_players:
        for key, player in state.players.items():
            if key != player.id:
                return f"Player key {key!r} does not match player id {player.id!r}"
    if state.players and state.current_player not in state.players:
        return f"Unknown current player {state.current_player!r}"
    return None


class GamePhase(StrEnum):
    """Phases of a player's turn."""

    DRAW = "draw"
    MAIN = "main"
    DISCARD = "discard"
    END = "end"


# =============================================================================
# Card
# =============================================================================


class Card(BaseModel):
    """An authored card.

    Cards are immutable once authored. ``effects`` holds the card's own
    behavior tree as an ordered sequence of effects.

    Attributes:
        id: Unique card identifier.
        name: Display name.
        cost: Integer play cost.
        effects: Ordered effects the card resolves when played.
        tags: Free-form classification tags.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        arbitrary_types_allowed=True,
    )

    id: str = Field(min_length=1, description="Unique card identifier")
    name: str = Field(description="Display name")
    cost: int = Field(default=0, description="Play cost")
    effects: tuple[Any, ...] = Field(
        default=(),
        description="Ordered effects making up the card's behavior",
    )
    tags: frozenset[str] = Field(default=frozenset(), description="Classification tags")

    @field_validator("effects", mode="after")
    @classmethod
    def validate_effects(cls, value: tuple[Any, ...]) -> tuple[Any, ...]:
        """Ensure every entry is an effect.

        Args:
            value: The effects to validate.

        Returns:
            The validated effects.

        Raises:
            ValueError: If an entry is not an ``Effect``.
        """
        from card_engine.effects.base import Effect

        for effect in value:
            if not isinstance(effect, Effect):
                msg = f"Card effects must be Effect instances, got {type(effect).__name__}"
                raise ValueError(msg)
        return value

    def has_tag(self, tag: str) -> bool:
        """Check whether the card carries a tag."""
        return tag in self.tags

    def as_effect(self) -> Effect:
        """Wrap the card's effects in a single ordered pipeline.

        Returns:
            A ``CompositeEffect`` over ``effects``.
        """
        from card_engine.effects.combinators import CompositeEffect

        return CompositeEffect(self.effects)


# =============================================================================
# Player State
# =============================================================================


class PlayerState(BaseModel):
    """State for a single player.

    ``hand``, ``deck`` and ``discard_pile`` are disjoint: a card id lives in
    exactly one of them. The top of the deck is its last element.

    Attributes:
        id: Player identifier.
        health: Current health, within ``[0, max_health]``.
        max_health: Maximum health, constant for the player's lifetime.
        hand: Cards in hand.
        deck: Draw pile; cards are drawn from the tail.
        discard_pile: Discarded cards.
        resources: Resource name to amount.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str = Field(min_length=1, description="Player identifier")
    health: Annotated[int, Field(ge=0)] = Field(description="Current health")
    max_health: Annotated[int, Field(ge=0)] = Field(description="Maximum health")
    hand: tuple[Card, ...] = Field(default=(), description="Cards in hand")
    deck: tuple[Card, ...] = Field(default=(), description="Draw pile, top is last")
    discard_pile: tuple[Card, ...] = Field(default=(), description="Discarded cards")
    resources: dict[str, int] = Field(default_factory=dict, description="Resource amounts")

    @model_validator(mode="after")
    def validate_player(self) -> Self:
        """Check the health bound and zone disjointness.

        Returns:
            Self if validation passes.

        Raises:
            ValueError: If health exceeds max health or a card sits in two zones.
        """
        problem = _player_problem(self)
        if problem:
            raise ValueError(problem)
        return self

    @property
    def is_defeated(self) -> bool:
        """Check whether the player has no health left."""
        return self.health == 0

    def resource(self, name: str) -> int:
        """Get a resource amount, defaulting to 0 when unset."""
        return self.resources.get(name, 0)

    def evolve(self, **changes: Any) -> PlayerState:
        """Return a shallow copy with some fields replaced.

        Unchanged fields are shared with this instance. Zone disjointness is
        only re-checked when a zone changes.

        Raises:
            StateValidationError: On an unknown field or a broken invariant.
        """
        _reject_unknown_fields(type(self), changes, player_id=self.id)
        updated = self.model_copy(update=changes)
        problem = _player_problem(updated, check_zones=not _ZONES.isdisjoint(changes))
        if problem:
            raise StateValidationError(problem, player_id=self.id)
        return updated


# =============================================================================
# Game State
# =============================================================================


class GameState(BaseModel):
    """Complete game state at a point in time.

    Attributes:
        players: Player id to player state, in seating order.
        current_player: Id of the player whose turn it is.
        turn: Turn counter, never decreasing.
        phase: Current turn phase.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    players: dict[str, PlayerState] = Field(
        default_factory=dict,
        description="Player states keyed by player id",
    )
    current_player: str = Field(default="", description="Active player id")
    turn: Annotated[int, Field(ge=0)] = Field(default=0, description="Turn counter")
    phase: GamePhase = Field(default=GamePhase.DRAW, description="Current phase")

    @model_validator(mode="after")
    def validate_players(self) -> Self:
        """Check that player keys match ids and the current player exists.

        Returns:
            Self if validation passes.

        Raises:
            ValueError: On a key/id mismatch or an unknown current player.
        """
        problem = _game_problem(self)
        if problem:
            raise ValueError(problem)
        return self

    @property
    def player_ids(self) -> list[str]:
        """Player ids in mapping order."""
        return list(self.players)

    def get_player(self, player_id: str) -> PlayerState | None:
        """Get a player by id."""
        return self.players.get(player_id)

    def with_player(self, player: PlayerState) -> GameState:
        """Return a new state with one player replaced.

        The players mapping is rebuilt; every other player state object is
        reused as-is.

        Raises:
            StateValidationError: If the player is not seated.
        """
        return self.with_players([player])

    def with_players(self, players: list[PlayerState]) -> GameState:
        """Return a new state with several seated players replaced at once."""
        updated = dict(self.players)
        for player in players:
            if player.id not in updated:
                raise StateValidationError(f"Unknown player {player.id!r}", player_id=player.id)
            updated[player.id] = player
        return self.evolve(players=updated)

    def evolve(self, **changes: Any) -> GameState:
        """Return a shallow copy with some fields replaced.

        Raises:
            StateValidationError: On an unknown field or a broken invariant.
        """
        _reject_unknown_fields(type(self), changes)
        updated = self.model_copy(update=changes)
        problem = _game_problem(updated, check_players="players" in changes)
        if problem:
            raise StateValidationError(problem)
        return updated

    @classmethod
    def top_level_fields(cls) -> tuple[str, ...]:
        """Names of the fields considered by a shallow merge."""
        return tuple(cls.model_fields)


__all__ = [
    "GamePhase",
    "Card",
    "PlayerState",
    "GameState",
]
