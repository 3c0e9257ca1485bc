"""State models for the card engine.

All models are frozen pydantic models that share unchanged substructure
between successive states.
"""

from __future__ import annotations

from card_engine.models.state import Card, GamePhase, GameState, PlayerState


__all__ = [
    "Card",
    "GamePhase",
    "GameState",
    "PlayerState",
]
