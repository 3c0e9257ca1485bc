"""Pytest configuration and shared fixtures.

This module provides common fixtures for the card engine test suite:
players, game states, execution contexts and capability registries.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable

import pytest


if TYPE_CHECKING:
    from collections.abc import Generator

    from card_engine.effects.context import GameContext
    from card_engine.models.state import Card, GameState


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Reset the settings cache before and after each test."""
    from card_engine.core.config import clear_settings_cache

    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def mock_env_vars(monkeypatch: pytest.MonkeyPatch) -> dict[str, str]:
    """Set up mock environment variables for testing.

    Returns:
        Dictionary of environment variables that were set.
    """
    env_vars = {
        "CARD_ENGINE_DEBUG": "true",
        "CARD_ENGINE_LOG_LEVEL": "DEBUG",
        "CARD_ENGINE_RANDOM_SEED": "1234",
        "CARD_ENGINE_STORAGE_NAMESPACE": "test",
    }
    for key, value in env_vars.items():
        monkeypatch.setenv(key, value)
    return env_vars


# =============================================================================
# Model Fixtures
# =============================================================================


@pytest.fixture
def make_card() -> Callable[..., Card]:
    """Factory for plain cards with no effects."""
    from card_engine.models.state import Card

    def _make(card_id: str, **kwargs: Any) -> Card:
        return Card(id=card_id, name=kwargs.pop("name", card_id.title()), **kwargs)

    return _make


@pytest.fixture
def two_player_state() -> GameState:
    """Players A and B at full health, A to act.

    Returns:
        GameState instance.
    """
    from card_engine.models.state import GamePhase, GameState, PlayerState

    return GameState(
        players={
            "A": PlayerState(id="A", health=100, max_health=100, resources={"mana": 3}),
            "B": PlayerState(id="B", health=100, max_health=100),
        },
        current_player="A",
        turn=1,
        phase=GamePhase.MAIN,
    )


@pytest.fixture
def solo_state() -> GameState:
    """A single player with no opponent.

    Returns:
        GameState instance.
    """
    from card_engine.models.state import GameState, PlayerState

    return GameState(
        players={"A": PlayerState(id="A", health=40, max_health=50)},
        current_player="A",
    )


# =============================================================================
# Context Fixtures
# =============================================================================


@pytest.fixture
def make_context() -> Callable[..., GameContext]:
    """Factory for contexts with a fixed random source and a captured log.

    The returned context's ``log`` appends to the ``log_lines`` attribute of
    the factory.
    """
    from card_engine.effects.context import GameContext

    log_lines: list[str] = []

    def _make(state: GameState, player_id: str = "A") -> GameContext:
        return GameContext(
            player_id=player_id,
            game_state=state,
            random=lambda: 0.5,
            log=log_lines.append,
        )

    _make.log_lines = log_lines  # type: ignore[attr-defined]
    return _make


@pytest.fixture
def context(two_player_state: GameState, make_context: Callable[..., GameContext]) -> GameContext:
    """Context for player A over the two-player state."""
    return make_context(two_player_state)


# =============================================================================
# Capability Fixtures
# =============================================================================


@pytest.fixture
def settings() -> Any:
    """Settings with a fixed seed and a storage namespace."""
    from card_engine.core.config import RandomSettings, Settings, StorageSettings

    return Settings(
        random=RandomSettings(seed=42),
        storage=StorageSettings(namespace="test"),
    )


@pytest.fixture
def registry(settings: Any) -> Any:
    """Default capability registry built from the test settings."""
    from card_engine.capabilities.defaults import create_default_registry

    return create_default_registry(settings)
