"""
Pytest fixtures for Tableturf tests.
"""

from collections import deque

import pytest

from ..engine_core.card import CardCatalog, CardDefinition, build_catalog
from ..engine_core.environment import Environment
from ..engine_core.grid import FieldShape
from ..engine_core.state import GameState, PlayerState


@pytest.fixture
def env() -> Environment:
    """Small game: 6-card decks, 3 cards in hand, 4 turns."""
    return Environment(player_size=2, deck_size=6, hand_size=3, max_turn=4)


@pytest.fixture
def catalog() -> CardCatalog:
    """
    Tiny catalog with hand-checkable shapes.

    Powers: 1->1, 2->1, 3->2, 4->2, 5->3, 6->4, 7->3, 8->1
    """
    return build_catalog([
        CardDefinition.from_text(1, "Dot", 1, "y"),
        CardDefinition.from_text(2, "Other Dot", 1, "y"),
        CardDefinition.from_text(3, "Bar", 2, "yy"),
        CardDefinition.from_text(4, "Spark Bar", 2, "yY"),
        CardDefinition.from_text(5, "Ell", 3, "y.\nyy"),
        CardDefinition.from_text(6, "Block", 3, "yy\nyY"),
        CardDefinition.from_text(7, "Long Bar", 3, "yyy"),
        CardDefinition.from_text(8, "Spark", 0, "Y"),
    ])


@pytest.fixture
def small_field() -> FieldShape:
    """6x5 field with one special square per player."""
    return FieldShape.from_text(
        ".....\n"
        "..B..\n"
        ".....\n"
        ".....\n"
        "..Y..\n"
        "....."
    )


@pytest.fixture
def make_state():
    """
    Factory for hand-built states.

    make_state(field_text, hands, special_points=None, decks=None, turn=1)
    Decks default to three cards each so a turn can draw.
    """
    def _make(field_text, hands, special_points=None, decks=None, turn=1):
        field = FieldShape.from_text(field_text)
        players = []
        for player_id, hand in enumerate(hands):
            players.append(PlayerState(
                player_id=player_id,
                special_point=special_points[player_id] if special_points else 0,
                hand=list(hand),
                deck=deque(decks[player_id] if decks else [5, 6, 7]),
            ))
        return GameState(turn=turn, field=field, players=players)

    return _make
