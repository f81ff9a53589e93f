"""
Tests for win determination.
"""

from collections import deque

import pytest

from ..engine_core.environment import Environment
from ..engine_core.errors import GameOverError
from ..engine_core.grid import EMPTY, FieldShape, FieldSquare
from ..engine_core.outcome import Outcome, determine_outcome, is_draw, is_lose, is_win, winner
from ..engine_core.state import GameState, PlayerState


class TestTwoPlayers:
    """Tests for the two-player comparison."""

    def test_not_defined_before_end(self, env, make_state):
        state = make_state("yb", [[1], [2]], turn=env.max_turn)
        with pytest.raises(GameOverError):
            determine_outcome(env, state, 0)
        assert not is_win(env, state, 0)
        assert not is_draw(env, state)

    def test_more_squares_wins(self, env, make_state):
        state = make_state("yY\nb.", [[1], [2]], turn=env.max_turn + 1)

        assert determine_outcome(env, state, 0) is Outcome.WIN
        assert determine_outcome(env, state, 1) is Outcome.LOSE
        assert is_win(env, state, 0)
        assert is_lose(env, state, 1)
        assert winner(env, state) == 0

    def test_equal_squares_draw(self, env, make_state):
        state = make_state("yB\n#.", [[1], [2]], turn=env.max_turn + 1)

        assert is_draw(env, state, 0)
        assert is_draw(env, state, 1)
        assert winner(env, state) is None

    def test_blocks_count_for_nobody(self, env, make_state):
        state = make_state("###\nyb.", [[1], [2]], turn=env.max_turn + 1)
        assert winner(env, state) is None

    @pytest.mark.parametrize("field", ["yy\nb.", "yb\n..", "bb\nBy", "#.\n.."])
    def test_exactly_one_outcome(self, env, make_state, field):
        """Win, lose and draw are mutually exclusive and exhaustive."""
        state = make_state(field, [[1], [2]], turn=env.max_turn + 1)
        for player_id in (0, 1):
            flags = [
                is_win(env, state, player_id),
                is_lose(env, state, player_id),
                is_draw(env, state, player_id),
            ]
            assert flags.count(True) == 1


class TestManyPlayers:
    """Tests for more than two players."""

    @pytest.fixture
    def env3(self):
        return Environment(player_size=3, deck_size=6, hand_size=3, max_turn=4)

    def make_state(self, owners):
        row = [FieldSquare.colored(owner) if owner is not None else EMPTY for owner in owners]
        return GameState(
            turn=5,
            field=FieldShape(squares=[row]),
            players=[PlayerState(player_id=pid, deck=deque()) for pid in range(3)],
        )

    def test_unique_best_wins(self, env3):
        state = self.make_state([0, 0, 1, 2, None])
        assert determine_outcome(env3, state, 0) is Outcome.WIN
        assert determine_outcome(env3, state, 1) is Outcome.LOSE
        assert determine_outcome(env3, state, 2) is Outcome.LOSE
        assert winner(env3, state) == 0

    def test_shared_best_is_draw(self, env3):
        state = self.make_state([0, 1, 2, 2, 1])
        assert determine_outcome(env3, state, 1) is Outcome.DRAW
        assert determine_outcome(env3, state, 2) is Outcome.DRAW
        assert determine_outcome(env3, state, 0) is Outcome.LOSE
        assert winner(env3, state) is None
