"""
Tests for the turn resolver (state transitions).

Tests:
- Painting, passing, special point bookkeeping
- Same-turn collisions and resolution order
- Special square activation
- Discard, draw, turn advance
- Rejected batches
"""

import pytest

from ..engine_core.action import Action, Direction
from ..engine_core.errors import GameOverError, InvalidActionError
from ..engine_core.grid import BLOCK, FieldSquare
from ..engine_core.reducer import TurnResolver, apply_turn, resolve_turn

U = Direction.UP


@pytest.fixture
def resolver(env, catalog):
    return TurnResolver(env=env, catalog=catalog)


class TestBasicTurn:
    """Tests for a turn without conflicts."""

    def test_put_and_pass(self, resolver, make_state):
        """A placement paints, a pass earns a point, hands cycle."""
        state = make_state("Y..\n...\n..B", [[3, 1], [1, 2]])

        report = resolver.resolve(state, [Action.put(3, U, 0, 1), Action.pass_turn(1)])

        assert state.field.to_rows() == ["Yyy", "...", "..B"]
        assert state.special_points == [0, 1]
        assert state.turn == 2
        assert state.players[0].hand == [1, 5]
        assert state.players[1].hand == [2, 5]
        assert list(state.players[0].deck) == [6, 7]
        assert report.painted == [(0, 1), (0, 2)]
        assert report.special_point_gains == {1: 1}

    def test_both_pass(self, resolver, make_state):
        state = make_state("Y.B", [[1], [2]], special_points=[2, 3])
        resolver.resolve(state, [Action.pass_turn(1), Action.pass_turn(2)])
        assert state.special_points == [3, 4]
        assert state.field.to_rows() == ["Y.B"]

    def test_discard_first_occurrence(self, resolver, make_state):
        state = make_state("Y.B", [[1, 3, 1], [2]])
        resolver.resolve(state, [Action.pass_turn(1), Action.pass_turn(2)])
        assert state.players[0].hand == [3, 1, 5]

    def test_no_draw_after_last_turn(self, env, resolver, make_state):
        state = make_state("Y.B", [[1, 3, 4], [2, 3, 4]], turn=env.max_turn)
        resolver.resolve(state, [Action.pass_turn(1), Action.pass_turn(2)])

        assert state.is_done(env)
        assert state.players[0].hand == [3, 4]
        assert list(state.players[0].deck) == [5, 6, 7]

    def test_special_put_pays_cost(self, resolver, make_state):
        """SPECIAL_PUT over an opponent's colored square."""
        state = make_state("Yb.\n...\n..B", [[1], [2]], special_points=[1, 0])

        report = resolver.resolve(state, [Action.special_put(1, U, 0, 1), Action.pass_turn(2)])

        assert state.field.at(0, 1) == FieldSquare.colored(0)
        assert state.special_points == [0, 1]
        assert report.order == [0, 1]
        assert report.special_point_gains == {0: -1, 1: 1}


class TestResolutionOrder:
    """Tests for the power ordering and its tie-break."""

    def test_higher_power_first(self, resolver, make_state):
        state = make_state("Y...\n....\n...B", [[1], [3]])
        report = resolver.resolve(state, [Action.put(1, U, 1, 1), Action.put(3, U, 1, 2)])
        assert report.order == [1, 0]

    def test_pass_counts_as_zero_power(self, resolver, make_state):
        state = make_state("Y...\n....\n...B", [[1], [3]])
        report = resolver.resolve(state, [Action.pass_turn(1), Action.put(3, U, 1, 2)])
        assert report.order == [1, 0]

    def test_equal_power_later_submission_first(self, resolver, make_state):
        """Ties go to the higher submission index."""
        state = make_state("Y...\n....\n...B", [[1], [2]])
        report = resolver.resolve(state, [Action.put(1, U, 0, 1), Action.put(2, U, 1, 3)])
        assert report.order == [1, 0]


class TestCollisions:
    """Tests for squares painted twice in one turn."""

    def test_equal_power_makes_block(self, resolver, make_state):
        state = make_state("Y..\n...\n..B", [[1], [2]])

        report = resolver.resolve(state, [Action.put(1, U, 1, 1), Action.put(2, U, 1, 1)])

        assert state.field.at(1, 1) == BLOCK
        assert state.field.to_rows() == ["Y..", ".#.", "..B"]
        assert report.blocked == [(1, 1)]
        assert report.painted == []

    def test_higher_power_keeps_square(self, resolver, make_state):
        """Card 3 (power 2) beats card 2 (power 1) on the shared square."""
        state = make_state("Y..\n...\n..B", [[3], [2]])

        resolver.resolve(state, [Action.put(3, U, 1, 1), Action.put(2, U, 1, 1)])

        assert state.field.to_rows() == ["Y..", ".yy", "..B"]
        assert state.scores() == [3, 1]

    def test_higher_power_keeps_square_either_seat(self, resolver, make_state):
        state = make_state("Y..\n...\n..B", [[2], [3]])

        resolver.resolve(state, [Action.put(2, U, 1, 1), Action.put(3, U, 1, 0)])

        assert state.field.to_rows() == ["Y..", "bb.", "..B"]

    def test_special_beats_colored_painted_this_turn(self, resolver, make_state):
        """Player 1 paints first (tie), then player 0's special square wins."""
        state = make_state("Y..B\n....", [[4], [3]])

        resolver.resolve(state, [Action.put(4, U, 1, 1), Action.put(3, U, 1, 1)])

        assert state.field.to_rows() == ["Y..B", ".#Y."]
        assert state.field.at(1, 2) == FieldSquare.special(0)

    def test_colored_never_covers_special(self, resolver, make_state):
        """Player 1's special square, painted first, survives player 0's colored."""
        state = make_state("Y..B\n....", [[3], [4]])

        resolver.resolve(state, [Action.put(3, U, 1, 1), Action.put(4, U, 1, 1)])

        assert state.field.to_rows() == ["Y..B", ".#B."]

    def test_equal_power_specials_make_block(self, resolver, make_state):
        state = make_state("Y.B\n...", [[8], [8]])
        resolver.resolve(state, [Action.put(8, U, 0, 1), Action.put(8, U, 0, 1)])
        assert state.field.to_rows() == ["Y#B", "..."]


class TestActivation:
    """Tests for special square activation."""

    def test_enclosed_specials_activate(self, resolver, make_state):
        """
        Filling the last two empty squares encloses all three specials.

        Player 0 owns two of them and gains two points; player 1 gains one.
        """
        state = make_state("Y.B\nb.Y", [[1], [2]])

        report = resolver.resolve(state, [Action.put(1, U, 0, 1), Action.put(2, U, 1, 1)])

        assert state.field.to_rows() == ["YyB", "bbY"]
        assert state.special_points == [2, 1]
        assert report.special_point_gains == {0: 2, 1: 1}
        assert report.activated == [(0, 0), (0, 2), (1, 2)]
        assert state.field.at(0, 0).activated
        assert state.field.at(0, 2).activated
        assert state.field.at(1, 2).activated

    def test_activation_happens_once(self, resolver, make_state):
        state = make_state("Y.B\nb.Y", [[1, 3], [2, 3]])
        resolver.resolve(state, [Action.put(1, U, 0, 1), Action.put(2, U, 1, 1)])

        report = resolver.resolve(state, [Action.pass_turn(3), Action.pass_turn(3)])

        assert report.activated == []
        assert state.special_points == [3, 2]

    def test_field_edge_is_not_empty(self, resolver, make_state):
        """A corner special activates once its in-bounds neighbors are filled."""
        state = make_state("Y.\nB.", [[1], [2]])

        resolver.resolve(state, [Action.put(1, U, 0, 1), Action.pass_turn(2)])

        assert not state.field.at(0, 0).activated
        state2 = make_state("Y.\nBb", [[1], [2]])
        resolver.resolve(state2, [Action.put(1, U, 0, 1), Action.pass_turn(2)])
        assert state2.field.at(0, 0).activated
        assert state2.field.at(1, 0).activated
        assert state2.special_points == [1, 2]

    def test_special_painted_this_turn_activates(self, resolver, make_state):
        state = make_state("Y.", [[8], [2]])

        resolver.resolve(state, [Action.put(8, U, 0, 1), Action.pass_turn(2)])

        assert state.field.at(0, 1) == FieldSquare.special(0, activated=True)
        assert state.special_points == [2, 1]

    def test_specials_with_empty_neighbor_wait(self, resolver, make_state):
        state = make_state("Y..\n...", [[1], [2]])
        report = resolver.resolve(state, [Action.put(1, U, 0, 1), Action.pass_turn(2)])
        assert report.activated == []
        assert state.special_points == [0, 1]


class TestRejectedTurns:
    """Tests for invalid input."""

    def test_invalid_action_leaves_state_untouched(self, resolver, make_state):
        state = make_state("Y..\n...\n..B", [[1], [2]])
        before = state.clone()

        with pytest.raises(InvalidActionError) as exc_info:
            resolver.resolve(state, [Action.put(1, U, 2, 0), Action.pass_turn(2)])

        assert exc_info.value.player_ids == [0]
        assert 0 in exc_info.value.reasons
        assert state == before

    def test_every_offender_reported(self, resolver, make_state):
        state = make_state("Y..\n...\n..B", [[1], [2]])
        with pytest.raises(InvalidActionError) as exc_info:
            resolver.resolve(state, [Action.pass_turn(2), Action.pass_turn(1)])
        assert exc_info.value.player_ids == [0, 1]

    def test_wrong_number_of_actions(self, resolver, make_state):
        state = make_state("Y.B", [[1], [2]])
        with pytest.raises(ValueError):
            resolver.resolve(state, [Action.pass_turn(1)])

    def test_finished_game(self, env, resolver, make_state):
        state = make_state("Y.B", [[1], [2]], turn=env.max_turn + 1)
        with pytest.raises(GameOverError):
            resolver.resolve(state, [Action.pass_turn(1), Action.pass_turn(2)])


class TestConvenienceFunctions:
    def test_apply_turn_works_on_copy(self, env, catalog, make_state):
        state = make_state("Y..\n...\n..B", [[1], [2]])
        before = state.clone()

        report = apply_turn(env, catalog, state, [Action.put(1, U, 1, 1), Action.pass_turn(2)])

        assert state == before
        assert report.state.turn == 2
        assert report.state.field.at(1, 1) == FieldSquare.colored(0)

    def test_resolve_turn_in_place(self, env, catalog, make_state):
        state = make_state("Y..\n...\n..B", [[1], [2]])
        report = resolve_turn(env, catalog, state, [Action.put(1, U, 1, 1), Action.pass_turn(2)])
        assert report.state is state
        assert state.turn == 2
