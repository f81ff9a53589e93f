"""
Win determination for finished games.

A player's score is the number of colored and special squares they own.
With two players the higher score wins; in general a player wins when
their score beats every other score, loses when any other score beats
theirs, and draws otherwise.
"""

from __future__ import annotations
from enum import Enum

from .environment import Environment
from .errors import GameOverError
from .state import GameState


class Outcome(Enum):
    WIN = "win"
    LOSE = "lose"
    DRAW = "draw"


def determine_outcome(env: Environment, state: GameState, player_id: int) -> Outcome:
    """Outcome for one player. Only defined once the game is over."""
    if not state.is_done(env):
        raise GameOverError(f"Game is not over (turn {state.turn} of {env.max_turn})")
    scores = state.scores()
    own = scores[player_id]
    best_other = max(s for pid, s in enumerate(scores) if pid != player_id)
    if own > best_other:
        return Outcome.WIN
    if own < best_other:
        return Outcome.LOSE
    return Outcome.DRAW


def is_win(env: Environment, state: GameState, player_id: int) -> bool:
    return state.is_done(env) and determine_outcome(env, state, player_id) is Outcome.WIN


def is_lose(env: Environment, state: GameState, player_id: int) -> bool:
    return state.is_done(env) and determine_outcome(env, state, player_id) is Outcome.LOSE


def is_draw(env: Environment, state: GameState, player_id: int = 0) -> bool:
    return state.is_done(env) and determine_outcome(env, state, player_id) is Outcome.DRAW


def winner(env: Environment, state: GameState) -> int | None:
    """The winning player id, or None for a draw."""
    for player in state.players:
        if determine_outcome(env, state, player.player_id) is Outcome.WIN:
            return player.player_id
    return None
