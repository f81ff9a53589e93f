"""
Match Runner - The judge loop for one game between policies.

The loop:
1. Every policy picks a deck; the runner shuffles it
2. GameState.create deals the opening hands
3. Every policy may mulligan once (fresh shuffle of its deck)
4. Each turn every policy sees its transcript and picks a legal action
5. The TurnResolver applies the batch
6. Repeat until max_turn has been resolved

An invalid batch ends the match: the resolver leaves the state untouched
and every offending player forfeits. An agent that fails to answer a turn
(timeout, exit, undecodable line) forfeits the same way.
"""

from __future__ import annotations
import logging
import random
from dataclasses import dataclass, field
from typing import Sequence

from ..catalog.loader import CardRecord
from ..engine_core.action import Action, MulliganAction
from ..engine_core.action_generator import ActionGenerator
from ..engine_core.card import CardCatalog
from ..engine_core.environment import Environment
from ..engine_core.errors import ConfigurationError, InvalidActionError
from ..engine_core.grid import PLAYER_GLYPHS, FieldShape
from ..engine_core.outcome import winner
from ..engine_core.reducer import TurnResolver
from ..engine_core.state import GameState
from ..engine_core.transcript import TurnTranscript
from ..bots.policy import BotPolicy
from .process_agent import AgentError
from .record import EnvironmentRecord, MatchRecord

logger = logging.getLogger(__name__)


@dataclass
class MatchResult:
    """
    Result of a finished match.

    `winner` is None for a draw. `forfeited_by` lists the players whose
    invalid action ended the match early.
    """
    winner: int | None
    scores: list[int]
    turns_played: int
    forfeited_by: list[int] = field(default_factory=list)
    record: MatchRecord | None = None
    final_state: GameState | None = None

    @property
    def forfeited(self) -> bool:
        return bool(self.forfeited_by)


class MatchRunner:
    """
    Plays one game between policies.

    Usage:
        runner = MatchRunner(env, catalog, field, [RandomPolicy(1), GreedyPolicy()], seed=7)
        result = runner.run()
    """

    def __init__(
        self,
        env: Environment,
        catalog: CardCatalog,
        field: FieldShape,
        policies: Sequence[BotPolicy],
        seed: int | None = None,
        names: Sequence[str] | None = None,
    ):
        if len(policies) != env.player_size:
            raise ConfigurationError(
                f"Expected {env.player_size} policies, got {len(policies)}"
            )
        if env.player_size > len(PLAYER_GLYPHS):
            raise ConfigurationError(
                f"Transcripts can show at most {len(PLAYER_GLYPHS)} players, got {env.player_size}"
            )
        self.env = env
        self.catalog = catalog
        self.field = field
        self.policies = list(policies)
        self.fixed_names = list(names) if names else None
        self.names = self.fixed_names or [p.get_name() for p in self.policies]
        self.rng = random.Random(seed)
        self.generator = ActionGenerator(catalog=catalog)
        self.resolver = TurnResolver(env=env, catalog=catalog)

        self.state: GameState | None = None
        self.record: MatchRecord | None = None

    def setup(self) -> GameState:
        """Build decks, deal, and apply mulligans."""
        for policy in self.policies:
            policy.begin_game(self.env, self.field, self.catalog)
        if self.fixed_names is None:
            self.names = [p.get_name() for p in self.policies]

        decks = []
        for policy in self.policies:
            deck = list(policy.choose_deck(self.catalog, self.env))
            self.rng.shuffle(deck)
            decks.append(deck)

        state = GameState.create(self.env, self.catalog, self.field, decks)

        mulligans = []
        for player_id, policy in enumerate(self.policies):
            player = state.players[player_id]
            choice = policy.select_mulligan(list(player.hand), self.catalog)
            if choice is MulliganAction.MULLIGAN:
                order = list(player.hand) + list(player.deck)
                self.rng.shuffle(order)
                state.mulligan(self.env, player_id, order)
                decks[player_id] = order
                logger.debug("player %d (%s) mulligans", player_id, self.names[player_id])
            mulligans.append(choice.encode())

        self.state = state
        self.record = MatchRecord(
            environment=EnvironmentRecord.from_environment(self.env),
            field_rows=self.field.to_rows(),
            cards=[CardRecord.from_card(card) for card in self.catalog.values()],
            player_names=self.names,
            decks=decks,
            mulligans=mulligans,
        )
        return state

    def collect_actions(self) -> list[Action]:
        """
        Ask every policy for its action on the current turn.

        Raises InvalidActionError naming every agent that failed to answer.
        """
        state = self.state
        actions = []
        failures = {}
        for player_id, policy in enumerate(self.policies):
            legal = self.generator.generate(state, player_id)
            transcript = TurnTranscript.build(self.generator, state, player_id, actions=legal)
            try:
                decision = policy.select_action(transcript, self.catalog, legal)
            except AgentError as e:
                failures[player_id] = str(e)
                continue
            logger.debug(
                "turn %d: player %d chose %s (%s, %d of %d legal actions evaluated)",
                state.turn, player_id, decision.action, decision.explanation or "no reason",
                decision.evaluated_actions, len(legal),
            )
            actions.append(decision.action)
        if failures:
            raise InvalidActionError(failures)
        return actions

    def play(self) -> MatchResult:
        """
        Play every remaining turn. Calls setup() first if needed.

        Every policy's end_game() runs when the match ends, however it ends.
        """
        try:
            return self._play()
        finally:
            self.close()

    run = play

    def close(self) -> None:
        for policy in self.policies:
            policy.end_game()

    def _play(self) -> MatchResult:
        if self.state is None:
            self.setup()
        state = self.state

        while not state.is_done(self.env):
            try:
                actions = self.collect_actions()
                self.resolver.resolve(state, actions)
            except InvalidActionError as e:
                return self._forfeit(e)
            self.record.turns.append([action.encode() for action in actions])

        result = MatchResult(
            winner=winner(self.env, state),
            scores=state.scores(),
            turns_played=len(self.record.turns),
            record=self.record,
            final_state=state,
        )
        self._log_result(result)
        return result

    def _forfeit(self, error: InvalidActionError) -> MatchResult:
        offenders = error.player_ids
        for player_id in offenders:
            logger.warning(
                "turn %d: player %d (%s) forfeits: %s",
                self.state.turn, player_id, self.names[player_id], error.reasons[player_id],
            )
        remaining = [pid for pid in range(self.env.player_size) if pid not in offenders]
        result = MatchResult(
            winner=remaining[0] if len(remaining) == 1 else None,
            scores=self.state.scores(),
            turns_played=len(self.record.turns),
            forfeited_by=offenders,
            record=self.record,
            final_state=self.state,
        )
        self._log_result(result)
        return result

    def _log_result(self, result: MatchResult) -> None:
        cells = ", ".join(
            f"{self.names[pid]}={score}" for pid, score in enumerate(result.scores)
        )
        logger.info("final cell counts: %s", cells)
        if result.winner is None:
            logger.info("match drawn after %d turns", result.turns_played)
        else:
            logger.info(
                "player %d (%s) wins after %d turns",
                result.winner, self.names[result.winner], result.turns_played,
            )


@dataclass
class SeriesResult:
    """Aggregate of several matches between the same policies."""
    wins: list[int]
    draws: int = 0
    forfeits: int = 0

    @property
    def games(self) -> int:
        return sum(self.wins) + self.draws


def run_series(
    env: Environment,
    catalog: CardCatalog,
    field: FieldShape,
    policies: Sequence[BotPolicy],
    games: int,
    seed: int | None = None,
) -> SeriesResult:
    """
    Play `games` matches. Each match gets its own seed derived from `seed`
    so a series is reproducible.
    """
    seeds = random.Random(seed)
    series = SeriesResult(wins=[0] * env.player_size)
    for game in range(games):
        runner = MatchRunner(env, catalog, field, policies, seed=seeds.randrange(2**32))
        result = runner.play()
        if result.forfeited:
            series.forfeits += 1
        if result.winner is None:
            series.draws += 1
        else:
            series.wins[result.winner] += 1
        logger.debug("game %d: winner=%s scores=%s", game + 1, result.winner, result.scores)
    return series
