"""
Match Records - Everything needed to replay a game.

A record stores the setup (environment, field, cards, dealt decks) and
the encoded actions of every player for every resolved turn. Replaying
rebuilds the initial state and resolves the turns again, which yields a
snapshot after every turn for renderers.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from ..catalog.loader import CardRecord
from ..engine_core.action import Action
from ..engine_core.card import CardCatalog, build_catalog
from ..engine_core.decoding import DecodeError
from ..engine_core.environment import Environment
from ..engine_core.errors import ConfigurationError
from ..engine_core.grid import FieldShape
from ..engine_core.outcome import winner
from ..engine_core.reducer import TurnResolver
from ..engine_core.state import GameState

MAX_PLAYERS = 8
MAX_DECK_SIZE = 60
MAX_HAND_SIZE = 10
MAX_TURNS = 60


class EnvironmentRecord(BaseModel):
    """
    Stored game parameters.

    The upper bounds keep a single request or record from asking the
    engine for an arbitrarily long game.
    """
    player_size: int = Field(2, ge=2, le=MAX_PLAYERS)
    deck_size: int = Field(15, ge=1, le=MAX_DECK_SIZE)
    hand_size: int = Field(4, ge=1, le=MAX_HAND_SIZE)
    max_turn: int = Field(12, ge=1, le=MAX_TURNS)
    duplicate_pick: bool = False

    model_config = {"from_attributes": True}

    def to_environment(self) -> Environment:
        return Environment(**self.model_dump())

    @classmethod
    def from_environment(cls, env: Environment) -> EnvironmentRecord:
        return cls.model_validate(env)


class MatchRecord(BaseModel):
    """
    A complete game log.

    `decks` are the orders the hands were dealt from (after any
    mulligan), so GameState.create(decks) reproduces the opening.
    """
    environment: EnvironmentRecord = Field(default_factory=EnvironmentRecord)
    field_rows: list[str]
    cards: list[CardRecord]
    player_names: list[str] = Field(default_factory=list)
    decks: list[list[int]]
    mulligans: list[str] = Field(default_factory=list, description="PASS or MULLIGAN per player")
    turns: list[list[str]] = Field(default_factory=list, description="Encoded actions per turn")

    def build_catalog(self) -> CardCatalog:
        return build_catalog(record.to_card() for record in self.cards)

    def build_field(self) -> FieldShape:
        try:
            return FieldShape.from_text("\n".join(self.field_rows))
        except DecodeError as e:
            raise ConfigurationError(f"Invalid field in record: {e}") from e


@dataclass
class ReplayResult:
    """Snapshots of a replayed game; snapshots[0] is the opening."""
    snapshots: list[GameState] = field(default_factory=list)
    finished: bool = False
    winner: int | None = None
    scores: list[int] = field(default_factory=list)

    @property
    def final_state(self) -> GameState:
        return self.snapshots[-1]


def replay(record: MatchRecord) -> ReplayResult:
    """
    Re-resolve every recorded turn.

    Raises ConfigurationError for a broken setup or undecodable action,
    and InvalidActionError if a recorded action is not legal.
    """
    env = record.environment.to_environment()
    catalog = record.build_catalog()
    state = GameState.create(env, catalog, record.build_field(), record.decks)
    resolver = TurnResolver(env=env, catalog=catalog)

    result = ReplayResult(snapshots=[state.clone()])
    for index, encoded in enumerate(record.turns, start=1):
        actions = []
        for player_id, text in enumerate(encoded):
            decoded = Action.decode(text)
            if not decoded.success:
                raise ConfigurationError(
                    f"Turn {index}, player {player_id}: cannot decode {text!r}: {decoded.error}"
                )
            actions.append(decoded.value)
        resolver.resolve(state, actions)
        result.snapshots.append(state.clone())

    result.finished = state.is_done(env)
    result.scores = state.scores()
    if result.finished:
        result.winner = winner(env, state)
    return result


def load_record(path: str | Path) -> MatchRecord:
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(f"Cannot read match record {path}: {e}") from e
    try:
        return MatchRecord.model_validate_json(text)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid match record {path}: {e}") from e


def save_record(record: MatchRecord, path: str | Path) -> None:
    Path(path).write_text(record.model_dump_json(indent=2), encoding="utf-8")
