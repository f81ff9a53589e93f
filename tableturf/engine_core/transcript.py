"""
Text protocol shared with external agents.

Initial input (once per game):

    {player_size} {deck_size} {hand_size} {max_turn} {duplicate_pick 0|1}
    {field_height} {field_width}
    <field rows>
    {n_cards}
    {card_id} {cost} {height} {width}     (per card)
    <card rows>

Turn transcript (per player, per turn):

    {turn}
    {special point of each player}
    <current field rows>
    {hand card ids}
    {n_actions}
    <one encoded action per line>

Parsers take an iterator of lines and return DecodeResult.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Iterable, Iterator

from .action import Action
from .action_generator import ActionGenerator
from .card import CardDefinition
from .decoding import DecodeResult
from .environment import Environment
from .errors import ConfigurationError, EmptyShapeError
from .grid import CardShape, FieldShape
from .state import GameState


@dataclass
class InitialInput:
    """Everything an agent learns before choosing its deck."""
    env: Environment
    field: FieldShape
    cards: list[CardDefinition] = field(default_factory=list)


@dataclass
class TurnTranscript:
    """What one player sees at the start of a turn."""
    turn: int
    special_points: list[int]
    field_rows: list[str]
    hand: list[int]
    legal_actions: list[str] = field(default_factory=list)

    @classmethod
    def build(
        cls,
        generator: ActionGenerator,
        state: GameState,
        player_id: int,
        actions: list[Action] | None = None,
    ) -> TurnTranscript:
        """Transcript for a player; `actions` skips regenerating the legal list."""
        player = state.get_player(player_id)
        if actions is None:
            actions = generator.generate(state, player_id)
        return cls(
            turn=state.turn,
            special_points=state.special_points,
            field_rows=state.field.to_rows(),
            hand=list(player.hand),
            legal_actions=[a.encode() for a in actions],
        )

    def actions(self) -> list[Action]:
        return [Action.parse(text) for text in self.legal_actions]

    def to_text(self) -> str:
        lines = [
            str(self.turn),
            _join(self.special_points),
            *self.field_rows,
            _join(self.hand),
            str(len(self.legal_actions)),
            *self.legal_actions,
        ]
        return "\n".join(lines) + "\n"


def initial_input_text(env: Environment, field_shape: FieldShape, cards: Iterable[CardDefinition]) -> str:
    cards = list(cards)
    lines = [
        env.header_line(),
        f"{field_shape.height} {field_shape.width}",
        *field_shape.to_rows(),
        str(len(cards)),
    ]
    for card in cards:
        lines.append(f"{card.id} {card.cost} {card.shape.height} {card.shape.width}")
        lines.extend(card.shape.to_rows())
    return "\n".join(lines) + "\n"


def hand_text(hand: Iterable[int]) -> str:
    return _join(hand) + "\n"


def parse_initial_input(lines: Iterator[str]) -> DecodeResult:
    header = _read_ints(lines, 5)
    if header is None:
        return DecodeResult.failure("expected 5 integers in the environment line")
    player_size, deck_size, hand_size, max_turn, duplicate_pick = header
    if duplicate_pick not in (0, 1):
        return DecodeResult.failure(f"duplicate pick flag must be 0 or 1, got {duplicate_pick}")
    try:
        env = Environment(
            player_size=player_size,
            deck_size=deck_size,
            hand_size=hand_size,
            max_turn=max_turn,
            duplicate_pick=duplicate_pick == 1,
        )
    except ConfigurationError as e:
        return DecodeResult.failure(str(e))

    size = _read_ints(lines, 2)
    if size is None:
        return DecodeResult.failure("expected field height and width")
    field_result = _read_grid(lines, FieldShape, size[0])
    if not field_result.success:
        return field_result
    if field_result.value.width != size[1]:
        return DecodeResult.failure(
            f"field declared {size[1]} columns, rows have {field_result.value.width}"
        )

    count = _read_ints(lines, 1)
    if count is None:
        return DecodeResult.failure("expected the number of cards")
    cards = []
    for _ in range(count[0]):
        card_header = _read_ints(lines, 4)
        if card_header is None:
            return DecodeResult.failure("expected card id, cost, height and width")
        card_id, cost, height, width = card_header
        shape_result = _read_grid(lines, CardShape, height)
        if not shape_result.success:
            return shape_result
        if shape_result.value.width != width:
            return DecodeResult.failure(
                f"card {card_id}: declared {width} columns, rows have {shape_result.value.width}"
            )
        try:
            cards.append(CardDefinition(id=card_id, name="", cost=cost, shape=shape_result.value))
        except EmptyShapeError as e:
            return DecodeResult.failure(f"card {card_id}: {e}")

    return DecodeResult.ok(InitialInput(env=env, field=field_result.value, cards=cards))


def parse_hand(lines: Iterator[str]) -> DecodeResult:
    hand = _read_ints(lines)
    if hand is None:
        return DecodeResult.failure("expected card ids")
    return DecodeResult.ok(hand)


def parse_turn_transcript(lines: Iterator[str], field_height: int) -> DecodeResult:
    turn = _read_ints(lines, 1)
    if turn is None:
        return DecodeResult.failure("expected the turn number")
    special_points = _read_ints(lines)
    if special_points is None:
        return DecodeResult.failure("expected special points")
    field_result = _read_grid(lines, FieldShape, field_height)
    if not field_result.success:
        return field_result
    hand = _read_ints(lines)
    if hand is None:
        return DecodeResult.failure("expected hand card ids")
    count = _read_ints(lines, 1)
    if count is None:
        return DecodeResult.failure("expected the number of legal actions")
    legal = []
    for _ in range(count[0]):
        line = next(lines, None)
        if line is None:
            return DecodeResult.failure("input ended inside the legal action list")
        legal.append(" ".join(line.split()))
    return DecodeResult.ok(TurnTranscript(
        turn=turn[0],
        special_points=special_points,
        field_rows=field_result.value.to_rows(),
        hand=hand,
        legal_actions=legal,
    ))


def _join(values: Iterable[int]) -> str:
    return " ".join(str(v) for v in values)


def _read_ints(lines: Iterator[str], count: int | None = None) -> list[int] | None:
    line = next(lines, None)
    if line is None:
        return None
    tokens = line.split()
    if count is not None and len(tokens) != count:
        return None
    if not all(token.isascii() and token.isdigit() for token in tokens):
        return None
    return [int(token) for token in tokens]


def _read_grid(lines: Iterator[str], grid_type, height: int) -> DecodeResult:
    rows = []
    for _ in range(height):
        line = next(lines, None)
        if line is None:
            return DecodeResult.failure("input ended inside a grid")
        rows.append("".join(line.split()))
    return grid_type.parse("\n".join(rows))
