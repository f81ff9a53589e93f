"""
Action System - Moves submitted by players, and their text encoding.

Every turn each player submits exactly one action:
1. PASS        discard a card and gain one special point
2. PUT         place a card on empty squares next to your own squares
3. SPECIAL_PUT spend special points to place a card over colored squares

Text encoding (shared with external agents):

    PASS <card_id>
    PUT <card_id> <U|D|R|L> <y> <x>
    SPECIAL_PUT <card_id> <U|D|R|L> <y> <x>
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum

from .decoding import DecodeResult


class Direction(Enum):
    """Card orientation. Values are the text glyphs."""
    UP = "U"
    RIGHT = "R"
    DOWN = "D"
    LEFT = "L"

    @property
    def quarter_turns(self) -> int:
        """Clockwise quarter turns applied to the printed shape."""
        return _QUARTER_TURNS[self]


_QUARTER_TURNS = {
    Direction.UP: 0,
    Direction.RIGHT: 1,
    Direction.DOWN: 2,
    Direction.LEFT: 3,
}

# Enumeration order used by the action generator.
DIRECTIONS: tuple[Direction, ...] = (Direction.UP, Direction.RIGHT, Direction.DOWN, Direction.LEFT)


class ActionType(Enum):
    """Types of actions. Values are the text keywords."""
    PASS = "PASS"
    PUT = "PUT"
    SPECIAL_PUT = "SPECIAL_PUT"


@dataclass(frozen=True)
class Action:
    """
    A move for one turn.

    PASS carries only a card id. PUT and SPECIAL_PUT also carry the
    direction and the field coordinate the shape's reference point is
    placed on.
    """
    action_type: ActionType
    card_id: int
    direction: Direction | None = None
    y: int | None = None
    x: int | None = None

    def __post_init__(self):
        placement = (self.direction, self.y, self.x)
        if self.action_type is ActionType.PASS:
            if any(value is not None for value in placement):
                raise ValueError("PASS takes no direction or position")
        elif any(value is None for value in placement):
            raise ValueError(f"{self.action_type.value} needs a direction and a position")

    @classmethod
    def pass_turn(cls, card_id: int) -> Action:
        """Factory for pass action."""
        return cls(action_type=ActionType.PASS, card_id=card_id)

    @classmethod
    def put(cls, card_id: int, direction: Direction, y: int, x: int) -> Action:
        """Factory for put action."""
        return cls(action_type=ActionType.PUT, card_id=card_id, direction=direction, y=y, x=x)

    @classmethod
    def special_put(cls, card_id: int, direction: Direction, y: int, x: int) -> Action:
        """Factory for special put action."""
        return cls(
            action_type=ActionType.SPECIAL_PUT,
            card_id=card_id,
            direction=direction,
            y=y,
            x=x,
        )

    @property
    def is_placement(self) -> bool:
        return self.action_type is not ActionType.PASS

    def encode(self) -> str:
        if self.action_type is ActionType.PASS:
            return f"PASS {self.card_id}"
        return f"{self.action_type.value} {self.card_id} {self.direction.value} {self.y} {self.x}"

    def __str__(self) -> str:
        return self.encode()

    @classmethod
    def decode(cls, text: str) -> DecodeResult:
        """Decode one action line into a DecodeResult."""
        tokens = text.split()
        if not tokens:
            return DecodeResult.failure("empty action")

        try:
            action_type = ActionType(tokens[0])
        except ValueError:
            return DecodeResult.failure(f"unknown action keyword {tokens[0]!r}")

        expected = 2 if action_type is ActionType.PASS else 5
        if len(tokens) != expected:
            return DecodeResult.failure(
                f"{action_type.value} takes {expected - 1} argument(s), got {len(tokens) - 1}"
            )

        card_id = _parse_index(tokens[1])
        if card_id is None:
            return DecodeResult.failure(f"invalid card id {tokens[1]!r}")
        if action_type is ActionType.PASS:
            return DecodeResult.ok(cls.pass_turn(card_id))

        try:
            direction = Direction(tokens[2])
        except ValueError:
            return DecodeResult.failure(f"invalid direction {tokens[2]!r}")
        y = _parse_index(tokens[3])
        x = _parse_index(tokens[4])
        if y is None or x is None:
            return DecodeResult.failure(f"invalid position {tokens[3]!r} {tokens[4]!r}")
        return DecodeResult.ok(
            cls(action_type=action_type, card_id=card_id, direction=direction, y=y, x=x)
        )

    @classmethod
    def parse(cls, text: str) -> Action:
        """Decode, raising DecodeError on malformed input."""
        return cls.decode(text).unwrap()


class MulliganAction(Enum):
    """Answer to the opening hand. Values are the text keywords."""
    KEEP = "PASS"
    MULLIGAN = "MULLIGAN"

    def encode(self) -> str:
        return self.value

    @classmethod
    def decode(cls, text: str) -> DecodeResult:
        try:
            return DecodeResult.ok(cls(text.strip()))
        except ValueError:
            return DecodeResult.failure(f"unknown mulligan answer {text.strip()!r}")


def _parse_index(token: str) -> int | None:
    """Non-negative decimal integer, or None."""
    if not (token.isascii() and token.isdigit()):
        return None
    return int(token)
