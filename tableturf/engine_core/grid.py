"""
Shape Grid - Rectangular grids of squares for the field and for cards.

Both the field and card shapes are row-major matrices parsed from
newline-delimited character rows:

    Field:  y/Y  colored/special square of player 0
            b/B  colored/special square of player 1
            #    block
            .    empty
    Card:   y    colored
            Y    special
            .    empty

Square values are closed variant types (an enum for cards, a kind-tagged
frozen dataclass for the field) so they can be compared and hashed.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterator

from .decoding import DecodeResult
from .errors import EmptyShapeError


Coord = tuple[int, int]

NEIGHBOR_OFFSETS: tuple[Coord, ...] = (
    (-1, -1), (-1, 0), (-1, 1),
    (0, -1), (0, 1),
    (1, -1), (1, 0), (1, 1),
)

# Glyphs for (colored, special) squares, indexed by player id.
PLAYER_GLYPHS: tuple[tuple[str, str], ...] = (("y", "Y"), ("b", "B"))


class FieldSquareKind(Enum):
    """Variants of a field square."""
    COLORED = "colored"
    SPECIAL = "special"
    BLOCK = "block"
    EMPTY = "empty"


@dataclass(frozen=True)
class FieldSquare:
    """
    One square of the field.

    `owner` is set for COLORED and SPECIAL squares only. `activated` is
    only meaningful for SPECIAL squares and flips at most once.
    """
    kind: FieldSquareKind
    owner: int | None = None
    activated: bool = False

    @classmethod
    def colored(cls, owner: int) -> FieldSquare:
        return cls(kind=FieldSquareKind.COLORED, owner=owner)

    @classmethod
    def special(cls, owner: int, activated: bool = False) -> FieldSquare:
        return cls(kind=FieldSquareKind.SPECIAL, owner=owner, activated=activated)

    @property
    def is_empty(self) -> bool:
        return self.kind is FieldSquareKind.EMPTY

    @property
    def is_block(self) -> bool:
        return self.kind is FieldSquareKind.BLOCK

    @property
    def is_colored(self) -> bool:
        return self.kind is FieldSquareKind.COLORED

    @property
    def is_special(self) -> bool:
        return self.kind is FieldSquareKind.SPECIAL

    @property
    def is_filled(self) -> bool:
        """Colored or special, i.e. owned by a player."""
        return self.kind in (FieldSquareKind.COLORED, FieldSquareKind.SPECIAL)

    def owned_by(self, player_id: int) -> bool:
        return self.is_filled and self.owner == player_id

    def with_activation(self) -> FieldSquare:
        return FieldSquare.special(self.owner, activated=True)

    def to_char(self) -> str:
        if self.kind is FieldSquareKind.EMPTY:
            return "."
        if self.kind is FieldSquareKind.BLOCK:
            return "#"
        if self.owner is None or not 0 <= self.owner < len(PLAYER_GLYPHS):
            raise ValueError(f"No field glyph for owner {self.owner}")
        colored, special = PLAYER_GLYPHS[self.owner]
        return special if self.is_special else colored

    @classmethod
    def from_char(cls, char: str) -> FieldSquare | None:
        """Decode a field character, or None if it is not a field glyph."""
        return _FIELD_CHARS.get(char)


EMPTY = FieldSquare(kind=FieldSquareKind.EMPTY)
BLOCK = FieldSquare(kind=FieldSquareKind.BLOCK)

_FIELD_CHARS: dict[str, FieldSquare] = {".": EMPTY, "#": BLOCK}
for _pid, (_colored, _special) in enumerate(PLAYER_GLYPHS):
    _FIELD_CHARS[_colored] = FieldSquare.colored(_pid)
    _FIELD_CHARS[_special] = FieldSquare.special(_pid)


class CardSquare(Enum):
    """Variants of a card square. Values are the text glyphs."""
    COLORED = "y"
    SPECIAL = "Y"
    EMPTY = "."

    @property
    def is_empty(self) -> bool:
        return self is CardSquare.EMPTY

    @property
    def is_filled(self) -> bool:
        return self is not CardSquare.EMPTY

    def to_char(self) -> str:
        return self.value

    @classmethod
    def from_char(cls, char: str) -> CardSquare | None:
        try:
            return cls(char)
        except ValueError:
            return None


@dataclass
class ShapeGrid:
    """
    A rectangular matrix of squares.

    Invariants: at least one row, at least one column, every row the
    same width. Subclasses fix the square type via `_decode_char`.
    """
    squares: list[list[Any]]

    def __post_init__(self):
        if not self.squares or not self.squares[0]:
            raise ValueError(f"{type(self).__name__} needs at least one row and column")
        width = len(self.squares[0])
        if any(len(row) != width for row in self.squares):
            raise ValueError(f"{type(self).__name__} rows must all have width {width}")

    @property
    def height(self) -> int:
        return len(self.squares)

    @property
    def width(self) -> int:
        return len(self.squares[0])

    # -------------------------------------------------------------------------
    # Parsing / formatting
    # -------------------------------------------------------------------------

    @classmethod
    def _decode_char(cls, char: str) -> Any:
        raise NotImplementedError

    @classmethod
    def parse(cls, text: str) -> DecodeResult:
        """
        Parse newline-delimited rows into a grid.

        Returns a DecodeResult; never raises on malformed input.
        """
        if text.endswith("\n"):
            text = text[:-1]
        if not text:
            return DecodeResult.failure("grid has no rows")

        rows: list[list[Any]] = []
        for y, line in enumerate(text.split("\n")):
            line = line.rstrip("\r")
            if not line:
                return DecodeResult.failure("empty row", row=y)
            row = []
            for x, char in enumerate(line):
                square = cls._decode_char(char)
                if square is None:
                    return DecodeResult.failure(f"invalid square character {char!r}", row=y, column=x)
                row.append(square)
            if rows and len(row) != len(rows[0]):
                return DecodeResult.failure(
                    f"row width {len(row)} differs from {len(rows[0])}", row=y
                )
            rows.append(row)
        return DecodeResult.ok(cls(squares=rows))

    @classmethod
    def from_text(cls, text: str):
        """Parse, raising DecodeError on malformed input."""
        return cls.parse(text).unwrap()

    def to_rows(self) -> list[str]:
        return ["".join(square.to_char() for square in row) for row in self.squares]

    def to_text(self) -> str:
        return "\n".join(self.to_rows())

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def in_bounds(self, y: int, x: int) -> bool:
        return 0 <= y < self.height and 0 <= x < self.width

    def at(self, y: int, x: int) -> Any:
        return self.squares[y][x]

    def cells(self) -> Iterator[tuple[int, int, Any]]:
        """Iterate (y, x, square) in row-major order."""
        for y, row in enumerate(self.squares):
            for x, square in enumerate(row):
                yield y, x, square

    def count(self, predicate: Callable[[Any], bool]) -> int:
        return sum(1 for _, _, square in self.cells() if predicate(square))

    def neighbors(self, y: int, x: int) -> Iterator[Coord]:
        """In-bounds 8-neighbors of (y, x)."""
        for dy, dx in NEIGHBOR_OFFSETS:
            ny, nx = y + dy, x + dx
            if self.in_bounds(ny, nx):
                yield ny, nx

    # -------------------------------------------------------------------------
    # Transformations
    # -------------------------------------------------------------------------

    def rotate(self):
        """
        One clockwise quarter turn.

        Cell (i, j) of the result is cell (height-1-j, i) of this grid.
        """
        return type(self)(squares=[
            [self.squares[self.height - 1 - j][i] for j in range(self.height)]
            for i in range(self.width)
        ])

    def rotated(self, quarter_turns: int):
        shape = self
        for _ in range(quarter_turns % 4):
            shape = shape.rotate()
        return shape

    def trim(self):
        """
        Shrink to the bounding box of all non-empty squares.

        Raises EmptyShapeError when every square is empty.
        """
        filled_rows = [y for y, row in enumerate(self.squares) if any(not s.is_empty for s in row)]
        if not filled_rows:
            raise EmptyShapeError(f"{type(self).__name__} has no non-empty square to trim to")
        filled_cols = [
            x for x in range(self.width)
            if any(not row[x].is_empty for row in self.squares)
        ]
        min_y, max_y = filled_rows[0], filled_rows[-1]
        min_x, max_x = filled_cols[0], filled_cols[-1]
        return type(self)(squares=[
            list(row[min_x:max_x + 1]) for row in self.squares[min_y:max_y + 1]
        ])

    def find_reference_point(self) -> Coord:
        """First non-empty square in row-major order."""
        for y, x, square in self.cells():
            if not square.is_empty:
                return y, x
        raise EmptyShapeError(f"{type(self).__name__} has no reference point")

    def copy(self):
        return type(self)(squares=[list(row) for row in self.squares])


@dataclass(eq=True)
class FieldShape(ShapeGrid):
    """The shared board."""

    @classmethod
    def _decode_char(cls, char: str) -> FieldSquare | None:
        return FieldSquare.from_char(char)

    def set(self, y: int, x: int, square: FieldSquare) -> None:
        self.squares[y][x] = square

    def count_player(self, player_id: int) -> int:
        """Colored + special squares owned by a player, any activation state."""
        return self.count(lambda square: square.owned_by(player_id))

    def has_empty_neighbor(self, y: int, x: int) -> bool:
        return any(self.squares[ny][nx].is_empty for ny, nx in self.neighbors(y, x))


@dataclass(eq=True)
class CardShape(ShapeGrid):
    """The pattern printed on a card."""

    @classmethod
    def _decode_char(cls, char: str) -> CardSquare | None:
        return CardSquare.from_char(char)

    def count_colored(self) -> int:
        """Colored + special squares; this is a card's power."""
        return self.count(lambda square: square.is_filled)

    def offsets(self) -> tuple[tuple[int, int, CardSquare], ...]:
        """Filled squares as (dy, dx, square) relative to the reference point."""
        ry, rx = self.find_reference_point()
        return tuple(
            (i - ry, j - rx, square)
            for i, j, square in self.cells()
            if square.is_filled
        )

    def placement(self, y: int, x: int) -> list[tuple[int, int, CardSquare]]:
        """
        Field coordinates covered when the reference point sits on (y, x).

        Coordinates may be negative or past the field edge; bounds are
        the caller's concern.
        """
        return place_offsets(self.offsets(), y, x)


def place_offsets(offsets, y: int, x: int) -> list[tuple[int, int, CardSquare]]:
    return [(y + dy, x + dx, square) for dy, dx, square in offsets]
