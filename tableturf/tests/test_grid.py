"""
Tests for shape grids.

Tests:
- Field and card parsing, decode errors
- Rotation, trimming, reference point
- Placement coordinates
"""

import pytest

from ..catalog.builtin import STARTER_CARDS
from ..engine_core.action import DIRECTIONS, Direction
from ..engine_core.card import CardDefinition
from ..engine_core.decoding import DecodeError
from ..engine_core.errors import EmptyShapeError
from ..engine_core.grid import (
    BLOCK,
    EMPTY,
    CardShape,
    CardSquare,
    FieldShape,
    FieldSquare,
    ShapeGrid,
)


class TestFieldParsing:
    """Tests for parsing field text."""

    def test_parse_all_glyphs(self):
        """Every field glyph maps to its square."""
        field = FieldShape.from_text("y.B\n#bY")

        assert field.height == 2
        assert field.width == 3
        assert field.at(0, 0) == FieldSquare.colored(0)
        assert field.at(0, 1) == EMPTY
        assert field.at(0, 2) == FieldSquare.special(1)
        assert field.at(1, 0) == BLOCK
        assert field.at(1, 1) == FieldSquare.colored(1)
        assert field.at(1, 2) == FieldSquare.special(0)

    def test_text_round_trip(self):
        """to_text reproduces the parsed text."""
        text = "y.B\n#bY\n..."
        assert FieldShape.from_text(text).to_text() == text

    def test_trailing_newline_accepted(self):
        """A final newline does not add a row."""
        assert FieldShape.from_text("..\n..\n").height == 2

    def test_invalid_character_reports_position(self):
        """Unknown glyphs fail with row and column."""
        result = FieldShape.parse("y.\nyx")

        assert not result.success
        assert result.row == 1
        assert result.column == 1
        assert "x" in result.error

    def test_ragged_rows_fail(self):
        """Rows of different width are rejected."""
        result = FieldShape.parse("yy\ny")

        assert not result.success
        assert result.row == 1

    def test_empty_text_fails(self):
        """A grid needs at least one row."""
        assert not FieldShape.parse("").success

    def test_from_text_raises_decode_error(self):
        """The raising form wraps the decode result."""
        with pytest.raises(DecodeError) as exc_info:
            FieldShape.from_text("..\n.?")
        assert exc_info.value.row == 1
        assert exc_info.value.column == 1

    def test_card_glyphs_differ_from_field_glyphs(self):
        """Cards have no block or blue squares."""
        assert not CardShape.parse("b").success
        assert not CardShape.parse("#").success
        assert CardShape.from_text("yY.").squares == [
            [CardSquare.COLORED, CardSquare.SPECIAL, CardSquare.EMPTY]
        ]

    def test_direct_construction_checks_rectangle(self):
        """The grid invariant holds for directly built grids too."""
        with pytest.raises(ValueError):
            ShapeGrid(squares=[[EMPTY, EMPTY], [EMPTY]])
        with pytest.raises(ValueError):
            ShapeGrid(squares=[])

    def test_unknown_owner_has_no_glyph(self):
        """Only players 0 and 1 can be written as text."""
        with pytest.raises(ValueError):
            FieldSquare.colored(2).to_char()


class TestRotation:
    """Tests for rotate()."""

    def test_rotate_row_to_column(self):
        """A 1x3 row becomes a 3x1 column, first cell on top."""
        shape = CardShape.from_text("yY.")
        rotated = shape.rotate()

        assert rotated.height == 3
        assert rotated.width == 1
        assert rotated.to_rows() == ["y", "Y", "."]

    def test_rotate_clockwise(self):
        """Cell (i, j) of the result is cell (h-1-j, i) of the source."""
        shape = CardShape.from_text("yY\ny.")
        assert shape.rotate().to_rows() == ["yy", ".Y"]

    def test_rotated_counts_turns(self):
        """rotated(n) applies n quarter turns."""
        shape = CardShape.from_text("yY\ny.")
        assert shape.rotated(2) == shape.rotate().rotate()
        assert shape.rotated(0) == shape

    @pytest.mark.parametrize("record", STARTER_CARDS, ids=lambda r: r.name)
    def test_four_rotations_are_identity(self, record):
        """Rotating four times returns the original shape."""
        shape = CardShape.from_text(record.cells)
        assert shape.rotate().rotate().rotate().rotate() == shape

    @pytest.mark.parametrize("record", STARTER_CARDS, ids=lambda r: r.name)
    def test_power_is_rotation_invariant(self, record):
        """Filled-cell count does not change under rotation."""
        shape = CardShape.from_text(record.cells)
        assert shape.rotate().count_colored() == shape.count_colored()


class TestTrim:
    """Tests for trim() and find_reference_point()."""

    def test_trim_to_bounding_box(self):
        """Empty border rows and columns go, inner empties stay."""
        shape = CardShape.from_text("....\n.yY.\n....\n.y..")
        assert shape.trim().to_rows() == ["yY", "..", "y."]

    def test_trim_is_idempotent(self):
        """Trimming a trimmed shape changes nothing."""
        shape = CardShape.from_text("....\n.yY.\n....\n.y..").trim()
        assert shape.trim() == shape

    def test_trim_keeps_tight_shape(self):
        """A shape already tight is unchanged."""
        shape = CardShape.from_text("y.\nyY")
        assert shape.trim() == shape

    def test_trim_empty_shape_raises(self):
        """There is nothing to trim to."""
        with pytest.raises(EmptyShapeError):
            CardShape.from_text("..\n..").trim()

    def test_reference_point_is_first_filled_cell(self):
        """Row-major scan order."""
        assert CardShape.from_text(".Y\nyy").find_reference_point() == (0, 1)
        assert CardShape.from_text("..\n.y").find_reference_point() == (1, 1)

    def test_reference_point_of_empty_shape_raises(self):
        with pytest.raises(EmptyShapeError):
            CardShape.from_text("...").find_reference_point()


class TestQueries:
    """Tests for neighborhood and counting helpers."""

    def test_neighbors_stay_in_bounds(self):
        """A corner has three neighbors."""
        field = FieldShape.from_text("...\n...\n...")
        assert set(field.neighbors(0, 0)) == {(0, 1), (1, 0), (1, 1)}
        assert len(list(field.neighbors(1, 1))) == 8

    def test_count_player_includes_specials(self):
        """Colored and special squares both count, blocks do not."""
        field = FieldShape.from_text("yY#\nbB.")
        assert field.count_player(0) == 2
        assert field.count_player(1) == 2

    def test_has_empty_neighbor(self):
        field = FieldShape.from_text("Yy\nb.")
        assert field.has_empty_neighbor(0, 0)
        field.set(1, 1, FieldSquare.colored(1))
        assert not field.has_empty_neighbor(0, 0)

    def test_copy_is_independent(self):
        field = FieldShape.from_text("..")
        copy = field.copy()
        copy.set(0, 0, BLOCK)
        assert field.at(0, 0) == EMPTY

    def test_placement_aligns_reference_point(self):
        """The reference point lands on (y, x)."""
        shape = CardShape.from_text(".Y\nyy")
        assert shape.placement(5, 5) == [
            (5, 5, CardSquare.SPECIAL),
            (6, 4, CardSquare.COLORED),
            (6, 5, CardSquare.COLORED),
        ]

    def test_placement_may_leave_field(self):
        """Bounds are not checked by placement itself."""
        shape = CardShape.from_text(".y\nyy")
        assert (1, -1, CardSquare.COLORED) in shape.placement(0, 0)

    def test_offsets_are_relative_to_reference_point(self):
        shape = CardShape.from_text(".Y\nyy")
        assert shape.offsets() == (
            (0, 0, CardSquare.SPECIAL),
            (1, -1, CardSquare.COLORED),
            (1, 0, CardSquare.COLORED),
        )


class TestCardPlacement:
    """CardDefinition.placement reuses offsets computed at construction."""

    @pytest.mark.parametrize("record", STARTER_CARDS, ids=lambda r: r.name)
    def test_matches_rotated_shape(self, record):
        card = record.to_card()
        for direction in DIRECTIONS:
            assert card.placement(direction, 7, 3) == card.oriented(direction).placement(7, 3)

    def test_reference_point_not_recomputed(self, monkeypatch):
        card = CardDefinition.from_text(1, "Ell", 3, "y.\nyy")

        def fail(self):
            raise AssertionError("reference point recomputed")

        monkeypatch.setattr(CardShape, "find_reference_point", fail)

        assert card.placement(Direction.RIGHT, 0, 1) == [
            (0, 1, CardSquare.COLORED),
            (0, 2, CardSquare.COLORED),
            (1, 1, CardSquare.COLORED),
        ]
