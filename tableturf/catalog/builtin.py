"""
Built-in starter card set and the default field.
"""

from __future__ import annotations

from ..engine_core.card import CardCatalog, build_catalog
from ..engine_core.grid import FieldShape
from .loader import CardRecord


STARTER_CARDS: list[CardRecord] = [
    CardRecord(id=1, name="Hero Shot", cost=5, cells="yyyyy\nyyyYy\n.y...\ny...."),
    CardRecord(id=2, name="Splat Dot", cost=1, cells="Y"),
    CardRecord(id=3, name="Twin Dot", cost=1, cells="yY"),
    CardRecord(id=4, name="Corner", cost=2, cells="yY\ny."),
    CardRecord(id=5, name="Short Line", cost=2, cells="yYy"),
    CardRecord(id=6, name="Square", cost=2, cells="yy\nyY"),
    CardRecord(id=7, name="Tee", cost=2, cells="yyy\n.Y."),
    CardRecord(id=8, name="Ell", cost=3, cells="y.\ny.\nyY"),
    CardRecord(id=9, name="Zig", cost=3, cells="yy.\n.Yy"),
    CardRecord(id=10, name="Plus", cost=3, cells=".y.\nyYy\n.y."),
    CardRecord(id=11, name="Long Line", cost=3, cells="yyyYy"),
    CardRecord(id=12, name="Hook", cost=3, cells="yyy\ny.Y"),
    CardRecord(id=13, name="Stair", cost=4, cells="y..\nyy.\n.Yy"),
    CardRecord(id=14, name="Cup", cost=4, cells="y.y\nyYy"),
    CardRecord(id=15, name="Slab", cost=4, cells="yyy\nyYy"),
    CardRecord(id=16, name="Arrow", cost=4, cells="..y..\n.yYy.\ny...y"),
    CardRecord(id=17, name="Wave", cost=5, cells="yy...\n.yYy.\n...yy"),
    CardRecord(id=18, name="Great Cross", cost=5, cells="..y..\n..y..\nyyYyy\n..y..\n..y.."),
    CardRecord(id=19, name="Bridge", cost=5, cells="yyyyy\ny.Y.y"),
    CardRecord(id=20, name="Fortress", cost=6, cells="yyyy\nyYYy\nyyyy"),
]


def starter_catalog() -> CardCatalog:
    return build_catalog(record.to_card() for record in STARTER_CARDS)


STRAIGHT_STREET_ROWS: list[str] = (
    ["........."] * 3
    + ["....B...."]
    + ["........."] * 18
    + ["....Y...."]
    + ["........."] * 3
)


def straight_street() -> FieldShape:
    """Default 26x9 field with one special square per player."""
    return FieldShape.from_text("\n".join(STRAIGHT_STREET_ROWS))
