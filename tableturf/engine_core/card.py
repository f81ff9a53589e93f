"""
Card definitions and the catalog.

A catalog is a read-only mapping of card id -> CardDefinition. It is
passed explicitly to every engine component that needs card data.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Mapping

from .action import Direction
from .errors import ConfigurationError
from .grid import CardShape, CardSquare, place_offsets


CardCatalog = Mapping[int, "CardDefinition"]


@dataclass(frozen=True)
class CardDefinition:
    """
    Immutable catalog entry.

    The shape is trimmed to its bounding box on construction and the
    power (number of colored + special squares) is derived from it.
    """
    id: int
    name: str
    cost: int
    shape: CardShape
    power: int = field(init=False)
    _orientations: tuple[CardShape, ...] = field(init=False, repr=False, compare=False)
    _offsets: tuple[tuple, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        if self.cost < 0:
            raise ValueError(f"Card {self.id} has negative cost")
        trimmed = self.shape.trim()
        object.__setattr__(self, "shape", trimmed)
        object.__setattr__(self, "power", trimmed.count_colored())
        object.__setattr__(
            self, "_orientations", tuple(trimmed.rotated(turns) for turns in range(4))
        )
        object.__setattr__(
            self, "_offsets", tuple(shape.offsets() for shape in self._orientations)
        )

    @classmethod
    def from_text(cls, card_id: int, name: str, cost: int, cells: str) -> CardDefinition:
        """Build from a cell-grid text. Raises DecodeError / EmptyShapeError."""
        return cls(id=card_id, name=name, cost=cost, shape=CardShape.from_text(cells))

    def oriented(self, direction: Direction) -> CardShape:
        """The shape after rotating clockwise for the given direction."""
        return self._orientations[direction.quarter_turns]

    def placement(self, direction: Direction, y: int, x: int) -> list[tuple[int, int, CardSquare]]:
        """Field squares covered by the card turned to `direction` with its reference point on (y, x)."""
        return place_offsets(self._offsets[direction.quarter_turns], y, x)


def build_catalog(cards: Iterable[CardDefinition]) -> CardCatalog:
    """Index cards by id. Duplicate ids are a configuration error."""
    catalog: dict[int, CardDefinition] = {}
    for card in cards:
        if card.id in catalog:
            raise ConfigurationError(f"Duplicate card id {card.id} in catalog")
        catalog[card.id] = card
    return MappingProxyType(catalog)
