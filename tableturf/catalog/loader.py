"""
Catalog Loader - Card catalogs from JSON.

A catalog file is a JSON array of records:

    [{"id": 1, "name": "Hero Shot", "cost": 5, "cells": "yyyyy\\nyyyYy\\n.y...\\ny...."}, ...]

Shapes are parsed and trimmed, and power is derived, when the record is
turned into a CardDefinition. Any problem with the file is a
ConfigurationError.
"""

from __future__ import annotations
from pathlib import Path
from typing import Iterable

from pydantic import BaseModel, Field, TypeAdapter, ValidationError

from ..engine_core.card import CardCatalog, CardDefinition, build_catalog
from ..engine_core.decoding import DecodeError
from ..engine_core.errors import ConfigurationError, EmptyShapeError


class CardRecord(BaseModel):
    """One catalog entry as stored on disk."""
    id: int = Field(ge=0)
    name: str = ""
    cost: int = Field(ge=0)
    cells: str = Field(description="Card rows joined by newlines, y/Y/. squares")

    model_config = {"from_attributes": True}

    def to_card(self) -> CardDefinition:
        try:
            return CardDefinition.from_text(self.id, self.name, self.cost, self.cells)
        except (DecodeError, EmptyShapeError) as e:
            raise ConfigurationError(f"Card {self.id} has an invalid shape: {e}") from e

    @classmethod
    def from_card(cls, card: CardDefinition) -> CardRecord:
        return cls(id=card.id, name=card.name, cost=card.cost, cells=card.shape.to_text())


_RECORDS = TypeAdapter(list[CardRecord])


def load_catalog_json(text: str | bytes) -> list[CardDefinition]:
    """Parse a JSON catalog into card definitions."""
    try:
        records = _RECORDS.validate_json(text)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid card catalog: {e}") from e
    cards = [record.to_card() for record in records]
    build_catalog(cards)  # rejects duplicate ids
    return cards


def load_catalog_file(path: str | Path) -> list[CardDefinition]:
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(f"Cannot read card catalog {path}: {e}") from e
    return load_catalog_json(text)


def load_catalog(path: str | Path | None = None) -> CardCatalog:
    """
    Load a catalog from `path`, or the built-in starter set.
    """
    if path is None:
        from .builtin import starter_catalog
        return starter_catalog()
    return build_catalog(load_catalog_file(path))


def dump_catalog_json(cards: Iterable[CardDefinition]) -> str:
    records = [CardRecord.from_card(card) for card in cards]
    return _RECORDS.dump_json(records, indent=2).decode("utf-8")
