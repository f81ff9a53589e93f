"""
Tests for card catalogs and the default field.
"""

import json

import pytest

from ..catalog import (
    STARTER_CARDS,
    CardRecord,
    dump_catalog_json,
    load_catalog,
    load_catalog_file,
    load_catalog_json,
    starter_catalog,
    straight_street,
)
from ..engine_core.errors import ConfigurationError
from ..engine_core.grid import FieldSquare


def _catalog_json(*records):
    return json.dumps(list(records))


class TestStarterCatalog:
    """Tests for the built-in card set."""

    def test_size_and_ids(self):
        catalog = starter_catalog()
        assert len(catalog) == 20
        assert sorted(catalog) == list(range(1, 21))
        assert len(STARTER_CARDS) == 20

    def test_hero_shot(self):
        card = starter_catalog()[1]
        assert card.name == "Hero Shot"
        assert card.power == 12
        assert card.cost == 5

    def test_every_card_has_a_special_square(self):
        """Every starter card carries a special square."""
        for card in starter_catalog().values():
            assert "Y" in card.shape.to_text(), card.name

    def test_catalog_is_read_only(self):
        catalog = starter_catalog()
        with pytest.raises(TypeError):
            catalog[99] = catalog[1]

    def test_load_catalog_without_path(self):
        assert load_catalog(None) == starter_catalog()


class TestStraightStreet:
    def test_dimensions_and_specials(self):
        field = straight_street()
        assert (field.height, field.width) == (26, 9)
        assert field.at(3, 4) == FieldSquare.special(1)
        assert field.at(22, 4) == FieldSquare.special(0)
        assert field.count(lambda square: square.is_filled) == 2


class TestLoadCatalogJson:
    """Tests for JSON catalog loading."""

    def test_shapes_are_trimmed(self):
        cards = load_catalog_json(_catalog_json(
            {"id": 4, "name": "Padded", "cost": 1, "cells": "...\n.yY\n..."},
        ))
        assert cards[0].shape.to_rows() == ["yY"]
        assert cards[0].power == 2

    def test_name_is_optional(self):
        cards = load_catalog_json(_catalog_json({"id": 1, "cost": 0, "cells": "y"}))
        assert cards[0].name == ""

    def test_duplicate_ids(self):
        text = _catalog_json(
            {"id": 1, "cost": 0, "cells": "y"},
            {"id": 1, "cost": 0, "cells": "yy"},
        )
        with pytest.raises(ConfigurationError) as exc_info:
            load_catalog_json(text)
        assert "Duplicate" in str(exc_info.value)

    @pytest.mark.parametrize("text", [
        "not json",
        '{"id": 1}',
        _catalog_json({"id": 1, "cells": "y"}),
        _catalog_json({"id": 1, "cost": -1, "cells": "y"}),
        _catalog_json({"id": -1, "cost": 0, "cells": "y"}),
    ])
    def test_malformed_records(self, text):
        with pytest.raises(ConfigurationError):
            load_catalog_json(text)

    @pytest.mark.parametrize("cells", ["yx", "...", "y\nyy"])
    def test_bad_shapes(self, cells):
        with pytest.raises(ConfigurationError) as exc_info:
            load_catalog_json(_catalog_json({"id": 7, "cost": 1, "cells": cells}))
        assert "Card 7" in str(exc_info.value)


class TestCatalogFiles:
    """Tests for catalog files on disk."""

    def test_dump_and_load(self, tmp_path, catalog):
        path = tmp_path / "cards.json"
        path.write_text(dump_catalog_json(catalog.values()), encoding="utf-8")

        loaded = load_catalog(path)

        assert list(loaded) == list(catalog)
        for card_id, card in catalog.items():
            assert loaded[card_id].shape == card.shape
            assert loaded[card_id].power == card.power
            assert loaded[card_id].name == card.name

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError) as exc_info:
            load_catalog_file(tmp_path / "missing.json")
        assert "Cannot read" in str(exc_info.value)

    def test_record_from_card(self, catalog):
        record = CardRecord.from_card(catalog[5])
        assert record.cells == "y.\nyy"
        assert record.to_card() == catalog[5]
