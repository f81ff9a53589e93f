"""
Catalog - Card catalogs and fields.

Provides:
- CardRecord: JSON schema of a catalog entry
- load_catalog_json / load_catalog_file: JSON catalog loading
- STARTER_CARDS / starter_catalog: the built-in card set
- straight_street: the default field
"""

from .loader import (
    CardRecord,
    load_catalog_json,
    load_catalog_file,
    load_catalog,
    dump_catalog_json,
)
from .builtin import STARTER_CARDS, starter_catalog, straight_street, STRAIGHT_STREET_ROWS

__all__ = [
    "CardRecord",
    "load_catalog_json",
    "load_catalog_file",
    "load_catalog",
    "dump_catalog_json",
    "STARTER_CARDS",
    "starter_catalog",
    "straight_street",
    "STRAIGHT_STREET_ROWS",
]
