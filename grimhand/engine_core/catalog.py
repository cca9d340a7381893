"""
Equipment Catalog - Immutable snapshot of equipment rows.

Rows come from an external loader (a spreadsheet export) as plain dicts.
The engine reads only rank and affinity for hand evaluation; the name
and effect text pass through for display.

A catalog is never edited. A reload builds a new catalog and the owner
swaps its reference, so readers see the whole old or the whole new one.
"""

from __future__ import annotations
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Iterable, Iterator, Mapping
import logging

from .errors import UnknownItemError

logger = logging.getLogger(__name__)

# Loader column header -> field name
_COLUMN_ALIASES = {
    "item_name": ("item_name", "ItemName"),
    "rank": ("rank", "Rank"),
    "affinity": ("affinity", "Affinity"),
    "primary_effect_text": ("primary_effect_text", "PrimaryEffect"),
}


def _pick(raw: Mapping[str, Any], column: str) -> Any:
    for key in _COLUMN_ALIASES[column]:
        if key in raw:
            return raw[key]
    return None


@dataclass(frozen=True)
class EquipmentCatalogRow:
    """One equipment definition. rank is kept as the loader's text."""
    item_name: str
    rank: str | None = None
    affinity: str | None = None
    primary_effect_text: str = ""

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> EquipmentCatalogRow:
        """
        Build a row from loader output.

        Raises:
            ValueError: the row has no item name
        """
        name = _pick(raw, "item_name")
        if name is None or not str(name).strip():
            raise ValueError("row has no item name")
        rank = _pick(raw, "rank")
        affinity = _pick(raw, "affinity")
        return cls(
            item_name=str(name).strip(),
            rank=str(rank).strip() if rank is not None and str(rank).strip() else None,
            affinity=str(affinity).strip() if affinity is not None and str(affinity).strip() else None,
            primary_effect_text=str(_pick(raw, "primary_effect_text") or ""),
        )

    def matches(self, term: str) -> bool:
        """Case-insensitive match on name, affinity or effect text."""
        term = term.lower()
        return (
            term in self.item_name.lower()
            or (self.affinity is not None and term in self.affinity.lower())
            or term in self.primary_effect_text.lower()
        )


class EquipmentCatalog:
    """
    Frozen collection of rows, keyed by item name.

    When two rows share a name, the later one wins.
    """

    def __init__(self, rows: Iterable[EquipmentCatalogRow] = ()):
        items: dict[str, EquipmentCatalogRow] = {}
        for row in rows:
            if row.item_name in items:
                logger.warning("Duplicate catalog item %r; keeping the later row", row.item_name)
            items[row.item_name] = row
        self._items = MappingProxyType(items)

    @classmethod
    def from_rows(cls, raw_rows: Iterable[Mapping[str, Any]]) -> EquipmentCatalog:
        """Build from loader dicts, skipping rows without a name."""
        rows = []
        for index, raw in enumerate(raw_rows):
            try:
                rows.append(EquipmentCatalogRow.from_mapping(raw))
            except ValueError as e:
                logger.warning("Skipping catalog row %d: %s", index, e)
        catalog = cls(rows)
        logger.info("Loaded equipment catalog with %d item(s)", len(catalog))
        return catalog

    def get(self, item_name: str) -> EquipmentCatalogRow:
        """Look up a row by name. Raises UnknownItemError."""
        try:
            return self._items[item_name]
        except KeyError:
            raise UnknownItemError(item_name) from None

    def __contains__(self, item_name: object) -> bool:
        return item_name in self._items

    def names(self) -> list[str]:
        return list(self._items)

    def search(self, term: str = "") -> list[EquipmentCatalogRow]:
        """Rows matching term; every row when term is blank."""
        term = term.strip()
        if not term:
            return list(self._items.values())
        return [row for row in self._items.values() if row.matches(term)]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[EquipmentCatalogRow]:
        return iter(self._items.values())
