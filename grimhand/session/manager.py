"""
Sheet Manager - Creates and tracks character sheets.

LIFECYCLE:
1. Caller creates a sheet (optionally with a name and selections)
2. Edits go through the sheet; each edit recomputes its stats
3. Caller deletes the sheet when done

PERSISTENCE RULES:
- NO database; sheets live in memory only
- All sheets share one attribute table and one equipment catalog
- Reloading either replaces the shared snapshot for every sheet
"""

from __future__ import annotations
from dataclasses import dataclass, field
import logging
import time
import uuid

from ..engine_core.attributes import AttributeTable, default_attribute_table
from ..engine_core.catalog import EquipmentCatalog
from ..engine_core.expression import DEFAULT_FORMULA
from ..engine_core.state import Character
from .sheet import CharacterSheet

logger = logging.getLogger(__name__)


@dataclass
class ManagedSheet:
    """A sheet plus its bookkeeping."""
    sheet_id: str
    sheet: CharacterSheet
    created_at: float
    updated_at: float = field(default=0.0)

    def touch(self) -> None:
        self.updated_at = time.time()


class SheetManager:
    """
    Manages character sheets.

    Responsibilities:
    - Create sheets against the shared table and catalog
    - Look sheets up by id
    - Swap the shared catalog/table snapshots atomically
    """

    def __init__(
        self,
        table: AttributeTable | None = None,
        catalog: EquipmentCatalog | None = None,
        default_formula: str = DEFAULT_FORMULA,
    ):
        self.table = table or default_attribute_table()
        self.catalog = catalog or EquipmentCatalog()
        self.default_formula = default_formula
        self._sheets: dict[str, ManagedSheet] = {}

    def create_sheet(
        self,
        name: str = "New Recruit",
        race: str | None = None,
        class_name: str | None = None,
        affinity: str | None = None,
        formula: str | None = None,
    ) -> ManagedSheet:
        """
        Create a new sheet.

        Raises:
            UnknownSelectionError: a selection is not in the table
        """
        selections = {
            key: value
            for key, value in (("race", race), ("class_name", class_name), ("affinity", affinity))
            if value
        }
        sheet = CharacterSheet(
            table=self.table,
            catalog=self.catalog,
            character=Character(name=name, **selections),
            formula=formula if formula is not None else self.default_formula,
            fresh=True,
        )

        now = time.time()
        managed = ManagedSheet(
            sheet_id=str(uuid.uuid4()),
            sheet=sheet,
            created_at=now,
            updated_at=now,
        )
        self._sheets[managed.sheet_id] = managed
        logger.info("Created sheet %s (%s)", managed.sheet_id, name)
        return managed

    def get_sheet(self, sheet_id: str) -> ManagedSheet | None:
        """Get a sheet by ID."""
        return self._sheets.get(sheet_id)

    def delete_sheet(self, sheet_id: str) -> bool:
        """Remove a sheet. Returns False if it did not exist."""
        removed = self._sheets.pop(sheet_id, None)
        if removed:
            logger.info("Deleted sheet %s", sheet_id)
        return removed is not None

    def list_sheets(self) -> list[str]:
        """IDs of every sheet."""
        return list(self._sheets)

    def replace_catalog(self, catalog: EquipmentCatalog) -> None:
        """Publish a reloaded catalog to the manager and every sheet."""
        self.catalog = catalog
        for managed in self._sheets.values():
            managed.sheet.replace_catalog(catalog)
            managed.touch()
        logger.info("Catalog replaced (%d items, %d sheets)", len(catalog), len(self._sheets))

    def replace_attribute_table(self, table: AttributeTable) -> None:
        """
        Publish a refreshed attribute table.

        Every sheet's selections are checked first; if any is missing
        from the new table, nothing is swapped.

        Raises:
            UnknownSelectionError: some sheet's selection is not in table
        """
        for managed in self._sheets.values():
            character = managed.sheet.character
            table.validate(character.race, character.class_name, character.affinity)
        self.table = table
        for managed in self._sheets.values():
            managed.sheet.replace_attribute_table(table)
            managed.touch()
