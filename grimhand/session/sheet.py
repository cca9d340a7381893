"""
Character Sheet - The mutation surface over one character.

Every operation follows the same shape:
1. Validate the request (nothing changes if it fails)
2. Mutate the character in place
3. Recompute DerivedStats and the formula result from scratch

The recomputation also writes the grand-total maxima back to the
character and clamps current life/AP, so current values never sit
above a max that just dropped.

The attribute table and the catalog are immutable snapshots; replacing
one is a single reference swap followed by a recomputation.
"""

from __future__ import annotations
from dataclasses import dataclass
import logging

from ..engine_core.aggregator import DerivedStats, resolve
from ..engine_core.attributes import AttributeTable, default_attribute_table
from ..engine_core.catalog import EquipmentCatalog, EquipmentCatalogRow
from ..engine_core.errors import UnknownResourceError
from ..engine_core.expression import (
    DEFAULT_FORMULA,
    FormulaEvaluator,
    FormulaResult,
    formula_scope,
)
from ..engine_core.state import Character, EquippedItem, clamp

logger = logging.getLogger(__name__)

# Editable counter name -> Character attribute
RESOURCE_FIELDS: dict[str, str] = {
    "lifeCurrent": "life_current",
    "apCurrent": "ap_current",
    "gold": "gold",
    "xp": "xp",
    "doubt": "doubt",
    "corruption": "corruption",
}

# Counters bounded above by a max
_BOUNDED = {"life_current": "life_max", "ap_current": "ap_max"}


@dataclass(frozen=True)
class SheetSnapshot:
    """Read-only view of a sheet after its last recomputation."""
    character: Character
    derived: DerivedStats
    formula: str
    formula_result: FormulaResult


class CharacterSheet:
    """
    Holds a character and keeps its derived values current.

    life_max and ap_max follow the grand totals, hand and alignment
    bonuses included. The original sheet app set them from the base sum
    only; here they agree with the lifeMax and apMax a formula sees.

    Usage:
        sheet = CharacterSheet(catalog=catalog)
        sheet.select(race="Elf")
        sheet.equip("slot1", "Bone Charm")
        sheet.derived.total.attack
        sheet.formula_result.value
    """

    def __init__(
        self,
        table: AttributeTable | None = None,
        catalog: EquipmentCatalog | None = None,
        character: Character | None = None,
        formula: str = DEFAULT_FORMULA,
        fresh: bool | None = None,
    ):
        """
        fresh applies the selection rule (base gold, progress counters
        reset) to the given character. It defaults to True only when no
        character is passed.

        Raises:
            UnknownSelectionError: the character's selections are not in the table
        """
        self.table = table or default_attribute_table()
        self.catalog = catalog or EquipmentCatalog()
        self.formula = formula
        self.evaluator = FormulaEvaluator()

        if fresh is None:
            fresh = character is None
        if character is None:
            character = Character()
        self.table.validate(character.race, character.class_name, character.affinity)
        self.character = character
        if fresh:
            self._reset_for_selection()

        self._recompute()

    # =========================================================================
    # Selections
    # =========================================================================

    def select(
        self,
        race: str | None = None,
        class_name: str | None = None,
        affinity: str | None = None,
    ) -> DerivedStats:
        """
        Change race, class and/or affinity.

        Raises:
            UnknownSelectionError: a name is not in the table
        """
        new_race = race if race is not None else self.character.race
        new_class = class_name if class_name is not None else self.character.class_name
        new_affinity = affinity if affinity is not None else self.character.affinity
        self.table.validate(new_race, new_class, new_affinity)

        self.character.race = new_race
        self.character.class_name = new_class
        self.character.affinity = new_affinity
        self._reset_for_selection()
        self._recompute()
        return self.derived

    def _reset_for_selection(self) -> None:
        """Counters that restart when the character is re-selected."""
        if self.character.gold == 0:
            self.character.gold = self.table.base_bundle(
                self.character.race, self.character.class_name, self.character.affinity
            ).gold
        self.character.xp = 0
        self.character.doubt = 0
        self.character.corruption = 0

    # =========================================================================
    # Equipment
    # =========================================================================

    def equip(self, slot_id: str, item_name: str | None) -> EquippedItem:
        """
        Put a catalog item into a slot. An empty name clears the slot.

        Raises:
            UnknownSlotError: slot_id is not slot1..slot5
            UnknownItemError: the catalog has no such item
        """
        slot = self.character.get_slot(slot_id)
        if not item_name:
            return self.unequip(slot_id)
        row = self.catalog.get(item_name)
        return self._fill(slot, row)

    def equip_row(self, slot_id: str, row: EquipmentCatalogRow) -> EquippedItem:
        """Put an item into a slot without a catalog lookup."""
        slot = self.character.get_slot(slot_id)
        return self._fill(slot, row)

    def _fill(self, slot: EquippedItem, row: EquipmentCatalogRow) -> EquippedItem:
        slot.fill(row.item_name, row.rank, row.affinity, row.primary_effect_text)
        if not slot.is_complete:
            logger.debug(
                "Item %r in %s lacks a usable rank or affinity; it will not count as a card",
                row.item_name, slot.slot_id,
            )
        self._recompute()
        return slot

    def unequip(self, slot_id: str) -> EquippedItem:
        """Clear a slot, keeping its identity."""
        slot = self.character.get_slot(slot_id)
        slot.clear()
        self._recompute()
        return slot

    # =========================================================================
    # Resource counters
    # =========================================================================

    def set_resource(self, name: str, value: int) -> int:
        """
        Set a counter, clamped to [0, max] or to >= 0.

        Raises:
            UnknownResourceError: name is not an editable counter
        """
        attr = self._resource_attr(name)
        setattr(self.character, attr, self._clamped(attr, int(value)))
        self._recompute()
        return getattr(self.character, attr)

    def adjust_resource(self, name: str, amount: int) -> int:
        """Add amount (may be negative) to a counter, with clamping."""
        attr = self._resource_attr(name)
        current = getattr(self.character, attr)
        return self.set_resource(name, current + int(amount))

    @staticmethod
    def _resource_attr(name: str) -> str:
        try:
            return RESOURCE_FIELDS[name]
        except KeyError:
            raise UnknownResourceError(name) from None

    def _clamped(self, attr: str, value: int) -> int:
        max_attr = _BOUNDED.get(attr)
        high = getattr(self.character, max_attr) if max_attr else None
        return clamp(value, 0, high)

    # =========================================================================
    # Formula
    # =========================================================================

    def set_formula(self, text: str) -> FormulaResult:
        """Replace the formula text and re-evaluate it."""
        self._recompute(formula=text)
        return self.formula_result

    # =========================================================================
    # Snapshot swaps
    # =========================================================================

    def replace_catalog(self, catalog: EquipmentCatalog) -> None:
        """
        Swap in a reloaded catalog.

        Already-equipped slots keep their copied data.
        """
        self.catalog = catalog
        self._recompute()

    def replace_attribute_table(self, table: AttributeTable) -> DerivedStats:
        """
        Swap in a refreshed attribute table.

        Raises:
            UnknownSelectionError: current selections are not in the new
                table; the old table stays in place
        """
        table.validate(self.character.race, self.character.class_name, self.character.affinity)
        self.table = table
        logger.info("Attribute table replaced")
        self._recompute()
        return self.derived

    # =========================================================================
    # Recomputation
    # =========================================================================

    def _recompute(self, formula: str | None = None) -> None:
        """
        Rebuild derived stats and the formula result.

        Everything is computed before anything is assigned, so a failure
        leaves the previous state (and the previous formula text) in place.
        """
        formula = self.formula if formula is None else formula
        derived = resolve(self.character, self.table)
        life_max = max(0, derived.total.life_max)
        ap_max = max(0, derived.total.ap_max)

        scope = formula_scope(self.character, derived)
        scope["lifeCurrent"] = clamp(self.character.life_current, 0, life_max)
        scope["apCurrent"] = clamp(self.character.ap_current, 0, ap_max)
        result = self.evaluator.try_evaluate(formula, scope)

        self.character.set_maxima(life_max, ap_max)
        self.formula = formula
        self.derived = derived
        self.formula_result = result

    def snapshot(self) -> SheetSnapshot:
        return SheetSnapshot(
            character=self.character.clone(),
            derived=self.derived,
            formula=self.formula,
            formula_result=self.formula_result,
        )
