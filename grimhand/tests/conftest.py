"""
Pytest fixtures for Grim Hand tests.
"""

import pytest

from ..engine_core.attributes import AttributeTable, default_attribute_table
from ..engine_core.catalog import EquipmentCatalog
from ..engine_core.state import Card, Character, parse_rank
from ..session import CharacterSheet, SheetManager


CATALOG_ROWS = [
    {"ItemName": "Iron Fang", "Rank": "2", "Affinity": "Iron", "PrimaryEffect": "Bite through plate"},
    {"ItemName": "Iron Hook", "Rank": "3", "Affinity": "Iron", "PrimaryEffect": "Drag a foe closer"},
    {"ItemName": "Iron Lantern", "Rank": "4", "Affinity": "Iron", "PrimaryEffect": "Reveal hidden traps"},
    {"ItemName": "Iron Crown", "Rank": "5", "Affinity": "Iron", "PrimaryEffect": "Command lesser dead"},
    {"ItemName": "Iron Spur", "Rank": "A", "Affinity": "Iron", "PrimaryEffect": "Strike first"},
    {"ItemName": "Blood Chalice", "Rank": "7", "Affinity": "Blood", "PrimaryEffect": "Heal 1 on kill"},
    {"ItemName": "Bone Dice", "Rank": "7", "Affinity": "Bone", "PrimaryEffect": "Reroll once"},
    {"ItemName": "Shadow Veil", "Rank": "7", "Affinity": "Shadow", "PrimaryEffect": "Hide in darkness"},
    {"ItemName": "Nature Sprig", "Rank": "7", "Affinity": "Nature", "PrimaryEffect": "Regrow 1 life"},
    {"ItemName": "Blood Thorn", "Rank": "2", "Affinity": "Blood", "PrimaryEffect": "Bleed on hit"},
    {"ItemName": "Blood Hound", "Rank": "4", "Affinity": "Blood", "PrimaryEffect": "Track the wounded"},
    {"ItemName": "Blood Oath", "Rank": "6", "Affinity": "Blood", "PrimaryEffect": "Bind an ally"},
    {"ItemName": "Blood Moon", "Rank": "8", "Affinity": "Blood", "PrimaryEffect": "Frenzy at night"},
    {"ItemName": "Blood Crown", "Rank": "10", "Affinity": "Blood", "PrimaryEffect": "Rule the feast"},
    {"ItemName": "Cracked Idol", "Rank": "", "Affinity": "Bone", "PrimaryEffect": "Unknown power"},
]


def cards(*specs: str) -> list[Card]:
    """Build cards from "RANK:AFFINITY" strings, e.g. cards("A:Iron", "2:Iron")."""
    result = []
    for spec in specs:
        rank, affinity = spec.split(":")
        result.append(Card(rank=parse_rank(rank), affinity=affinity))
    return result


@pytest.fixture
def table() -> AttributeTable:
    """Stock attribute table."""
    return default_attribute_table()


@pytest.fixture
def catalog() -> EquipmentCatalog:
    """Catalog built from the sample loader rows."""
    return EquipmentCatalog.from_rows(CATALOG_ROWS)


@pytest.fixture
def character() -> Character:
    """Human Warrior of Iron with nothing equipped."""
    return Character(race="Human", class_name="Warrior", affinity="Iron")


@pytest.fixture
def sheet(table, catalog) -> CharacterSheet:
    """Fresh sheet (Human / Warrior / Iron) over the sample catalog."""
    return CharacterSheet(table=table, catalog=catalog)


@pytest.fixture
def manager(table, catalog) -> SheetManager:
    return SheetManager(table=table, catalog=catalog)
