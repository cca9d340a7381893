"""
Attribute Table - Static per-category attribute deltas.

Every race, class and affinity contributes one AttributeBundle.
A character's base totals are the sum of its three selected bundles.

The table is immutable once built. Refreshing it means building a
new table and swapping the reference.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping

from .errors import UnknownSelectionError


class Affinity(str, Enum):
    """Affinities shared by characters and items."""
    BLOOD = "Blood"
    BONE = "Bone"
    SHADOW = "Shadow"
    IRON = "Iron"
    NATURE = "Nature"


@dataclass(frozen=True)
class AttributeBundle:
    """Attribute deltas contributed by one race, class or affinity."""
    life: int = 0
    strength: int = 0
    agility: int = 0
    action_points: int = 0
    gold: int = 0
    attack_contribution: int = 0

    def __add__(self, other: AttributeBundle) -> AttributeBundle:
        if not isinstance(other, AttributeBundle):
            return NotImplemented
        return AttributeBundle(
            life=self.life + other.life,
            strength=self.strength + other.strength,
            agility=self.agility + other.agility,
            action_points=self.action_points + other.action_points,
            gold=self.gold + other.gold,
            attack_contribution=self.attack_contribution + other.attack_contribution,
        )

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> AttributeBundle:
        """
        Build a bundle from a plain mapping.

        Accepts both the sheet column names (ap, attackContribution)
        and the snake_case field names.
        """
        return cls(
            life=int(raw.get("life", 0)),
            strength=int(raw.get("strength", 0)),
            agility=int(raw.get("agility", 0)),
            action_points=int(raw.get("action_points", raw.get("ap", 0))),
            gold=int(raw.get("gold", 0)),
            attack_contribution=int(
                raw.get("attack_contribution", raw.get("attackContribution", 0))
            ),
        )


@dataclass(frozen=True)
class AttributeTable:
    """
    Immutable lookup of race, class and affinity bundles.

    Lookups raise UnknownSelectionError for names not in the table.
    """
    races: Mapping[str, AttributeBundle]
    classes: Mapping[str, AttributeBundle]
    affinities: Mapping[str, AttributeBundle]

    def __post_init__(self):
        # Freeze the mappings so a shared table cannot be edited in place
        object.__setattr__(self, "races", MappingProxyType(dict(self.races)))
        object.__setattr__(self, "classes", MappingProxyType(dict(self.classes)))
        object.__setattr__(self, "affinities", MappingProxyType(dict(self.affinities)))

    def race(self, name: str) -> AttributeBundle:
        return self._lookup(self.races, "race", name)

    def character_class(self, name: str) -> AttributeBundle:
        return self._lookup(self.classes, "class", name)

    def affinity(self, name: str) -> AttributeBundle:
        return self._lookup(self.affinities, "affinity", name)

    def base_bundle(self, race: str, class_name: str, affinity: str) -> AttributeBundle:
        """Sum of the three selected bundles."""
        return self.race(race) + self.character_class(class_name) + self.affinity(affinity)

    def validate(self, race: str, class_name: str, affinity: str) -> None:
        """Raise UnknownSelectionError if any selection is missing."""
        self.base_bundle(race, class_name, affinity)

    @staticmethod
    def _lookup(mapping: Mapping[str, AttributeBundle], category: str, name: str) -> AttributeBundle:
        try:
            return mapping[name]
        except KeyError:
            raise UnknownSelectionError(category, name) from None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Mapping[str, Mapping[str, Any]]]) -> AttributeTable:
        """
        Build a table from nested plain data.

        Expected shape:
            {"races": {"Human": {"life": 5, ...}, ...},
             "classes": {...},
             "affinities": {...}}
        """
        def bundles(section: str) -> dict[str, AttributeBundle]:
            return {
                name: AttributeBundle.from_mapping(raw)
                for name, raw in data.get(section, {}).items()
            }

        return cls(
            races=bundles("races"),
            classes=bundles("classes"),
            affinities=bundles("affinities"),
        )


# ============================================================================
# Default Grim Hand values
# ============================================================================

DEFAULT_ATTRIBUTE_DATA: dict[str, dict[str, dict[str, int]]] = {
    "races": {
        "Human": {"life": 5, "strength": 2, "agility": 2, "ap": 3, "gold": 10, "attackContribution": 1},
        "Dwarf": {"life": 6, "strength": 3, "agility": 1, "ap": 2, "gold": 8, "attackContribution": 2},
        "Elf": {"life": 4, "strength": 1, "agility": 3, "ap": 4, "gold": 12, "attackContribution": 1},
        "Orc": {"life": 7, "strength": 4, "agility": 0, "ap": 2, "gold": 5, "attackContribution": 2},
        "Goblin": {"life": 3, "strength": 1, "agility": 4, "ap": 3, "gold": 15, "attackContribution": 0},
    },
    "classes": {
        "Warrior": {"life": 6, "strength": 3, "agility": 1, "ap": 2, "gold": 7, "attackContribution": 2},
        "Ranger": {"life": 4, "strength": 2, "agility": 3, "ap": 3, "gold": 11, "attackContribution": 1},
        "Rogue": {"life": 4, "strength": 1, "agility": 4, "ap": 3, "gold": 13, "attackContribution": 1},
        "Mage": {"life": 3, "strength": 0, "agility": 2, "ap": 5, "gold": 10, "attackContribution": 0},
        "Cleric": {"life": 5, "strength": 2, "agility": 1, "ap": 3, "gold": 8, "attackContribution": 1},
    },
    "affinities": {
        "Blood": {"life": 1, "strength": 1, "agility": 0, "ap": 1, "gold": 5, "attackContribution": 1},
        "Bone": {"life": 1, "strength": 0, "agility": 1, "ap": 1, "gold": 6, "attackContribution": 1},
        "Shadow": {"life": 0, "strength": 0, "agility": 1, "ap": 2, "gold": 7, "attackContribution": 0},
        "Iron": {"life": 2, "strength": 1, "agility": 0, "ap": 0, "gold": 4, "attackContribution": 1},
        "Nature": {"life": 1, "strength": 0, "agility": 2, "ap": 1, "gold": 8, "attackContribution": 0},
    },
}


def default_attribute_table() -> AttributeTable:
    """Build the table with the stock Grim Hand values."""
    return AttributeTable.from_mapping(DEFAULT_ATTRIBUTE_DATA)
