"""
Engine Core - Character stat resolution and equipment hand evaluation.

The engine:
1. Sums race, class and affinity attribute bundles
2. Applies per-item affinity alignment bonuses
3. Classifies the equipped cards as a hand and applies its bonus
4. Evaluates the player's formula against the resulting stats
"""

from .errors import (
    GrimHandError,
    FormulaError,
    FormulaSyntaxError,
    FormulaResultError,
    UnknownSelectionError,
    UnknownSlotError,
    UnknownItemError,
    UnknownResourceError,
)
from .attributes import Affinity, AttributeBundle, AttributeTable, default_attribute_table
from .state import Card, Character, EquippedItem, SLOT_IDS, parse_rank, rank_label
from .hand import HandClassification, HandType, classify_hand
from .bonuses import HandBonus, StatTotals, HAND_BONUSES, resolve_bonus, reduce_incoming_damage
from .aggregator import DerivedStats, resolve
from .expression import (
    DEFAULT_FORMULA,
    FORMULA_VARIABLES,
    Formula,
    FormulaEvaluator,
    FormulaResult,
    evaluate_formula,
    formula_scope,
)
from .catalog import EquipmentCatalog, EquipmentCatalogRow

__all__ = [
    "GrimHandError",
    "FormulaError",
    "FormulaSyntaxError",
    "FormulaResultError",
    "UnknownSelectionError",
    "UnknownSlotError",
    "UnknownItemError",
    "UnknownResourceError",
    "Affinity",
    "AttributeBundle",
    "AttributeTable",
    "default_attribute_table",
    "Card",
    "Character",
    "EquippedItem",
    "SLOT_IDS",
    "parse_rank",
    "rank_label",
    "HandClassification",
    "HandType",
    "classify_hand",
    "HandBonus",
    "StatTotals",
    "HAND_BONUSES",
    "resolve_bonus",
    "reduce_incoming_damage",
    "DerivedStats",
    "resolve",
    "DEFAULT_FORMULA",
    "FORMULA_VARIABLES",
    "Formula",
    "FormulaEvaluator",
    "FormulaResult",
    "evaluate_formula",
    "formula_scope",
    "EquipmentCatalog",
    "EquipmentCatalogRow",
]
