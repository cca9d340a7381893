"""
Stat Aggregator - Resolves a character into its derived stats.

Pipeline (each stage reads the totals the previous one produced):
1. Base: sum of the race, class and affinity bundles
2. Alignment: each item sharing the character's affinity gives +1 to
   that affinity's stat, and +1 attack per aligned item
3. Hand: complete slots become cards, the hand is classified, and the
   winning hand's bonus is applied

resolve() is a pure function of (character, table). Callers invoke it
again after every mutation; nothing is patched incrementally.
"""

from __future__ import annotations
from dataclasses import dataclass
import logging

from .attributes import Affinity, AttributeTable
from .bonuses import (
    StatTotals,
    apply_hand_bonus,
    describe_bonus,
    display_name,
    resolve_bonus,
)
from .hand import HandClassification, classify_hand
from .state import Character

logger = logging.getLogger(__name__)

# Stat raised by one aligned item, per affinity
ALIGNED_ITEM_STAT: dict[str, str] = {
    Affinity.BLOOD.value: "life_max",
    Affinity.NATURE.value: "life_max",
    Affinity.BONE.value: "agility",
    Affinity.SHADOW.value: "ap_max",
    Affinity.IRON.value: "strength",
}


@dataclass(frozen=True)
class DerivedStats:
    """
    Everything the display layer shows about a character's stats.

    base is pre-equipment; total includes alignment and hand bonuses.
    """
    base: StatTotals
    total: StatTotals
    aligned_bonus: int
    hand: HandClassification
    hand_display_name: str
    hand_bonus_text: str
    damage_reduction: int = 0


def base_totals(character: Character, table: AttributeTable) -> StatTotals:
    """Stage 1: sum of the three selected bundles."""
    bundle = table.base_bundle(character.race, character.class_name, character.affinity)
    return StatTotals(
        life_max=bundle.life,
        strength=bundle.strength,
        agility=bundle.agility,
        ap_max=bundle.action_points,
        gold=bundle.gold,
        attack=bundle.attack_contribution,
    )


def apply_alignment(character: Character, totals: StatTotals) -> tuple[StatTotals, int]:
    """
    Stage 2: per-item affinity match bonuses.

    Returns (new totals, aligned item count).
    """
    aligned = [
        item for item in character.equipped_items
        if item.affinity and item.affinity == character.affinity
    ]
    stat = ALIGNED_ITEM_STAT.get(character.affinity)
    if stat:
        totals = totals.plus(**{stat: len(aligned)})
    totals = totals.plus(attack=len(aligned))
    return totals, len(aligned)


def resolve(character: Character, table: AttributeTable) -> DerivedStats:
    """
    Compute DerivedStats for a character.

    Raises:
        UnknownSelectionError: race, class or affinity not in the table
    """
    base = base_totals(character, table)
    totals, aligned_count = apply_alignment(character, base)

    for item in character.equipped_items:
        if not item.is_empty and not item.is_complete:
            logger.debug("Slot %s has incomplete card data; excluded from hand", item.slot_id)

    hand = classify_hand(character.cards())
    totals = apply_hand_bonus(hand, totals)
    bonus = resolve_bonus(hand)

    return DerivedStats(
        base=base,
        total=totals,
        aligned_bonus=aligned_count,
        hand=hand,
        hand_display_name=display_name(hand),
        hand_bonus_text=describe_bonus(hand),
        damage_reduction=bonus.damage_reduction if bonus else 0,
    )
