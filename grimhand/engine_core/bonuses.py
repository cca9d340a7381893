"""
Bonus Resolver - Maps a hand classification to its stat transform.

Exactly one bonus applies: the one for the winning hand.
Bonuses are data (stat deltas plus display text), not code, so the
same table drives both the arithmetic and the player-facing text.

Full House is a combat rule (incoming damage -1, floor 0) and leaves
the stat totals untouched.
"""

from __future__ import annotations
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Mapping

from .hand import HandClassification, HandType


@dataclass(frozen=True)
class StatTotals:
    """Running stat totals that bonuses transform."""
    life_max: int = 0
    strength: int = 0
    agility: int = 0
    ap_max: int = 0
    gold: int = 0
    attack: int = 0

    def plus(self, **deltas: int) -> StatTotals:
        """Return new totals with the given deltas added."""
        return replace(self, **{name: getattr(self, name) + delta for name, delta in deltas.items()})


@dataclass(frozen=True)
class HandBonus:
    """
    The bonus granted by one hand type.

    deltas are added to StatTotals field-by-field.
    damage_reduction applies at combat time only.
    """
    hand_type: HandType
    text: str
    deltas: Mapping[str, int] = field(default_factory=dict)
    damage_reduction: int = 0

    def __post_init__(self):
        unknown = set(self.deltas) - set(StatTotals.__dataclass_fields__)
        if unknown:
            raise ValueError(f"Unknown stat(s) in bonus: {sorted(unknown)}")
        object.__setattr__(self, "deltas", MappingProxyType(dict(self.deltas)))

    def apply(self, totals: StatTotals) -> StatTotals:
        if not self.deltas:
            return totals
        return totals.plus(**self.deltas)


HAND_BONUSES: Mapping[HandType, HandBonus] = MappingProxyType({
    bonus.hand_type: bonus
    for bonus in (
        HandBonus(HandType.PAIR, "+1 Attack Score", {"attack": 1}),
        HandBonus(HandType.TWO_PAIR, "+1 Action Point (Max)", {"ap_max": 1}),
        HandBonus(HandType.THREE_OF_A_KIND, "+1 Strength", {"strength": 1}),
        HandBonus(HandType.STRAIGHT, "+1 Agility", {"agility": 1}),
        HandBonus(HandType.FLUSH, "+1 Life Essence (Max)", {"life_max": 1}),
        HandBonus(
            HandType.FULL_HOUSE,
            "Reduce all incoming damage by 1 (min 0)",
            damage_reduction=1,
        ),
        HandBonus(HandType.FOUR_OF_A_KIND, "+2 Attack Score", {"attack": 2}),
        HandBonus(
            HandType.STRAIGHT_FLUSH,
            "+2 Life Essence (Max) and +1 Action Point (Max)",
            {"life_max": 2, "ap_max": 1},
        ),
        HandBonus(HandType.FIVE_OF_A_KIND, "+3 Attack Score", {"attack": 3}),
    )
})

# Themed names shown to players, indexed by level
HAND_DISPLAY_NAMES: tuple[str, ...] = (
    "Desperate Scramble",
    "Unified Effort",
    "Dual Grip",
    "Triad Impact",
    "Unfettered Path",
    "Pure Affinity",
    "Anchored Power",
    "Resonant Force",
    "Primal Current",
    "Monolithic Quintessence",
)

NO_BONUS_TEXT = "No bonus for this hand."


def resolve_bonus(classification: HandClassification) -> HandBonus | None:
    """Bonus for a classification; None for High Card."""
    return HAND_BONUSES.get(classification.hand_type)


def apply_hand_bonus(classification: HandClassification, totals: StatTotals) -> StatTotals:
    """Apply the winning hand's transform to the totals."""
    bonus = resolve_bonus(classification)
    if bonus is None:
        return totals
    return bonus.apply(totals)


def display_name(classification: HandClassification) -> str:
    return HAND_DISPLAY_NAMES[classification.level]


def describe_bonus(classification: HandClassification) -> str:
    """Player-facing text: "<themed name>: <effect>"."""
    bonus = resolve_bonus(classification)
    text = bonus.text if bonus else NO_BONUS_TEXT
    return f"{display_name(classification)}: {text}"


def reduce_incoming_damage(damage: int, classification: HandClassification) -> int:
    """Combat-time damage after the hand's reduction, never below 0."""
    bonus = resolve_bonus(classification)
    reduction = bonus.damage_reduction if bonus else 0
    return max(0, damage - reduction)
