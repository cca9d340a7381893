"""
Tests for hand bonuses.

Tests:
- Each hand's stat transform
- Full House damage reduction
- Player-facing bonus text
"""

import pytest

from ..engine_core.bonuses import (
    HAND_BONUSES,
    HAND_DISPLAY_NAMES,
    NO_BONUS_TEXT,
    HandBonus,
    StatTotals,
    apply_hand_bonus,
    describe_bonus,
    display_name,
    reduce_incoming_damage,
    resolve_bonus,
)
from ..engine_core.hand import HandClassification, HandType, HIGH_CARD


BASE = StatTotals(life_max=13, strength=6, agility=3, ap_max=5, gold=21, attack=4)


def apply(hand_type: HandType) -> StatTotals:
    return apply_hand_bonus(HandClassification.of(hand_type), BASE)


class TestStatTransforms:
    """Exactly one bonus applies: the winning hand's."""

    def test_high_card_has_no_bonus(self):
        assert resolve_bonus(HIGH_CARD) is None
        assert apply_hand_bonus(HIGH_CARD, BASE) == BASE

    def test_pair_adds_attack(self):
        assert apply(HandType.PAIR) == BASE.plus(attack=1)

    def test_two_pair_adds_ap_max(self):
        assert apply(HandType.TWO_PAIR) == BASE.plus(ap_max=1)

    def test_three_of_a_kind_adds_strength(self):
        assert apply(HandType.THREE_OF_A_KIND) == BASE.plus(strength=1)

    def test_straight_adds_agility(self):
        assert apply(HandType.STRAIGHT) == BASE.plus(agility=1)

    def test_flush_adds_life_max(self):
        assert apply(HandType.FLUSH) == BASE.plus(life_max=1)

    def test_full_house_leaves_stats_alone(self):
        assert apply(HandType.FULL_HOUSE) == BASE

    def test_four_of_a_kind_adds_two_attack(self):
        assert apply(HandType.FOUR_OF_A_KIND).attack == BASE.attack + 2

    def test_straight_flush_adds_life_and_ap(self):
        """Both parts of the Straight Flush bonus apply."""
        totals = apply(HandType.STRAIGHT_FLUSH)
        assert totals.life_max == BASE.life_max + 2
        assert totals.ap_max == BASE.ap_max + 1
        assert totals.attack == BASE.attack

    def test_five_of_a_kind_adds_three_attack(self):
        assert apply(HandType.FIVE_OF_A_KIND).attack == BASE.attack + 3

    def test_every_hand_above_high_card_has_a_bonus(self):
        assert set(HAND_BONUSES) == set(HandType) - {HandType.HIGH_CARD}

    def test_bonus_rejects_unknown_stat(self):
        with pytest.raises(ValueError):
            HandBonus(HandType.PAIR, "bad", {"charisma": 1})


class TestDamageReduction:
    def test_full_house_reduces_by_one(self):
        assert reduce_incoming_damage(3, HandClassification.of(HandType.FULL_HOUSE)) == 2

    def test_reduction_floors_at_zero(self):
        assert reduce_incoming_damage(0, HandClassification.of(HandType.FULL_HOUSE)) == 0

    def test_other_hands_take_full_damage(self):
        assert reduce_incoming_damage(3, HandClassification.of(HandType.FLUSH)) == 3
        assert reduce_incoming_damage(3, HIGH_CARD) == 3


class TestBonusText:
    def test_display_names_cover_every_level(self):
        assert len(HAND_DISPLAY_NAMES) == len(HandType)
        assert display_name(HIGH_CARD) == "Desperate Scramble"
        assert display_name(HandClassification.of(HandType.FIVE_OF_A_KIND)) == "Monolithic Quintessence"

    def test_describe_pair(self):
        assert describe_bonus(HandClassification.of(HandType.PAIR)) == "Unified Effort: +1 Attack Score"

    def test_describe_high_card(self):
        assert describe_bonus(HIGH_CARD) == f"Desperate Scramble: {NO_BONUS_TEXT}"
