"""
Hand Classifier - Ranks up to five equipped cards like a poker hand.

The classifier is an ordered rule table walked from the best hand down.
The first rule whose predicate holds decides the hand; lower rules are
never consulted. Each rule also declares the minimum number of cards it
needs, so three cards can never form a straight.

Levels:
    9 Five of a Kind     4 Straight
    8 Straight Flush     3 Three of a Kind
    7 Four of a Kind     2 Two Pair
    6 Full House         1 Pair
    5 Flush              0 High Card

The function is pure and ignores input order.
"""

from __future__ import annotations
from collections import Counter
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable

from .state import Card, SLOT_COUNT

ACE_HIGH = 14
ACE_LOW = 1
RUN_LENGTH = 5


class HandType(Enum):
    """Hand categories, valued by level (9 = best)."""
    HIGH_CARD = 0
    PAIR = 1
    TWO_PAIR = 2
    THREE_OF_A_KIND = 3
    STRAIGHT = 4
    FLUSH = 5
    FULL_HOUSE = 6
    FOUR_OF_A_KIND = 7
    STRAIGHT_FLUSH = 8
    FIVE_OF_A_KIND = 9

    @property
    def label(self) -> str:
        return HAND_LABELS[self]


HAND_LABELS = {
    HandType.HIGH_CARD: "High Card",
    HandType.PAIR: "Pair",
    HandType.TWO_PAIR: "Two Pair",
    HandType.THREE_OF_A_KIND: "Three of a Kind",
    HandType.STRAIGHT: "Straight",
    HandType.FLUSH: "Flush",
    HandType.FULL_HOUSE: "Full House",
    HandType.FOUR_OF_A_KIND: "Four of a Kind",
    HandType.STRAIGHT_FLUSH: "Straight Flush",
    HandType.FIVE_OF_A_KIND: "Five of a Kind",
}


@dataclass(frozen=True, order=True)
class HandClassification:
    """Result of classifying a hand. Ordered by level."""
    level: int
    name: str

    @property
    def hand_type(self) -> HandType:
        return HandType(self.level)

    @classmethod
    def of(cls, hand_type: HandType) -> HandClassification:
        return cls(level=hand_type.value, name=hand_type.label)


HIGH_CARD = HandClassification.of(HandType.HIGH_CARD)


@dataclass(frozen=True)
class HandFacts:
    """Precomputed counts the rule predicates read."""
    card_count: int
    rank_counts: Counter
    affinities: frozenset[str]
    unique_ranks: frozenset[int]

    @classmethod
    def from_cards(cls, cards: list[Card]) -> HandFacts:
        return cls(
            card_count=len(cards),
            rank_counts=Counter(card.rank for card in cards),
            affinities=frozenset(card.affinity for card in cards),
            unique_ranks=frozenset(card.rank for card in cards),
        )

    def has_count(self, n: int) -> bool:
        return n in self.rank_counts.values()

    def ranks_with_count(self, n: int) -> int:
        return sum(1 for count in self.rank_counts.values() if count == n)

    @property
    def is_flush(self) -> bool:
        return len(self.affinities) == 1

    @property
    def is_straight(self) -> bool:
        """Five consecutive unique ranks, with the Ace allowed low."""
        ranks = set(self.unique_ranks)
        if ACE_HIGH in ranks:
            ranks.add(ACE_LOW)
        return any(
            all(start + offset in ranks for offset in range(RUN_LENGTH))
            for start in ranks
        )


@dataclass(frozen=True)
class HandRule:
    """A hand type, the cards it needs, and the test for it."""
    hand_type: HandType
    min_cards: int
    predicate: Callable[[HandFacts], bool]

    def matches(self, facts: HandFacts) -> bool:
        return facts.card_count >= self.min_cards and self.predicate(facts)


# Best first. classify_hand returns the first match.
HAND_RULES: tuple[HandRule, ...] = (
    HandRule(HandType.FIVE_OF_A_KIND, 5, lambda f: f.has_count(5)),
    HandRule(HandType.STRAIGHT_FLUSH, 5, lambda f: f.is_flush and f.is_straight),
    HandRule(HandType.FOUR_OF_A_KIND, 4, lambda f: f.has_count(4)),
    HandRule(HandType.FULL_HOUSE, 5, lambda f: f.has_count(3) and f.has_count(2)),
    HandRule(HandType.FLUSH, 5, lambda f: f.is_flush),
    HandRule(HandType.STRAIGHT, 5, lambda f: f.is_straight),
    HandRule(HandType.THREE_OF_A_KIND, 3, lambda f: f.has_count(3)),
    HandRule(HandType.TWO_PAIR, 4, lambda f: f.ranks_with_count(2) == 2),
    HandRule(HandType.PAIR, 2, lambda f: f.ranks_with_count(2) == 1),
)


def classify_hand(cards: Iterable[Card]) -> HandClassification:
    """
    Classify 0-5 cards.

    Always returns exactly one classification; no cards is High Card.

    Raises:
        ValueError: more than five cards were given
    """
    cards = list(cards)
    if len(cards) > SLOT_COUNT:
        raise ValueError(f"A hand holds at most {SLOT_COUNT} cards, got {len(cards)}")
    if not cards:
        return HIGH_CARD

    facts = HandFacts.from_cards(cards)
    for rule in HAND_RULES:
        if rule.matches(facts):
            return HandClassification.of(rule.hand_type)
    return HIGH_CARD
