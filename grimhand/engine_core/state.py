"""
Character State - The mutable character record the engine reads.

Design principles:
- Five fixed equipment slots; slots are cleared, never removed
- Cards are derived from slots, never stored
- Current life/AP are clamped into [0, max] whenever max changes
- Derived stats are NOT stored here; they are recomputed from this state
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any
from copy import deepcopy

from .errors import UnknownSlotError

SLOT_COUNT = 5
SLOT_IDS: tuple[str, ...] = tuple(f"slot{i + 1}" for i in range(SLOT_COUNT))

MIN_RANK = 2
MAX_RANK = 14

FACE_RANKS = {
    "J": 11,
    "Q": 12,
    "K": 13,
    "A": 14,
}

RANK_LABELS = {value: label for label, value in FACE_RANKS.items()}


def parse_rank(value: Any) -> int | None:
    """
    Convert rank text ("2".."10", "J", "Q", "K", "A") or an int to 2..14.

    Returns None for anything that does not land in the rank domain;
    such a slot simply does not contribute a card.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        rank = value
    else:
        text = str(value).strip().upper()
        if not text:
            return None
        if text in FACE_RANKS:
            return FACE_RANKS[text]
        if not (text.isascii() and text.isdigit()):
            return None
        rank = int(text)
    if MIN_RANK <= rank <= MAX_RANK:
        return rank
    return None


def rank_label(rank: int) -> str:
    """Display label for a rank value (14 -> "A")."""
    return RANK_LABELS.get(rank, str(rank))


@dataclass(frozen=True)
class Card:
    """
    A (rank, affinity) pair used for hand classification.

    Ace is 14; it also completes the low run 2-3-4-5-A.
    """
    rank: int
    affinity: str

    def __post_init__(self):
        if not MIN_RANK <= self.rank <= MAX_RANK:
            raise ValueError(f"Card rank must be {MIN_RANK}..{MAX_RANK}, got {self.rank}")
        if not self.affinity:
            raise ValueError("Card affinity is required")

    def __str__(self) -> str:
        return f"{rank_label(self.rank)}:{self.affinity}"


@dataclass
class EquippedItem:
    """
    One equipment slot.

    The slot_id never changes. Equipping and unequipping overwrite
    the other fields in place. A slot without both rank and affinity
    is empty or incomplete and yields no card.
    """
    slot_id: str
    item_name: str | None = None
    rank: int | None = None
    affinity: str | None = None
    primary_effect_text: str = ""

    @property
    def is_empty(self) -> bool:
        return self.item_name is None and self.rank is None and self.affinity is None

    @property
    def is_complete(self) -> bool:
        return self.rank is not None and bool(self.affinity)

    def fill(
        self,
        item_name: str | None,
        rank: Any,
        affinity: str | None,
        primary_effect_text: str = "",
    ) -> None:
        """Overwrite the slot contents, parsing rank text into 2..14."""
        self.item_name = item_name or None
        self.rank = parse_rank(rank)
        self.affinity = affinity.strip() if affinity and affinity.strip() else None
        self.primary_effect_text = primary_effect_text or ""

    def clear(self) -> None:
        """Empty the slot, keeping its identity."""
        self.item_name = None
        self.rank = None
        self.affinity = None
        self.primary_effect_text = ""

    def to_card(self) -> Card | None:
        """Card for this slot, or None if rank or affinity is missing."""
        if not self.is_complete:
            return None
        return Card(rank=self.rank, affinity=self.affinity)


def _empty_slots() -> list[EquippedItem]:
    return [EquippedItem(slot_id=slot_id) for slot_id in SLOT_IDS]


@dataclass
class Character:
    """
    A character: selections, equipment and resource counters.

    life_max and ap_max mirror the grand totals of the last resolve;
    the sheet updates them (and clamps current values) after each change.
    """
    name: str = "New Recruit"
    race: str = "Human"
    class_name: str = "Warrior"
    affinity: str = "Iron"

    equipped_items: list[EquippedItem] = field(default_factory=_empty_slots)

    # Resource counters
    life_current: int = 0
    life_max: int = 0
    ap_current: int = 0
    ap_max: int = 0
    gold: int = 0
    xp: int = 0
    doubt: int = 0
    corruption: int = 0

    def __post_init__(self):
        if [item.slot_id for item in self.equipped_items] != list(SLOT_IDS):
            raise ValueError(f"Character needs exactly the slots {SLOT_IDS}")

    def get_slot(self, slot_id: str) -> EquippedItem:
        """Get a slot by id."""
        for item in self.equipped_items:
            if item.slot_id == slot_id:
                return item
        raise UnknownSlotError(slot_id)

    def cards(self) -> list[Card]:
        """Cards from every complete slot, in slot order."""
        return [card for card in (item.to_card() for item in self.equipped_items) if card]

    def set_maxima(self, life_max: int, ap_max: int) -> None:
        """Set max life/AP and clamp current values into [0, max]."""
        self.life_max = max(0, life_max)
        self.ap_max = max(0, ap_max)
        self.life_current = clamp(self.life_current, 0, self.life_max)
        self.ap_current = clamp(self.ap_current, 0, self.ap_max)

    def clone(self) -> Character:
        """Deep copy the character."""
        return deepcopy(self)


def clamp(value: int, low: int, high: int | None = None) -> int:
    """Clamp value into [low, high]; high=None means no upper bound."""
    if high is not None and value > high:
        value = high
    return max(low, value)
