"""
Engine Errors - Exception taxonomy for the stat engine.

Only caller mistakes and formula problems are raised:
- Unknown selections, slots, items or counters (KeyError subclasses)
- Formula syntax errors (text is not restricted arithmetic)
- Formula result errors (parsed fine, evaluated to a non-finite value)

Malformed equipment data (a slot missing rank or affinity) is never raised.
Such slots are dropped before hand evaluation.
"""

from __future__ import annotations


class GrimHandError(Exception):
    """Base class for engine errors."""


class UnknownSelectionError(GrimHandError, KeyError):
    """A race, class or affinity name is missing from the attribute table."""

    def __init__(self, category: str, name: str):
        self.category = category
        self.name = name
        super().__init__(f"Unknown {category}: {name!r}")

    def __str__(self) -> str:
        return self.args[0]


class UnknownSlotError(GrimHandError, KeyError):
    """Slot id is not one of the five equipment slots."""

    def __init__(self, slot_id: str):
        self.slot_id = slot_id
        super().__init__(f"Unknown equipment slot: {slot_id!r}")

    def __str__(self) -> str:
        return self.args[0]


class UnknownItemError(GrimHandError, KeyError):
    """The equipment catalog has no item with this name."""

    def __init__(self, item_name: str):
        self.item_name = item_name
        super().__init__(f"Unknown item: {item_name!r}")

    def __str__(self) -> str:
        return self.args[0]


class UnknownResourceError(GrimHandError, KeyError):
    """Resource counter name is not editable."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown resource counter: {name!r}")

    def __str__(self) -> str:
        return self.args[0]


class FormulaError(GrimHandError):
    """Base class for formula failures. error_kind is "syntax" or "result"."""
    error_kind = "formula"


class FormulaSyntaxError(FormulaError):
    """Formula text does not parse as arithmetic over the known variables."""
    error_kind = "syntax"

    def __init__(self, message: str, position: int | None = None):
        self.position = position
        if position is not None:
            message = f"{message} (at position {position})"
        super().__init__(message)


class FormulaResultError(FormulaError):
    """Formula parsed but produced a non-finite or non-numeric value."""
    error_kind = "result"
