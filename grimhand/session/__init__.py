"""
Session Module - Character sheets and their lifecycle.

A sheet wraps one character:
- Holds selections, equipment and resource counters
- Recomputes derived stats and the formula after every edit
- Lives in memory only
"""

from .sheet import CharacterSheet, SheetSnapshot, RESOURCE_FIELDS
from .manager import SheetManager, ManagedSheet

__all__ = [
    "CharacterSheet",
    "SheetSnapshot",
    "RESOURCE_FIELDS",
    "SheetManager",
    "ManagedSheet",
]
