"""
Grim Hand - Character stat resolution and equipment hand engine.

Turns a character's race, class and affinity plus up to five equipped
item cards into derived stats:
- Attribute bundles summed per selection
- Affinity alignment bonuses per item
- Poker-style classification of the equipped cards
- A player-editable arithmetic formula over the results
"""

__version__ = "0.1.0"
