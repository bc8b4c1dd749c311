"""
Stateless Skills for xivcraft.

Skills are pure functions that:
- Take structured input
- Never own a random source; callers pass one in
- Return structured output (Pydantic models)
"""

from xivcraft.skills.dice import (
    DiceResult,
    RandomSource,
    roll_condition,
    roll_dice,
    roll_percentile,
)

__all__ = [
    # Dice
    "roll_dice",
    "roll_percentile",
    "roll_condition",
    "DiceResult",
    "RandomSource",
]
