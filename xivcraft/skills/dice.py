"""
Dice Rolling Skill.

Rolls dice in NdX+M notation. Callers pass the random source, so seeded
simulations are reproducible; without one, cryptographic randomness is used.
"""

from __future__ import annotations

import re
import secrets
from typing import Protocol

from pydantic import BaseModel, Field


class RandomSource(Protocol):
    """Anything with ``random.Random.randint`` semantics."""

    def randint(self, a: int, b: int) -> int: ...


class DiceResult(BaseModel):
    """Result of a dice roll."""

    notation: str = Field(description="Original dice notation")
    rolls: list[int] = Field(description="Individual die results")
    modifier: int = Field(default=0, description="Any +/- modifier")
    total: int = Field(description="Final result")


def roll_dice(notation: str, rng: RandomSource | None = None) -> DiceResult:
    """
    Roll dice using standard notation.

    Supports:
    - NdX: Roll N dice with X sides (e.g., "1d100", "2d6")
    - NdX+M: Add modifier (e.g., "1d100-1")

    Args:
        notation: Dice notation string
        rng: Random source; cryptographic randomness if None

    Returns:
        DiceResult with individual rolls and total

    Examples:
        >>> result = roll_dice("1d100", rng=random.Random(7))
        >>> 1 <= result.total <= 100
        True
    """
    notation = notation.lower().strip()

    pattern = r"^(\d+)d(\d+)([+-]\d+)?$"
    match = re.match(pattern, notation)

    if not match:
        raise ValueError(f"Invalid dice notation: {notation}")

    num_dice = int(match.group(1))
    die_size = int(match.group(2))
    modifier = int(match.group(3)) if match.group(3) else 0

    if num_dice < 1 or die_size < 1:
        raise ValueError("Number of dice and die size must be positive")

    if rng is None:
        rolls = [secrets.randbelow(die_size) + 1 for _ in range(num_dice)]
    else:
        rolls = [rng.randint(1, die_size) for _ in range(num_dice)]

    return DiceResult(
        notation=notation,
        rolls=rolls,
        modifier=modifier,
        total=sum(rolls) + modifier,
    )


def roll_percentile(rng: RandomSource | None = None) -> int:
    """Uniform roll in [1, 100], used for action success checks."""
    return roll_dice("1d100", rng).total


def roll_condition(rng: RandomSource | None = None) -> int:
    """Uniform roll in [0, 100), used for condition sampling."""
    return roll_dice("1d100-1", rng).total
