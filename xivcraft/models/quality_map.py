"""
Quality Maps for xivcraft.

A completed craft's final quality is reported either as a chance of a
high-quality result or as a collectability rating.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field

# HQ chance indexed by percentage of max quality reached (0-100).
HQ_CHANCE_TABLE: tuple[int, ...] = (
    1, 1, 1, 1, 1, 2, 2, 2, 2, 3,
    3, 3, 3, 4, 4, 4, 4, 5, 5, 5,
    5, 6, 6, 6, 6, 7, 7, 7, 7, 8,
    8, 8, 9, 9, 9, 10, 10, 10, 11, 11,
    11, 12, 12, 12, 13, 13, 13, 14, 14, 14,
    15, 15, 15, 16, 16, 17, 17, 17, 18, 18,
    18, 19, 19, 20, 20, 21, 22, 23, 24, 26,
    28, 31, 34, 38, 42, 47, 52, 58, 64, 68,
    71, 74, 76, 78, 80, 81, 82, 83, 84, 85,
    86, 87, 88, 89, 90, 91, 92, 94, 96, 98,
    100,
)


class QualityMapKind(str, Enum):
    """How final quality is reported."""

    HQ = "hq"
    COLLECTABILITY = "collectability"


class HQChance(BaseModel):
    """Chance of a high-quality result."""

    percent: int = Field(ge=0, le=100, description="HQ chance in percent")

    @property
    def nq_percent(self) -> int:
        return 100 - self.percent


class Collectability(BaseModel):
    """Collectability rating of a collectable craft."""

    rating: int = Field(ge=0, description="Collectability (quality / 10)")


def quality_percent(quality: int, max_quality: int) -> int:
    """
    Percentage of max quality reached, rounded to nearest.

    Quality beyond the maximum counts as the maximum.
    """
    if max_quality <= 0:
        return 100
    quality = min(quality, max_quality)
    return min(100, (quality * 200 + max_quality) // (max_quality * 2))


def hq_chance(quality: int, max_quality: int) -> HQChance:
    """Look up the HQ chance for a final quality."""
    return HQChance(percent=HQ_CHANCE_TABLE[quality_percent(quality, max_quality)])


def collectability(quality: int, max_quality: int) -> Collectability:
    return Collectability(rating=min(quality, max_quality) // 10)


def map_quality(
    kind: QualityMapKind, quality: int, max_quality: int
) -> HQChance | Collectability:
    """Map final quality to the reporting scheme ``kind``."""
    if kind == QualityMapKind.COLLECTABILITY:
        return collectability(quality, max_quality)
    return hq_chance(quality, max_quality)
