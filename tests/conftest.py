"""Shared fixtures: the reference character/recipe and stub random sources."""

from __future__ import annotations

import pytest

from xivcraft.engine import Action
from xivcraft.models import (
    CharacterStats,
    CraftingContext,
    CraftingState,
    RecipeStats,
    create_crafting_context,
    create_initial_state,
)


class NoRandom:
    """Random source that fails the test if it is ever consulted."""

    def randint(self, a: int, b: int) -> int:
        raise AssertionError("random source should not be used")


class FixedRandom:
    """Random source that always returns the same value."""

    def __init__(self, value: int):
        self.value = value
        self.calls = 0

    def randint(self, a: int, b: int) -> int:
        assert a <= self.value <= b
        self.calls += 1
        return self.value


REFERENCE_ROTATION = [
    Action.MUSCLE_MEMORY,
    Action.VENERATION,
    Action.WASTE_NOT_2,
    Action.FINAL_APPRAISAL,
    Action.GROUNDWORK,
    Action.CAREFUL_SYNTHESIS,
    Action.CAREFUL_SYNTHESIS,
    Action.INNOVATION,
    Action.BASIC_TOUCH,
    Action.BASIC_TOUCH,
    Action.STANDARD_TOUCH,
    Action.ADVANCED_TOUCH,
    Action.MANIPULATION,
    Action.INNOVATION,
    Action.PRUDENT_TOUCH,
    Action.PRUDENT_TOUCH,
    Action.PRUDENT_TOUCH,
    Action.PRUDENT_TOUCH,
    Action.INNOVATION,
    Action.PRUDENT_TOUCH,
    Action.PRUDENT_TOUCH,
    Action.PRUDENT_TOUCH,
    Action.TRAINED_FINESSE,
    Action.INNOVATION,
    Action.GREAT_STRIDES,
    Action.BYREGOTS_BLESSING,
    Action.BASIC_SYNTHESIS,
]


@pytest.fixture
def character() -> CharacterStats:
    return CharacterStats(craftsmanship=3691, control=3664, max_cp=564, level=90)


@pytest.fixture
def recipe() -> RecipeStats:
    return RecipeStats(
        level=90,
        rlvl=580,
        max_progress=3900,
        max_quality=10920,
        max_durability=70,
        progress_divider=130,
        quality_divider=115,
        progress_modifier=80,
        quality_modifier=70,
    )


@pytest.fixture
def context(character: CharacterStats, recipe: RecipeStats) -> CraftingContext:
    return create_crafting_context(character, recipe)


@pytest.fixture
def specialist_context(character: CharacterStats, recipe: RecipeStats) -> CraftingContext:
    return create_crafting_context(character, recipe, specialist=True)


@pytest.fixture
def initial_state(context: CraftingContext) -> CraftingState:
    return create_initial_state(context)


@pytest.fixture
def rotation() -> list[Action]:
    return list(REFERENCE_ROTATION)


@pytest.fixture
def no_rng() -> NoRandom:
    return NoRandom()


@pytest.fixture
def fixed_rng():
    """Factory for random sources that always roll ``value``."""
    return FixedRandom
