"""
Crafting Models for xivcraft.

- CharacterStats / RecipeStats: resolved numbers from the game tables
- CraftingContext: immutable per-simulation context
- CraftingState: the four tracked resources, condition and buffs for a turn
- StateDelta: the changes one action causes, added to a state to advance it
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from xivcraft.models.buffs import BuffState, create_buff_state
from xivcraft.models.conditions import Condition, RuleSet
from xivcraft.models.quality_map import QualityMapKind

# Level from which regular recipes roll Good more often.
QUALITY_ASSURANCE_LEVEL = 63


# =============================================================================
# Stats
# =============================================================================


class CharacterStats(BaseModel):
    """Crafter stats with gear and food already applied."""

    model_config = ConfigDict(frozen=True)

    craftsmanship: int = Field(ge=0)
    control: int = Field(ge=0)
    max_cp: int = Field(ge=0)
    level: int = Field(ge=1, le=90, description="Class job level")


class RecipeStats(BaseModel):
    """Recipe values resolved from the recipe and recipe level tables."""

    model_config = ConfigDict(frozen=True)

    level: int = Field(ge=1, description="Class job level of the recipe")
    rlvl: int | None = Field(default=None, ge=1, description="Internal recipe level")
    stars: int = Field(default=0, ge=0, le=5)

    max_progress: int = Field(gt=0)
    max_quality: int = Field(ge=0)
    max_durability: int = Field(gt=0)

    progress_divider: int = Field(gt=0)
    quality_divider: int = Field(gt=0)
    progress_modifier: int = Field(default=100, ge=0, description="Percent, below-level penalty")
    quality_modifier: int = Field(default=100, ge=0, description="Percent, below-level penalty")

    conditions_flag: int = Field(default=15, description="Bitmask of legal conditions")


# =============================================================================
# Context
# =============================================================================


class CraftingContext(BaseModel):
    """
    Everything about a craft that never changes between turns.

    Build with ``create_crafting_context`` so the recipe's condition bitmask
    is checked against the rule-set.
    """

    model_config = ConfigDict(frozen=True)

    character: CharacterStats
    recipe: RecipeStats
    rule_set: RuleSet = RuleSet.REGULAR
    quality_map: QualityMapKind = QualityMapKind.HQ
    specialist: bool = False

    @property
    def is_expert(self) -> bool:
        return self.rule_set.is_expert

    @property
    def applies_level_modifiers(self) -> bool:
        """Recipe progress/quality modifiers apply at or below recipe level."""
        return self.character.level <= self.recipe.level

    @property
    def quality_assurance(self) -> bool:
        return self.character.level >= QUALITY_ASSURANCE_LEVEL

    @property
    def base_progress(self) -> float:
        """Progress of a 100% efficiency action under Normal, before flooring."""
        base = self.character.craftsmanship * 10 / self.recipe.progress_divider + 2
        if self.applies_level_modifiers:
            base = base * self.recipe.progress_modifier / 100
        return base

    @property
    def base_quality(self) -> float:
        """Quality of a 100% efficiency action under Normal, before flooring."""
        base = self.character.control * 10 / self.recipe.quality_divider + 35
        if self.applies_level_modifiers:
            base = base * self.recipe.quality_modifier / 100
        return base

    @property
    def base_progress_floor(self) -> int:
        # Integer form of floor(base_progress), free of float rounding
        numerator = self.character.craftsmanship * 10 + 2 * self.recipe.progress_divider
        denominator = self.recipe.progress_divider
        if self.applies_level_modifiers:
            numerator *= self.recipe.progress_modifier
            denominator *= 100
        return numerator // denominator

    @property
    def base_quality_floor(self) -> int:
        numerator = self.character.control * 10 + 35 * self.recipe.quality_divider
        denominator = self.recipe.quality_divider
        if self.applies_level_modifiers:
            numerator *= self.recipe.quality_modifier
            denominator *= 100
        return numerator // denominator


# =============================================================================
# Delta
# =============================================================================


class StateDelta(BaseModel):
    """
    Changes caused by one action.

    ``new_buffs`` replaces the state's buffs wholesale. ``action_durability``
    and ``repair`` are kept apart so the repair can be dropped once the
    craft is over.
    """

    added_progress: int = Field(default=0, ge=0)
    added_quality: int = Field(default=0, ge=0)
    new_buffs: BuffState = Field(default_factory=BuffState)
    action_durability: int = Field(default=0, description="Cost (<0) or restore (>0)")
    repair: int = Field(default=0, ge=0, description="Restored by buffs this turn")
    added_cp: int = Field(default=0, description="Cost (<0) or gain (>0)")
    time_passed: bool = True
    final_appraisal_triggered: bool = False

    @property
    def durability_change(self) -> int:
        return self.action_durability + self.repair


# =============================================================================
# State
# =============================================================================


class CraftingState(BaseModel):
    """
    The authoritative record of a craft at the start of a turn.

    Durability and CP may go non-positive inside a delta computation but are
    clamped to their maximums when a delta is added.
    """

    context: CraftingContext
    progress: int = Field(default=0, ge=0)
    quality: int = Field(default=0, ge=0)
    durability: int
    cp: int
    condition: Condition = Condition.NORMAL
    buffs: BuffState = Field(default_factory=BuffState)
    first_step: bool = True
    step: int = Field(default=0, ge=0, description="Actions applied so far")

    @property
    def character(self) -> CharacterStats:
        return self.context.character

    @property
    def recipe(self) -> RecipeStats:
        return self.context.recipe

    @property
    def missing_progress(self) -> int:
        return max(0, self.recipe.max_progress - self.progress)

    @property
    def missing_quality(self) -> int:
        return max(0, self.recipe.max_quality - self.quality)

    def __add__(self, delta: StateDelta) -> CraftingState:
        if not isinstance(delta, StateDelta):
            return NotImplemented
        return CraftingState(
            context=self.context,
            progress=self.progress + delta.added_progress,
            quality=self.quality + delta.added_quality,
            durability=min(
                self.recipe.max_durability,
                self.durability + delta.repair + delta.action_durability,
            ),
            cp=min(self.character.max_cp, self.cp + delta.added_cp),
            condition=self.condition,
            buffs=delta.new_buffs.model_copy(deep=True),
            first_step=self.first_step and not delta.time_passed,
            step=self.step + 1,
        )

    def apply(self, delta: StateDelta) -> None:
        """Add ``delta`` to this state in place."""
        updated = self + delta
        for name in ("progress", "quality", "durability", "cp", "buffs", "first_step", "step"):
            setattr(self, name, getattr(updated, name))

    def with_next_condition(self, delta: StateDelta, roll: int) -> CraftingState:
        """
        Add ``delta`` and roll the condition for the following turn.

        Args:
            delta: The delta of the action just taken
            roll: A uniform draw in [0, 100)
        """
        updated = self + delta
        updated.condition = self.context.rule_set.sample(
            self.condition, roll, quality_assurance=self.context.quality_assurance
        )
        return updated


# =============================================================================
# Factory Functions
# =============================================================================


def create_crafting_context(
    character: CharacterStats,
    recipe: RecipeStats,
    rule_set: RuleSet | None = None,
    quality_map: QualityMapKind = QualityMapKind.HQ,
    specialist: bool = False,
) -> CraftingContext:
    """
    Create a crafting context for a character and recipe.

    Args:
        character: Crafter stats
        recipe: Recipe stats
        rule_set: Condition rule-set; inferred from the recipe's bitmask if None
        quality_map: How final quality is reported
        specialist: Whether specialist actions are available

    Returns:
        A new CraftingContext

    Raises:
        ConditionMismatchError: If the recipe bitmask doesn't match ``rule_set``
        UnknownConditionFlagError: If no rule-set matches the recipe bitmask
    """
    if rule_set is None:
        rule_set = RuleSet.from_flags(recipe.conditions_flag)
    else:
        rule_set.check_flags(recipe.conditions_flag)

    return CraftingContext(
        character=character,
        recipe=recipe,
        rule_set=rule_set,
        quality_map=quality_map,
        specialist=specialist,
    )


def create_initial_state(context: CraftingContext) -> CraftingState:
    """Create the turn-zero state of a craft."""
    return CraftingState(
        context=context,
        durability=context.recipe.max_durability,
        cp=context.character.max_cp,
        condition=Condition.NORMAL,
        buffs=create_buff_state(specialist=context.specialist),
    )
