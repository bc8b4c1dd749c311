"""
Crafting Actions for xivcraft.

Every action is a row of plain data (ACTION_DATA) plus the handful of
actions whose rules don't fit the generic formulas, which are handled as
explicit branches. Both ``Action`` and its failure stand-in ``NullFailure``
expose the same capabilities:

- progress(state) / quality(state, new_buffs)
- durability(state) / cp_cost(state)
- deactivate_buffs(state, new_buffs) / apply_buffs(state, new_buffs)
- can_execute(state) / fail_rate(state)
- level() / time_passes()

All formulas use integer arithmetic so results match the game exactly.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from xivcraft.models.buffs import BuffState, WasteNotLevel
from xivcraft.models.crafting import CraftingState


# =============================================================================
# Action Data
# =============================================================================


class ActionData(BaseModel):
    """Per-action constants consumed by the generic formulas."""

    model_config = ConfigDict(frozen=True)

    level: int = Field(ge=1, description="Class job level that learns the action")
    cp_cost: int = Field(default=0, description="Negative costs CP, positive grants it")
    durability: int = Field(default=0, description="Negative costs durability, positive restores")
    progress_efficiency: int = Field(default=0, ge=0, description="Percent")
    quality_efficiency: int = Field(default=0, ge=0, description="Percent")
    fail_rate: int = Field(default=0, ge=0, le=100, description="Percent")
    time_passes: bool = True
    inner_quiet_stacks: int = Field(default=0, ge=0, description="Stacks gained on success")
    progress_trait: tuple[int, int] | None = Field(
        default=None, description="(level, efficiency) of a trait upgrading progress efficiency"
    )


class Action(str, Enum):
    """Every crafter action."""

    BASIC_SYNTHESIS = "basic_synthesis"
    BASIC_TOUCH = "basic_touch"
    MASTERS_MEND = "masters_mend"
    HASTY_TOUCH = "hasty_touch"
    RAPID_SYNTHESIS = "rapid_synthesis"
    OBSERVE = "observe"
    TRICKS_OF_THE_TRADE = "tricks_of_the_trade"
    WASTE_NOT = "waste_not"
    VENERATION = "veneration"
    STANDARD_TOUCH = "standard_touch"
    GREAT_STRIDES = "great_strides"
    INNOVATION = "innovation"
    FINAL_APPRAISAL = "final_appraisal"
    WASTE_NOT_2 = "waste_not_2"
    BYREGOTS_BLESSING = "byregots_blessing"
    PRECISE_TOUCH = "precise_touch"
    MUSCLE_MEMORY = "muscle_memory"
    CAREFUL_OBSERVATION = "careful_observation"
    CAREFUL_SYNTHESIS = "careful_synthesis"
    PATIENT_TOUCH = "patient_touch"
    MANIPULATION = "manipulation"
    PRUDENT_TOUCH = "prudent_touch"
    FOCUSED_SYNTHESIS = "focused_synthesis"
    FOCUSED_TOUCH = "focused_touch"
    REFLECT = "reflect"
    PREPARATORY_TOUCH = "preparatory_touch"
    GROUNDWORK = "groundwork"
    DELICATE_SYNTHESIS = "delicate_synthesis"
    INTENSIVE_SYNTHESIS = "intensive_synthesis"
    TRAINED_EYE = "trained_eye"
    ADVANCED_TOUCH = "advanced_touch"
    HEART_AND_SOUL = "heart_and_soul"
    PRUDENT_SYNTHESIS = "prudent_synthesis"
    TRAINED_FINESSE = "trained_finesse"

    @property
    def data(self) -> ActionData:
        return ACTION_DATA[self]

    # -------------------------------------------------------------------------
    # Level and time
    # -------------------------------------------------------------------------

    def level(self) -> int:
        """Class job level required to use the action."""
        return self.data.level

    def time_passes(self) -> bool:
        """Whether buffs tick down and the condition changes after use."""
        return self.data.time_passes

    # -------------------------------------------------------------------------
    # Progress and quality
    # -------------------------------------------------------------------------

    def progress_efficiency(self, state: CraftingState) -> int:
        """Base progress efficiency in percent, before buffs."""
        data = self.data
        efficiency = data.progress_efficiency
        if data.progress_trait is not None and state.character.level >= data.progress_trait[0]:
            efficiency = data.progress_trait[1]

        if self is Action.GROUNDWORK and -self.durability(state) > state.durability:
            efficiency //= 2
        return efficiency

    def quality_efficiency(self, state: CraftingState) -> int:
        """Base quality efficiency in percent, before buffs."""
        if self is Action.BYREGOTS_BLESSING:
            return 100 + 20 * state.buffs.quality.inner_quiet.stacks
        return self.data.quality_efficiency

    def progress(self, state: CraftingState) -> int:
        """Progress added by the action in ``state``."""
        efficiency = self.progress_efficiency(state)
        if efficiency == 0:
            return 0
        context = state.context
        return (
            context.base_progress_floor
            * state.condition.to_progress_modifier()
            * (100 + state.buffs.progress.efficiency_mod())
            * efficiency
        ) // 1_000_000

    def quality(self, state: CraftingState, new_buffs: BuffState) -> int:
        """
        Quality added by the action in ``state``.

        Buffs the quality formula itself consumes (Byregot's Blessing eating
        Inner Quiet) are cleared from ``new_buffs`` here.
        """
        if self is Action.TRAINED_EYE:
            return state.missing_quality

        efficiency = self.quality_efficiency(state)
        if efficiency == 0:
            return 0

        quality_buffs = state.buffs.quality
        added = (
            state.context.base_quality_floor
            * state.condition.to_quality_modifier()
            * (100 + quality_buffs.efficiency_mod())
            * quality_buffs.inner_quiet.efficiency_factor()
            * efficiency
        ) // 100_000_000

        if self is Action.BYREGOTS_BLESSING and new_buffs.quality.inner_quiet.is_active():
            new_buffs.quality.inner_quiet.deactivate()
        return added

    # -------------------------------------------------------------------------
    # Costs
    # -------------------------------------------------------------------------

    def base_cp_cost(self, state: CraftingState) -> int:
        combo = state.buffs.combo
        if self is Action.STANDARD_TOUCH and combo.basic_touch.is_active():
            return -18
        if self is Action.ADVANCED_TOUCH and combo.standard_touch.is_active():
            return -18
        return self.data.cp_cost

    def cp_cost(self, state: CraftingState) -> int:
        """CP change caused by the action; negative for costs."""
        base = self.base_cp_cost(state)
        if base == 0:
            return 0
        if base > 0:
            return base if state.condition.is_good_or_excellent() else 0
        # Truncate toward zero
        return -((-base * state.condition.to_cp_usage_modifier()) // 100)

    def durability(self, state: CraftingState) -> int:
        """Durability change caused by the action; negative for costs."""
        base = self.data.durability
        if base >= 0:
            return base
        return (
            base
            * state.condition.to_durability_modifier()
            * state.buffs.durability.durability_cost_mod()
        ) // 10_000

    def fail_rate(self, state: CraftingState) -> int:
        """Chance in percent that the action fails."""
        base = self.data.fail_rate
        if self in _OBSERVE_COMBO_ACTIONS and state.buffs.combo.observation.is_active():
            base = 0
        return max(0, base - state.condition.to_success_rate_modifier())

    # -------------------------------------------------------------------------
    # Executability
    # -------------------------------------------------------------------------

    def can_execute(self, state: CraftingState) -> bool:
        """Whether the action may be used in ``state``, ignoring CP."""
        if state.character.level < self.level():
            return False

        buffs = state.buffs
        if self in _FIRST_STEP_ACTIONS and not state.first_step:
            return False
        if self in _GOOD_ONLY_ACTIONS:
            return state.condition.is_good_or_excellent() or buffs.heart_and_soul.is_active()
        if self in (Action.PRUDENT_TOUCH, Action.PRUDENT_SYNTHESIS):
            return not buffs.durability.waste_not.is_active()
        if self is Action.BYREGOTS_BLESSING:
            return buffs.quality.inner_quiet.is_active()
        if self is Action.TRAINED_FINESSE:
            return buffs.quality.inner_quiet.stacks == buffs.quality.inner_quiet.MAX_STACKS
        if self is Action.TRAINED_EYE:
            return not state.context.is_expert and state.recipe.level + 10 <= state.character.level
        if self is Action.CAREFUL_OBSERVATION:
            return buffs.specialist_actions.actions_available()
        if self is Action.HEART_AND_SOUL:
            return (
                buffs.specialist_actions.actions_available()
                and buffs.heart_and_soul.is_available()
            )
        return True

    # -------------------------------------------------------------------------
    # Buff hooks
    # -------------------------------------------------------------------------

    def deactivate_buffs(self, state: CraftingState, new_buffs: BuffState) -> None:
        """Consume buffs used up by this action, before buffs decay."""
        if self.progress_efficiency(state) > 0 and new_buffs.progress.muscle_memory.is_active():
            new_buffs.progress.muscle_memory.deactivate()

        increases_quality = self.data.quality_efficiency > 0 or self is Action.TRAINED_EYE
        if increases_quality and new_buffs.quality.great_strides.is_active():
            new_buffs.quality.great_strides.deactivate()

        if self is Action.MANIPULATION and new_buffs.durability.manipulation.is_active():
            new_buffs.durability.manipulation.deactivate()

        if (
            self in _GOOD_ONLY_ACTIONS
            and not state.condition.is_good_or_excellent()
            and new_buffs.heart_and_soul.is_active()
        ):
            new_buffs.heart_and_soul.deactivate()

    def apply_buffs(self, state: CraftingState, new_buffs: BuffState) -> None:
        """Start the buffs this action grants, after buffs decay."""
        bonus = state.condition.to_status_duration_modifier()

        stacks = self.data.inner_quiet_stacks
        if self is Action.PATIENT_TOUCH:
            inner_quiet = new_buffs.quality.inner_quiet
            inner_quiet.add(max(1, inner_quiet.stacks))
        elif stacks:
            new_buffs.quality.inner_quiet.add(stacks)

        if self is Action.BASIC_TOUCH:
            new_buffs.combo.basic_touch.activate()
        elif self is Action.STANDARD_TOUCH and state.buffs.combo.basic_touch.is_active():
            new_buffs.combo.standard_touch.activate()
        elif self is Action.OBSERVE:
            new_buffs.combo.observation.activate()
        elif self is Action.WASTE_NOT:
            new_buffs.durability.waste_not.activate(bonus, WasteNotLevel.WASTE_NOT)
        elif self is Action.WASTE_NOT_2:
            new_buffs.durability.waste_not.activate(bonus, WasteNotLevel.WASTE_NOT_2)
        elif self is Action.MANIPULATION:
            new_buffs.durability.manipulation.activate(bonus)
        elif self is Action.VENERATION:
            new_buffs.progress.veneration.activate(bonus)
        elif self is Action.MUSCLE_MEMORY:
            new_buffs.progress.muscle_memory.activate(bonus)
        elif self is Action.FINAL_APPRAISAL:
            new_buffs.progress.final_appraisal.activate(bonus)
        elif self is Action.INNOVATION:
            new_buffs.quality.innovation.activate(bonus)
        elif self is Action.GREAT_STRIDES:
            new_buffs.quality.great_strides.activate(bonus)
        elif self in (Action.CAREFUL_OBSERVATION, Action.HEART_AND_SOUL):
            # Infeasible uses are still evaluated prospectively
            if new_buffs.specialist_actions.actions_available():
                new_buffs.specialist_actions.spend()
            if self is Action.HEART_AND_SOUL and new_buffs.heart_and_soul.is_available():
                new_buffs.heart_and_soul.activate()

    # -------------------------------------------------------------------------
    # Failure
    # -------------------------------------------------------------------------

    def failure(self) -> NullFailure:
        """The stand-in executed when this action fails."""
        return NullFailure(action=self)


_FIRST_STEP_ACTIONS = frozenset({Action.MUSCLE_MEMORY, Action.REFLECT, Action.TRAINED_EYE})

_GOOD_ONLY_ACTIONS = frozenset(
    {Action.TRICKS_OF_THE_TRADE, Action.PRECISE_TOUCH, Action.INTENSIVE_SYNTHESIS}
)

_OBSERVE_COMBO_ACTIONS = frozenset(
    {Action.FOCUSED_SYNTHESIS, Action.FOCUSED_TOUCH, Action.PATIENT_TOUCH}
)


# =============================================================================
# Failure Stand-in
# =============================================================================


class NullFailure(BaseModel):
    """
    A failed attempt at ``action``.

    Costs the same CP and durability as the real action but adds no progress
    or quality and grants no buffs. A failed Patient Touch halves Inner Quiet.
    """

    model_config = ConfigDict(frozen=True)

    action: Action

    def level(self) -> int:
        return self.action.level()

    def time_passes(self) -> bool:
        return self.action.time_passes()

    def progress(self, state: CraftingState) -> int:
        return 0

    def quality(self, state: CraftingState, new_buffs: BuffState) -> int:
        return 0

    def cp_cost(self, state: CraftingState) -> int:
        return self.action.cp_cost(state)

    def durability(self, state: CraftingState) -> int:
        return self.action.durability(state)

    def fail_rate(self, state: CraftingState) -> int:
        return 0

    def can_execute(self, state: CraftingState) -> bool:
        return self.action.can_execute(state)

    def deactivate_buffs(self, state: CraftingState, new_buffs: BuffState) -> None:
        pass

    def apply_buffs(self, state: CraftingState, new_buffs: BuffState) -> None:
        if self.action is Action.PATIENT_TOUCH:
            new_buffs.quality.inner_quiet.halve()

    def failure(self) -> NullFailure:
        return self


CraftingAction = Action | NullFailure


# =============================================================================
# Action Table
# =============================================================================

ACTION_DATA: dict[Action, ActionData] = {
    Action.BASIC_SYNTHESIS: ActionData(
        level=1, durability=-10, progress_efficiency=100, progress_trait=(31, 120)
    ),
    Action.BASIC_TOUCH: ActionData(
        level=5, cp_cost=-18, durability=-10, quality_efficiency=100, inner_quiet_stacks=1
    ),
    Action.MASTERS_MEND: ActionData(level=7, cp_cost=-88, durability=30),
    Action.HASTY_TOUCH: ActionData(
        level=9, durability=-10, quality_efficiency=100, fail_rate=40, inner_quiet_stacks=1
    ),
    Action.RAPID_SYNTHESIS: ActionData(
        level=9, durability=-10, progress_efficiency=250, fail_rate=50, progress_trait=(63, 500)
    ),
    Action.OBSERVE: ActionData(level=13, cp_cost=-7),
    Action.TRICKS_OF_THE_TRADE: ActionData(level=13, cp_cost=20),
    Action.WASTE_NOT: ActionData(level=15, cp_cost=-56),
    Action.VENERATION: ActionData(level=15, cp_cost=-18),
    Action.STANDARD_TOUCH: ActionData(
        level=18, cp_cost=-32, durability=-10, quality_efficiency=125, inner_quiet_stacks=1
    ),
    Action.GREAT_STRIDES: ActionData(level=21, cp_cost=-32),
    Action.INNOVATION: ActionData(level=26, cp_cost=-18),
    Action.FINAL_APPRAISAL: ActionData(level=42, cp_cost=-1, time_passes=False),
    Action.WASTE_NOT_2: ActionData(level=47, cp_cost=-98),
    Action.BYREGOTS_BLESSING: ActionData(
        level=50, cp_cost=-24, durability=-10, quality_efficiency=100
    ),
    Action.PRECISE_TOUCH: ActionData(
        level=53, cp_cost=-18, durability=-10, quality_efficiency=150, inner_quiet_stacks=2
    ),
    Action.MUSCLE_MEMORY: ActionData(
        level=54, cp_cost=-6, durability=-10, progress_efficiency=300
    ),
    Action.CAREFUL_OBSERVATION: ActionData(level=55, time_passes=False),
    Action.CAREFUL_SYNTHESIS: ActionData(
        level=62, cp_cost=-7, durability=-10, progress_efficiency=150, progress_trait=(82, 180)
    ),
    Action.PATIENT_TOUCH: ActionData(
        level=64, cp_cost=-6, durability=-10, quality_efficiency=100, fail_rate=50
    ),
    Action.MANIPULATION: ActionData(level=65, cp_cost=-96),
    Action.PRUDENT_TOUCH: ActionData(
        level=66, cp_cost=-25, durability=-5, quality_efficiency=100, inner_quiet_stacks=1
    ),
    Action.FOCUSED_SYNTHESIS: ActionData(
        level=67, cp_cost=-5, durability=-10, progress_efficiency=200, fail_rate=50
    ),
    Action.FOCUSED_TOUCH: ActionData(
        level=68,
        cp_cost=-18,
        durability=-10,
        quality_efficiency=150,
        fail_rate=50,
        inner_quiet_stacks=1,
    ),
    Action.REFLECT: ActionData(
        level=69, cp_cost=-6, durability=-10, quality_efficiency=100, inner_quiet_stacks=2
    ),
    Action.PREPARATORY_TOUCH: ActionData(
        level=71, cp_cost=-40, durability=-20, quality_efficiency=200, inner_quiet_stacks=2
    ),
    Action.GROUNDWORK: ActionData(
        level=72, cp_cost=-18, durability=-20, progress_efficiency=300, progress_trait=(86, 360)
    ),
    Action.DELICATE_SYNTHESIS: ActionData(
        level=76,
        cp_cost=-32,
        durability=-10,
        progress_efficiency=100,
        quality_efficiency=100,
        inner_quiet_stacks=1,
    ),
    Action.INTENSIVE_SYNTHESIS: ActionData(
        level=78, cp_cost=-6, durability=-10, progress_efficiency=400
    ),
    Action.TRAINED_EYE: ActionData(level=80, cp_cost=-250, durability=-10),
    Action.ADVANCED_TOUCH: ActionData(
        level=84, cp_cost=-46, durability=-10, quality_efficiency=150, inner_quiet_stacks=1
    ),
    Action.HEART_AND_SOUL: ActionData(level=86, time_passes=False),
    Action.PRUDENT_SYNTHESIS: ActionData(
        level=88, cp_cost=-18, durability=-5, progress_efficiency=180
    ),
    Action.TRAINED_FINESSE: ActionData(
        level=90, cp_cost=-32, quality_efficiency=100, inner_quiet_stacks=1
    ),
}
