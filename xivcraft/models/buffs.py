"""
Buff Models for xivcraft.

Buffs are grouped by the resource they affect. Every group supports the same
lifecycle:

- activate(bonus): start (or restart) the buff for its base duration plus bonus
- decay_in_place() / decay(): one turn passes
- deactivate(): consume the buff, returning what was left of it

Contract violations (decaying by more than one turn, consuming an inactive
buff, exceeding the specialist charge cap) are assertions.
"""

from __future__ import annotations

from enum import Enum
from typing import ClassVar

from pydantic import BaseModel, Field


# =============================================================================
# Buff Primitives
# =============================================================================


class DurationalBuff(BaseModel):
    """
    A buff that lasts a fixed number of turns.

    ``remaining`` is the number of turns left; zero means inactive.
    """

    BASE_DURATION: ClassVar[int] = 1

    remaining: int = Field(default=0, ge=0, description="Turns left, 0 when inactive")

    def is_active(self) -> bool:
        return self.remaining > 0

    def activate(self, bonus: int = 0) -> None:
        """
        Set the buff to its base duration plus ``bonus``.

        Re-activating an active buff overwrites its duration rather than
        extending it.
        """
        self.remaining = self.BASE_DURATION + bonus

    def decay_in_place(self, amount: int = 1) -> None:
        """Advance the buff by one turn, saturating at inactive."""
        assert amount == 1, f"Buffs decay one turn at a time, got {amount}"
        if self.remaining > 0:
            self.remaining -= 1

    def decay(self, amount: int = 1) -> DurationalBuff:
        """Return a copy of this buff advanced by one turn."""
        decayed = self.model_copy()
        decayed.decay_in_place(amount)
        return decayed

    def deactivate(self) -> int:
        """
        Consume the buff.

        Returns:
            The number of turns that were left
        """
        assert self.is_active(), f"{type(self).__name__} is not active"
        remaining = self.remaining
        self.remaining = 0
        return remaining


class EfficiencyBuff(DurationalBuff):
    """A durational buff adding a flat percentage to action efficiency."""

    EFFICIENCY: ClassVar[int] = 0

    def efficiency_mod(self) -> int:
        return self.EFFICIENCY if self.is_active() else 0


class ComboFlag(DurationalBuff):
    """Eligibility granted for exactly the next action."""

    BASE_DURATION: ClassVar[int] = 1


# =============================================================================
# Quality Buffs
# =============================================================================


class InnerQuiet(BaseModel):
    """Stacking quality buff; each stack adds 10% to quality gains."""

    MAX_STACKS: ClassVar[int] = 10

    stacks: int = Field(default=0, ge=0, le=10, description="Inner Quiet stacks")

    def is_active(self) -> bool:
        return self.stacks > 0

    def add(self, amount: int = 1) -> None:
        """Gain stacks, capped at MAX_STACKS."""
        self.stacks = min(self.MAX_STACKS, self.stacks + amount)

    def halve(self) -> None:
        self.stacks //= 2

    def double(self) -> None:
        self.add(self.stacks)

    def deactivate(self) -> int:
        """Consume all stacks, returning how many there were."""
        assert self.is_active(), "Inner Quiet is not active"
        stacks = self.stacks
        self.stacks = 0
        return stacks

    def efficiency_factor(self) -> int:
        """Multiplicative percentage applied to quality gains."""
        return 100 + 10 * self.stacks


class Innovation(EfficiencyBuff):
    BASE_DURATION: ClassVar[int] = 4
    EFFICIENCY: ClassVar[int] = 50


class GreatStrides(EfficiencyBuff):
    """Consumed by the next action that increases quality."""

    BASE_DURATION: ClassVar[int] = 3
    EFFICIENCY: ClassVar[int] = 100


class QualityBuffs(BaseModel):
    """Buffs affecting quality gains."""

    inner_quiet: InnerQuiet = Field(default_factory=InnerQuiet)
    innovation: Innovation = Field(default_factory=Innovation)
    great_strides: GreatStrides = Field(default_factory=GreatStrides)

    def efficiency_mod(self) -> int:
        """Additive bonus to quality efficiency from durational buffs."""
        return self.innovation.efficiency_mod() + self.great_strides.efficiency_mod()

    def decay_in_place(self) -> None:
        self.innovation.decay_in_place()
        self.great_strides.decay_in_place()


# =============================================================================
# Progress Buffs
# =============================================================================


class Veneration(EfficiencyBuff):
    BASE_DURATION: ClassVar[int] = 4
    EFFICIENCY: ClassVar[int] = 50


class MuscleMemory(EfficiencyBuff):
    """Consumed by the next action that increases progress."""

    BASE_DURATION: ClassVar[int] = 5
    EFFICIENCY: ClassVar[int] = 100


class FinalAppraisal(DurationalBuff):
    """Stops the next progress gain that would complete the craft."""

    BASE_DURATION: ClassVar[int] = 5


class ProgressBuffs(BaseModel):
    """Buffs affecting progress gains."""

    veneration: Veneration = Field(default_factory=Veneration)
    muscle_memory: MuscleMemory = Field(default_factory=MuscleMemory)
    final_appraisal: FinalAppraisal = Field(default_factory=FinalAppraisal)

    def efficiency_mod(self) -> int:
        """Additive bonus to progress efficiency."""
        return self.veneration.efficiency_mod() + self.muscle_memory.efficiency_mod()

    def decay_in_place(self) -> None:
        self.veneration.decay_in_place()
        self.muscle_memory.decay_in_place()
        self.final_appraisal.decay_in_place()


# =============================================================================
# Durability Buffs
# =============================================================================


class Manipulation(DurationalBuff):
    """Restores durability each turn that time passes."""

    BASE_DURATION: ClassVar[int] = 8
    REPAIR: ClassVar[int] = 5

    def repair(self) -> int:
        return self.REPAIR if self.is_active() else 0


class WasteNotLevel(str, Enum):
    """Strength of an active Waste Not."""

    NONE = "none"
    WASTE_NOT = "waste_not"  # 4 turns
    WASTE_NOT_2 = "waste_not_2"  # 8 turns


class WasteNot(DurationalBuff):
    """Halves durability costs; the two levels differ only in duration."""

    BASE_DURATION: ClassVar[int] = 4
    LEVEL_DURATIONS: ClassVar[dict[WasteNotLevel, int]] = {
        WasteNotLevel.NONE: 0,
        WasteNotLevel.WASTE_NOT: 4,
        WasteNotLevel.WASTE_NOT_2: 8,
    }
    COST_MODIFIER: ClassVar[int] = 50

    level: WasteNotLevel = WasteNotLevel.NONE

    def activate(self, bonus: int = 0, level: WasteNotLevel = WasteNotLevel.WASTE_NOT) -> None:
        assert level is not WasteNotLevel.NONE, "Activate Waste Not with a real level"
        self.level = level
        self.remaining = self.LEVEL_DURATIONS[level] + bonus

    def decay_in_place(self, amount: int = 1) -> None:
        super().decay_in_place(amount)
        if self.remaining == 0:
            self.level = WasteNotLevel.NONE

    def deactivate(self) -> int:
        remaining = super().deactivate()
        self.level = WasteNotLevel.NONE
        return remaining

    def durability_cost_mod(self) -> int:
        """Percentage applied to durability costs."""
        return self.COST_MODIFIER if self.is_active() else 100


class DurabilityBuffs(BaseModel):
    """Buffs affecting durability."""

    manipulation: Manipulation = Field(default_factory=Manipulation)
    waste_not: WasteNot = Field(default_factory=WasteNot)

    def durability_cost_mod(self) -> int:
        return self.waste_not.durability_cost_mod()

    def repair(self) -> int:
        """Durability restored at the end of a turn in which time passes."""
        return self.manipulation.repair()

    def decay_in_place(self) -> None:
        self.manipulation.decay_in_place()
        self.waste_not.decay_in_place()


# =============================================================================
# Combos
# =============================================================================


class ComboBuffs(BaseModel):
    """
    Single-turn flags left by one action for the next.

    These decay even when time does not pass.
    """

    basic_touch: ComboFlag = Field(default_factory=ComboFlag)
    standard_touch: ComboFlag = Field(default_factory=ComboFlag)
    observation: ComboFlag = Field(default_factory=ComboFlag)

    def decay_in_place(self) -> None:
        self.basic_touch.decay_in_place()
        self.standard_touch.decay_in_place()
        self.observation.decay_in_place()


# =============================================================================
# Specialist / One-shot Buffs
# =============================================================================


class SpecialistActions(BaseModel):
    """
    Specialist action charges.

    ``charges`` is None for non-specialists, 0 once every charge is spent,
    and 1-3 while charges remain.
    """

    MAX_CHARGES: ClassVar[int] = 3

    charges: int | None = Field(default=None, ge=0, le=3)

    @property
    def is_specialist(self) -> bool:
        return self.charges is not None

    def actions_available(self) -> bool:
        return bool(self.charges)

    def spend(self) -> None:
        assert self.actions_available(), "No specialist actions available"
        self.charges -= 1


class OneShotState(str, Enum):
    """Lifecycle of a once-per-craft buff."""

    UNUSED = "unused"
    ACTIVE = "active"
    USED = "used"


class HeartAndSoul(BaseModel):
    """Lets the next Good-only action be used regardless of condition."""

    state: OneShotState = OneShotState.UNUSED

    def is_active(self) -> bool:
        return self.state is OneShotState.ACTIVE

    def is_available(self) -> bool:
        return self.state is OneShotState.UNUSED

    def activate(self) -> None:
        assert self.state is OneShotState.UNUSED, "Heart and Soul can only be used once"
        self.state = OneShotState.ACTIVE

    def deactivate(self) -> None:
        assert self.is_active(), "Heart and Soul is not active"
        self.state = OneShotState.USED


# =============================================================================
# Buff State
# =============================================================================


class BuffState(BaseModel):
    """Every buff tracked during a craft."""

    quality: QualityBuffs = Field(default_factory=QualityBuffs)
    progress: ProgressBuffs = Field(default_factory=ProgressBuffs)
    durability: DurabilityBuffs = Field(default_factory=DurabilityBuffs)
    combo: ComboBuffs = Field(default_factory=ComboBuffs)
    specialist_actions: SpecialistActions = Field(default_factory=SpecialistActions)
    heart_and_soul: HeartAndSoul = Field(default_factory=HeartAndSoul)

    def decay_in_place(self) -> None:
        """One turn passes for every durational buff except combos."""
        self.quality.decay_in_place()
        self.progress.decay_in_place()
        self.durability.decay_in_place()

    def decay(self) -> BuffState:
        decayed = self.model_copy(deep=True)
        decayed.decay_in_place()
        return decayed

    def decay_combos(self) -> None:
        self.combo.decay_in_place()

    def copy_for_turn(self) -> BuffState:
        """Independent copy used as the starting point of a new delta."""
        return self.model_copy(deep=True)


def create_buff_state(specialist: bool = False) -> BuffState:
    """
    Create the buff state of a fresh craft.

    Args:
        specialist: Whether the crafter has specialist actions

    Returns:
        A BuffState with no active buffs
    """
    charges = SpecialistActions.MAX_CHARGES if specialist else None
    return BuffState(specialist_actions=SpecialistActions(charges=charges))
