"""
Engine Data Models for xivcraft.

Defines the structures produced by the action pipeline:
- OutcomeKind / ActionOutcome: what one action application did
- ActionResult: a prospective outcome tagged with its feasibility
- RandomOutcome / ExhaustiveOutcome: outcomes of actions that can fail
- SimulatorConfig: engine configuration
"""

from __future__ import annotations

import os
from enum import Enum

from pydantic import BaseModel, Field

from xivcraft.models.crafting import CraftingState, StateDelta
from xivcraft.models.quality_map import Collectability, HQChance, map_quality

_TRUTHY = {"1", "true", "yes", "on"}


# =============================================================================
# Configuration
# =============================================================================


class SimulatorConfig(BaseModel):
    """Engine configuration."""

    # Check CP and executability on real (non-prospective) actions
    strict: bool = False

    # Safety limit for simulator loops
    max_turns: int = Field(default=100, ge=1)

    @classmethod
    def from_env(cls) -> SimulatorConfig:
        """Build a config from XIVCRAFT_* environment variables."""
        config = cls()
        if os.getenv("XIVCRAFT_STRICT"):
            config.strict = os.getenv("XIVCRAFT_STRICT", "").strip().lower() in _TRUTHY
        if os.getenv("XIVCRAFT_MAX_TURNS"):
            config.max_turns = int(os.getenv("XIVCRAFT_MAX_TURNS", config.max_turns))
        return config


# =============================================================================
# Outcomes
# =============================================================================


class OutcomeKind(str, Enum):
    """Where the craft stands after an action."""

    COMPLETED = "completed"  # Progress reached the recipe's target
    FAILED = "failed"  # Durability ran out first
    IN_PROGRESS = "in_progress"


class ActionOutcome(BaseModel):
    """Classified result of applying one action."""

    kind: OutcomeKind
    delta: StateDelta

    @property
    def is_finished(self) -> bool:
        return self.kind != OutcomeKind.IN_PROGRESS

    def map_quality(self, state: CraftingState) -> HQChance | Collectability | None:
        """
        Map the craft's final quality, if this outcome completed it.

        Args:
            state: The state the action was applied to

        Returns:
            HQ chance or collectability, or None if the craft isn't complete
        """
        if self.kind != OutcomeKind.COMPLETED:
            return None
        return map_quality(
            state.context.quality_map,
            state.quality + self.delta.added_quality,
            state.recipe.max_quality,
        )


class ActionResultStatus(str, Enum):
    """Feasibility of a prospective action."""

    OK = "ok"
    TOO_LITTLE_CP = "too_little_cp"
    ACTION_INVALID = "action_invalid"
    NO_CP_AND_INVALID = "no_cp_and_invalid"


class ActionResult(BaseModel):
    """
    A prospective outcome and whether the action was actually allowed.

    The outcome is always present, even for infeasible actions.
    """

    status: ActionResultStatus = ActionResultStatus.OK
    outcome: ActionOutcome

    @property
    def is_ok(self) -> bool:
        return self.status == ActionResultStatus.OK

    def unwrap(self) -> ActionOutcome:
        """
        Return the outcome of a feasible action.

        Raises:
            ActionInfeasibleError: If the action was not allowed
        """
        if not self.is_ok:
            raise ActionInfeasibleError(self)
        return self.outcome


class RandomOutcome(BaseModel):
    """Outcome of an action after rolling for failure."""

    succeeded: bool
    outcome: ActionOutcome


class RandomResult(BaseModel):
    """Prospective counterpart of RandomOutcome."""

    succeeded: bool
    result: ActionResult


class WeightedOutcome(BaseModel):
    """One branch of an exhaustive evaluation."""

    weight: int = Field(ge=0, le=100, description="Probability in percent")
    outcome: ActionOutcome


class ExhaustiveOutcome(BaseModel):
    """Both branches of an action that may fail."""

    failure: WeightedOutcome
    success: WeightedOutcome

    def branches(self) -> list[WeightedOutcome]:
        return [self.failure, self.success]


class WeightedResult(BaseModel):
    weight: int = Field(ge=0, le=100)
    result: ActionResult


class ExhaustiveResult(BaseModel):
    """Prospective counterpart of ExhaustiveOutcome."""

    failure: WeightedResult
    success: WeightedResult


# =============================================================================
# Errors
# =============================================================================


class ActionUsageError(RuntimeError):
    """A real action was applied when it was not allowed."""

    def __init__(self, action: object, status: ActionResultStatus):
        self.action = action
        self.status = status
        super().__init__(f"Cannot use {action}: {status.value}")


class ActionInfeasibleError(ValueError):
    """Unwrapped a prospective result whose action was not allowed."""

    def __init__(self, result: ActionResult):
        self.result = result
        super().__init__(f"Action not allowed: {result.status.value}")


class CraftFinishedError(RuntimeError):
    """An action was requested after the craft already ended."""
