"""
Core Engine for xivcraft.

The engine resolves actions against crafting states:
- Actions (data table plus per-action rules)
- The resolution pipeline (act / prospective_act)
- Random outcomes (decided and exhaustive)
- A simulator that drives a whole craft
"""

from __future__ import annotations

from xivcraft.engine.actions import ACTION_DATA, Action, ActionData, CraftingAction, NullFailure
from xivcraft.engine.models import (
    ActionInfeasibleError,
    ActionOutcome,
    ActionResult,
    ActionResultStatus,
    ActionUsageError,
    CraftFinishedError,
    ExhaustiveOutcome,
    ExhaustiveResult,
    OutcomeKind,
    RandomOutcome,
    RandomResult,
    SimulatorConfig,
    WeightedOutcome,
    WeightedResult,
)
from xivcraft.engine.pipeline import (
    act,
    check_feasibility,
    compute_delta,
    from_delta_state,
    prospective_act,
)
from xivcraft.engine.random_outcome import (
    act_exhaustive,
    act_random,
    next_state,
    prospective_act_exhaustive,
    prospective_act_random,
    roll_fails,
)
from xivcraft.engine.simulator import CraftReport, CraftSimulator, CraftTurn

__all__ = [
    # Actions
    "Action",
    "ActionData",
    "ACTION_DATA",
    "CraftingAction",
    "NullFailure",
    # Models
    "SimulatorConfig",
    "OutcomeKind",
    "ActionOutcome",
    "ActionResult",
    "ActionResultStatus",
    "RandomOutcome",
    "RandomResult",
    "WeightedOutcome",
    "WeightedResult",
    "ExhaustiveOutcome",
    "ExhaustiveResult",
    # Errors
    "ActionUsageError",
    "ActionInfeasibleError",
    "CraftFinishedError",
    # Pipeline
    "act",
    "prospective_act",
    "compute_delta",
    "from_delta_state",
    "check_feasibility",
    # Random outcomes
    "act_random",
    "prospective_act_random",
    "act_exhaustive",
    "prospective_act_exhaustive",
    "roll_fails",
    "next_state",
    # Simulator
    "CraftSimulator",
    "CraftReport",
    "CraftTurn",
]
