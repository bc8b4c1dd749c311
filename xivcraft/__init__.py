"""
xivcraft: a simulator for the FFXIV crafting minigame.

Build a context from character and recipe stats, create the turn-zero
state, then apply actions with ``act`` / ``prospective_act`` or drive a
whole craft with ``CraftSimulator``.
"""

from xivcraft.engine import (
    Action,
    ActionOutcome,
    ActionResult,
    CraftSimulator,
    OutcomeKind,
    SimulatorConfig,
    act,
    act_exhaustive,
    act_random,
    prospective_act,
)
from xivcraft.models import (
    CharacterStats,
    CraftingContext,
    CraftingState,
    RecipeStats,
    RuleSet,
    StateDelta,
    create_crafting_context,
    create_initial_state,
)

__version__ = "0.1.0"

__all__ = [
    "Action",
    "ActionOutcome",
    "ActionResult",
    "CraftSimulator",
    "OutcomeKind",
    "SimulatorConfig",
    "act",
    "act_exhaustive",
    "act_random",
    "prospective_act",
    "CharacterStats",
    "RecipeStats",
    "CraftingContext",
    "CraftingState",
    "RuleSet",
    "StateDelta",
    "create_crafting_context",
    "create_initial_state",
]
