"""
Core Data Models for xivcraft.

These models describe a craft: the immutable context (character, recipe,
condition rule-set), the per-turn state, the buffs and conditions that
modify actions, and the deltas that advance a state.
"""

from xivcraft.models.buffs import (
    BuffState,
    ComboBuffs,
    DurabilityBuffs,
    HeartAndSoul,
    InnerQuiet,
    OneShotState,
    ProgressBuffs,
    QualityBuffs,
    SpecialistActions,
    WasteNotLevel,
    create_buff_state,
)
from xivcraft.models.conditions import (
    Condition,
    ConditionFlag,
    ConditionMismatchError,
    RuleSet,
    UnknownConditionFlagError,
)
from xivcraft.models.crafting import (
    CharacterStats,
    CraftingContext,
    CraftingState,
    RecipeStats,
    StateDelta,
    create_crafting_context,
    create_initial_state,
)
from xivcraft.models.quality_map import (
    Collectability,
    HQChance,
    QualityMapKind,
    collectability,
    hq_chance,
    map_quality,
)

__all__ = [
    # Buffs
    "BuffState",
    "QualityBuffs",
    "ProgressBuffs",
    "DurabilityBuffs",
    "ComboBuffs",
    "InnerQuiet",
    "SpecialistActions",
    "HeartAndSoul",
    "OneShotState",
    "WasteNotLevel",
    "create_buff_state",
    # Conditions
    "Condition",
    "ConditionFlag",
    "RuleSet",
    "ConditionMismatchError",
    "UnknownConditionFlagError",
    # Crafting
    "CharacterStats",
    "RecipeStats",
    "CraftingContext",
    "CraftingState",
    "StateDelta",
    "create_crafting_context",
    "create_initial_state",
    # Quality
    "QualityMapKind",
    "HQChance",
    "Collectability",
    "hq_chance",
    "collectability",
    "map_quality",
]
