"""
Random Outcomes for xivcraft.

Actions with a fail rate either succeed or run their failure stand-in.
Two modes are offered:

- Decided: roll once with the caller's random source and run one branch
- Exhaustive: run both branches with their percentage weights, touching
  no random source, for expected-value tools
"""

from __future__ import annotations

from xivcraft.engine.actions import CraftingAction
from xivcraft.engine.models import (
    ExhaustiveOutcome,
    ExhaustiveResult,
    RandomOutcome,
    RandomResult,
    SimulatorConfig,
    WeightedOutcome,
    WeightedResult,
)
from xivcraft.engine.pipeline import act, prospective_act
from xivcraft.models.crafting import CraftingState, StateDelta
from xivcraft.skills.dice import RandomSource, roll_condition, roll_percentile


def roll_fails(fail_rate: int, rng: RandomSource) -> bool:
    """
    Decide whether an action with ``fail_rate`` fails.

    Certain outcomes (0 and 100) don't consume a roll.
    """
    if fail_rate <= 0:
        return False
    if fail_rate >= 100:
        return True
    return roll_percentile(rng) <= fail_rate


def act_random(
    action: CraftingAction,
    state: CraftingState,
    rng: RandomSource,
    config: SimulatorConfig | None = None,
) -> RandomOutcome:
    """
    Roll for failure, then apply the action or its failure stand-in.

    Args:
        action: The action to attempt
        state: The current state
        rng: Random source for the success roll
        config: Engine configuration

    Returns:
        RandomOutcome with the branch taken and its outcome
    """
    if roll_fails(action.fail_rate(state), rng):
        return RandomOutcome(succeeded=False, outcome=act(action.failure(), state, config))
    return RandomOutcome(succeeded=True, outcome=act(action, state, config))


def prospective_act_random(
    action: CraftingAction, state: CraftingState, rng: RandomSource
) -> RandomResult:
    """Prospective counterpart of ``act_random``."""
    if roll_fails(action.fail_rate(state), rng):
        return RandomResult(succeeded=False, result=prospective_act(action.failure(), state))
    return RandomResult(succeeded=True, result=prospective_act(action, state))


def act_exhaustive(
    action: CraftingAction,
    state: CraftingState,
    config: SimulatorConfig | None = None,
) -> ExhaustiveOutcome:
    """
    Apply both branches of an action.

    Returns:
        ExhaustiveOutcome whose branch weights sum to 100
    """
    fail_rate = action.fail_rate(state)
    return ExhaustiveOutcome(
        failure=WeightedOutcome(weight=fail_rate, outcome=act(action.failure(), state, config)),
        success=WeightedOutcome(weight=100 - fail_rate, outcome=act(action, state, config)),
    )


def prospective_act_exhaustive(action: CraftingAction, state: CraftingState) -> ExhaustiveResult:
    fail_rate = action.fail_rate(state)
    return ExhaustiveResult(
        failure=WeightedResult(weight=fail_rate, result=prospective_act(action.failure(), state)),
        success=WeightedResult(weight=100 - fail_rate, result=prospective_act(action, state)),
    )


def next_state(state: CraftingState, delta: StateDelta, rng: RandomSource) -> CraftingState:
    """
    Add ``delta`` to ``state`` and roll the next condition.

    Every action moves the condition on, including those that stop time.
    No roll is made when the successor is forced.
    """
    if state.context.rule_set.forced_successor(state.condition) is not None:
        return state.with_next_condition(delta, 0)
    return state.with_next_condition(delta, roll_condition(rng))
