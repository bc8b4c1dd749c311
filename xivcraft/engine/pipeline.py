"""
Action Resolution Pipeline for xivcraft.

Applying an action to a state runs a fixed sequence of steps:

1. CP change; the delta starts from a copy of the current buffs
2. Progress, capped by Final Appraisal
3. Quality and durability change
4. Buffs consumed by the action
5. Time passes: Manipulation repair, then every buff ticks down
   (combos tick down even when time doesn't pass)
6. Buffs granted by the action
7. The outcome is classified; completion wins over failure
"""

from __future__ import annotations

import logging

from xivcraft.engine.actions import CraftingAction
from xivcraft.engine.models import (
    ActionOutcome,
    ActionResult,
    ActionResultStatus,
    ActionUsageError,
    OutcomeKind,
    SimulatorConfig,
)
from xivcraft.models.buffs import BuffState
from xivcraft.models.crafting import CraftingState, StateDelta

logger = logging.getLogger(__name__)

DEFAULT_CONFIG = SimulatorConfig()


def _apply_final_appraisal(
    state: CraftingState, progress: int, new_buffs: BuffState
) -> tuple[int, bool]:
    """
    Stop progress one short of completion if Final Appraisal is up.

    Returns:
        Tuple of (progress to add, whether Final Appraisal fired)
    """
    final_appraisal = new_buffs.progress.final_appraisal
    if progress == 0 or not final_appraisal.is_active():
        return progress, False
    if state.progress + progress < state.recipe.max_progress:
        return progress, False

    final_appraisal.deactivate()
    return max(0, state.recipe.max_progress - 1 - state.progress), True


def compute_delta(action: CraftingAction, state: CraftingState) -> StateDelta:
    """
    Compute the changes ``action`` would make to ``state``.

    Neither the state nor its buffs are modified.
    """
    new_buffs = state.buffs.copy_for_turn()

    added_cp = action.cp_cost(state)
    added_progress, triggered = _apply_final_appraisal(state, action.progress(state), new_buffs)

    added_quality = action.quality(state, new_buffs)
    action_durability = action.durability(state)

    action.deactivate_buffs(state, new_buffs)

    time_passed = action.time_passes()
    repair = 0
    if time_passed:
        repair = new_buffs.durability.repair()
        new_buffs.decay_in_place()
    new_buffs.decay_combos()

    action.apply_buffs(state, new_buffs)

    return StateDelta(
        added_progress=added_progress,
        added_quality=added_quality,
        new_buffs=new_buffs,
        action_durability=action_durability,
        repair=repair,
        added_cp=added_cp,
        time_passed=time_passed,
        final_appraisal_triggered=triggered,
    )


def from_delta_state(state: CraftingState, delta: StateDelta) -> ActionOutcome:
    """
    Classify a delta against the state it was computed from.

    A finished craft gets no Manipulation repair, so ``repair`` is zeroed
    for completed and failed outcomes.
    """
    if state.progress + delta.added_progress >= state.recipe.max_progress:
        kind = OutcomeKind.COMPLETED
    elif state.durability + delta.action_durability <= 0:
        kind = OutcomeKind.FAILED
    else:
        kind = OutcomeKind.IN_PROGRESS

    if kind != OutcomeKind.IN_PROGRESS:
        delta = delta.model_copy(update={"repair": 0})
    return ActionOutcome(kind=kind, delta=delta)


def check_feasibility(action: CraftingAction, state: CraftingState) -> ActionResultStatus:
    """Whether ``action`` is allowed in ``state``."""
    enough_cp = state.cp + action.cp_cost(state) >= 0
    valid = action.can_execute(state)

    if enough_cp and valid:
        return ActionResultStatus.OK
    if valid:
        return ActionResultStatus.TOO_LITTLE_CP
    if enough_cp:
        return ActionResultStatus.ACTION_INVALID
    return ActionResultStatus.NO_CP_AND_INVALID


def prospective_act(action: CraftingAction, state: CraftingState) -> ActionResult:
    """
    Evaluate ``action`` without enforcing whether it is allowed.

    Args:
        action: The action to evaluate
        state: The state to evaluate it in

    Returns:
        ActionResult carrying the outcome the action would have, tagged
        with whether it had enough CP and was executable
    """
    outcome = from_delta_state(state, compute_delta(action, state))
    return ActionResult(status=check_feasibility(action, state), outcome=outcome)


def act(
    action: CraftingAction,
    state: CraftingState,
    config: SimulatorConfig | None = None,
) -> ActionOutcome:
    """
    Apply ``action`` to ``state``.

    Callers are expected to have checked the action with ``prospective_act``.
    Under a strict config an infeasible action raises instead.

    Args:
        action: The action to apply
        state: The current state
        config: Engine configuration (defaults to non-strict)

    Returns:
        ActionOutcome with the delta to add to ``state``

    Raises:
        ActionUsageError: If strict and the action lacks CP or is invalid
    """
    config = config or DEFAULT_CONFIG

    if config.strict:
        status = check_feasibility(action, state)
        if status != ActionResultStatus.OK:
            raise ActionUsageError(action, status)
    elif logger.isEnabledFor(logging.DEBUG):
        status = check_feasibility(action, state)
        if status != ActionResultStatus.OK:
            logger.debug("Applying %s at step %d despite %s", action, state.step, status.value)

    return from_delta_state(state, compute_delta(action, state))
