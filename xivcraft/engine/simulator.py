"""
Craft Simulator for xivcraft.

Drives a single craft turn by turn: rolls for action failure, applies the
delta, rolls the next condition and keeps a history of every turn.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Iterable

from pydantic import BaseModel, Field

from xivcraft.engine.actions import Action
from xivcraft.engine.models import (
    ActionOutcome,
    CraftFinishedError,
    OutcomeKind,
    SimulatorConfig,
)
from xivcraft.engine.random_outcome import act_random, next_state
from xivcraft.models.conditions import Condition
from xivcraft.models.crafting import CraftingContext, CraftingState, create_initial_state
from xivcraft.models.quality_map import Collectability, HQChance
from xivcraft.skills.dice import RandomSource

logger = logging.getLogger(__name__)


class CraftTurn(BaseModel):
    """One recorded turn of a craft."""

    action: Action
    condition: Condition = Field(description="Condition the action was used in")
    succeeded: bool
    outcome: ActionOutcome


class CraftReport(BaseModel):
    """Summary of a craft after running a rotation."""

    kind: OutcomeKind
    final_state: CraftingState
    turns: list[CraftTurn] = Field(default_factory=list)
    quality_result: HQChance | Collectability | None = Field(
        default=None, description="HQ chance or collectability of a completed craft"
    )

    @property
    def completed(self) -> bool:
        return self.kind == OutcomeKind.COMPLETED


class CraftSimulator:
    """
    Runs one craft with an injected random source.

    Example:
        simulator = CraftSimulator(context, rng=random.Random(42))
        report = simulator.run([Action.MUSCLE_MEMORY, Action.VENERATION, ...])
    """

    def __init__(
        self,
        context: CraftingContext,
        rng: RandomSource | None = None,
        config: SimulatorConfig | None = None,
    ):
        self.context = context
        self.rng = rng if rng is not None else random.Random()
        self.config = config or SimulatorConfig()
        self.state = create_initial_state(context)
        self.turns: list[CraftTurn] = []
        self.kind = OutcomeKind.IN_PROGRESS
        self.quality_result: HQChance | Collectability | None = None

    @property
    def is_finished(self) -> bool:
        return self.kind != OutcomeKind.IN_PROGRESS

    def step(self, action: Action) -> ActionOutcome:
        """
        Use one action.

        Args:
            action: The action to use

        Returns:
            The outcome of the action (or of its failure)

        Raises:
            CraftFinishedError: If the craft already completed or failed
            ActionUsageError: If the config is strict and the action isn't allowed
        """
        if self.is_finished:
            raise CraftFinishedError(f"Craft already {self.kind.value}")

        state = self.state
        rolled = act_random(action, state, self.rng, self.config)
        outcome = rolled.outcome

        self.turns.append(
            CraftTurn(
                action=action,
                condition=state.condition,
                succeeded=rolled.succeeded,
                outcome=outcome,
            )
        )

        if outcome.is_finished:
            self.quality_result = outcome.map_quality(state)
            self.state = state + outcome.delta
            self.kind = outcome.kind
            logger.info(
                "Craft %s after %d turns: progress %d/%d, quality %d/%d",
                self.kind.value,
                len(self.turns),
                self.state.progress,
                self.context.recipe.max_progress,
                self.state.quality,
                self.context.recipe.max_quality,
            )
        else:
            self.state = next_state(state, outcome.delta, self.rng)

        logger.debug(
            "Turn %d: %s (%s, %s) -> progress %d, quality %d, durability %d, cp %d",
            len(self.turns),
            action.value,
            state.condition.value,
            "ok" if rolled.succeeded else "failed",
            self.state.progress,
            self.state.quality,
            self.state.durability,
            self.state.cp,
        )
        return outcome

    def run(self, actions: Iterable[Action]) -> CraftReport:
        """
        Use actions in order until the craft finishes or they run out.

        Stops early after ``config.max_turns`` turns.
        """
        for action in actions:
            if self.is_finished:
                break
            if len(self.turns) >= self.config.max_turns:
                logger.warning("Stopping craft after %d turns", self.config.max_turns)
                break
            self.step(action)
        return self.report()

    def report(self) -> CraftReport:
        return CraftReport(
            kind=self.kind,
            final_state=self.state,
            turns=list(self.turns),
            quality_result=self.quality_result,
        )
