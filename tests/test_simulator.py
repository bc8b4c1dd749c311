"""Tests for the craft simulator."""

from __future__ import annotations

import logging
import random

import pytest

from xivcraft.engine import (
    Action,
    ActionUsageError,
    CraftFinishedError,
    CraftSimulator,
    OutcomeKind,
    SimulatorConfig,
)
from xivcraft.models import Collectability, CraftingContext, HQChance, QualityMapKind


class TestCraftSimulator:
    """Tests for running whole crafts."""

    def test_reference_rotation(self, context: CraftingContext, rotation, fixed_rng):
        """With every roll at 100, the rotation stays Normal and reaches max HQ."""
        simulator = CraftSimulator(context, rng=fixed_rng(100))
        report = simulator.run(rotation)

        assert report.completed
        assert report.kind == OutcomeKind.COMPLETED
        assert len(report.turns) == len(rotation)
        assert isinstance(report.quality_result, HQChance)
        assert report.quality_result.percent == 100
        assert report.final_state.quality == 10904
        assert all(turn.condition.value == "normal" for turn in report.turns)

    def test_step_after_finish(self, context: CraftingContext, rotation, fixed_rng):
        """A finished craft takes no more actions."""
        simulator = CraftSimulator(context, rng=fixed_rng(100))
        simulator.run(rotation)
        with pytest.raises(CraftFinishedError):
            simulator.step(Action.BASIC_SYNTHESIS)

    def test_run_stops_when_finished(self, context: CraftingContext, fixed_rng):
        """Actions after completion are ignored by run()."""
        simulator = CraftSimulator(context, rng=fixed_rng(100))
        report = simulator.run([Action.RAPID_SYNTHESIS] * 10)
        # 1140 progress per success, done on the fourth
        assert report.completed
        assert len(report.turns) == 4

    def test_failed_craft(self, context: CraftingContext, fixed_rng):
        """Running out of durability fails the craft as ordinary data."""
        simulator = CraftSimulator(context, rng=fixed_rng(100))
        report = simulator.run([Action.BASIC_TOUCH] * 10)
        assert report.kind == OutcomeKind.FAILED
        assert len(report.turns) == 7
        assert report.quality_result is None
        assert not report.completed

    def test_failed_rolls_recorded(self, context: CraftingContext, fixed_rng):
        """Turns record whether the roll succeeded."""
        simulator = CraftSimulator(context, rng=fixed_rng(1))
        simulator.step(Action.RAPID_SYNTHESIS)
        turn = simulator.turns[0]
        assert not turn.succeeded
        assert turn.outcome.delta.added_progress == 0
        assert simulator.state.progress == 0

    def test_max_turns(self, context: CraftingContext, fixed_rng):
        """run() gives up after max_turns."""
        simulator = CraftSimulator(
            context, rng=fixed_rng(100), config=SimulatorConfig(max_turns=3)
        )
        report = simulator.run([Action.OBSERVE] * 10)
        assert report.kind == OutcomeKind.IN_PROGRESS
        assert len(report.turns) == 3

    def test_strict_config(self, context: CraftingContext, fixed_rng):
        """A strict simulator refuses illegal actions."""
        simulator = CraftSimulator(
            context, rng=fixed_rng(100), config=SimulatorConfig(strict=True)
        )
        with pytest.raises(ActionUsageError):
            simulator.step(Action.BYREGOTS_BLESSING)
        assert simulator.turns == []

    def test_collectability(self, character, recipe, fixed_rng):
        """Collectable crafts report collectability."""
        from xivcraft.models import create_crafting_context

        context = create_crafting_context(
            character, recipe, quality_map=QualityMapKind.COLLECTABILITY
        )
        simulator = CraftSimulator(context, rng=fixed_rng(100))
        report = simulator.run([Action.BASIC_TOUCH, Action.RAPID_SYNTHESIS] + [Action.RAPID_SYNTHESIS] * 3)
        assert report.completed
        assert isinstance(report.quality_result, Collectability)
        assert report.quality_result.rating == 24

    def test_seeded_runs_repeat(self, context: CraftingContext, rotation):
        """Equal seeds give equal crafts."""
        first = CraftSimulator(context, rng=random.Random(7)).run(rotation)
        second = CraftSimulator(context, rng=random.Random(7)).run(rotation)
        assert first.final_state == second.final_state
        assert [t.condition for t in first.turns] == [t.condition for t in second.turns]

    def test_logs_turns(self, context: CraftingContext, fixed_rng, caplog):
        """Each turn is logged at debug level."""
        with caplog.at_level(logging.DEBUG, logger="xivcraft.engine.simulator"):
            CraftSimulator(context, rng=fixed_rng(100)).step(Action.BASIC_SYNTHESIS)
        assert "basic_synthesis" in caplog.text


class TestSimulatorConfig:
    """Tests for configuration."""

    def test_defaults(self):
        """Lenient by default."""
        config = SimulatorConfig()
        assert not config.strict
        assert config.max_turns == 100

    def test_from_env(self, monkeypatch):
        """Environment variables override defaults."""
        monkeypatch.setenv("XIVCRAFT_STRICT", "true")
        monkeypatch.setenv("XIVCRAFT_MAX_TURNS", "40")
        config = SimulatorConfig.from_env()
        assert config.strict
        assert config.max_turns == 40

    def test_from_env_unset(self, monkeypatch):
        """Unset variables keep defaults."""
        monkeypatch.delenv("XIVCRAFT_STRICT", raising=False)
        monkeypatch.delenv("XIVCRAFT_MAX_TURNS", raising=False)
        assert SimulatorConfig.from_env() == SimulatorConfig()
