"""Tests for the dice rolling skill."""

from __future__ import annotations

import random

import pytest

from xivcraft.skills.dice import DiceResult, roll_condition, roll_dice, roll_percentile


class TestRollDice:
    """Test the roll_dice function."""

    def test_simple_roll(self):
        """Test basic NdX notation."""
        result = roll_dice("2d6")
        assert result.notation == "2d6"
        assert len(result.rolls) == 2
        assert all(1 <= r <= 6 for r in result.rolls)
        assert result.total == sum(result.rolls)
        assert result.modifier == 0

    def test_roll_with_modifier(self):
        """Test NdX+M notation."""
        result = roll_dice("1d20+5")
        assert result.notation == "1d20+5"
        assert len(result.rolls) == 1
        assert 1 <= result.rolls[0] <= 20
        assert result.modifier == 5
        assert result.total == result.rolls[0] + 5

    def test_roll_with_negative_modifier(self):
        """Test NdX-M notation."""
        result = roll_dice("1d100-1")
        assert result.modifier == -1
        assert result.total == result.rolls[0] - 1

    def test_notation_normalized(self):
        """Notation is lowercased and stripped."""
        result = roll_dice("  1D100 ")
        assert result.notation == "1d100"

    def test_invalid_notation(self):
        """Test invalid notation raises ValueError."""
        with pytest.raises(ValueError, match="Invalid dice notation"):
            roll_dice("not dice")

    def test_keep_notation_unsupported(self):
        """Keep-highest notation is not part of the grammar."""
        with pytest.raises(ValueError):
            roll_dice("4d6kh3")

    def test_zero_dice(self):
        """Test zero dice raises ValueError."""
        with pytest.raises(ValueError, match="must be positive"):
            roll_dice("0d6")

    def test_returns_dice_result(self):
        """Test that roll_dice returns a DiceResult."""
        result = roll_dice("1d6")
        assert isinstance(result, DiceResult)


class TestInjectedRandomSource:
    """Rolls with a caller-supplied random source."""

    def test_seeded_rolls_repeat(self):
        """The same seed gives the same rolls."""
        first = roll_dice("3d100", rng=random.Random(1234))
        second = roll_dice("3d100", rng=random.Random(1234))
        assert first.rolls == second.rolls

    def test_uses_randint_bounds(self, fixed_rng):
        """Each die asks the source for a value in [1, sides]."""
        rng = fixed_rng(100)
        result = roll_dice("2d100", rng=rng)
        assert result.rolls == [100, 100]
        assert rng.calls == 2


class TestPercentileRolls:
    """Tests for the percentile helpers."""

    def test_percentile_range(self, fixed_rng):
        """Percentile rolls are in [1, 100]."""
        assert roll_percentile(fixed_rng(1)) == 1
        assert roll_percentile(fixed_rng(100)) == 100

    def test_condition_range(self, fixed_rng):
        """Condition rolls are in [0, 100)."""
        assert roll_condition(fixed_rng(1)) == 0
        assert roll_condition(fixed_rng(100)) == 99

    def test_many_rolls_in_range(self):
        """Seeded rolls stay within range."""
        rng = random.Random(99)
        for _ in range(200):
            assert 1 <= roll_percentile(rng) <= 100
            assert 0 <= roll_condition(rng) < 100
