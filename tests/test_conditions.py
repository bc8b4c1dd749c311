"""Tests for conditions, modifier tables and rule-sets."""

from __future__ import annotations

from collections import Counter

import pytest

from xivcraft.models import (
    CharacterStats,
    Condition,
    ConditionMismatchError,
    RecipeStats,
    RuleSet,
    UnknownConditionFlagError,
    create_crafting_context,
)


def distribution(rule_set: RuleSet, quality_assurance: bool = True) -> Counter:
    """Count the conditions picked by every roll from Normal."""
    return Counter(
        rule_set.sample(Condition.NORMAL, roll, quality_assurance=quality_assurance)
        for roll in range(100)
    )


class TestModifiers:
    """Tests for condition modifier lookups."""

    def test_quality_modifiers(self):
        """Quality scales with Poor, Good and Excellent."""
        assert Condition.POOR.to_quality_modifier() == 50
        assert Condition.NORMAL.to_quality_modifier() == 100
        assert Condition.GOOD.to_quality_modifier() == 150
        assert Condition.EXCELLENT.to_quality_modifier() == 400

    def test_single_category_conditions(self):
        """Expert conditions each touch one category."""
        assert Condition.MALLEABLE.to_progress_modifier() == 150
        assert Condition.CENTERED.to_success_rate_modifier() == 25
        assert Condition.STURDY.to_durability_modifier() == 50
        assert Condition.PRIMED.to_status_duration_modifier() == 2
        assert Condition.PLIANT.to_cp_usage_modifier() == 50

    def test_unaffected_conditions_are_neutral(self):
        """Conditions that don't affect a category map to its neutral value."""
        for condition in Condition:
            if condition is not Condition.MALLEABLE:
                assert condition.to_progress_modifier() == 100
            if condition is not Condition.CENTERED:
                assert condition.to_success_rate_modifier() == 0
            if condition is not Condition.STURDY:
                assert condition.to_durability_modifier() == 100
            if condition is not Condition.PRIMED:
                assert condition.to_status_duration_modifier() == 0
            if condition is not Condition.PLIANT:
                assert condition.to_cp_usage_modifier() == 100

    def test_good_and_excellent_predicates(self):
        """is_good / is_excellent only match their own condition."""
        assert Condition.GOOD.is_good()
        assert not Condition.EXCELLENT.is_good()
        assert Condition.EXCELLENT.is_excellent()
        assert Condition.EXCELLENT.is_good_or_excellent()
        assert not Condition.CENTERED.is_good_or_excellent()


class TestRuleSetFlags:
    """Tests for rule-set bitmasks."""

    def test_flag_values(self):
        """Each rule-set matches its recipe bitmask."""
        assert int(RuleSet.REGULAR.flags) == 15
        assert int(RuleSet.EXPERT_1.flags) == 115
        assert int(RuleSet.EXPERT_2.flags) == 483

    def test_from_flags(self):
        """Bitmasks map back to rule-sets."""
        assert RuleSet.from_flags(15) is RuleSet.REGULAR
        assert RuleSet.from_flags(115) is RuleSet.EXPERT_1
        assert RuleSet.from_flags(483) is RuleSet.EXPERT_2

    def test_unknown_flag(self):
        """A bitmask no rule-set uses is rejected."""
        with pytest.raises(UnknownConditionFlagError) as exc_info:
            RuleSet.from_flags(499)
        assert exc_info.value.got == 499

    def test_check_flags_mismatch(self):
        """Checking the wrong bitmask raises a typed error."""
        with pytest.raises(ConditionMismatchError) as exc_info:
            RuleSet.EXPERT_1.check_flags(15)
        assert exc_info.value.got == 15
        assert exc_info.value.expected == 115
        assert "expert_1" in str(exc_info.value)

    def test_conditions_listing(self):
        """Rule-sets list their legal conditions."""
        assert RuleSet.REGULAR.conditions == (
            Condition.NORMAL,
            Condition.GOOD,
            Condition.EXCELLENT,
            Condition.POOR,
        )
        assert RuleSet.EXPERT_2.allows(Condition.PRIMED)
        assert not RuleSet.EXPERT_1.allows(Condition.MALLEABLE)

    def test_is_expert(self):
        """Only the expert rule-sets are expert."""
        assert not RuleSet.REGULAR.is_expert
        assert RuleSet.EXPERT_1.is_expert
        assert RuleSet.EXPERT_2.is_expert


class TestContextConstruction:
    """Rule-set checks when building a crafting context."""

    def test_mismatched_recipe_rejected(self, character: CharacterStats, recipe: RecipeStats):
        """A regular recipe can't be crafted under expert conditions."""
        with pytest.raises(ConditionMismatchError):
            create_crafting_context(character, recipe, rule_set=RuleSet.EXPERT_2)

    def test_rule_set_inferred(self, character: CharacterStats, recipe: RecipeStats):
        """The rule-set is inferred from the recipe bitmask."""
        expert = recipe.model_copy(update={"conditions_flag": 115})
        context = create_crafting_context(character, expert)
        assert context.rule_set is RuleSet.EXPERT_1
        assert context.is_expert

    def test_unknown_recipe_flag(self, character: CharacterStats, recipe: RecipeStats):
        """Unknown bitmasks fail construction."""
        with pytest.raises(UnknownConditionFlagError):
            create_crafting_context(character, recipe.model_copy(update={"conditions_flag": 3}))


class TestRegularSampling:
    """Tests for the regular condition distribution."""

    def test_forced_successors(self):
        """Good and Poor lead to Normal, Excellent to Poor, whatever the roll."""
        for roll in (0, 50, 99):
            assert RuleSet.REGULAR.sample(Condition.GOOD, roll) is Condition.NORMAL
            assert RuleSet.REGULAR.sample(Condition.EXCELLENT, roll) is Condition.POOR
            assert RuleSet.REGULAR.sample(Condition.POOR, roll) is Condition.NORMAL

    def test_quality_assurance_distribution(self):
        """With Quality Assurance, Good is 25% and Excellent 4%."""
        counts = distribution(RuleSet.REGULAR)
        assert counts[Condition.GOOD] == 25
        assert counts[Condition.EXCELLENT] == 4
        assert counts[Condition.NORMAL] == 71

    def test_pre_quality_assurance_distribution(self):
        """Without Quality Assurance, Good is 20%."""
        counts = distribution(RuleSet.REGULAR, quality_assurance=False)
        assert counts[Condition.GOOD] == 20
        assert counts[Condition.EXCELLENT] == 4
        assert counts[Condition.NORMAL] == 76

    def test_thresholds(self):
        """Low rolls give Good, then Excellent, then Normal."""
        assert RuleSet.REGULAR.sample(Condition.NORMAL, 24) is Condition.GOOD
        assert RuleSet.REGULAR.sample(Condition.NORMAL, 25) is Condition.EXCELLENT
        assert RuleSet.REGULAR.sample(Condition.NORMAL, 28) is Condition.EXCELLENT
        assert RuleSet.REGULAR.sample(Condition.NORMAL, 29) is Condition.NORMAL

    def test_roll_out_of_range(self):
        """Rolls outside [0, 100) are rejected."""
        with pytest.raises(ValueError):
            RuleSet.REGULAR.sample(Condition.NORMAL, 100)


class TestExpertSampling:
    """Tests for the expert condition distributions."""

    def test_expert_1_distribution(self):
        """Expert 1 weights."""
        counts = distribution(RuleSet.EXPERT_1)
        assert counts == Counter(
            {
                Condition.GOOD: 12,
                Condition.CENTERED: 15,
                Condition.PLIANT: 12,
                Condition.STURDY: 15,
                Condition.NORMAL: 46,
            }
        )

    def test_expert_2_distribution(self):
        """Expert 2 weights."""
        counts = distribution(RuleSet.EXPERT_2)
        assert counts == Counter(
            {
                Condition.GOOD: 12,
                Condition.PLIANT: 12,
                Condition.STURDY: 15,
                Condition.MALLEABLE: 12,
                Condition.PRIMED: 12,
                Condition.NORMAL: 37,
            }
        )

    def test_expert_ignores_current_condition(self):
        """Expert sampling only depends on the roll."""
        for current in RuleSet.EXPERT_1.conditions:
            assert RuleSet.EXPERT_1.sample(current, 0) is Condition.GOOD
            assert RuleSet.EXPERT_1.sample(current, 99) is Condition.NORMAL

    def test_samples_stay_legal(self):
        """Sampled conditions always belong to the rule-set."""
        for rule_set in RuleSet:
            for roll in range(100):
                assert rule_set.allows(rule_set.sample(Condition.NORMAL, roll))
