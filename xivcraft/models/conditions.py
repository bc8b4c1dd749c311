"""
Crafting Conditions for xivcraft.

A condition is re-rolled after every turn in which time passes and scales
the effects of the next action. Each recipe declares which conditions can
appear through a bitmask; the bitmask selects one of three fixed rule-sets:

- Regular: Normal, Good, Excellent, Poor
- Expert 1: Normal, Good, Centered, Pliant, Sturdy
- Expert 2: Normal, Good, Pliant, Sturdy, Malleable, Primed
"""

from __future__ import annotations

from enum import Enum, IntFlag


# =============================================================================
# Conditions
# =============================================================================


class Condition(str, Enum):
    """Every condition a recipe can roll."""

    NORMAL = "normal"
    GOOD = "good"
    EXCELLENT = "excellent"
    POOR = "poor"
    CENTERED = "centered"  # +25% success rate
    PLIANT = "pliant"  # CP cost halved
    STURDY = "sturdy"  # Durability cost halved
    MALLEABLE = "malleable"  # Progress +50%
    PRIMED = "primed"  # Buff durations +2

    @property
    def flag(self) -> ConditionFlag:
        """Bit used for this condition in recipe condition masks."""
        return _CONDITION_FLAGS[self]

    def is_good(self) -> bool:
        return self is Condition.GOOD

    def is_excellent(self) -> bool:
        return self is Condition.EXCELLENT

    def is_good_or_excellent(self) -> bool:
        """Whether Good-only actions (Precise Touch, Tricks...) may be used."""
        return self in (Condition.GOOD, Condition.EXCELLENT)

    def to_quality_modifier(self) -> int:
        """Percentage applied to quality gains."""
        return QUALITY_MODIFIERS.get(self, 100)

    def to_progress_modifier(self) -> int:
        """Percentage applied to progress gains."""
        return PROGRESS_MODIFIERS.get(self, 100)

    def to_success_rate_modifier(self) -> int:
        """Additive bonus to success rate, subtracted from fail rates."""
        return SUCCESS_RATE_MODIFIERS.get(self, 0)

    def to_durability_modifier(self) -> int:
        """Percentage applied to durability costs."""
        return DURABILITY_MODIFIERS.get(self, 100)

    def to_status_duration_modifier(self) -> int:
        """Extra turns added to buffs activated under this condition."""
        return STATUS_DURATION_MODIFIERS.get(self, 0)

    def to_cp_usage_modifier(self) -> int:
        """Percentage applied to CP costs."""
        return CP_USAGE_MODIFIERS.get(self, 100)


class ConditionFlag(IntFlag):
    """Bits of the recipe ``conditions_flag`` column."""

    NORMAL = 0x01
    GOOD = 0x02
    EXCELLENT = 0x04
    POOR = 0x08
    CENTERED = 0x10
    PLIANT = 0x20
    STURDY = 0x40
    MALLEABLE = 0x80
    PRIMED = 0x100


_CONDITION_FLAGS: dict[Condition, ConditionFlag] = {
    Condition.NORMAL: ConditionFlag.NORMAL,
    Condition.GOOD: ConditionFlag.GOOD,
    Condition.EXCELLENT: ConditionFlag.EXCELLENT,
    Condition.POOR: ConditionFlag.POOR,
    Condition.CENTERED: ConditionFlag.CENTERED,
    Condition.PLIANT: ConditionFlag.PLIANT,
    Condition.STURDY: ConditionFlag.STURDY,
    Condition.MALLEABLE: ConditionFlag.MALLEABLE,
    Condition.PRIMED: ConditionFlag.PRIMED,
}


# =============================================================================
# Modifier Tables
# =============================================================================

# Conditions not listed map to the neutral value of the category.
QUALITY_MODIFIERS: dict[Condition, int] = {
    Condition.POOR: 50,
    Condition.GOOD: 150,
    Condition.EXCELLENT: 400,
}

PROGRESS_MODIFIERS: dict[Condition, int] = {
    Condition.MALLEABLE: 150,
}

SUCCESS_RATE_MODIFIERS: dict[Condition, int] = {
    Condition.CENTERED: 25,
}

DURABILITY_MODIFIERS: dict[Condition, int] = {
    Condition.STURDY: 50,
}

STATUS_DURATION_MODIFIERS: dict[Condition, int] = {
    Condition.PRIMED: 2,
}

CP_USAGE_MODIFIERS: dict[Condition, int] = {
    Condition.PLIANT: 50,
}


# =============================================================================
# Errors
# =============================================================================


class ConditionMismatchError(ValueError):
    """A recipe's condition bitmask does not match the requested rule-set."""

    def __init__(self, rule_set: RuleSet, got: int):
        self.rule_set = rule_set
        self.got = got
        self.expected = rule_set.flags
        super().__init__(
            f"Recipe conditions flag {got} does not match {rule_set.value} "
            f"conditions (expected {int(rule_set.flags)}: {rule_set.describe()})"
        )


class UnknownConditionFlagError(ValueError):
    """A recipe's condition bitmask matches no known rule-set."""

    def __init__(self, got: int):
        self.got = got
        super().__init__(f"Unknown recipe conditions flag: {got}")


# =============================================================================
# Rule-sets
# =============================================================================

# Cumulative thresholds over a draw in [0, 100). The last entry of each table
# catches every remaining draw.
_REGULAR_QA_THRESHOLDS: tuple[tuple[int, Condition], ...] = (
    (25, Condition.GOOD),
    (29, Condition.EXCELLENT),
    (100, Condition.NORMAL),
)

_REGULAR_THRESHOLDS: tuple[tuple[int, Condition], ...] = (
    (20, Condition.GOOD),
    (24, Condition.EXCELLENT),
    (100, Condition.NORMAL),
)

# Unresolved: whether Good forces Normal next and whether Good gains the
# Quality Assurance bonus on expert recipes. Both tables ignore the current
# condition.
_EXPERT_1_THRESHOLDS: tuple[tuple[int, Condition], ...] = (
    (12, Condition.GOOD),
    (27, Condition.CENTERED),
    (39, Condition.PLIANT),
    (54, Condition.STURDY),
    (100, Condition.NORMAL),
)

_EXPERT_2_THRESHOLDS: tuple[tuple[int, Condition], ...] = (
    (12, Condition.GOOD),
    (24, Condition.PLIANT),
    (39, Condition.STURDY),
    (51, Condition.MALLEABLE),
    (63, Condition.PRIMED),
    (100, Condition.NORMAL),
)

_REGULAR_FORCED: dict[Condition, Condition] = {
    Condition.GOOD: Condition.NORMAL,
    Condition.EXCELLENT: Condition.POOR,
    Condition.POOR: Condition.NORMAL,
}


class RuleSet(str, Enum):
    """Named sets of legal conditions with their sampling distribution."""

    REGULAR = "regular"
    EXPERT_1 = "expert_1"
    EXPERT_2 = "expert_2"

    @property
    def flags(self) -> ConditionFlag:
        """The fixed bitmask of legal conditions for this rule-set."""
        return _RULE_SET_FLAGS[self]

    @property
    def conditions(self) -> tuple[Condition, ...]:
        return tuple(c for c in Condition if c.flag & self.flags)

    @property
    def is_expert(self) -> bool:
        return self is not RuleSet.REGULAR

    def describe(self) -> str:
        return ", ".join(c.value for c in self.conditions)

    def allows(self, condition: Condition) -> bool:
        return bool(condition.flag & self.flags)

    def check_flags(self, flags: int) -> None:
        """
        Verify a recipe bitmask against this rule-set.

        Raises:
            ConditionMismatchError: If the bitmask is not exactly this
                rule-set's legal set.
        """
        if flags != int(self.flags):
            raise ConditionMismatchError(self, flags)

    @classmethod
    def from_flags(cls, flags: int) -> RuleSet:
        """
        Find the rule-set whose legal set is exactly ``flags``.

        Raises:
            UnknownConditionFlagError: If no rule-set uses this bitmask.
        """
        for rule_set in cls:
            if int(rule_set.flags) == flags:
                return rule_set
        raise UnknownConditionFlagError(flags)

    def forced_successor(self, current: Condition) -> Condition | None:
        """Condition that must follow ``current``, if the draw is skipped."""
        if self is RuleSet.REGULAR:
            return _REGULAR_FORCED.get(current)
        return None

    def sample(
        self,
        current: Condition,
        roll: int,
        quality_assurance: bool = True,
    ) -> Condition:
        """
        Pick the condition following ``current``.

        Args:
            current: The condition of the turn that just ended
            roll: A uniform draw in [0, 100); ignored for forced successors
            quality_assurance: Regular recipes only, whether the Quality
                Assurance trait raises the chance of Good

        Returns:
            The next condition
        """
        forced = self.forced_successor(current)
        if forced is not None:
            return forced

        if not 0 <= roll < 100:
            raise ValueError(f"Condition roll must be in [0, 100), got {roll}")

        if self is RuleSet.REGULAR:
            thresholds = _REGULAR_QA_THRESHOLDS if quality_assurance else _REGULAR_THRESHOLDS
        elif self is RuleSet.EXPERT_1:
            thresholds = _EXPERT_1_THRESHOLDS
        else:
            thresholds = _EXPERT_2_THRESHOLDS

        for upper, condition in thresholds:
            if roll < upper:
                return condition
        return Condition.NORMAL


# 499 (expert 1 plus Malleable and Primed) appears in the game data but no
# recipe uses it, so it has no rule-set.
_RULE_SET_FLAGS: dict[RuleSet, ConditionFlag] = {
    RuleSet.REGULAR: (
        ConditionFlag.NORMAL | ConditionFlag.GOOD | ConditionFlag.EXCELLENT | ConditionFlag.POOR
    ),
    RuleSet.EXPERT_1: (
        ConditionFlag.NORMAL
        | ConditionFlag.GOOD
        | ConditionFlag.CENTERED
        | ConditionFlag.PLIANT
        | ConditionFlag.STURDY
    ),
    RuleSet.EXPERT_2: (
        ConditionFlag.NORMAL
        | ConditionFlag.GOOD
        | ConditionFlag.PLIANT
        | ConditionFlag.STURDY
        | ConditionFlag.MALLEABLE
        | ConditionFlag.PRIMED
    ),
}
