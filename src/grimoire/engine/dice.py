"""Dice resolution for faculty checks.

Resolution pipeline:
1. Draw a natural d20 (two draws with advantage or disadvantage)
2. Modifier = floor((score - 10) / 2)
3. Natural 20 -> critical, natural 1 -> fumble, regardless of total
4. Otherwise total = natural + modifier:
   total >= DC -> success, total >= DC - 2 -> partial, else failure

Every function that draws takes an optional ``rng`` (anything with a
``randint(a, b)`` method). Passing a seeded ``random.Random`` makes a whole
resolution reproducible; omitting it uses the module-level generator.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

from grimoire.models.content import OutcomeTier
from grimoire.parameters import (
    DEFAULT_DC,
    DIE_SIDES,
    NATURAL_CRITICAL,
    NATURAL_FUMBLE,
    PARTIAL_SUCCESS_MARGIN,
    UNSET_FACULTY_SCORE,
)

if TYPE_CHECKING:
    from grimoire.models.content import Choice
    from grimoire.models.investigator import Investigator

logger = logging.getLogger(__name__)


class RandomSource(Protocol):
    """Minimal interface of random.Random used by the dice engine."""

    def randint(self, a: int, b: int) -> int: ...


@dataclass(frozen=True)
class RollResult:
    """Two draws and the one kept under advantage or disadvantage."""

    roll1: int
    roll2: int
    result: int


@dataclass(frozen=True)
class CheckResult:
    """Outcome of a full faculty check.

    Attributes:
        roll: Natural die result that decided the tier
        modifier: Faculty modifier
        total: roll + modifier
        dc: Difficulty the check was made against
        tier: Resolved outcome tier
    """

    roll: int
    modifier: int
    total: int
    dc: int
    tier: OutcomeTier


def roll_d20(rng: RandomSource | None = None) -> int:
    """Uniform random integer in [1, 20]."""
    return (rng or random).randint(1, DIE_SIDES)


def roll_with_advantage(rng: RandomSource | None = None) -> RollResult:
    """Roll 2d20 and keep the higher."""
    roll1 = roll_d20(rng)
    roll2 = roll_d20(rng)
    return RollResult(roll1=roll1, roll2=roll2, result=max(roll1, roll2))


def roll_with_disadvantage(rng: RandomSource | None = None) -> RollResult:
    """Roll 2d20 and keep the lower."""
    roll1 = roll_d20(rng)
    roll2 = roll_d20(rng)
    return RollResult(roll1=roll1, roll2=roll2, result=min(roll1, roll2))


def calculate_modifier(score: int) -> int:
    """Faculty modifier for a score.

    Defined for any integer, including scores outside 1-20.

    Examples:
        >>> calculate_modifier(10)
        0
        >>> calculate_modifier(14)
        2
        >>> calculate_modifier(7)
        -2
    """
    return (score - 10) // 2


def resolve_check(natural_roll: int, modifier: int, dc: int) -> OutcomeTier:
    """Resolve a natural roll and modifier against a DC.

    Natural 20 and natural 1 take precedence over the total.

    Examples:
        >>> resolve_check(15, 2, 12).value
        'success'
        >>> resolve_check(20, -5, 30).value
        'critical'
        >>> resolve_check(9, 1, 12).value
        'partial'
    """
    if natural_roll == NATURAL_CRITICAL:
        return OutcomeTier.CRITICAL
    if natural_roll == NATURAL_FUMBLE:
        return OutcomeTier.FUMBLE

    total = natural_roll + modifier
    if total >= dc:
        return OutcomeTier.SUCCESS
    if total >= dc - PARTIAL_SUCCESS_MARGIN:
        return OutcomeTier.PARTIAL
    return OutcomeTier.FAILURE


def resolve_dc(choice: Choice, investigator: Investigator) -> int:
    """Effective DC for a choice.

    A dynamic difficulty rule returns high_dc once the scaling faculty meets
    high_threshold, else base_dc. Without one, the fixed difficulty is used,
    defaulting to DEFAULT_DC.
    """
    rule = choice.dynamic_difficulty
    if rule is not None:
        score = investigator.faculty_score(rule.scale_faculty.value)
        if score is None:
            score = UNSET_FACULTY_SCORE
        return rule.high_dc if score >= rule.high_threshold else rule.base_dc
    if choice.difficulty is None:
        return DEFAULT_DC
    return choice.difficulty


def perform_check(
    faculty: str,
    investigator: Investigator,
    dc: int,
    has_advantage: bool = False,
    has_disadvantage: bool = False,
    rng: RandomSource | None = None,
) -> CheckResult:
    """Run a complete faculty check.

    Advantage and disadvantage cancel each other; with both, a single plain
    d20 is rolled. The reported roll is the kept natural result.

    Args:
        faculty: Faculty to check
        investigator: Source of the faculty score
        dc: Difficulty class
        has_advantage: Roll twice, keep higher
        has_disadvantage: Roll twice, keep lower
        rng: Random source

    Returns:
        CheckResult with the natural roll, modifier, total, DC and tier
    """
    if has_advantage and not has_disadvantage:
        natural = roll_with_advantage(rng).result
    elif has_disadvantage and not has_advantage:
        natural = roll_with_disadvantage(rng).result
    else:
        natural = roll_d20(rng)

    score = investigator.faculty_score(faculty)
    modifier = calculate_modifier(score if score is not None else UNSET_FACULTY_SCORE)
    tier = resolve_check(natural, modifier, dc)
    logger.debug(
        f"{faculty} check: natural={natural} modifier={modifier:+d} dc={dc} -> {tier.value}"
    )
    return CheckResult(roll=natural, modifier=modifier, total=natural + modifier, dc=dc, tier=tier)
