"""Choice resolution.

compute_choice_result() is pure: it maps a choice and a snapshot to a
ChoiceResult, drawing dice from the supplied random source. The effects of
a resolved choice are described separately by choice_effects() and applied
by process_choice() in one step, after the computation has succeeded.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from grimoire.engine.conditions import is_choice_available
from grimoire.engine.dice import RandomSource, perform_check, resolve_dc
from grimoire.engine.effects import apply_effects, flag_effect, go_to_scene_effect, npc_effects
from grimoire.errors import SceneNotFoundError
from grimoire.models.content import Choice, Effect, OutcomeTier, SceneNode
from grimoire.models.state import GameState
from grimoire.parameters import ABILITY_AUTO_SUCCEED_FLAGS, LAST_CRITICAL_FACULTY_FLAG

logger = logging.getLogger(__name__)


@dataclass
class ChoiceResult:
    """Outcome of resolving a choice.

    Roll fields are None when no roll was made (unchecked choices and
    ability auto-successes).

    Attributes:
        next_scene_id: Scene the outcome leads to
        tier: Resolved outcome tier
        roll: Natural die result
        modifier: Faculty modifier
        total: roll + modifier
        dc: Difficulty checked against
        faculty: Faculty that was checked
        auto_succeeded: True if an ability flag forced a critical
    """

    next_scene_id: str
    tier: OutcomeTier
    roll: int | None = None
    modifier: int | None = None
    total: int | None = None
    dc: int | None = None
    faculty: str | None = None
    auto_succeeded: bool = False

    @property
    def rolled(self) -> bool:
        return self.roll is not None


def has_revealed_advantage(choice: Choice, state: GameState) -> bool:
    """True if any advantage_if clue has been revealed."""
    return any(state.is_clue_revealed(clue_id) for clue_id in choice.advantage_if or [])


def ability_auto_succeeds(choice: Choice, state: GameState) -> bool:
    """True if an active ability flag turns this choice's check into a critical."""
    if choice.faculty is None:
        return False
    flag = ABILITY_AUTO_SUCCEED_FLAGS.get(choice.faculty.value)
    return flag is not None and state.flags.get(flag) is True


def compute_choice_result(
    choice: Choice,
    state: GameState,
    rng: RandomSource | None = None,
) -> ChoiceResult:
    """Resolve a choice against a snapshot without touching state.

    1. Faculty checks first honor the ability auto-succeed flag for the
       checked faculty: critical, no roll.
    2. Otherwise the DC is resolved, advantage comes from any revealed
       advantage_if clue, and the tier picks the outcome.
    3. Choices without a check resolve to the success outcome.
    """
    if choice.is_faculty_check:
        faculty = choice.faculty.value
        if ability_auto_succeeds(choice, state):
            logger.debug(f"Choice {choice.id}: {faculty} ability auto-succeeds")
            return ChoiceResult(
                next_scene_id=choice.outcome_for(OutcomeTier.CRITICAL),
                tier=OutcomeTier.CRITICAL,
                faculty=faculty,
                auto_succeeded=True,
            )

        dc = resolve_dc(choice, state.investigator)
        check = perform_check(
            faculty,
            state.investigator,
            dc,
            has_advantage=has_revealed_advantage(choice, state),
            has_disadvantage=False,
            rng=rng,
        )
        return ChoiceResult(
            next_scene_id=choice.outcome_for(check.tier),
            tier=check.tier,
            roll=check.roll,
            modifier=check.modifier,
            total=check.total,
            dc=check.dc,
            faculty=faculty,
        )

    return ChoiceResult(next_scene_id=choice.unconditional_outcome(), tier=OutcomeTier.SUCCESS)


def critical_effects(result: ChoiceResult) -> list[Effect]:
    """Record the faculty of a rolled critical for case-end progression."""
    if result.rolled and result.tier == OutcomeTier.CRITICAL and result.faculty:
        return [flag_effect(LAST_CRITICAL_FACULTY_FLAG, result.faculty)]
    return []


def choice_effects(choice: Choice, result: ChoiceResult) -> list[Effect]:
    """Effects of a resolved scene choice, in application order."""
    effects = critical_effects(result)
    effects.extend(npc_effects(choice.npc_effect))
    effects.append(go_to_scene_effect(result.next_scene_id))
    return effects


def process_choice(
    choice: Choice,
    state: GameState,
    rng: RandomSource | None = None,
) -> tuple[GameState, ChoiceResult]:
    """Resolve a choice and apply its effects.

    Returns:
        Tuple of (new state, result)

    Raises:
        SceneNotFoundError: The resolved outcome has no target scene; nothing
            is applied
    """
    result = compute_choice_result(choice, state, rng)
    if not result.next_scene_id:
        raise SceneNotFoundError(
            f"Choice '{choice.id}' has no outcome for tier '{result.tier.value}'"
        )
    new_state = apply_effects(state, choice_effects(choice, result))
    return new_state, result


def get_available_choices(scene: SceneNode, state: GameState) -> list[Choice]:
    """Choices of a scene whose gating conditions hold."""
    return [choice for choice in scene.choices if is_choice_available(choice, state)]
