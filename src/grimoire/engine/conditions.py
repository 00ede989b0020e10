"""Condition evaluation over a GameState snapshot.

Conditions gate choice visibility, clue discovery and scene variants. A
condition list is AND-combined and an empty list always holds. Evaluation is
pure and fails closed: a condition that names a clue, NPC or faculty missing
from the state is false, and so is a condition type this engine does not know.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from grimoire.models.content import Choice, ClueDiscovery, Condition, ConditionType
from grimoire.models.state import GameState
from grimoire.parameters import SUSPICION_TIERS

logger = logging.getLogger(__name__)


def _has_clue(condition: Condition, state: GameState) -> bool:
    return state.is_clue_revealed(condition.target)


def _has_deduction(condition: Condition, state: GameState) -> bool:
    return condition.target in state.deductions


def _has_flag(condition: Condition, state: GameState) -> bool:
    if condition.target not in state.flags:
        return False
    flag_value = state.flags[condition.target]
    if condition.value is None:
        return flag_value is True
    return type(flag_value) is type(condition.value) and flag_value == condition.value


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _faculty_min(condition: Condition, state: GameState) -> bool:
    score = state.investigator.faculty_score(condition.target)
    if score is None or not _is_number(condition.value):
        return False
    return score >= condition.value


def _archetype_is(condition: Condition, state: GameState) -> bool:
    return state.investigator.archetype.value == condition.value


def _npc_disposition(condition: Condition, state: GameState) -> bool:
    npc = state.npcs.get(condition.target)
    if npc is None or not _is_number(condition.value):
        return False
    return npc.disposition >= condition.value


def _npc_suspicion(condition: Condition, state: GameState) -> bool:
    npc = state.npcs.get(condition.target)
    band = SUSPICION_TIERS.get(condition.value) if isinstance(condition.value, str) else None
    if npc is None or band is None:
        return False
    low, high = band
    return low <= npc.suspicion <= high


def _faction_reputation(condition: Condition, state: GameState) -> bool:
    if not _is_number(condition.value):
        return False
    return state.reputation(condition.target) >= condition.value


CONDITION_EVALUATORS: dict[ConditionType, Callable[[Condition, GameState], bool]] = {
    ConditionType.HAS_CLUE: _has_clue,
    ConditionType.HAS_DEDUCTION: _has_deduction,
    ConditionType.HAS_FLAG: _has_flag,
    ConditionType.FACULTY_MIN: _faculty_min,
    ConditionType.ARCHETYPE_IS: _archetype_is,
    ConditionType.NPC_DISPOSITION: _npc_disposition,
    ConditionType.NPC_SUSPICION: _npc_suspicion,
    ConditionType.FACTION_REPUTATION: _faction_reputation,
}


def evaluate_condition(condition: Condition, state: GameState) -> bool:
    """Evaluate a single condition. Unknown types are false."""
    evaluator = CONDITION_EVALUATORS.get(condition.type)
    if evaluator is None:
        logger.debug(f"Unknown condition type '{condition.type}' evaluated as false")
        return False
    return evaluator(condition, state)


def evaluate_conditions(conditions: Iterable[Condition] | None, state: GameState) -> bool:
    """True if every condition holds. No conditions means no prerequisites."""
    if not conditions:
        return True
    return all(evaluate_condition(condition, state) for condition in conditions)


def choice_conditions(choice: Choice) -> list[Condition]:
    """Build the gating conditions declared by a choice's requires_* fields."""
    conditions: list[Condition] = []
    if choice.requires_clue:
        conditions.append(Condition(type=ConditionType.HAS_CLUE, target=choice.requires_clue))
    if choice.requires_deduction:
        conditions.append(
            Condition(type=ConditionType.HAS_DEDUCTION, target=choice.requires_deduction)
        )
    if choice.requires_flag:
        conditions.append(Condition(type=ConditionType.HAS_FLAG, target=choice.requires_flag))
    if choice.requires_faculty:
        conditions.append(
            Condition(
                type=ConditionType.FACULTY_MIN,
                target=choice.requires_faculty.faculty.value,
                value=choice.requires_faculty.minimum,
            )
        )
    return conditions


def is_choice_available(choice: Choice, state: GameState) -> bool:
    """True if the choice's gating conditions hold."""
    return evaluate_conditions(choice_conditions(choice), state)


def can_discover_clue(discovery: ClueDiscovery, state: GameState) -> bool:
    """True if a discovery's faculty and deduction gates are satisfied."""
    if discovery.requires_faculty is not None:
        requirement = discovery.requires_faculty
        score = state.investigator.faculty_score(requirement.faculty.value)
        if score is None or score < requirement.minimum:
            return False
    if discovery.requires_deduction and discovery.requires_deduction not in state.deductions:
        return False
    return True
