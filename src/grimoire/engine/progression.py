"""Case completion: faculty growth and vignette unlocks.

At the end of a case the faculty that most recently scored a rolled critical
grows by one point, the vignette registry is checked for a newly earned side
story, and the resulting state is autosaved.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from grimoire.engine.conditions import evaluate_condition
from grimoire.engine.effects import apply_effects, flag_effect
from grimoire.models.content import Condition, ConditionType, Effect, EffectType
from grimoire.models.investigator import is_valid_faculty
from grimoire.models.state import GameState
from grimoire.parameters import AUTOSAVE_SLOT, LAST_CRITICAL_FACULTY_FLAG, VIGNETTE_UNLOCKED_FLAG

if TYPE_CHECKING:
    from grimoire.storage.save_manager import SaveManager

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VignetteUnlockRule:
    """A vignette and the condition that earns it.

    The condition is one of factionReputation (faction >= threshold),
    npcDisposition (NPC disposition >= threshold) or hasFlag.
    """

    vignette_id: str
    condition: Condition

    @classmethod
    def faction_reputation(cls, vignette_id: str, faction: str, threshold: float) -> VignetteUnlockRule:
        return cls(
            vignette_id,
            Condition(type=ConditionType.FACTION_REPUTATION, target=faction, value=threshold),
        )

    @classmethod
    def npc_disposition(cls, vignette_id: str, npc_id: str, threshold: int) -> VignetteUnlockRule:
        return cls(
            vignette_id,
            Condition(type=ConditionType.NPC_DISPOSITION, target=npc_id, value=threshold),
        )

    @classmethod
    def required_flag(cls, vignette_id: str, flag: str) -> VignetteUnlockRule:
        return cls(vignette_id, Condition(type=ConditionType.HAS_FLAG, target=flag))


VIGNETTE_RULES: tuple[VignetteUnlockRule, ...] = (
    VignetteUnlockRule.faction_reputation("a-matter-of-shadows", "Lamplighters", 2),
)


@dataclass(frozen=True)
class CaseCompletion:
    """What completing a case granted. Both fields are None when nothing was."""

    faculty_bonus_granted: str | None = None
    vignette_unlocked: str | None = None


def vignette_flag(vignette_id: str) -> str:
    return VIGNETTE_UNLOCKED_FLAG.format(id=vignette_id)


def faculty_bonus_effect(faculty: str) -> Effect:
    return Effect(type=EffectType.FACULTY, target=faculty, delta=1)


def grant_faculty_bonus(state: GameState, faculty: str) -> GameState:
    """Raise a faculty by one point, capped at FACULTY_CAP.

    Unknown faculty names leave the state unchanged.
    """
    return apply_effects(state, [faculty_bonus_effect(faculty)])


def check_vignette_unlocks(
    state: GameState,
    rules: tuple[VignetteUnlockRule, ...] = VIGNETTE_RULES,
) -> str | None:
    """Id of the first satisfied vignette not yet unlocked, else None."""
    for rule in rules:
        if state.flags.get(vignette_flag(rule.vignette_id)) is True:
            continue
        if evaluate_condition(rule.condition, state):
            return rule.vignette_id
    return None


def complete_case(
    case_id: str,
    state: GameState,
    save_manager: SaveManager | None = None,
    rules: tuple[VignetteUnlockRule, ...] = VIGNETTE_RULES,
) -> tuple[CaseCompletion, GameState]:
    """Finish a case.

    Args:
        case_id: Case being completed
        state: Snapshot at the end of the case
        save_manager: Receives the autosave; skipped when None
        rules: Vignette registry to check

    Returns:
        Tuple of (CaseCompletion, new state)
    """
    effects: list[Effect] = []
    granted: str | None = None

    last_critical = state.flags.get(LAST_CRITICAL_FACULTY_FLAG)
    if is_valid_faculty(last_critical):
        granted = last_critical
        effects.append(faculty_bonus_effect(granted))
    elif last_critical is not None:
        logger.warning(f"Case {case_id}: ignoring invalid {LAST_CRITICAL_FACULTY_FLAG}={last_critical!r}")

    new_state = apply_effects(state, effects)
    unlocked = check_vignette_unlocks(new_state, rules)
    if unlocked is not None:
        new_state = apply_effects(new_state, [flag_effect(vignette_flag(unlocked))])

    logger.info(
        f"Case {case_id} complete: faculty bonus={granted or 'none'}, vignette={unlocked or 'none'}"
    )
    if save_manager is not None:
        save_manager.save(AUTOSAVE_SLOT, new_state)

    return CaseCompletion(faculty_bonus_granted=granted, vignette_unlocked=unlocked), new_state
