"""Effect application: the single step that turns described effects into state.

Resolvers return lists of Effect descriptors instead of mutating state.
apply_effects() applies them in order to a private copy and returns the new
snapshot, leaving the input untouched.

Effects naming an NPC or clue missing from the state, and effect types this
engine does not know, are skipped.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from grimoire.models.base import clamp
from grimoire.models.content import Effect, EffectType, NpcEffect
from grimoire.models.evidence import ClueStatus, can_transition
from grimoire.models.investigator import is_valid_faculty
from grimoire.models.npc import adjust_disposition, adjust_suspicion
from grimoire.models.state import GameState
from grimoire.parameters import FACTION_PROPAGATION_RATE, FACULTY_CAP

logger = logging.getLogger(__name__)


# =============================================================================
# Effect constructors
# =============================================================================


def composure_effect(delta: int) -> Effect:
    return Effect(type=EffectType.COMPOSURE, delta=delta)


def vitality_effect(delta: int) -> Effect:
    return Effect(type=EffectType.VITALITY, delta=delta)


def flag_effect(flag: str, value: bool | str = True) -> Effect:
    return Effect(type=EffectType.FLAG, target=flag, value=value)


def go_to_scene_effect(scene_id: str) -> Effect:
    return Effect(type=EffectType.GO_TO_SCENE, target=scene_id)


def npc_effects(npc_effect: NpcEffect | None) -> list[Effect]:
    """Disposition and suspicion effects for a choice's npcEffect."""
    if npc_effect is None:
        return []
    return [
        Effect(
            type=EffectType.DISPOSITION,
            target=npc_effect.npc_id,
            delta=npc_effect.disposition_delta,
        ),
        Effect(
            type=EffectType.SUSPICION,
            target=npc_effect.npc_id,
            delta=npc_effect.suspicion_delta,
        ),
    ]


# =============================================================================
# Handlers (operate on the private working copy)
# =============================================================================


def _apply_composure(state: GameState, effect: Effect) -> None:
    if effect.delta is not None:
        state.investigator = state.investigator.with_composure_delta(int(effect.delta))


def _apply_vitality(state: GameState, effect: Effect) -> None:
    if effect.delta is not None:
        state.investigator = state.investigator.with_vitality_delta(int(effect.delta))


def _apply_flag(state: GameState, effect: Effect) -> None:
    if effect.target is not None:
        state.flags[effect.target] = True if effect.value is None else effect.value


def _apply_disposition(state: GameState, effect: Effect) -> None:
    npc = state.npcs.get(effect.target or "")
    if npc is None or effect.delta is None:
        logger.debug(f"Skipping disposition effect for unknown NPC '{effect.target}'")
        return
    state.npcs[npc.id] = adjust_disposition(npc, int(effect.delta))
    # A faction-aligned NPC drags their faction's reputation along.
    if npc.faction:
        shift = effect.delta * FACTION_PROPAGATION_RATE
        state.faction_reputation[npc.faction] = float(state.reputation(npc.faction) + shift)


def _apply_suspicion(state: GameState, effect: Effect) -> None:
    npc = state.npcs.get(effect.target or "")
    if npc is None or effect.delta is None:
        logger.debug(f"Skipping suspicion effect for unknown NPC '{effect.target}'")
        return
    state.npcs[npc.id] = adjust_suspicion(npc, int(effect.delta))


def _apply_reputation(state: GameState, effect: Effect) -> None:
    if effect.target is not None and effect.delta is not None:
        current = state.reputation(effect.target)
        state.faction_reputation[effect.target] = float(current + effect.delta)


def _apply_discover_clue(state: GameState, effect: Effect) -> None:
    clue = state.clues.get(effect.target or "")
    if clue is None:
        logger.debug(f"Skipping discovery of unknown clue '{effect.target}'")
        return
    state.clues[clue.id] = clue.model_copy(
        update={"is_revealed": True, "status": ClueStatus.NEW}
    )


def _apply_clue_status(state: GameState, effect: Effect) -> None:
    clue = state.clues.get(effect.target or "")
    if clue is None or not isinstance(effect.value, str):
        return
    try:
        status = ClueStatus(effect.value)
    except ValueError:
        logger.debug(f"Skipping unknown clue status '{effect.value}'")
        return
    if not can_transition(clue.status, status):
        logger.warning(
            f"Ignoring clue '{clue.id}' transition {clue.status.value} -> {status.value}"
        )
        return
    state.clues[clue.id] = clue.model_copy(update={"status": status})


def _apply_add_deduction(state: GameState, effect: Effect) -> None:
    deduction = effect.deduction
    # Deductions are immutable once recorded.
    if deduction is not None and deduction.id not in state.deductions:
        state.deductions[deduction.id] = deduction


def _apply_faculty(state: GameState, effect: Effect) -> None:
    if not is_valid_faculty(effect.target):
        return
    if isinstance(effect.value, int) and not isinstance(effect.value, bool):
        value = effect.value
    elif effect.delta is not None:
        current = state.investigator.faculty_score(effect.target) or 0
        if effect.delta > 0 and current >= FACULTY_CAP:
            # scores allocated above the cap at creation are kept, not lowered
            return
        value = current + int(effect.delta)
    else:
        return
    state.investigator = state.investigator.with_faculty(
        effect.target, int(clamp(value, 0, FACULTY_CAP))
    )


def _apply_go_to_scene(state: GameState, effect: Effect) -> None:
    if not effect.target:
        return
    state.scene_history.append(state.current_scene)
    state.current_scene = effect.target


EFFECT_HANDLERS: dict[EffectType, Callable[[GameState, Effect], None]] = {
    EffectType.COMPOSURE: _apply_composure,
    EffectType.VITALITY: _apply_vitality,
    EffectType.FLAG: _apply_flag,
    EffectType.DISPOSITION: _apply_disposition,
    EffectType.SUSPICION: _apply_suspicion,
    EffectType.REPUTATION: _apply_reputation,
    EffectType.DISCOVER_CLUE: _apply_discover_clue,
    EffectType.CLUE_STATUS: _apply_clue_status,
    EffectType.ADD_DEDUCTION: _apply_add_deduction,
    EffectType.FACULTY: _apply_faculty,
    EffectType.GO_TO_SCENE: _apply_go_to_scene,
}


def apply_effects(state: GameState, effects: Iterable[Effect]) -> GameState:
    """Apply effects in order and return the resulting snapshot.

    Args:
        state: Snapshot to start from (not modified)
        effects: Effects to apply

    Returns:
        New GameState with every recognized effect applied
    """
    new_state = state.model_copy(deep=True)
    for effect in effects:
        handler = EFFECT_HANDLERS.get(effect.type)
        if handler is None:
            logger.debug(f"Skipping unknown effect type '{effect.type}'")
            continue
        handler(new_state, effect)
    return new_state
