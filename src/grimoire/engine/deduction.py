"""Deduction formation from connected clues.

A deduction built from any red-herring clue is itself a red herring. The
taint changes the flavor text only; game logic reads is_red_herring.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Mapping, Sequence

from grimoire.errors import DeductionError, InvalidTransitionError
from grimoire.models.content import Effect, EffectType
from grimoire.models.evidence import Clue, ClueType, Deduction, path_to_deduced
from grimoire.models.state import GameState

logger = logging.getLogger(__name__)

TAINTED_DESCRIPTION = "A connection forms, but something feels off..."
CONFIDENT_DESCRIPTION = "The threads converge into a clear deduction."

MIN_CLUES_PER_DEDUCTION = 2


def build_deduction(
    clue_ids: Sequence[str],
    clues_by_id: Mapping[str, Clue],
    deduction_id: str | None = None,
) -> Deduction:
    """Assemble a Deduction from clue ids.

    Every input id is kept verbatim, in order. Ids missing from clues_by_id
    do not taint the deduction.

    Args:
        clue_ids: Ids of the clues being connected
        clues_by_id: All known clues
        deduction_id: Explicit id; a random one is generated if omitted

    Returns:
        New Deduction with is_red_herring set
    """
    is_red_herring = any(
        clue_id in clues_by_id and clues_by_id[clue_id].type == ClueType.RED_HERRING
        for clue_id in clue_ids
    )
    return Deduction(
        id=deduction_id or f"deduction-{uuid.uuid4().hex[:12]}",
        clue_ids=list(clue_ids),
        description=TAINTED_DESCRIPTION if is_red_herring else CONFIDENT_DESCRIPTION,
        is_red_herring=is_red_herring,
    )


def connect_clues(
    clue_ids: Sequence[str],
    state: GameState,
    deduction_id: str | None = None,
) -> tuple[Deduction, list[Effect]]:
    """Form a deduction from revealed clues.

    Returns the deduction together with the effects that record it and walk
    each contributing clue along its lifecycle to ``deduced``.

    Raises:
        DeductionError: Fewer than two distinct revealed clues, or a clue
            that can no longer be used (spent)
    """
    distinct = list(dict.fromkeys(clue_ids))
    unrevealed = [clue_id for clue_id in distinct if not state.is_clue_revealed(clue_id)]
    if unrevealed:
        raise DeductionError(f"Clues not revealed: {unrevealed}")
    if len(distinct) < MIN_CLUES_PER_DEDUCTION:
        raise DeductionError(
            f"A deduction needs at least {MIN_CLUES_PER_DEDUCTION} distinct clues, "
            f"got {len(distinct)}"
        )

    effects: list[Effect] = []
    for clue_id in distinct:
        try:
            steps = path_to_deduced(state.clues[clue_id].status)
        except InvalidTransitionError as e:
            raise DeductionError(f"Clue '{clue_id}': {e}") from e
        effects.extend(
            Effect(type=EffectType.CLUE_STATUS, target=clue_id, value=step.value)
            for step in steps
        )

    deduction = build_deduction(distinct, state.clues, deduction_id)
    effects.insert(0, Effect(type=EffectType.ADD_DEDUCTION, deduction=deduction))
    logger.info(
        f"Deduction {deduction.id} formed from {len(distinct)} clues "
        f"(red herring: {deduction.is_red_herring})"
    )
    return deduction, effects
