"""Encounter state machine.

States: not started -> in progress (round 0..N-1) -> complete.

- start_encounter() builds the EncounterState. Supernatural encounters open
  with a reaction check (higher of nerve/lore, ties to nerve, DC 12). A
  failed check costs 1-2 composure and swaps round 1's first choice for its
  worse_alternative.
- process_encounter_choice() resolves one round: the check, damage on a
  failing tier (both axes in supernatural rounds, exactly one in mundane
  rounds), NPC effects, and round advancement. The scene changes only when
  the final round is resolved.
- get_encounter_choices() filters a round's choices for display.

A complete encounter is terminal; submitting another choice raises
EncounterCompleteError.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from grimoire.engine.choices import ChoiceResult, critical_effects, has_revealed_advantage
from grimoire.engine.conditions import is_choice_available
from grimoire.engine.dice import RandomSource, perform_check, resolve_dc, roll_d20
from grimoire.engine.effects import (
    apply_effects,
    composure_effect,
    go_to_scene_effect,
    npc_effects,
    vitality_effect,
)
from grimoire.errors import EncounterCompleteError
from grimoire.models.content import (
    Choice,
    Effect,
    EncounterRound,
    EncounterState,
    OutcomeTier,
)
from grimoire.models.evidence import ClueType
from grimoire.models.investigator import Faculty
from grimoire.models.state import GameState
from grimoire.parameters import (
    REACTION_CHECK_DC,
    REACTION_COMPOSURE_DAMAGE,
    UNSET_FACULTY_SCORE,
)

logger = logging.getLogger(__name__)


@dataclass
class EncounterStart:
    """Result of starting an encounter.

    Attributes:
        encounter_state: Fresh state positioned at round 0
        effects: Composure damage from a failed reaction check, if any
        reaction_roll: Natural roll of the reaction check (None if mundane)
        reaction_faculty: Faculty used for the reaction check
    """

    encounter_state: EncounterState
    effects: list[Effect] = field(default_factory=list)
    reaction_roll: int | None = None
    reaction_faculty: str | None = None


@dataclass
class EncounterTurn:
    """Result of resolving one encounter round.

    Attributes:
        encounter_state: State after the round advanced
        result: The choice resolution
        effects: Effects applied to the game state, in order
        state: Game state after the effects
    """

    encounter_state: EncounterState
    result: ChoiceResult
    effects: list[Effect]
    state: GameState


@dataclass(frozen=True)
class EncounterChoiceOption:
    """A visible encounter choice with its occult-advantage annotation."""

    choice: Choice
    has_advantage: bool = False


def reaction_faculty(state: GameState) -> Faculty:
    """Higher of nerve and lore; ties favor nerve."""
    investigator = state.investigator
    nerve = investigator.faculty_score(Faculty.NERVE.value)
    lore = investigator.faculty_score(Faculty.LORE.value)
    nerve = UNSET_FACULTY_SCORE if nerve is None else nerve
    lore = UNSET_FACULTY_SCORE if lore is None else lore
    return Faculty.NERVE if nerve >= lore else Faculty.LORE


def _copy_rounds(rounds: list[EncounterRound]) -> list[EncounterRound]:
    return [r.model_copy(update={"choices": list(r.choices)}) for r in rounds]


def start_encounter(
    encounter_id: str,
    rounds: list[EncounterRound],
    is_supernatural: bool,
    state: GameState,
    rng: RandomSource | None = None,
) -> EncounterStart:
    """Create an encounter, running the reaction check when supernatural.

    Args:
        encounter_id: Id for the new encounter
        rounds: Ordered rounds (not modified)
        is_supernatural: Whether a reaction check opens the encounter
        state: Current snapshot
        rng: Random source

    Returns:
        EncounterStart with the new state and any reaction-check damage
    """
    processed = _copy_rounds(rounds)
    if not is_supernatural or not processed:
        return EncounterStart(encounter_state=EncounterState(id=encounter_id, rounds=processed))

    faculty = reaction_faculty(state)
    check = perform_check(faculty.value, state.investigator, REACTION_CHECK_DC, rng=rng)
    passed = check.tier.is_success
    effects: list[Effect] = []

    if not passed:
        low, high = REACTION_COMPOSURE_DAMAGE
        # Separate draw from the reaction roll; maps a d20 onto low..high.
        damage = low + roll_d20(rng) % (high - low + 1)
        effects.append(composure_effect(-damage))

        first_round = processed[0]
        if first_round.choices and first_round.choices[0].worse_alternative is not None:
            replacement = first_round.choices[0].worse_alternative
            processed[0] = first_round.model_copy(
                update={"choices": [replacement, *first_round.choices[1:]]}
            )
        logger.info(
            f"Encounter {encounter_id}: reaction check failed ({faculty.value} "
            f"rolled {check.roll}), composure -{damage}"
        )

    return EncounterStart(
        encounter_state=EncounterState(
            id=encounter_id,
            rounds=processed,
            reaction_check_passed=passed,
        ),
        effects=effects,
        reaction_roll=check.roll,
        reaction_faculty=faculty.value,
    )


def has_occult_advantage(choice: Choice, state: GameState) -> bool:
    """True if any advantage_if clue is revealed and occult."""
    for clue_id in choice.advantage_if or []:
        clue = state.clues.get(clue_id)
        if clue is not None and clue.is_revealed and clue.type == ClueType.OCCULT:
            return True
    return False


def encounter_damage_effects(choice: Choice, is_supernatural: bool) -> list[Effect]:
    """Damage effects for a failed encounter choice.

    Supernatural rounds damage both composure and vitality where defined.
    Mundane rounds damage composure if defined, else vitality.
    """
    damage = choice.encounter_damage
    if damage is None:
        return []
    effects: list[Effect] = []
    if is_supernatural:
        if damage.composure_delta is not None:
            effects.append(composure_effect(damage.composure_delta))
        if damage.vitality_delta is not None:
            effects.append(vitality_effect(damage.vitality_delta))
    elif damage.composure_delta is not None:
        effects.append(composure_effect(damage.composure_delta))
    elif damage.vitality_delta is not None:
        effects.append(vitality_effect(damage.vitality_delta))
    return effects


def resolve_encounter_choice(
    choice: Choice,
    encounter_state: EncounterState,
    state: GameState,
    rng: RandomSource | None = None,
) -> tuple[EncounterState, ChoiceResult, list[Effect]]:
    """Pure half of process_encounter_choice: result plus described effects.

    Raises:
        EncounterCompleteError: The encounter has already finished
    """
    if encounter_state.is_complete:
        raise EncounterCompleteError(f"Encounter '{encounter_state.id}' is already complete")

    current = encounter_state.active_round
    is_supernatural = current.is_supernatural if current is not None else False
    has_advantage = has_occult_advantage(choice, state) or has_revealed_advantage(choice, state)

    if choice.is_faculty_check:
        check = perform_check(
            choice.faculty.value,
            state.investigator,
            resolve_dc(choice, state.investigator),
            has_advantage=has_advantage,
            has_disadvantage=False,
            rng=rng,
        )
        result = ChoiceResult(
            next_scene_id=choice.outcome_for(check.tier),
            tier=check.tier,
            roll=check.roll,
            modifier=check.modifier,
            total=check.total,
            dc=check.dc,
            faculty=choice.faculty.value,
        )
    else:
        result = ChoiceResult(
            next_scene_id=choice.unconditional_outcome(), tier=OutcomeTier.SUCCESS
        )

    effects = critical_effects(result)
    if result.tier.is_failure:
        effects.extend(encounter_damage_effects(choice, is_supernatural))
    effects.extend(npc_effects(choice.npc_effect))

    next_round = encounter_state.current_round + 1
    is_complete = next_round >= len(encounter_state.rounds)
    if is_complete and result.next_scene_id:
        effects.append(go_to_scene_effect(result.next_scene_id))

    updated = encounter_state.model_copy(
        update={"current_round": next_round, "is_complete": is_complete}
    )
    return updated, result, effects


def process_encounter_choice(
    choice: Choice,
    encounter_state: EncounterState,
    state: GameState,
    rng: RandomSource | None = None,
) -> EncounterTurn:
    """Resolve one encounter round and apply its effects.

    Returns:
        EncounterTurn with the advanced encounter, the result and new state

    Raises:
        EncounterCompleteError: The encounter has already finished
    """
    updated, result, effects = resolve_encounter_choice(choice, encounter_state, state, rng)
    if updated.is_complete:
        logger.info(f"Encounter {updated.id} complete -> {result.next_scene_id or '(no scene)'}")
    return EncounterTurn(
        encounter_state=updated,
        result=result,
        effects=effects,
        state=apply_effects(state, effects),
    )


def get_encounter_choices(round_: EncounterRound, state: GameState) -> list[EncounterChoiceOption]:
    """Visible choices for a round.

    Escape paths appear whenever their gating conditions hold and never carry
    advantage. Other choices must pass the same gating and are annotated with
    occult advantage; the annotation does not affect visibility.
    """
    options: list[EncounterChoiceOption] = []
    for choice in round_.choices:
        if not is_choice_available(choice, state):
            continue
        if choice.is_escape_path:
            options.append(EncounterChoiceOption(choice=choice, has_advantage=False))
        else:
            options.append(
                EncounterChoiceOption(choice=choice, has_advantage=has_occult_advantage(choice, state))
            )
    return options
