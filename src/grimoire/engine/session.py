"""Game session: the single owner of mutable game state.

GameSession wires the pure engine functions together. Every operation reads
the current snapshot, asks the engine for a result and a list of effects, and
replaces the snapshot with the applied result. Nothing else writes state.

Autosave follows GameSettings.auto_save_frequency:
- "choice": after every resolved choice
- "scene": on every scene entry
- "manual": never

Encounters are not persisted. Loading a save taken mid-encounter restores the
scene where the encounter began; the encounter starts again from round 1.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Sequence
from typing import Optional

from grimoire.content.validator import validate_content
from grimoire.engine import choices as choice_engine
from grimoire.engine import deduction as deduction_engine
from grimoire.engine import encounter as encounter_engine
from grimoire.engine.choices import ChoiceResult
from grimoire.engine.effects import apply_effects, flag_effect, go_to_scene_effect
from grimoire.engine.encounter import EncounterChoiceOption, EncounterStart, EncounterTurn
from grimoire.engine.progression import CaseCompletion, complete_case
from grimoire.engine.scenes import resolve_scene, scene_entry_effects
from grimoire.errors import ContentValidationError, EncounterCompleteError
from grimoire.models.archetypes import ABILITY_FLAGS, ARCHETYPES
from grimoire.models.content import CaseData, Choice, EncounterRound, EncounterState, SceneNode
from grimoire.models.evidence import Deduction
from grimoire.models.investigator import Investigator
from grimoire.models.state import GameState
from grimoire.parameters import AUTOSAVE_SLOT
from grimoire.storage.save_manager import SaveManager

logger = logging.getLogger(__name__)


class GameSession:
    """One player's game.

    Attributes:
        state: Current game snapshot
        case: Loaded case content (None before start_case)
        encounter: Encounter in progress (None outside encounters)
        save_manager: Destination for autosaves and explicit saves
    """

    def __init__(
        self,
        investigator: Optional[Investigator] = None,
        save_manager: Optional[SaveManager] = None,
        random_seed: Optional[int] = None,
        state: Optional[GameState] = None,
    ) -> None:
        """Create a session.

        Args:
            investigator: Player character for a fresh state
            save_manager: Save destination; saving is disabled when None
            random_seed: Seed for dice rolls (for reproducibility)
            state: Existing snapshot to continue from (overrides investigator)
        """
        if state is None:
            state = GameState(investigator=investigator or Investigator())
        self.state = state
        self.case: Optional[CaseData] = None
        self.encounter: Optional[EncounterState] = None
        self.save_manager = save_manager
        self._random = random.Random(random_seed)

    # =========================================================================
    # Public API
    # =========================================================================

    def get_current_state(self) -> GameState:
        """Copy of the current snapshot."""
        return self.state.model_copy(deep=True)

    def current_scene(self) -> SceneNode:
        """Resolved scene node for the current scene id."""
        return resolve_scene(self.state.current_scene, self.state, self._require_case())

    def start_case(self, case: CaseData) -> SceneNode:
        """Validate a case and enter its first scene.

        Resets the archetype ability, clears ability flags, merges the case's
        clues and NPCs into state and clears scene history.

        Raises:
            ContentValidationError: The case has critical validation issues
        """
        result = validate_content(case)
        if not result.is_valid:
            errors = [issue.message for issue in result.errors]
            logger.error(f"Case {case.meta.id} failed validation with {len(errors)} error(s)")
            raise ContentValidationError(case.meta.id, errors)

        first_scene = case.first_scene_id
        state = self.state.model_copy(deep=True)
        state.current_case = case.meta.id
        state.current_scene = first_scene or ""
        state.scene_history = []
        state.investigator = state.investigator.model_copy(update={"ability_used": False})
        for flag in ABILITY_FLAGS:
            state.flags.pop(flag, None)
        state.clues.update({clue_id: clue.model_copy() for clue_id, clue in case.clues.items()})
        state.npcs.update({npc_id: npc.model_copy() for npc_id, npc in case.npcs.items()})

        self.case = case
        self.encounter = None
        self.state = state
        logger.info(f"Started case {case.meta.id} at scene {first_scene}")
        return self._arrive()

    def enter_scene(self, scene_id: str) -> SceneNode:
        """Move to a scene and apply its entry effects.

        Raises:
            SceneNotFoundError: The scene is not part of the case
        """
        case = self._require_case()
        resolve_scene(scene_id, self.state, case)
        if scene_id != self.state.current_scene:
            self.state = apply_effects(self.state, [go_to_scene_effect(scene_id)])
        return self._arrive()

    def available_choices(self) -> list[Choice]:
        """Choices of the current scene whose gates hold."""
        return choice_engine.get_available_choices(self.current_scene(), self.state)

    def process_choice(self, choice_id: str) -> ChoiceResult:
        """Resolve one of the current scene's available choices.

        Raises:
            ValueError: The choice is not available in the current scene
            SceneNotFoundError: The outcome names no scene
        """
        choice = self._find_choice(choice_id, self.available_choices())
        new_state, result = choice_engine.process_choice(choice, self.state, self._random)
        self.state = new_state
        self._arrive()
        if self.state.settings.auto_save_frequency == "choice":
            self._autosave()
        return result

    def activate_ability(self) -> str:
        """Spend the archetype ability for this case.

        Returns:
            The world flag the ability set

        Raises:
            ValueError: The ability was already used this case
        """
        investigator = self.state.investigator
        if investigator.ability_used:
            raise ValueError(f"{investigator.name or 'Investigator'} already used their ability")
        definition = ARCHETYPES[investigator.archetype]
        state = apply_effects(self.state, [flag_effect(definition.ability_flag)])
        state.investigator = state.investigator.model_copy(update={"ability_used": True})
        self.state = state
        logger.info(f"Ability {definition.ability_name} activated ({definition.ability_flag})")
        return definition.ability_flag

    def connect_clues(self, clue_ids: Sequence[str]) -> Deduction:
        """Form a deduction from revealed clues.

        Raises:
            DeductionError: Fewer than two distinct revealed clues
        """
        deduction, effects = deduction_engine.connect_clues(clue_ids, self.state)
        self.state = apply_effects(self.state, effects)
        return deduction

    def start_encounter(
        self,
        encounter_id: str,
        rounds: list[EncounterRound],
        is_supernatural: bool = False,
    ) -> EncounterStart:
        """Begin an encounter, applying any reaction-check damage."""
        start = encounter_engine.start_encounter(
            encounter_id, rounds, is_supernatural, self.state, self._random
        )
        self.state = apply_effects(self.state, start.effects)
        self.encounter = start.encounter_state
        return start

    def encounter_choices(self) -> list[EncounterChoiceOption]:
        """Visible choices of the active encounter round."""
        active = self.encounter.active_round if self.encounter else None
        if active is None:
            return []
        return encounter_engine.get_encounter_choices(active, self.state)

    def process_encounter_choice(self, choice_id: str) -> EncounterTurn:
        """Resolve the active round with one of its visible choices.

        Raises:
            EncounterCompleteError: No encounter is in progress
            ValueError: The choice is not visible this round
        """
        if self.encounter is None or self.encounter.is_complete:
            raise EncounterCompleteError("No encounter in progress")
        options = [option.choice for option in self.encounter_choices()]
        choice = self._find_choice(choice_id, options)

        turn = encounter_engine.process_encounter_choice(
            choice, self.encounter, self.state, self._random
        )
        self.state = turn.state
        self.encounter = turn.encounter_state
        if self.state.settings.auto_save_frequency == "choice":
            self._autosave()
        if turn.encounter_state.is_complete:
            self.encounter = None
            if turn.result.next_scene_id:
                self._arrive()
        return turn

    def complete_case(self) -> CaseCompletion:
        """Finish the active case; see grimoire.engine.progression."""
        case = self._require_case()
        completion, self.state = complete_case(case.meta.id, self.state, self.save_manager)
        return completion

    def save(self, slot: str) -> bool:
        """Save the current state to a slot. False if saving is disabled."""
        if self.save_manager is None:
            return False
        self.save_manager.save(slot, self.state)
        return True

    def load(self, slot: str, case: Optional[CaseData] = None) -> bool:
        """Replace the current state with a saved one.

        Any encounter in progress is dropped.

        Returns:
            True if the slot was loaded, False if it is missing or unreadable
        """
        if self.save_manager is None:
            return False
        state = self.save_manager.load(slot)
        if state is None:
            return False
        self.state = state
        self.encounter = None
        if case is not None:
            self.case = case
        logger.info(f"Loaded slot {slot} at scene {state.current_scene}")
        return True

    # =========================================================================
    # Internals
    # =========================================================================

    def _require_case(self) -> CaseData:
        if self.case is None:
            raise ValueError("No case loaded; call start_case first")
        return self.case

    def _find_choice(self, choice_id: str, candidates: list[Choice]) -> Choice:
        for choice in candidates:
            if choice.id == choice_id:
                return choice
        raise ValueError(f"Choice not available: {choice_id}")

    def _arrive(self) -> SceneNode:
        """Apply entry effects of the current scene and autosave."""
        scene = self.current_scene()
        self.state = apply_effects(self.state, scene_entry_effects(scene, self.state))
        if self.state.settings.auto_save_frequency == "scene":
            self._autosave()
        return scene

    def _autosave(self) -> None:
        if self.save_manager is not None:
            self.save_manager.save(AUTOSAVE_SLOT, self.state)
