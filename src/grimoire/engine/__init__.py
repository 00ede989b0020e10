"""Rules engine for Gaslight & Grimoire.

This module contains the narrative rules including:
- dice: d20 checks, advantage/disadvantage and outcome tiers
- conditions: gating predicates over a GameState snapshot
- deduction: connecting clues into deductions
- choices: scene choice resolution
- encounter: the multi-round encounter state machine
- progression: case completion, faculty growth and vignette unlocks
- effects: described state changes and their application
- scenes: scene variants and scene entry
- session: GameSession, the single writer of game state

Usage:
    from grimoire.content import load_case
    from grimoire.engine import GameSession
    from grimoire.models import create_investigator

    investigator = create_investigator("Ada", "deductionist", {"reason": 4})
    session = GameSession(investigator, random_seed=7)
    scene = session.start_case(load_case("content/cases/the-whitechapel-cipher"))

    choices = session.available_choices()
    result = session.process_choice(choices[0].id)
"""

from grimoire.engine.choices import (
    ChoiceResult,
    choice_effects,
    compute_choice_result,
    get_available_choices,
    process_choice,
)
from grimoire.engine.conditions import (
    can_discover_clue,
    choice_conditions,
    evaluate_condition,
    evaluate_conditions,
    is_choice_available,
)
from grimoire.engine.deduction import build_deduction, connect_clues
from grimoire.engine.dice import (
    CheckResult,
    RandomSource,
    RollResult,
    calculate_modifier,
    perform_check,
    resolve_check,
    resolve_dc,
    roll_d20,
    roll_with_advantage,
    roll_with_disadvantage,
)
from grimoire.engine.effects import apply_effects
from grimoire.engine.encounter import (
    EncounterChoiceOption,
    EncounterStart,
    EncounterTurn,
    get_encounter_choices,
    process_encounter_choice,
    start_encounter,
)
from grimoire.engine.progression import (
    VIGNETTE_RULES,
    CaseCompletion,
    VignetteUnlockRule,
    check_vignette_unlocks,
    complete_case,
    grant_faculty_bonus,
)
from grimoire.engine.scenes import resolve_scene, scene_entry_effects
from grimoire.engine.session import GameSession

__all__ = [
    # Session
    "GameSession",
    # Dice
    "RandomSource",
    "RollResult",
    "CheckResult",
    "roll_d20",
    "roll_with_advantage",
    "roll_with_disadvantage",
    "calculate_modifier",
    "resolve_check",
    "resolve_dc",
    "perform_check",
    # Conditions
    "evaluate_condition",
    "evaluate_conditions",
    "choice_conditions",
    "is_choice_available",
    "can_discover_clue",
    # Deduction
    "build_deduction",
    "connect_clues",
    # Choices
    "ChoiceResult",
    "compute_choice_result",
    "choice_effects",
    "process_choice",
    "get_available_choices",
    # Encounters
    "EncounterStart",
    "EncounterTurn",
    "EncounterChoiceOption",
    "start_encounter",
    "process_encounter_choice",
    "get_encounter_choices",
    # Progression
    "CaseCompletion",
    "VignetteUnlockRule",
    "VIGNETTE_RULES",
    "check_vignette_unlocks",
    "complete_case",
    "grant_faculty_bonus",
    # Effects and scenes
    "apply_effects",
    "resolve_scene",
    "scene_entry_effects",
]
