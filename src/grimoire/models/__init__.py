"""Gaslight & Grimoire data model.

This module exports the core data structures for the rules engine.
"""

from .archetypes import ABILITY_FLAGS, ARCHETYPES, ArchetypeDefinition, create_investigator
from .base import CamelModel, clamp, clamp_int
from .content import (
    ALL_TIERS,
    CaseData,
    CaseMeta,
    Choice,
    ChoiceOutcomes,
    ClueDiscovery,
    Condition,
    ConditionType,
    DynamicDifficulty,
    Effect,
    EffectType,
    EncounterDamage,
    EncounterRound,
    EncounterState,
    FacultyRequirement,
    NpcEffect,
    OutcomeTier,
    SceneNode,
)
from .evidence import (
    Clue,
    ClueStatus,
    ClueType,
    Deduction,
    advance_clue_status,
    can_transition,
    path_to_deduced,
)
from .investigator import FACULTIES, Archetype, Faculty, Investigator, is_valid_faculty
from .npc import NPCState, adjust_disposition, adjust_suspicion, remove_npc, suspicion_tier
from .state import AudioVolume, GameSettings, GameState, SaveFile, SaveSummary

__all__ = [
    # Enums
    "Archetype",
    "ClueStatus",
    "ClueType",
    "ConditionType",
    "EffectType",
    "Faculty",
    "OutcomeTier",
    # Character
    "Investigator",
    "ArchetypeDefinition",
    "ARCHETYPES",
    "ABILITY_FLAGS",
    "FACULTIES",
    "create_investigator",
    "is_valid_faculty",
    # Evidence
    "Clue",
    "Deduction",
    "advance_clue_status",
    "can_transition",
    "path_to_deduced",
    # NPCs
    "NPCState",
    "adjust_disposition",
    "adjust_suspicion",
    "remove_npc",
    "suspicion_tier",
    # Content
    "ALL_TIERS",
    "CaseData",
    "CaseMeta",
    "Choice",
    "ChoiceOutcomes",
    "ClueDiscovery",
    "Condition",
    "DynamicDifficulty",
    "Effect",
    "EncounterDamage",
    "EncounterRound",
    "EncounterState",
    "FacultyRequirement",
    "NpcEffect",
    "SceneNode",
    # State
    "AudioVolume",
    "GameSettings",
    "GameState",
    "SaveFile",
    "SaveSummary",
    # Helpers
    "CamelModel",
    "clamp",
    "clamp_int",
]
