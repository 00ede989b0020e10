"""Rules constants for Gaslight & Grimoire.

This module is the SINGLE SOURCE OF TRUTH for tunable rules constants.
Engine modules import from here rather than hard-coding numbers.

Parameter Categories:
- Dice: d20 range, default and reaction DCs, partial-success band
- Resources: composure/vitality, disposition/suspicion clamp ranges
- Progression: faculty cap, character creation budget
- World flags: ability and case-progression flag names
- Persistence: save schema version, slot names

Usage:
    from grimoire.parameters import DEFAULT_DC, FACULTY_CAP
"""

# =============================================================================
# DICE
# =============================================================================

DIE_SIDES = 20
"""Faces on the check die. Natural DIE_SIDES is always a critical."""

NATURAL_CRITICAL = 20
NATURAL_FUMBLE = 1

DEFAULT_DC = 12
"""DC used when a faculty choice has neither a fixed nor a dynamic difficulty."""

PARTIAL_SUCCESS_MARGIN = 2
"""A total within this many points below the DC resolves as a partial success."""

REACTION_CHECK_DC = 12
"""Fixed DC of the supernatural reaction check at encounter start."""

REACTION_COMPOSURE_DAMAGE = (1, 2)
"""Inclusive range of composure lost when the reaction check fails."""

UNSET_FACULTY_SCORE = 10
"""Score assumed for a dynamic-difficulty scaling faculty missing from the investigator."""


# =============================================================================
# RESOURCES
# =============================================================================

RESOURCE_MIN = 0
RESOURCE_MAX = 10
"""Composure and vitality range."""

DISPOSITION_MIN = -10
DISPOSITION_MAX = 10

SUSPICION_MIN = 0
SUSPICION_MAX = 10

SUSPICION_TIERS = {
    "normal": (0, 2),
    "evasive": (3, 5),
    "concealing": (6, 8),
    "hostile": (9, 10),
}
"""Inclusive suspicion bands used by the npcSuspicion condition."""

FACTION_PROPAGATION_RATE = 0.5
"""Share of an NPC disposition delta applied to that NPC's faction reputation."""


# =============================================================================
# PROGRESSION
# =============================================================================

FACULTY_CAP = 20
"""Faculty scores never exceed this through bonus grants."""

BASE_FACULTY_SCORE = 8
BONUS_POINTS_TOTAL = 12
"""Points a player distributes across faculties at character creation."""

STARTING_COMPOSURE = 10
STARTING_VITALITY = 10


# =============================================================================
# WORLD FLAGS
# =============================================================================

LAST_CRITICAL_FACULTY_FLAG = "last-critical-faculty"
"""Names the faculty that most recently rolled a natural critical."""

ABILITY_AUTO_SUCCEED_FLAGS = {
    "reason": "ability-auto-succeed-reason",
    "vigor": "ability-auto-succeed-vigor",
    "influence": "ability-auto-succeed-influence",
}
"""Faculty -> flag that turns the next check with that faculty into a critical."""

VEIL_SIGHT_FLAG = "ability-veil-sight-active"

VIGNETTE_UNLOCKED_FLAG = "vignette-unlocked-{id}"


# =============================================================================
# PERSISTENCE
# =============================================================================

CURRENT_SAVE_VERSION = 1
"""Bump together with a new step in grimoire.storage.save_manager.MIGRATIONS."""

AUTOSAVE_SLOT = "autosave"

MAX_MANUAL_SAVES = 10
"""Manual saves beyond this count are pruned oldest-first. Autosave is exempt."""
