"""Tests for the data model.

Tests verify:
1. Resource, disposition and suspicion clamping on construction
2. Suspicion tiers
3. Clue lifecycle transitions and the path to deduced
4. Character creation with archetype bonuses and point budgets
5. camelCase content parsing and GameState JSON round trips
"""

import pytest
from pydantic import ValidationError

from grimoire.errors import InvalidTransitionError
from grimoire.models import (
    ABILITY_FLAGS,
    ARCHETYPES,
    Archetype,
    CaseMeta,
    Choice,
    Clue,
    ClueStatus,
    ClueType,
    Condition,
    ConditionType,
    Faculty,
    GameState,
    Investigator,
    NPCState,
    OutcomeTier,
    adjust_disposition,
    adjust_suspicion,
    advance_clue_status,
    can_transition,
    create_investigator,
    path_to_deduced,
    remove_npc,
    suspicion_tier,
)


# =============================================================================
# Investigator and NPC clamps
# =============================================================================


class TestClamping:
    """Tests for range clamping."""

    @pytest.mark.parametrize("value,expected", [(15, 10), (-3, 0), (7, 7)])
    def test_resources_clamped(self, value, expected):
        investigator = Investigator(composure=value, vitality=value)
        assert investigator.composure == expected
        assert investigator.vitality == expected

    @pytest.mark.parametrize("value", [None, [3], "lots", True])
    def test_non_numeric_resource_is_validation_error(self, value):
        with pytest.raises(ValidationError):
            Investigator(composure=value)
        with pytest.raises(ValidationError):
            NPCState(id="n", disposition=value)

    def test_resource_deltas_clamped(self, investigator):
        assert investigator.with_composure_delta(-25).composure == 0
        assert investigator.with_vitality_delta(4).vitality == 10

    def test_faculty_capped(self, investigator):
        assert investigator.with_faculty("vigor", 30).faculty_score("vigor") == 20

    def test_faculty_score_unknown(self, investigator):
        assert investigator.faculty_score("charm") is None

    @pytest.mark.parametrize("value,expected", [(20, 10), (-20, -10), (4, 4)])
    def test_disposition_clamped(self, value, expected):
        assert NPCState(id="n", disposition=value).disposition == expected

    def test_suspicion_clamped(self):
        assert NPCState(id="n", suspicion=-1).suspicion == 0
        assert NPCState(id="n", suspicion=99).suspicion == 10

    def test_adjusters_clamp(self):
        npc = NPCState(id="n", disposition=9, suspicion=1)
        assert adjust_disposition(npc, 5).disposition == 10
        assert adjust_suspicion(npc, -5).suspicion == 0
        assert npc.disposition == 9

    def test_remove_npc(self):
        npc = remove_npc(NPCState(id="n"))
        assert npc.is_alive is False
        assert npc.is_accessible is False


class TestSuspicionTier:
    """Tests for suspicion bands."""

    @pytest.mark.parametrize(
        "score,tier",
        [(0, "normal"), (2, "normal"), (3, "evasive"), (5, "evasive"),
         (6, "concealing"), (8, "concealing"), (9, "hostile"), (10, "hostile")],
    )
    def test_bands(self, score, tier):
        assert suspicion_tier(score) == tier

    def test_out_of_range(self):
        with pytest.raises(ValueError):
            suspicion_tier(11)


# =============================================================================
# Clue lifecycle
# =============================================================================


class TestClueLifecycle:
    """Tests for allowed transitions."""

    @pytest.mark.parametrize(
        "current,target",
        [
            (ClueStatus.NEW, ClueStatus.EXAMINED),
            (ClueStatus.EXAMINED, ClueStatus.CONNECTED),
            (ClueStatus.CONNECTED, ClueStatus.DEDUCED),
            (ClueStatus.CONNECTED, ClueStatus.CONTESTED),
            (ClueStatus.CONTESTED, ClueStatus.EXAMINED),
            (ClueStatus.DEDUCED, ClueStatus.SPENT),
        ],
    )
    def test_allowed(self, current, target):
        assert can_transition(current, target)

    @pytest.mark.parametrize(
        "current,target",
        [
            (ClueStatus.NEW, ClueStatus.DEDUCED),
            (ClueStatus.DEDUCED, ClueStatus.NEW),
            (ClueStatus.DEDUCED, ClueStatus.CONTESTED),
            (ClueStatus.SPENT, ClueStatus.EXAMINED),
            (ClueStatus.CONTESTED, ClueStatus.CONNECTED),
        ],
    )
    def test_forbidden(self, current, target):
        assert not can_transition(current, target)

    def test_spent_is_terminal(self):
        assert not any(can_transition(ClueStatus.SPENT, s) for s in ClueStatus)

    def test_advance_returns_copy(self):
        clue = Clue(id="c", type=ClueType.PHYSICAL)
        examined = advance_clue_status(clue, ClueStatus.EXAMINED)
        assert examined.status == ClueStatus.EXAMINED
        assert clue.status == ClueStatus.NEW

    def test_advance_rejects_forbidden(self):
        with pytest.raises(InvalidTransitionError):
            advance_clue_status(Clue(id="c", type=ClueType.PHYSICAL), ClueStatus.DEDUCED)

    @pytest.mark.parametrize(
        "status,path",
        [
            (ClueStatus.NEW, [ClueStatus.EXAMINED, ClueStatus.CONNECTED, ClueStatus.DEDUCED]),
            (ClueStatus.CONNECTED, [ClueStatus.DEDUCED]),
            (ClueStatus.DEDUCED, []),
            (ClueStatus.CONTESTED, [ClueStatus.EXAMINED, ClueStatus.CONNECTED, ClueStatus.DEDUCED]),
        ],
    )
    def test_path_to_deduced(self, status, path):
        assert path_to_deduced(status) == path

    def test_path_from_spent_raises(self):
        with pytest.raises(InvalidTransitionError):
            path_to_deduced(ClueStatus.SPENT)


# =============================================================================
# Character creation
# =============================================================================


class TestCreateInvestigator:
    """Tests for create_investigator."""

    def test_allocation_and_bonuses(self):
        investigator = create_investigator("Ada", "deductionist", {"reason": 3, "nerve": 2})
        assert investigator.archetype == Archetype.DEDUCTIONIST
        assert investigator.faculty_score("reason") == 14
        assert investigator.faculty_score("perception") == 9
        assert investigator.faculty_score("nerve") == 10
        assert investigator.faculty_score("lore") == 8
        assert investigator.composure == 10
        assert investigator.ability_used is False

    def test_full_budget_allowed(self):
        investigator = create_investigator("Kit", Archetype.OPERATOR, {"vigor": 12})
        assert investigator.faculty_score("vigor") == 23
        assert investigator.faculty_score("nerve") == 9

    def test_over_budget(self):
        with pytest.raises(ValueError, match="only 12"):
            create_investigator("Ada", "deductionist", {"reason": 7, "lore": 6})

    def test_unknown_faculty(self):
        with pytest.raises(ValueError, match="Unknown faculties"):
            create_investigator("Ada", "deductionist", {"charm": 1})

    def test_negative_points(self):
        with pytest.raises(ValueError):
            create_investigator("Ada", "deductionist", {"reason": -1})

    def test_blank_name(self):
        with pytest.raises(ValueError):
            create_investigator("   ", "occultist")

    def test_every_archetype_has_an_ability_flag(self):
        assert set(ARCHETYPES) == set(Archetype)
        assert len(set(ABILITY_FLAGS)) == len(Archetype)
        assert ARCHETYPES[Archetype.OCCULTIST].ability_faculty == Faculty.LORE


# =============================================================================
# Parsing and serialization
# =============================================================================


class TestParsing:
    """Tests for camelCase content parsing."""

    def test_choice_from_camel_case(self):
        choice = Choice.model_validate(
            {
                "id": "pick-lock",
                "faculty": "vigor",
                "difficulty": 14,
                "advantageIf": ["hairpin"],
                "requiresClue": "locked-door",
                "outcomes": {"success": "inside", "failure": "caught"},
                "npcEffect": {"npcId": "warden", "suspicionDelta": 2},
            }
        )
        assert choice.is_faculty_check
        assert choice.outcome_for(OutcomeTier.SUCCESS) == "inside"
        assert choice.outcome_for(OutcomeTier.PARTIAL) == ""
        assert choice.npc_effect.suspicion_delta == 2

    def test_unknown_condition_type_kept(self):
        condition = Condition.model_validate({"type": "tidesHigh", "target": "thames"})
        assert condition.type == "tidesHigh"
        known = Condition.model_validate({"type": "hasClue", "target": "c"})
        assert known.type == ConditionType.HAS_CLUE

    def test_case_meta_aliases(self):
        meta = CaseMeta.model_validate({"id": "c", "acts": 2, "firstScene": "s-1"})
        assert meta.first_scene == "s-1"

    def test_game_state_round_trip(self, game_state):
        state = game_state.model_copy(
            update={"flags": {"met-grey": True, "last-critical-faculty": "lore"},
                    "faction_reputation": {"Lamplighters": 1.5}}
        )
        restored = GameState.from_json(state.to_json())
        assert restored == state
        assert restored.flags["last-critical-faculty"] == "lore"
        assert restored.flags["met-grey"] is True

    def test_game_state_dumps_camel_case(self, game_state):
        data = game_state.to_dict()
        assert "currentScene" in data
        assert "factionReputation" in data
        assert data["clues"]["false-alibi"]["type"] == "redHerring"
