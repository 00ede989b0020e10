"""Tests for deduction formation.

Tests verify:
1. Red-herring taint: any red herring -> is_red_herring, none -> clean
2. Every input clue id is kept
3. connect_clues guards: revealed, distinct, at least two, not spent
4. Effects record the deduction and walk each clue to deduced
"""

import random

import pytest

from grimoire.engine.deduction import (
    CONFIDENT_DESCRIPTION,
    TAINTED_DESCRIPTION,
    build_deduction,
    connect_clues,
)
from grimoire.engine.effects import apply_effects
from grimoire.errors import DeductionError
from grimoire.models import Clue, ClueStatus, ClueType, EffectType


class TestBuildDeduction:
    """Tests for build_deduction."""

    def test_clean_deduction(self, clues):
        deduction = build_deduction(["bloody-glove", "torn-letter"], clues)
        assert deduction.is_red_herring is False
        assert deduction.description == CONFIDENT_DESCRIPTION
        assert deduction.clue_ids == ["bloody-glove", "torn-letter"]

    def test_red_herring_taints(self, clues):
        deduction = build_deduction(["bloody-glove", "false-alibi"], clues)
        assert deduction.is_red_herring is True
        assert deduction.description == TAINTED_DESCRIPTION

    def test_generated_ids_are_unique(self, clues):
        first = build_deduction(["bloody-glove", "torn-letter"], clues)
        second = build_deduction(["bloody-glove", "torn-letter"], clues)
        assert first.id.startswith("deduction-")
        assert first.id != second.id

    def test_explicit_id(self, clues):
        assert build_deduction(["bloody-glove"], clues, "d-7").id == "d-7"

    def test_unknown_ids_kept_and_do_not_taint(self, clues):
        deduction = build_deduction(["bloody-glove", "ghost-clue"], clues)
        assert deduction.clue_ids == ["bloody-glove", "ghost-clue"]
        assert deduction.is_red_herring is False

    def test_taint_property_over_random_sets(self):
        rng = random.Random(1234)
        types = list(ClueType)
        for trial in range(200):
            count = rng.randint(2, 6)
            pool = {
                f"c{trial}-{i}": Clue(id=f"c{trial}-{i}", type=rng.choice(types))
                for i in range(count)
            }
            ids = list(pool)
            deduction = build_deduction(ids, pool)
            has_herring = any(c.type == ClueType.RED_HERRING for c in pool.values())
            assert deduction.is_red_herring is has_herring
            assert set(ids) <= set(deduction.clue_ids)


class TestConnectClues:
    """Tests for connect_clues."""

    def test_returns_deduction_and_effects(self, game_state):
        deduction, effects = connect_clues(["bloody-glove", "torn-letter"], game_state, "d-1")
        assert deduction.id == "d-1"
        assert effects[0].type == EffectType.ADD_DEDUCTION
        assert effects[0].deduction == deduction
        status_effects = [e for e in effects if e.type == EffectType.CLUE_STATUS]
        assert [e.value for e in status_effects if e.target == "bloody-glove"] == [
            "examined",
            "connected",
            "deduced",
        ]

    def test_does_not_modify_state(self, game_state):
        before = game_state.model_copy(deep=True)
        connect_clues(["bloody-glove", "torn-letter"], game_state)
        assert game_state == before

    def test_applied_effects_mark_clues_deduced(self, game_state):
        deduction, effects = connect_clues(["bloody-glove", "chalk-sigil"], game_state)
        new_state = apply_effects(game_state, effects)
        assert deduction.id in new_state.deductions
        assert new_state.clues["bloody-glove"].status == ClueStatus.DEDUCED
        assert new_state.clues["chalk-sigil"].status == ClueStatus.DEDUCED
        assert new_state.clues["torn-letter"].status == ClueStatus.NEW

    def test_contested_clue_is_reexamined(self, game_state):
        clues = dict(game_state.clues)
        clues["torn-letter"] = clues["torn-letter"].model_copy(
            update={"status": ClueStatus.CONTESTED}
        )
        state = game_state.model_copy(update={"clues": clues})
        _, effects = connect_clues(["bloody-glove", "torn-letter"], state)
        new_state = apply_effects(state, effects)
        assert new_state.clues["torn-letter"].status == ClueStatus.DEDUCED

    def test_fewer_than_two_clues(self, game_state):
        with pytest.raises(DeductionError, match="at least 2"):
            connect_clues(["bloody-glove"], game_state)

    def test_duplicates_count_once(self, game_state):
        with pytest.raises(DeductionError):
            connect_clues(["bloody-glove", "bloody-glove"], game_state)

    def test_unrevealed_clue(self, game_state):
        with pytest.raises(DeductionError, match="not revealed"):
            connect_clues(["bloody-glove", "hidden-key"], game_state)

    def test_spent_clue(self, game_state):
        clues = dict(game_state.clues)
        clues["torn-letter"] = clues["torn-letter"].model_copy(update={"status": ClueStatus.SPENT})
        state = game_state.model_copy(update={"clues": clues})
        with pytest.raises(DeductionError, match="spent"):
            connect_clues(["bloody-glove", "torn-letter"], state)
