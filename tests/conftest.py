"""Shared pytest fixtures and markers for all tests."""

from pathlib import Path

import pytest

from grimoire.models import (
    Archetype,
    Clue,
    ClueType,
    Faculty,
    GameState,
    Investigator,
    NPCState,
)

CONTENT_ROOT = Path(__file__).parent.parent / "content"


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )


class StubRandom:
    """Random source that returns queued values from randint()."""

    def __init__(self, *values: int):
        self.values = list(values)
        self.calls = 0

    def randint(self, a: int, b: int) -> int:
        assert self.values, "StubRandom ran out of queued values"
        value = self.values.pop(0)
        assert a <= value <= b, f"queued value {value} outside [{a}, {b}]"
        self.calls += 1
        return value


@pytest.fixture
def stub_rng():
    """Factory for StubRandom: stub_rng(15, 3) yields 15, then 3."""
    return StubRandom


@pytest.fixture
def content_root():
    """Path to the bundled sample content."""
    return CONTENT_ROOT


@pytest.fixture
def investigator():
    """A deductionist with reason 14 and every other faculty at 10."""
    faculties = {faculty: 10 for faculty in Faculty}
    faculties[Faculty.REASON] = 14
    return Investigator(
        name="Ada Pryce",
        archetype=Archetype.DEDUCTIONIST,
        faculties=faculties,
    )


@pytest.fixture
def clues():
    """Clues keyed by id: two revealed physical clues, one occult, one red herring."""
    return {
        "bloody-glove": Clue(id="bloody-glove", type=ClueType.PHYSICAL, is_revealed=True),
        "torn-letter": Clue(id="torn-letter", type=ClueType.PHYSICAL, is_revealed=True),
        "chalk-sigil": Clue(id="chalk-sigil", type=ClueType.OCCULT, is_revealed=True),
        "false-alibi": Clue(id="false-alibi", type=ClueType.RED_HERRING, is_revealed=True),
        "hidden-key": Clue(id="hidden-key", type=ClueType.PHYSICAL),
    }


@pytest.fixture
def npcs():
    """NPCs keyed by id: one aligned with the Lamplighters, one unaligned."""
    return {
        "inspector-grey": NPCState(
            id="inspector-grey", name="Inspector Grey", faction="Lamplighters", suspicion=4
        ),
        "mrs-hartley": NPCState(id="mrs-hartley", name="Mrs Hartley", disposition=3),
    }


@pytest.fixture
def game_state(investigator, clues, npcs):
    """A mid-case game state."""
    return GameState(
        investigator=investigator,
        current_scene="scene-study",
        current_case="test-case",
        clues=clues,
        npcs=npcs,
    )
