"""Evidence models: clues, their lifecycle, and deductions.

Clue lifecycle:
    new -> examined -> connected -> deduced        (success path)
    new | examined | connected -> contested -> examined   (failure path)
    any non-terminal status -> spent               (terminal)
"""

from __future__ import annotations

from enum import Enum

from pydantic import Field

from grimoire.errors import InvalidTransitionError
from grimoire.models.base import CamelModel


class ClueType(str, Enum):
    """Kinds of evidence. Red herrings taint any deduction they join."""

    PHYSICAL = "physical"
    TESTIMONY = "testimony"
    OCCULT = "occult"
    DEDUCTION = "deduction"
    RED_HERRING = "redHerring"


class ClueStatus(str, Enum):
    """Position of a clue in its lifecycle."""

    NEW = "new"
    EXAMINED = "examined"
    CONNECTED = "connected"
    DEDUCED = "deduced"
    CONTESTED = "contested"
    SPENT = "spent"


SUCCESS_PATH: tuple[ClueStatus, ...] = (
    ClueStatus.NEW,
    ClueStatus.EXAMINED,
    ClueStatus.CONNECTED,
    ClueStatus.DEDUCED,
)

ALLOWED_TRANSITIONS: dict[ClueStatus, frozenset[ClueStatus]] = {
    ClueStatus.NEW: frozenset({ClueStatus.EXAMINED, ClueStatus.CONTESTED, ClueStatus.SPENT}),
    ClueStatus.EXAMINED: frozenset({ClueStatus.CONNECTED, ClueStatus.CONTESTED, ClueStatus.SPENT}),
    ClueStatus.CONNECTED: frozenset({ClueStatus.DEDUCED, ClueStatus.CONTESTED, ClueStatus.SPENT}),
    ClueStatus.CONTESTED: frozenset({ClueStatus.EXAMINED, ClueStatus.SPENT}),
    ClueStatus.DEDUCED: frozenset({ClueStatus.SPENT}),
    ClueStatus.SPENT: frozenset(),
}


class Clue(CamelModel):
    """A piece of evidence defined by case content.

    Attributes:
        id: Unique clue id within the case
        type: Evidence kind
        title: Short label
        description: Full text shown on discovery
        scene_source: Scene the clue is found in
        connects_to: Clue ids this clue is designed to connect with
        grants_faculty: Faculty this clue hints at, if any
        tags: Free-form tags, order irrelevant
        status: Lifecycle position
        is_revealed: Whether the investigator has discovered it
    """

    id: str
    type: ClueType
    title: str = ""
    description: str = ""
    scene_source: str = ""
    connects_to: list[str] | None = None
    grants_faculty: str | None = None
    tags: list[str] = Field(default_factory=list)
    status: ClueStatus = ClueStatus.NEW
    is_revealed: bool = False


class Deduction(CamelModel):
    """A connection formed between two or more clues.

    is_red_herring is True iff at least one contributing clue is a red herring.
    Deductions are never edited or removed once added to the state.
    """

    id: str
    clue_ids: list[str]
    description: str = ""
    unlocks_scenes: list[str] | None = None
    unlocks_dialogue: list[str] | None = None
    is_red_herring: bool = False


def can_transition(current: ClueStatus, target: ClueStatus) -> bool:
    """Check whether the clue lifecycle allows current -> target."""
    return target in ALLOWED_TRANSITIONS[current]


def advance_clue_status(clue: Clue, status: ClueStatus) -> Clue:
    """Return a copy of the clue moved to a new status.

    Raises:
        InvalidTransitionError: If the lifecycle forbids the transition
    """
    if not can_transition(clue.status, status):
        raise InvalidTransitionError(
            f"Clue '{clue.id}' cannot move from {clue.status.value} to {status.value}"
        )
    return clue.model_copy(update={"status": status})


def path_to_deduced(status: ClueStatus) -> list[ClueStatus]:
    """Statuses a clue passes through on its way to DEDUCED.

    Contested clues are re-examined first. Deduced clues need no steps.

    Raises:
        InvalidTransitionError: If the clue is spent
    """
    if status == ClueStatus.SPENT:
        raise InvalidTransitionError("A spent clue cannot join a deduction")
    if status == ClueStatus.CONTESTED:
        return [ClueStatus.EXAMINED, ClueStatus.CONNECTED, ClueStatus.DEDUCED]
    index = SUCCESS_PATH.index(status)
    return list(SUCCESS_PATH[index + 1:])
