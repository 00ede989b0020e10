"""Investigator model: archetype, faculties and the two resource tracks."""

from __future__ import annotations

from enum import Enum

from pydantic import Field, field_validator

from grimoire.models.base import CamelModel, clamp_int
from grimoire.parameters import (
    BASE_FACULTY_SCORE,
    FACULTY_CAP,
    RESOURCE_MAX,
    RESOURCE_MIN,
    STARTING_COMPOSURE,
    STARTING_VITALITY,
)


class Faculty(str, Enum):
    """The six aptitude scores that drive check modifiers."""

    REASON = "reason"
    PERCEPTION = "perception"
    NERVE = "nerve"
    VIGOR = "vigor"
    INFLUENCE = "influence"
    LORE = "lore"


class Archetype(str, Enum):
    """Fixed investigator archetypes chosen at character creation."""

    DEDUCTIONIST = "deductionist"
    OCCULTIST = "occultist"
    OPERATOR = "operator"
    MESMERIST = "mesmerist"


FACULTIES: tuple[str, ...] = tuple(f.value for f in Faculty)


def is_valid_faculty(value: object) -> bool:
    """True if value names one of the six faculties."""
    return isinstance(value, str) and value in FACULTIES


def _default_faculties() -> dict[Faculty, int]:
    return {faculty: BASE_FACULTY_SCORE for faculty in Faculty}


class Investigator(CamelModel):
    """The player character.

    Attributes:
        name: Display name
        archetype: One of the four archetypes
        faculties: Score per faculty
        composure: Mental resource, clamped to [0, 10]
        vitality: Physical resource, clamped to [0, 10]
        ability_used: Whether the archetype ability was spent this case
    """

    name: str = ""
    archetype: Archetype = Archetype.DEDUCTIONIST
    faculties: dict[Faculty, int] = Field(default_factory=_default_faculties)
    composure: int = Field(default=STARTING_COMPOSURE)
    vitality: int = Field(default=STARTING_VITALITY)
    ability_used: bool = False

    @field_validator("composure", "vitality", mode="before")
    @classmethod
    def clamp_resource(cls, v: int) -> int:
        """Clamp composure and vitality to [0, 10]."""
        return clamp_int(v, RESOURCE_MIN, RESOURCE_MAX)

    def faculty_score(self, faculty: str) -> int | None:
        """Score for a faculty name, or None if the investigator lacks it."""
        if not is_valid_faculty(faculty):
            return None
        return self.faculties.get(Faculty(faculty))

    def with_faculty(self, faculty: str, value: int) -> Investigator:
        """Copy with one faculty set to value (capped at FACULTY_CAP)."""
        faculties = dict(self.faculties)
        faculties[Faculty(faculty)] = min(FACULTY_CAP, int(value))
        return self.model_copy(update={"faculties": faculties})

    def with_composure_delta(self, delta: int) -> Investigator:
        return self.model_copy(
            update={"composure": clamp_int(self.composure + delta, RESOURCE_MIN, RESOURCE_MAX)}
        )

    def with_vitality_delta(self, delta: int) -> Investigator:
        return self.model_copy(
            update={"vitality": clamp_int(self.vitality + delta, RESOURCE_MIN, RESOURCE_MAX)}
        )
