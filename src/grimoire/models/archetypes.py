"""Archetype definitions and character creation.

Each archetype adds fixed faculty bonuses on top of the player's point
allocation and carries a once-per-case ability. Activating the ability sets
a world flag; the choice resolver reads the auto-succeed flags.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from grimoire.models.investigator import FACULTIES, Archetype, Faculty, Investigator
from grimoire.parameters import (
    ABILITY_AUTO_SUCCEED_FLAGS,
    BASE_FACULTY_SCORE,
    BONUS_POINTS_TOTAL,
    VEIL_SIGHT_FLAG,
)


@dataclass(frozen=True)
class ArchetypeDefinition:
    """Static description of an archetype.

    Attributes:
        id: Archetype enum value
        name: Display name
        description: Flavor text
        bonuses: Faculty bonuses applied at creation
        ability_name: Name of the once-per-case ability
        ability_faculty: Faculty the ability is tied to
        ability_flag: World flag set when the ability is activated
    """

    id: Archetype
    name: str
    description: str
    bonuses: dict[Faculty, int] = field(default_factory=dict)
    ability_name: str = ""
    ability_faculty: Faculty = Faculty.REASON
    ability_flag: str = ""


ARCHETYPES: dict[Archetype, ArchetypeDefinition] = {
    Archetype.DEDUCTIONIST: ArchetypeDefinition(
        id=Archetype.DEDUCTIONIST,
        name="Deductionist",
        description="A master of logical inference who reads crime scenes like open books.",
        bonuses={Faculty.REASON: 3, Faculty.PERCEPTION: 1},
        ability_name="Elementary",
        ability_faculty=Faculty.REASON,
        ability_flag=ABILITY_AUTO_SUCCEED_FLAGS["reason"],
    ),
    Archetype.OCCULTIST: ArchetypeDefinition(
        id=Archetype.OCCULTIST,
        name="Occultist",
        description="A scholar of forbidden knowledge on the boundary of the arcane.",
        bonuses={Faculty.LORE: 3, Faculty.PERCEPTION: 1},
        ability_name="Veil Sight",
        ability_faculty=Faculty.LORE,
        ability_flag=VEIL_SIGHT_FLAG,
    ),
    Archetype.OPERATOR: ArchetypeDefinition(
        id=Archetype.OPERATOR,
        name="Operator",
        description="A street-hardened survivor with underworld connections.",
        bonuses={Faculty.VIGOR: 3, Faculty.NERVE: 1},
        ability_name="Street Survivor",
        ability_faculty=Faculty.VIGOR,
        ability_flag=ABILITY_AUTO_SUCCEED_FLAGS["vigor"],
    ),
    Archetype.MESMERIST: ArchetypeDefinition(
        id=Archetype.MESMERIST,
        name="Mesmerist",
        description="A silver-tongued manipulator who reads people with uncanny precision.",
        bonuses={Faculty.INFLUENCE: 3, Faculty.NERVE: 1},
        ability_name="Silver Tongue",
        ability_faculty=Faculty.INFLUENCE,
        ability_flag=ABILITY_AUTO_SUCCEED_FLAGS["influence"],
    ),
}

ABILITY_FLAGS: tuple[str, ...] = tuple(a.ability_flag for a in ARCHETYPES.values())


def create_investigator(
    name: str,
    archetype: Archetype | str,
    allocation: dict[str, int] | None = None,
) -> Investigator:
    """Build a new investigator from a point allocation.

    Args:
        name: Investigator name
        archetype: Chosen archetype
        allocation: Points added to the base score per faculty; must not
            exceed BONUS_POINTS_TOTAL in total

    Returns:
        Investigator with base scores, allocation and archetype bonuses applied

    Raises:
        ValueError: If the allocation is negative, names an unknown faculty,
            or spends more than BONUS_POINTS_TOTAL points
    """
    if not name.strip():
        raise ValueError("Investigator must have a name")
    archetype = Archetype(archetype)
    allocation = allocation or {}

    unknown = [key for key in allocation if key not in FACULTIES]
    if unknown:
        raise ValueError(f"Unknown faculties in allocation: {unknown}")
    if any(points < 0 for points in allocation.values()):
        raise ValueError("Allocation points must be non-negative")
    spent = sum(allocation.values())
    if spent > BONUS_POINTS_TOTAL:
        raise ValueError(f"Allocated {spent} points, only {BONUS_POINTS_TOTAL} available")

    bonuses = ARCHETYPES[archetype].bonuses
    faculties = {
        faculty: BASE_FACULTY_SCORE + allocation.get(faculty.value, 0) + bonuses.get(faculty, 0)
        for faculty in Faculty
    }
    return Investigator(name=name.strip(), archetype=archetype, faculties=faculties)
