"""NPC state model with clamped disposition and suspicion."""

from __future__ import annotations

from pydantic import Field, field_validator

from grimoire.models.base import CamelModel, clamp_int
from grimoire.parameters import (
    DISPOSITION_MAX,
    DISPOSITION_MIN,
    SUSPICION_MAX,
    SUSPICION_MIN,
    SUSPICION_TIERS,
)


class NPCState(CamelModel):
    """Per-NPC relationship state.

    Attributes:
        id: Unique NPC id
        name: Display name
        faction: Faction the NPC belongs to, if any
        disposition: Attitude toward the investigator (-10 to 10)
        suspicion: How guarded the NPC is (0 to 10)
        memory_flags: Things the NPC remembers
        is_alive: False once removed from the story
        is_accessible: Whether the investigator can reach the NPC
    """

    id: str
    name: str = ""
    faction: str | None = None
    disposition: int = Field(default=0)
    suspicion: int = Field(default=0)
    memory_flags: dict[str, bool] = Field(default_factory=dict)
    is_alive: bool = True
    is_accessible: bool = True

    @field_validator("disposition", mode="before")
    @classmethod
    def clamp_disposition(cls, v: int) -> int:
        """Clamp disposition to [-10, 10]."""
        return clamp_int(v, DISPOSITION_MIN, DISPOSITION_MAX)

    @field_validator("suspicion", mode="before")
    @classmethod
    def clamp_suspicion(cls, v: int) -> int:
        """Clamp suspicion to [0, 10]."""
        return clamp_int(v, SUSPICION_MIN, SUSPICION_MAX)


def adjust_disposition(npc: NPCState, delta: int) -> NPCState:
    """Copy of the NPC with disposition shifted by delta, clamped to [-10, 10]."""
    value = clamp_int(npc.disposition + delta, DISPOSITION_MIN, DISPOSITION_MAX)
    return npc.model_copy(update={"disposition": value})


def adjust_suspicion(npc: NPCState, delta: int) -> NPCState:
    """Copy of the NPC with suspicion shifted by delta, clamped to [0, 10]."""
    value = clamp_int(npc.suspicion + delta, SUSPICION_MIN, SUSPICION_MAX)
    return npc.model_copy(update={"suspicion": value})


def remove_npc(npc: NPCState) -> NPCState:
    """Mark an NPC dead; dead NPCs are never accessible."""
    return npc.model_copy(update={"is_alive": False, "is_accessible": False})


def suspicion_tier(suspicion: int) -> str:
    """Name of the suspicion band a score falls into."""
    for tier, (low, high) in SUSPICION_TIERS.items():
        if low <= suspicion <= high:
            return tier
    raise ValueError(f"Suspicion {suspicion} outside [{SUSPICION_MIN}, {SUSPICION_MAX}]")
