"""Game state snapshot and save file models.

GameState is the single argument threaded through every engine function.
Engine functions never mutate it; they return new snapshots or Effect lists.
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field

from grimoire.models.base import CamelModel
from grimoire.models.evidence import Clue, Deduction
from grimoire.models.investigator import Investigator
from grimoire.models.npc import NPCState
from grimoire.parameters import CURRENT_SAVE_VERSION


class AudioVolume(CamelModel):
    ambient: float = Field(default=0.6, ge=0.0, le=1.0)
    sfx: float = Field(default=0.8, ge=0.0, le=1.0)


class GameSettings(CamelModel):
    """Player preferences stored alongside the game. The engine only reads
    hints_enabled and auto_save_frequency; the rest is carried for the UI."""

    font_size: Literal["standard", "large", "extraLarge"] | int = "standard"
    high_contrast: bool = False
    reduced_motion: bool = False
    text_speed: Literal["typewriter", "fast", "instant"] = "typewriter"
    hints_enabled: bool = True
    auto_save_frequency: Literal["choice", "scene", "manual"] = "scene"
    audio_volume: AudioVolume = Field(default_factory=AudioVolume)


class GameState(CamelModel):
    """Complete game snapshot.

    Attributes:
        investigator: The player character
        current_scene: Active scene id ("" before a case starts)
        current_case: Active case id
        scene_history: Append-only log of previously visited scenes
        clues: All clues of the active case, revealed or not
        deductions: Deductions formed so far
        npcs: NPC state keyed by id
        flags: World flags; values are booleans except for flags that name
            something, such as last-critical-faculty
        faction_reputation: Unbounded reputation per faction
        settings: Player preferences
    """

    investigator: Investigator = Field(default_factory=Investigator)
    current_scene: str = ""
    current_case: str = ""
    scene_history: list[str] = Field(default_factory=list)
    clues: dict[str, Clue] = Field(default_factory=dict)
    deductions: dict[str, Deduction] = Field(default_factory=dict)
    npcs: dict[str, NPCState] = Field(default_factory=dict)
    flags: dict[str, bool | str] = Field(default_factory=dict)
    faction_reputation: dict[str, float] = Field(default_factory=dict)
    settings: GameSettings = Field(default_factory=GameSettings)

    def is_clue_revealed(self, clue_id: str) -> bool:
        clue = self.clues.get(clue_id)
        return clue is not None and clue.is_revealed

    def reputation(self, faction: str) -> float:
        return self.faction_reputation.get(faction, 0)

    # Serialization methods
    def to_json(self) -> str:
        """Serialize state to JSON string."""
        return self.model_dump_json(by_alias=True, indent=2)

    @classmethod
    def from_json(cls, json_str: str) -> GameState:
        """Deserialize state from JSON string."""
        return cls.model_validate_json(json_str)

    def to_dict(self) -> dict:
        """Serialize state to a camelCase dictionary."""
        return self.model_dump(mode="json", by_alias=True)

    @classmethod
    def from_dict(cls, data: dict) -> GameState:
        """Deserialize state from dictionary."""
        return cls.model_validate(data)


class SaveFile(CamelModel):
    """Versioned envelope around a GameState.

    The state is kept as a raw dict so that migrations can operate on data
    written by older schemas before it is validated into a GameState.
    """

    version: int = CURRENT_SAVE_VERSION
    timestamp: str
    state: dict


class SaveSummary(CamelModel):
    """Index entry describing a save slot."""

    id: str
    timestamp: str
    case_name: str = ""
    investigator_name: str = ""
