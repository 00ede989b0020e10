"""Case content models: conditions, effects, choices, scenes and encounters.

Conditions and effects are tagged unions discriminated by ``type``. Known
types parse to ConditionType / EffectType; unknown type strings are kept
verbatim so newer content still loads on an older engine. Unknown conditions
evaluate false and unknown effects are skipped.
"""

from __future__ import annotations

from enum import Enum

from pydantic import Field

from grimoire.models.base import CamelModel
from grimoire.models.evidence import Clue, Deduction
from grimoire.models.investigator import Archetype, Faculty
from grimoire.models.npc import NPCState


class OutcomeTier(str, Enum):
    """Outcome buckets a check resolves to, best first."""

    CRITICAL = "critical"
    SUCCESS = "success"
    PARTIAL = "partial"
    FAILURE = "failure"
    FUMBLE = "fumble"

    @property
    def is_success(self) -> bool:
        return self in (OutcomeTier.CRITICAL, OutcomeTier.SUCCESS)

    @property
    def is_failure(self) -> bool:
        return self in (OutcomeTier.FAILURE, OutcomeTier.FUMBLE)


ALL_TIERS: tuple[OutcomeTier, ...] = tuple(OutcomeTier)

ChoiceOutcomes = dict[OutcomeTier, str]
"""Next scene id per outcome tier."""


class ConditionType(str, Enum):
    """Gating predicates understood by the condition evaluator."""

    HAS_CLUE = "hasClue"
    HAS_DEDUCTION = "hasDeduction"
    HAS_FLAG = "hasFlag"
    FACULTY_MIN = "facultyMin"
    ARCHETYPE_IS = "archetypeIs"
    NPC_DISPOSITION = "npcDisposition"
    NPC_SUSPICION = "npcSuspicion"
    FACTION_REPUTATION = "factionReputation"


class Condition(CamelModel):
    """A single gating predicate over the game state."""

    type: ConditionType | str = Field(union_mode="left_to_right")
    target: str = ""
    value: bool | int | float | str | None = None


class EffectType(str, Enum):
    """State changes the effect applier understands."""

    COMPOSURE = "composure"
    VITALITY = "vitality"
    FLAG = "flag"
    DISPOSITION = "disposition"
    SUSPICION = "suspicion"
    REPUTATION = "reputation"
    DISCOVER_CLUE = "discoverClue"
    CLUE_STATUS = "clueStatus"
    ADD_DEDUCTION = "addDeduction"
    FACULTY = "faculty"
    GO_TO_SCENE = "goToScene"


class Effect(CamelModel):
    """A described state change, applied later by grimoire.engine.effects.

    Attributes:
        type: What to change
        target: Flag, NPC, faction, clue, faculty or scene id
        delta: Numeric change for resource/relationship effects
        value: Literal value for flag, faculty and clue-status effects
        deduction: Payload for ADD_DEDUCTION
    """

    type: EffectType | str = Field(union_mode="left_to_right")
    target: str | None = None
    delta: int | float | None = None
    value: bool | int | str | None = None
    deduction: Deduction | None = None


class FacultyRequirement(CamelModel):
    faculty: Faculty
    minimum: int


class DynamicDifficulty(CamelModel):
    """DC that rises to high_dc once the scaling faculty reaches high_threshold."""

    base_dc: int = Field(alias="baseDC")
    scale_faculty: Faculty
    high_threshold: int
    high_dc: int = Field(alias="highDC")


class NpcEffect(CamelModel):
    npc_id: str
    disposition_delta: int = 0
    suspicion_delta: int = 0


class EncounterDamage(CamelModel):
    """Resource loss applied when an encounter choice fails. Negative is damage."""

    composure_delta: int | None = None
    vitality_delta: int | None = None


class Choice(CamelModel):
    """A player decision within a scene or encounter round.

    A faculty-gated choice (faculty plus difficulty or dynamic_difficulty)
    must map every OutcomeTier in outcomes; content validation enforces it.
    """

    id: str
    text: str = ""
    faculty: Faculty | None = None
    difficulty: int | None = None
    dynamic_difficulty: DynamicDifficulty | None = None
    advantage_if: list[str] | None = None
    outcomes: ChoiceOutcomes = Field(default_factory=dict)
    requires_clue: str | None = None
    requires_deduction: str | None = None
    requires_flag: str | None = None
    requires_faculty: FacultyRequirement | None = None
    npc_effect: NpcEffect | None = None
    worse_alternative: Choice | None = None
    is_escape_path: bool = False
    encounter_damage: EncounterDamage | None = None

    @property
    def is_faculty_check(self) -> bool:
        """True if resolving this choice involves a roll."""
        return self.faculty is not None and (
            self.difficulty is not None or self.dynamic_difficulty is not None
        )

    def outcome_for(self, tier: OutcomeTier) -> str:
        return self.outcomes.get(tier, "")

    def unconditional_outcome(self) -> str:
        """Next scene for a choice resolved without a roll."""
        return self.outcomes.get(OutcomeTier.SUCCESS) or self.outcomes.get(
            OutcomeTier.CRITICAL, ""
        )


class ClueDiscovery(CamelModel):
    """How a clue can be found in a scene."""

    clue_id: str
    method: str = "automatic"
    requires_faculty: FacultyRequirement | None = None
    requires_deduction: str | None = None


class SceneNode(CamelModel):
    """A node of the scene graph, or a conditional variant of one."""

    id: str
    act: int = 1
    narrative: str = ""
    illustration: str | None = None
    ambient_audio: str | None = None
    clues_available: list[ClueDiscovery] = Field(default_factory=list)
    choices: list[Choice] = Field(default_factory=list)
    conditions: list[Condition] | None = None
    on_enter: list[Effect] | None = None
    archetype_exclusive: Archetype | None = None
    variant_of: str | None = None
    variant_condition: Condition | None = None


class CaseMeta(CamelModel):
    id: str
    title: str = ""
    synopsis: str = ""
    acts: int = 1
    faculty_distribution: dict[Faculty, float] = Field(default_factory=dict)
    first_scene: str | None = None
    trigger_condition: Condition | None = None


class CaseData(CamelModel):
    """A loaded case or vignette, indexed by id."""

    meta: CaseMeta
    scenes: dict[str, SceneNode] = Field(default_factory=dict)
    clues: dict[str, Clue] = Field(default_factory=dict)
    npcs: dict[str, NPCState] = Field(default_factory=dict)
    variants: list[SceneNode] = Field(default_factory=list)

    @property
    def first_scene_id(self) -> str | None:
        """Declared first scene, falling back to the first scene loaded."""
        if self.meta.first_scene:
            return self.meta.first_scene
        return next(iter(self.scenes), None)


class EncounterRound(CamelModel):
    round_number: int
    choices: list[Choice] = Field(default_factory=list)
    is_supernatural: bool = False


class EncounterState(CamelModel):
    """Progress through a multi-round encounter.

    current_round is 0-indexed. Once is_complete is set no further choices
    are processed. reaction_check_passed is None for mundane encounters.
    """

    id: str
    rounds: list[EncounterRound] = Field(default_factory=list)
    current_round: int = 0
    is_complete: bool = False
    reaction_check_passed: bool | None = None

    @property
    def active_round(self) -> EncounterRound | None:
        if self.is_complete or self.current_round >= len(self.rounds):
            return None
        return self.rounds[self.current_round]
