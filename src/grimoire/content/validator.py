"""Content validation for loaded cases.

All checks are deterministic and run over a CaseData before play starts.

What IS validated:
1. Scene graph: every choice outcome targets a known scene or variant
2. Clue references: requiresClue, advantageIf and cluesAvailable name known clues
3. Outcome completeness: faculty-gated choices map all five outcome tiers
4. Entry point: meta.firstScene is present and names a known scene
5. Variants: variantOf names a known base scene

Encounter worseAlternative choices are checked like any other choice.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum

from grimoire.models.content import ALL_TIERS, CaseData, Choice, SceneNode

logger = logging.getLogger(__name__)


class ValidationSeverity(Enum):
    """Severity level for validation issues."""

    CRITICAL = "critical"  # Blocks case start
    WARNING = "warning"  # Playable, but relies on a fallback


@dataclass
class ValidationIssue:
    """A single validation issue found."""

    severity: ValidationSeverity
    message: str
    scene_id: str | None = None


@dataclass
class ValidationResult:
    """Aggregated validation result for one case."""

    case_id: str
    scene_count: int = 0
    clue_count: int = 0
    issues: list[ValidationIssue] = field(default_factory=list)

    def add_issue(
        self,
        severity: ValidationSeverity,
        message: str,
        scene_id: str | None = None,
    ) -> None:
        self.issues.append(ValidationIssue(severity=severity, message=message, scene_id=scene_id))

    @property
    def errors(self) -> list[ValidationIssue]:
        return [i for i in self.issues if i.severity == ValidationSeverity.CRITICAL]

    @property
    def warnings(self) -> list[ValidationIssue]:
        return [i for i in self.issues if i.severity == ValidationSeverity.WARNING]

    @property
    def is_valid(self) -> bool:
        return not self.errors


def _with_alternatives(choices: list[Choice]) -> Iterator[Choice]:
    for choice in choices:
        current: Choice | None = choice
        while current is not None:
            yield current
            current = current.worse_alternative


def _check_choice(
    result: ValidationResult,
    scene: SceneNode,
    choice: Choice,
    scene_ids: set[str],
    clue_ids: set[str],
) -> None:
    where = f'Scene "{scene.id}" -> choice "{choice.id}"'

    for tier, target in choice.outcomes.items():
        if target and target not in scene_ids:
            result.add_issue(
                ValidationSeverity.CRITICAL,
                f'{where} -> outcome "{tier.value}" references unknown scene "{target}"',
                scene.id,
            )

    if choice.requires_clue and choice.requires_clue not in clue_ids:
        result.add_issue(
            ValidationSeverity.CRITICAL,
            f'{where} -> requiresClue references unknown clue "{choice.requires_clue}"',
            scene.id,
        )

    for clue_id in choice.advantage_if or []:
        if clue_id not in clue_ids:
            result.add_issue(
                ValidationSeverity.CRITICAL,
                f'{where} -> advantageIf references unknown clue "{clue_id}"',
                scene.id,
            )

    if choice.is_faculty_check:
        missing = [tier.value for tier in ALL_TIERS if tier not in choice.outcomes]
        if missing:
            result.add_issue(
                ValidationSeverity.CRITICAL,
                f"{where} is faculty-gated but missing outcomes: {', '.join(missing)}",
                scene.id,
            )


def validate_content(case: CaseData) -> ValidationResult:
    """Validate a loaded case.

    Args:
        case: Loaded case content

    Returns:
        ValidationResult; is_valid is False if any critical issue was found
    """
    scene_ids = set(case.scenes) | {variant.id for variant in case.variants}
    clue_ids = set(case.clues)
    result = ValidationResult(
        case_id=case.meta.id,
        scene_count=len(scene_ids),
        clue_count=len(clue_ids),
    )

    if not case.meta.first_scene:
        result.add_issue(
            ValidationSeverity.WARNING,
            'meta.json missing "firstScene"; the first loaded scene is used',
        )
    elif case.meta.first_scene not in scene_ids:
        result.add_issue(
            ValidationSeverity.CRITICAL,
            f'meta.json "firstScene" references unknown scene "{case.meta.first_scene}"',
        )

    for variant in case.variants:
        if variant.variant_of and variant.variant_of not in case.scenes:
            result.add_issue(
                ValidationSeverity.CRITICAL,
                f'Variant "{variant.id}" -> variantOf references unknown scene "{variant.variant_of}"',
                variant.id,
            )

    for scene in [*case.scenes.values(), *case.variants]:
        for choice in _with_alternatives(scene.choices):
            _check_choice(result, scene, choice, scene_ids, clue_ids)
        for discovery in scene.clues_available:
            if discovery.clue_id not in clue_ids:
                result.add_issue(
                    ValidationSeverity.CRITICAL,
                    f'Scene "{scene.id}" -> cluesAvailable references unknown clue "{discovery.clue_id}"',
                    scene.id,
                )

    if result.errors:
        for issue in result.errors:
            logger.error(f"[{case.meta.id}] {issue.message}")
    return result
