"""Scene resolution and scene entry."""

from __future__ import annotations

import logging

from grimoire.engine.conditions import can_discover_clue, evaluate_conditions
from grimoire.errors import SceneNotFoundError
from grimoire.models.content import CaseData, Effect, EffectType, SceneNode
from grimoire.models.state import GameState

logger = logging.getLogger(__name__)

AUTOMATIC_DISCOVERY = "automatic"


def resolve_scene(scene_id: str, state: GameState, case: CaseData) -> SceneNode:
    """Scene to present for scene_id.

    The first variant of the scene whose variant_condition holds replaces it.
    Variants without a condition never apply.

    Raises:
        SceneNotFoundError: scene_id is not a base scene of the case
    """
    base = case.scenes.get(scene_id)
    if base is None:
        raise SceneNotFoundError(f"Scene '{scene_id}' not found in case '{case.meta.id}'")

    for variant in case.variants:
        if (
            variant.variant_of == scene_id
            and variant.variant_condition is not None
            and evaluate_conditions([variant.variant_condition], state)
        ):
            logger.debug(f"Scene {scene_id} resolved to variant {variant.id}")
            return variant
    return base


def scene_entry_effects(scene: SceneNode, state: GameState) -> list[Effect]:
    """Effects of entering a scene: on_enter first, then automatic discoveries.

    Clues already revealed, and discoveries whose gates fail, are left out.
    """
    effects = list(scene.on_enter or [])
    for discovery in scene.clues_available:
        if discovery.method != AUTOMATIC_DISCOVERY:
            continue
        if state.is_clue_revealed(discovery.clue_id):
            continue
        if can_discover_clue(discovery, state):
            effects.append(Effect(type=EffectType.DISCOVER_CLUE, target=discovery.clue_id))
    return effects
