"""Case loading from a directory of JSON documents.

Directory layout:
    meta.json        {id, title, synopsis, acts, facultyDistribution, firstScene?}
    act1.json ...    {scenes: [...]}, one file per act (main cases)
    scenes.json      {scenes: [...]} (side cases and vignettes, no act files)
    clues.json       {clues: [...]}
    npcs.json        {npcs: [...]}
    variants.json    {variants: [...]} (optional)
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Union

from pydantic import ValidationError

from grimoire.errors import ContentLoadError
from grimoire.models.content import CaseData, CaseMeta, SceneNode
from grimoire.models.evidence import Clue
from grimoire.models.npc import NPCState

logger = logging.getLogger(__name__)


def _read_json(path: Path) -> Any:
    if not path.exists():
        raise ContentLoadError(f"Missing content file: {path}")
    try:
        with open(path) as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise ContentLoadError(f"Invalid JSON in {path}: {e}") from e


def _read_list(path: Path, key: str) -> list[dict]:
    data = _read_json(path)
    if not isinstance(data, dict) or not isinstance(data.get(key), list):
        raise ContentLoadError(f"{path} must contain a '{key}' list")
    return data[key]


def scene_files(case_dir: Path, acts: int) -> list[Path]:
    """Scene documents of a case: act files when act1.json exists, else scenes.json."""
    if (case_dir / "act1.json").exists():
        return [case_dir / f"act{n}.json" for n in range(1, max(acts, 1) + 1)]
    return [case_dir / "scenes.json"]


def load_case(path: Union[str, Path]) -> CaseData:
    """Load and index a case directory.

    Args:
        path: Case directory

    Returns:
        CaseData with scenes, clues and NPCs keyed by id

    Raises:
        ContentLoadError: A required file is missing, unparsable or malformed
    """
    case_dir = Path(path)
    if not case_dir.is_dir():
        raise ContentLoadError(f"Case directory not found: {case_dir}")

    try:
        meta = CaseMeta.model_validate(_read_json(case_dir / "meta.json"))

        scenes: list[SceneNode] = []
        for scene_file in scene_files(case_dir, meta.acts):
            scenes.extend(SceneNode.model_validate(s) for s in _read_list(scene_file, "scenes"))

        clues = [Clue.model_validate(c) for c in _read_list(case_dir / "clues.json", "clues")]
        npcs = [NPCState.model_validate(n) for n in _read_list(case_dir / "npcs.json", "npcs")]

        variants: list[SceneNode] = []
        variants_file = case_dir / "variants.json"
        if variants_file.exists():
            variants = [
                SceneNode.model_validate(v) for v in _read_list(variants_file, "variants")
            ]
    except ValidationError as e:
        raise ContentLoadError(f"Malformed content in {case_dir}: {e}") from e

    case = CaseData(
        meta=meta,
        scenes={scene.id: scene for scene in scenes},
        clues={clue.id: clue for clue in clues},
        npcs={npc.id: npc for npc in npcs},
        variants=variants,
    )
    logger.info(
        f"Loaded case {meta.id}: {len(case.scenes)} scenes, {len(case.clues)} clues, "
        f"{len(case.npcs)} NPCs, {len(case.variants)} variants"
    )
    return case


def discover_case_dirs(content_root: Union[str, Path]) -> list[Path]:
    """Case directories under content_root/cases and content_root/side-cases."""
    root = Path(content_root)
    dirs: list[Path] = []
    for group in ("cases", "side-cases"):
        group_dir = root / group
        if group_dir.is_dir():
            dirs.extend(sorted(d for d in group_dir.iterdir() if d.is_dir()))
    return dirs
