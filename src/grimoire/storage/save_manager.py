"""Versioned save files over a SaveRepository.

A save file is {version, timestamp, state}. Loading migrates older files
step by step up to CURRENT_SAVE_VERSION before the state is validated.
Files from a newer schema are refused rather than guessed at.

Corrupted or missing slots load as None; callers treat that as "no save".
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Optional

from pydantic import ValidationError

from grimoire.errors import UnsupportedSaveVersionError
from grimoire.models.state import GameState, SaveFile, SaveSummary
from grimoire.parameters import AUTOSAVE_SLOT, CURRENT_SAVE_VERSION, MAX_MANUAL_SAVES

from .repository import SaveRepository

logger = logging.getLogger(__name__)

MANUAL_SAVE_PREFIX = "save-"


# =============================================================================
# Migrations
# =============================================================================


def _v0_to_v1(state: dict) -> dict:
    """Version 1 added faction reputation."""
    if state.get("factionReputation") is None:
        state["factionReputation"] = {}
    return state


MIGRATIONS: dict[int, Callable[[dict], dict]] = {
    0: _v0_to_v1,
}
"""Migration steps keyed by the version they upgrade from."""


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


# =============================================================================
# Save manager
# =============================================================================


class SaveManager:
    """Saves, loads and migrates game state.

    Attributes:
        repository: Slot storage backend
    """

    def __init__(
        self,
        repository: SaveRepository,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self.repository = repository
        self._clock = clock

    def _timestamp(self) -> str:
        return self._clock().isoformat()

    def save(self, slot_id: str, state: GameState) -> SaveFile:
        """Write state to a slot at the current version.

        Returns:
            The SaveFile that was written
        """
        save_file = SaveFile(
            version=CURRENT_SAVE_VERSION,
            timestamp=self._timestamp(),
            state=state.to_dict(),
        )
        summary = SaveSummary(
            id=slot_id,
            timestamp=save_file.timestamp,
            case_name=state.current_case,
            investigator_name=state.investigator.name,
        )
        self.repository.save_slot(
            slot_id,
            save_file.model_dump_json(by_alias=True),
            summary.model_dump(mode="json", by_alias=True),
        )
        logger.info(f"Saved slot {slot_id} (case={state.current_case or 'none'})")
        return save_file

    def load(self, slot_id: str) -> Optional[GameState]:
        """Load and migrate a slot.

        Returns:
            GameState, or None if the slot is missing, corrupted or from an
            unsupported version
        """
        try:
            raw = self.repository.load_slot(slot_id)
        except UnicodeDecodeError:
            logger.warning(f"Slot {slot_id} is corrupted: not valid UTF-8")
            return None
        if raw is None:
            return None
        try:
            save_file = self.migrate(SaveFile.model_validate_json(raw))
            return GameState.from_dict(save_file.state)
        except ValidationError as e:
            logger.warning(f"Slot {slot_id} is corrupted: {e.error_count()} validation error(s)")
            return None
        except UnsupportedSaveVersionError as e:
            logger.warning(f"Slot {slot_id} cannot be loaded: {e}")
            return None

    def migrate(self, save_file: SaveFile) -> SaveFile:
        """Bring a save file up to CURRENT_SAVE_VERSION.

        Current files are returned unchanged. Older files are upgraded one
        step at a time and restamped.

        Raises:
            UnsupportedSaveVersionError: The version is newer than current, or
                no migration path exists from it
        """
        if save_file.version == CURRENT_SAVE_VERSION:
            return save_file
        if save_file.version > CURRENT_SAVE_VERSION:
            raise UnsupportedSaveVersionError(save_file.version, CURRENT_SAVE_VERSION)

        state = copy.deepcopy(save_file.state)
        version = save_file.version
        while version < CURRENT_SAVE_VERSION:
            step = MIGRATIONS.get(version)
            if step is None:
                raise UnsupportedSaveVersionError(save_file.version, CURRENT_SAVE_VERSION)
            state = step(state)
            version += 1

        logger.info(f"Migrated save from version {save_file.version} to {version}")
        return SaveFile(version=version, timestamp=self._timestamp(), state=state)

    def delete_save(self, slot_id: str) -> bool:
        """Remove a slot and its index entry."""
        return self.repository.delete_slot(slot_id)

    def list_saves(self) -> list[SaveSummary]:
        """Summaries of all slots, newest first."""
        summaries = []
        for entry in self.repository.list_summaries():
            try:
                summaries.append(SaveSummary.model_validate(entry))
            except ValidationError:
                logger.warning(f"Skipping malformed save index entry: {entry!r}")
        return sorted(summaries, key=lambda s: (s.timestamp, s.id), reverse=True)

    def save_manual(self, state: GameState) -> str:
        """Write a new manual save and prune the oldest beyond MAX_MANUAL_SAVES.

        The autosave slot is never pruned.

        Returns:
            Id of the new slot
        """
        existing = {summary.id for summary in self.list_saves()}
        slot_id = f"{MANUAL_SAVE_PREFIX}{self._clock().strftime('%Y%m%dT%H%M%S%f')}"
        base, n = slot_id, 1
        while slot_id in existing:
            slot_id = f"{base}-{n}"
            n += 1

        self.save(slot_id, state)
        self._prune_manual_saves()
        return slot_id

    def _prune_manual_saves(self) -> None:
        manual = [
            s for s in self.list_saves()
            if s.id != AUTOSAVE_SLOT and s.id.startswith(MANUAL_SAVE_PREFIX)
        ]
        for summary in manual[MAX_MANUAL_SAVES:]:
            self.repository.delete_slot(summary.id)
            logger.info(f"Pruned manual save {summary.id}")
