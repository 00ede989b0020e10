"""File-based save repository using JSON files.

Each slot is stored as <slot>.json in the saves directory. Slot summaries
live in a single index file kept alongside the slots.
"""

import json
import logging
import re
from pathlib import Path
from typing import Optional

from .repository import SaveRepository

logger = logging.getLogger(__name__)

INDEX_FILENAME = "index.json"


def is_valid_slot_id(slot_id: str) -> bool:
    """True if a slot id is safe to use as a file name.

    Examples:
        >>> is_valid_slot_id("autosave")
        True
        >>> is_valid_slot_id("../etc/passwd")
        False
    """
    return bool(re.fullmatch(r"[A-Za-z0-9][A-Za-z0-9_-]*", slot_id)) and slot_id != "index"


class FileSaveRepository(SaveRepository):
    """JSON file-based save repository."""

    def __init__(self, saves_path: str | Path = "saves"):
        """Initialize repository.

        Args:
            saves_path: Path to saves directory
        """
        self.saves_path = Path(saves_path)
        self.saves_path.mkdir(parents=True, exist_ok=True)

    def _get_slot_path(self, slot_id: str) -> Path:
        """Get path to slot file."""
        if not is_valid_slot_id(slot_id):
            raise ValueError(f"Invalid slot id: {slot_id!r}")
        return self.saves_path / f"{slot_id}.json"

    def _read_index(self) -> list[dict]:
        path = self.saves_path / INDEX_FILENAME
        if not path.exists():
            return []
        try:
            with open(path, encoding="utf-8") as f:
                entries = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning(f"Save index {path} is corrupted, treating as empty: {e}")
            return []
        if not isinstance(entries, list):
            logger.warning(f"Save index {path} is not a list, treating as empty")
            return []
        return [e for e in entries if isinstance(e, dict)]

    def _write_index(self, entries: list[dict]) -> None:
        entries = sorted(entries, key=lambda x: x.get("timestamp", ""), reverse=True)
        with open(self.saves_path / INDEX_FILENAME, "w", encoding="utf-8") as f:
            json.dump(entries, f, indent=2)

    def save_slot(self, slot_id: str, data: str, summary: dict) -> None:
        """Write slot file and update the index."""
        path = self._get_slot_path(slot_id)
        with open(path, "w", encoding="utf-8") as f:
            f.write(data)

        entries = [e for e in self._read_index() if e.get("id") != slot_id]
        entries.append({**summary, "id": slot_id})
        self._write_index(entries)

    def load_slot(self, slot_id: str) -> Optional[str]:
        """Read slot file contents."""
        path = self._get_slot_path(slot_id)
        if not path.exists():
            return None
        with open(path, encoding="utf-8") as f:
            return f.read()

    def delete_slot(self, slot_id: str) -> bool:
        """Delete slot file and its index entry."""
        path = self._get_slot_path(slot_id)
        entries = self._read_index()
        remaining = [e for e in entries if e.get("id") != slot_id]
        if len(remaining) != len(entries):
            self._write_index(remaining)
        if path.exists():
            path.unlink()
            return True
        return False

    def list_summaries(self) -> list[dict]:
        """List index entries sorted by timestamp, newest first."""
        return sorted(self._read_index(), key=lambda x: x.get("timestamp", ""), reverse=True)
