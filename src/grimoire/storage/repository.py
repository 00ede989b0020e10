"""Abstract repository interface for save slots.

Both file-based (JSON) and SQLite backends implement this interface, so the
SaveManager can persist games without knowing which backend is active.
Slot payloads are opaque serialized text; parsing and migration belong to
the SaveManager.
"""

from abc import ABC, abstractmethod
from typing import Optional


class SaveRepository(ABC):
    """Abstract base class for save slot storage."""

    @abstractmethod
    def save_slot(self, slot_id: str, data: str, summary: dict) -> None:
        """Write a slot and its index entry, replacing any previous save.

        Args:
            slot_id: Slot name (e.g. "autosave", "save-20250101T120000000000")
            data: Serialized save file
            summary: Index entry {id, timestamp, caseName, investigatorName}
        """
        pass

    @abstractmethod
    def load_slot(self, slot_id: str) -> Optional[str]:
        """Read a slot.

        Args:
            slot_id: Slot name

        Returns:
            Serialized save file, or None if the slot does not exist
        """
        pass

    @abstractmethod
    def delete_slot(self, slot_id: str) -> bool:
        """Delete a slot and its index entry.

        Returns:
            True if deleted, False if not found
        """
        pass

    @abstractmethod
    def list_summaries(self) -> list[dict]:
        """Return index entries for all slots, newest first."""
        pass
