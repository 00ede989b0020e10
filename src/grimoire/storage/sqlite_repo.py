"""SQLite-based save repository.

Slots and their summaries share one table; the serialized save is stored
verbatim in the data column.
"""

import sqlite3
from pathlib import Path
from typing import Optional

from .repository import SaveRepository


def dict_factory(cursor: sqlite3.Cursor, row: tuple) -> dict:
    """Convert sqlite3 row to dict."""
    return {col[0]: row[idx] for idx, col in enumerate(cursor.description)}


class SQLiteSaveRepository(SaveRepository):
    """SQLite-based save repository."""

    def __init__(self, database_uri: str = "instance/grimoire.db"):
        """Initialize repository.

        Args:
            database_uri: Path to SQLite database file
        """
        self.database_path = Path(database_uri)
        self.database_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    def _get_connection(self) -> sqlite3.Connection:
        """Get database connection."""
        conn = sqlite3.connect(self.database_path)
        conn.row_factory = dict_factory
        return conn

    def _init_db(self) -> None:
        """Initialize database schema."""
        conn = self._get_connection()
        cursor = conn.cursor()
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS saves (
                id TEXT PRIMARY KEY,
                timestamp TEXT NOT NULL,
                case_name TEXT,
                investigator_name TEXT,
                data TEXT NOT NULL
            )
        """)
        cursor.execute("CREATE INDEX IF NOT EXISTS idx_saves_timestamp ON saves(timestamp)")
        conn.commit()
        conn.close()

    def save_slot(self, slot_id: str, data: str, summary: dict) -> None:
        """Insert or replace a slot."""
        conn = self._get_connection()
        cursor = conn.cursor()
        cursor.execute("""
            INSERT INTO saves (id, timestamp, case_name, investigator_name, data)
            VALUES (?, ?, ?, ?, ?)
            ON CONFLICT(id) DO UPDATE SET
                timestamp = excluded.timestamp,
                case_name = excluded.case_name,
                investigator_name = excluded.investigator_name,
                data = excluded.data
        """, (
            slot_id,
            summary.get("timestamp", ""),
            summary.get("caseName", ""),
            summary.get("investigatorName", ""),
            data,
        ))
        conn.commit()
        conn.close()

    def load_slot(self, slot_id: str) -> Optional[str]:
        """Load slot data by ID."""
        conn = self._get_connection()
        cursor = conn.cursor()
        cursor.execute("SELECT data FROM saves WHERE id = ?", (slot_id,))
        row = cursor.fetchone()
        conn.close()

        if row is None:
            return None
        return row["data"]

    def delete_slot(self, slot_id: str) -> bool:
        """Delete a slot."""
        conn = self._get_connection()
        cursor = conn.cursor()
        cursor.execute("DELETE FROM saves WHERE id = ?", (slot_id,))
        deleted = cursor.rowcount > 0
        conn.commit()
        conn.close()
        return deleted

    def list_summaries(self) -> list[dict]:
        """List slot summaries, newest first."""
        conn = self._get_connection()
        cursor = conn.cursor()
        cursor.execute("""
            SELECT id, timestamp, case_name AS caseName, investigator_name AS investigatorName
            FROM saves
            ORDER BY timestamp DESC
        """)
        rows = cursor.fetchall()
        conn.close()
        return rows
