"""Storage module for Gaslight & Grimoire.

This module provides save-slot repositories and the SaveManager that writes
versioned save files through them.

Usage:
    from grimoire.storage import get_save_manager

    # Get a save manager over the configured backend (from environment)
    saves = get_save_manager()
    saves.save("autosave", state)
    state = saves.load("autosave")

    # Or specify backend explicitly
    from grimoire.storage import StorageBackend
    saves = get_save_manager(StorageBackend.SQLITE)

Configuration via environment variables:
    GRIMOIRE_STORAGE_BACKEND: "file" or "sqlite" (default: "file")
    GRIMOIRE_SAVES_PATH: Path to saves directory (default: "saves")
    GRIMOIRE_DATABASE_URI: SQLite database path (default: "instance/grimoire.db")
    GRIMOIRE_CONTENT_PATH: Path to case content (default: "content")
"""

from .config import (
    StorageBackend,
    get_content_path,
    get_database_uri,
    get_save_manager,
    get_save_repository,
    get_saves_path,
    get_storage_backend,
)
from .file_repo import FileSaveRepository
from .repository import SaveRepository
from .save_manager import MIGRATIONS, SaveManager
from .sqlite_repo import SQLiteSaveRepository

__all__ = [
    # Abstract interface
    "SaveRepository",
    # Implementations
    "FileSaveRepository",
    "SQLiteSaveRepository",
    # Save files
    "SaveManager",
    "MIGRATIONS",
    # Configuration
    "StorageBackend",
    "get_storage_backend",
    "get_saves_path",
    "get_database_uri",
    "get_content_path",
    # Factory functions
    "get_save_repository",
    "get_save_manager",
]
