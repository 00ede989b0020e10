"""Storage configuration for Gaslight & Grimoire.

This module provides configuration for storage backends and factory functions
to create repository and save manager instances based on configuration.
"""

import os
from enum import Enum

from .file_repo import FileSaveRepository
from .repository import SaveRepository
from .save_manager import SaveManager
from .sqlite_repo import SQLiteSaveRepository


class StorageBackend(Enum):
    """Available storage backends."""

    FILE = "file"
    SQLITE = "sqlite"


# Default configuration (can be overridden via environment variables)
DEFAULT_STORAGE_BACKEND = StorageBackend.FILE
DEFAULT_SAVES_PATH = "saves"
DEFAULT_DATABASE_URI = "instance/grimoire.db"
DEFAULT_CONTENT_PATH = "content"


def get_storage_backend() -> StorageBackend:
    """Get configured storage backend from environment.

    Returns:
        StorageBackend enum value
    """
    backend_str = os.environ.get("GRIMOIRE_STORAGE_BACKEND", "file").lower()
    if backend_str == "sqlite":
        return StorageBackend.SQLITE
    return StorageBackend.FILE


def get_saves_path() -> str:
    """Get configured saves path from environment."""
    return os.environ.get("GRIMOIRE_SAVES_PATH", DEFAULT_SAVES_PATH)


def get_database_uri() -> str:
    """Get configured database URI from environment."""
    return os.environ.get("GRIMOIRE_DATABASE_URI", DEFAULT_DATABASE_URI)


def get_content_path() -> str:
    """Get configured content root from environment."""
    return os.environ.get("GRIMOIRE_CONTENT_PATH", DEFAULT_CONTENT_PATH)


def get_save_repository(
    backend: StorageBackend | None = None,
) -> SaveRepository:
    """Factory function to create save repository.

    Args:
        backend: Storage backend to use. If None, uses environment config.

    Returns:
        SaveRepository instance
    """
    if backend is None:
        backend = get_storage_backend()

    if backend == StorageBackend.SQLITE:
        return SQLiteSaveRepository(get_database_uri())
    return FileSaveRepository(get_saves_path())


def get_save_manager(backend: StorageBackend | None = None) -> SaveManager:
    """Factory function to create a SaveManager over the configured repository."""
    return SaveManager(get_save_repository(backend))
