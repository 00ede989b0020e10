"""Tests for the storage module.

Tests cover:
- FileSaveRepository slot id safety and index bookkeeping
- Storage configuration functions
- Parametrized integration tests to verify both backends pass identical tests
"""

import json

import pytest

from grimoire.storage.config import (
    StorageBackend,
    get_content_path,
    get_save_manager,
    get_save_repository,
    get_storage_backend,
)
from grimoire.storage.file_repo import FileSaveRepository, is_valid_slot_id
from grimoire.storage.save_manager import SaveManager
from grimoire.storage.sqlite_repo import SQLiteSaveRepository


def summary(slot_id, timestamp, case_name="the-whitechapel-cipher", investigator_name="Ada"):
    return {
        "id": slot_id,
        "timestamp": timestamp,
        "caseName": case_name,
        "investigatorName": investigator_name,
    }


# ============================================================================
# FileSaveRepository Tests - Error Boundaries Only
# ============================================================================


class TestFileSaveRepository:
    """Tests for file-based save repository error boundaries and edge cases.

    Most functionality is covered by TestSaveRepositoryIntegration which runs
    parametrized tests against both File and SQLite backends.
    """

    @pytest.fixture
    def repo(self, tmp_path):
        """Create a FileSaveRepository with a temporary directory."""
        return FileSaveRepository(tmp_path / "saves")

    @pytest.mark.parametrize("slot_id", ["../escape", "a/b", "", "index", "-leading-dash"])
    def test_invalid_slot_id_raises(self, repo, slot_id):
        """Test slot ids that are unsafe file names are rejected."""
        assert not is_valid_slot_id(slot_id)
        with pytest.raises(ValueError, match="Invalid slot id"):
            repo.save_slot(slot_id, "{}", summary(slot_id, "2026-01-01T00:00:00"))

    def test_index_written_newest_first(self, repo):
        """Test the index file is kept sorted by timestamp."""
        repo.save_slot("old", "{}", summary("old", "2026-01-01T00:00:00"))
        repo.save_slot("new", "{}", summary("new", "2026-02-01T00:00:00"))

        with open(repo.saves_path / "index.json", encoding="utf-8") as f:
            index = json.load(f)
        assert [entry["id"] for entry in index] == ["new", "old"]

    @pytest.mark.parametrize("content", [b"{not json", b"\xff\xfe[", b"{\"id\": \"x\"}"])
    def test_corrupted_index_reads_as_empty(self, repo, content):
        """Test a damaged index lists no saves and does not block new ones."""
        (repo.saves_path / "index.json").write_bytes(content)

        assert repo.list_summaries() == []

        repo.save_slot("autosave", "{}", summary("autosave", "2026-01-01T00:00:00"))
        assert [s["id"] for s in repo.list_summaries()] == ["autosave"]
        assert repo.delete_slot("autosave") is True

    def test_delete_missing_slot(self, repo):
        """Test deleting an unknown slot returns False."""
        assert repo.delete_slot("nothing-here") is False


# ============================================================================
# Config Tests
# ============================================================================


class TestStorageConfig:
    """Tests for storage configuration functions.

    Focuses on factory functions and default behavior.
    """

    def test_get_storage_backend_default(self, monkeypatch):
        """Test get_storage_backend returns FILE by default."""
        monkeypatch.delenv("GRIMOIRE_STORAGE_BACKEND", raising=False)
        assert get_storage_backend() == StorageBackend.FILE

    def test_unknown_backend_falls_back_to_file(self, monkeypatch):
        """Test an unrecognized backend name selects FILE."""
        monkeypatch.setenv("GRIMOIRE_STORAGE_BACKEND", "postgres")
        assert get_storage_backend() == StorageBackend.FILE

    def test_factory_returns_file_repo(self, tmp_path, monkeypatch):
        """Test factory returns a File repository for FILE backend."""
        monkeypatch.setenv("GRIMOIRE_SAVES_PATH", str(tmp_path / "saves"))

        repo = get_save_repository(StorageBackend.FILE)

        assert isinstance(repo, FileSaveRepository)
        assert repo.saves_path == tmp_path / "saves"

    def test_factory_returns_sqlite_repo(self, tmp_path, monkeypatch):
        """Test factory returns a SQLite repository for SQLITE backend."""
        monkeypatch.setenv("GRIMOIRE_DATABASE_URI", str(tmp_path / "test.db"))

        assert isinstance(get_save_repository(StorageBackend.SQLITE), SQLiteSaveRepository)

    def test_factory_uses_env_when_backend_not_specified(self, tmp_path, monkeypatch):
        """Test factory functions use environment config when backend is None."""
        monkeypatch.setenv("GRIMOIRE_STORAGE_BACKEND", "SQLite")
        monkeypatch.setenv("GRIMOIRE_DATABASE_URI", str(tmp_path / "test.db"))

        manager = get_save_manager()

        assert isinstance(manager, SaveManager)
        assert isinstance(manager.repository, SQLiteSaveRepository)

    def test_content_path(self, monkeypatch):
        """Test the content root defaults and can be overridden."""
        monkeypatch.delenv("GRIMOIRE_CONTENT_PATH", raising=False)
        assert get_content_path() == "content"
        monkeypatch.setenv("GRIMOIRE_CONTENT_PATH", "/srv/grimoire/content")
        assert get_content_path() == "/srv/grimoire/content"


# ============================================================================
# Integration Tests - Parametrized for Both Backends
# ============================================================================


@pytest.fixture
def file_save_repo(tmp_path):
    """Create a FileSaveRepository for integration tests."""
    return FileSaveRepository(tmp_path / "file_saves")


@pytest.fixture
def sqlite_save_repo(tmp_path):
    """Create a SQLiteSaveRepository for integration tests."""
    return SQLiteSaveRepository(str(tmp_path / "test_saves.db"))


class TestSaveRepositoryIntegration:
    """Integration tests that run against both file and SQLite backends."""

    @pytest.fixture(params=["file", "sqlite"])
    def save_repo(self, request, file_save_repo, sqlite_save_repo):
        """Parametrized fixture that provides both repository implementations."""
        if request.param == "file":
            return file_save_repo
        return sqlite_save_repo

    def test_empty_list(self, save_repo):
        """Both backends should return empty list initially."""
        assert save_repo.list_summaries() == []

    def test_missing_slot_loads_none(self, save_repo):
        assert save_repo.load_slot("autosave") is None

    def test_save_load_roundtrip(self, save_repo):
        """Slot data is returned verbatim."""
        data = '{"version": 1, "timestamp": "t", "state": {}}'
        save_repo.save_slot("autosave", data, summary("autosave", "2026-03-01T10:00:00"))

        assert save_repo.load_slot("autosave") == data
        assert save_repo.list_summaries() == [summary("autosave", "2026-03-01T10:00:00")]

    def test_overwrite_keeps_one_entry(self, save_repo):
        save_repo.save_slot("autosave", "first", summary("autosave", "2026-03-01T10:00:00"))
        save_repo.save_slot(
            "autosave", "second", summary("autosave", "2026-03-02T10:00:00", case_name="other")
        )

        assert save_repo.load_slot("autosave") == "second"
        summaries = save_repo.list_summaries()
        assert len(summaries) == 1
        assert summaries[0]["caseName"] == "other"

    def test_delete(self, save_repo):
        save_repo.save_slot("save-1", "data", summary("save-1", "2026-03-01T10:00:00"))

        assert save_repo.delete_slot("save-1") is True
        assert save_repo.load_slot("save-1") is None
        assert save_repo.list_summaries() == []
        assert save_repo.delete_slot("save-1") is False

    def test_list_sorted_newest_first(self, save_repo):
        for slot_id, timestamp in [
            ("b", "2026-03-02T00:00:00"),
            ("a", "2026-03-01T00:00:00"),
            ("c", "2026-03-03T00:00:00"),
        ]:
            save_repo.save_slot(slot_id, "data", summary(slot_id, timestamp))

        assert [s["id"] for s in save_repo.list_summaries()] == ["c", "b", "a"]
