"""Tests for the favorites store."""

import stat
from pathlib import Path
from unittest.mock import patch

import pytest

from histbox.exceptions import PersistenceWriteError
from histbox.favorites import FavoritesStore


@pytest.fixture
def path(tmp_path: Path) -> Path:
    """Location of a favorites file inside a not-yet-created directory."""
    return tmp_path / "histbox" / "bash_favorites"


class TestLoad:
    """Tests for FavoritesStore.load()."""

    def test_missing_file_is_empty(self, path: Path) -> None:
        """A missing file is an empty favorites list, not an error."""
        store = FavoritesStore(path)
        assert store.load() == []
        assert len(store) == 0

    def test_reads_one_entry_per_line(self, path: Path) -> None:
        """Entries are read in file order, skipping blanks and duplicates."""
        path.parent.mkdir(parents=True)
        path.write_text("git status\n\nls -la\ngit status\n")
        store = FavoritesStore(path)
        assert [f.text for f in store.load()] == ["git status", "ls -la"]

    def test_loaded_entries_have_no_timestamp(self, path: Path) -> None:
        """The file stores text only."""
        path.parent.mkdir(parents=True)
        path.write_text("ls\n")
        store = FavoritesStore(path)
        assert store.load()[0].added_at is None

    def test_unreadable_file_is_empty(self, path: Path) -> None:
        """A file that cannot be decoded is treated as empty."""
        path.parent.mkdir(parents=True)
        path.write_bytes(b"\xff\xfe\xfa")
        store = FavoritesStore(path)
        assert store.load() == []


class TestMutation:
    """Tests for add/remove/toggle."""

    def test_add_and_contains(self, path: Path) -> None:
        """Added favorites are reported by contains()."""
        store = FavoritesStore(path)
        assert store.add("ls") is True
        assert store.contains("ls")
        assert "ls" in store
        assert store.list()[0].added_at is not None

    def test_add_is_idempotent(self, path: Path) -> None:
        """Adding twice keeps a single entry."""
        store = FavoritesStore(path)
        store.add("ls")
        assert store.add("ls") is False
        assert store.texts() == ["ls"]

    def test_remove_absent_is_noop(self, path: Path) -> None:
        """Removing an absent favorite changes nothing."""
        store = FavoritesStore(path)
        store.add("ls")
        store.persist()
        assert store.remove("cd") is False
        assert store.texts() == ["ls"]
        assert store.dirty is False

    def test_insertion_order(self, path: Path) -> None:
        """list() returns favorites in insertion order."""
        store = FavoritesStore(path)
        for text in ("c", "a", "b"):
            store.add(text)
        assert store.texts() == ["c", "a", "b"]

    def test_toggle(self, path: Path) -> None:
        """toggle() adds then removes."""
        store = FavoritesStore(path)
        assert store.toggle("ls") is True
        assert store.toggle("ls") is False
        assert "ls" not in store

    def test_mutation_marks_dirty(self, path: Path) -> None:
        """Changes are pending until persisted."""
        store = FavoritesStore(path)
        store.add("ls")
        assert store.dirty is True
        store.persist()
        assert store.dirty is False


class TestPersist:
    """Tests for persist() round trips."""

    def test_add_persist_load_round_trip(self, path: Path) -> None:
        """A persisted favorite is present after a fresh load."""
        store = FavoritesStore(path)
        store.add("git status")
        store.add("ls -la")
        store.persist()
        fresh = FavoritesStore(path)
        assert [f.text for f in fresh.load()] == ["git status", "ls -la"]

    def test_remove_persist_load_round_trip(self, path: Path) -> None:
        """A removed favorite is absent after a fresh load."""
        store = FavoritesStore(path)
        store.add("git status")
        store.add("ls -la")
        store.persist()
        store.remove("git status")
        store.persist()
        fresh = FavoritesStore(path)
        fresh.load()
        assert "git status" not in fresh
        assert "ls -la" in fresh

    def test_file_format(self, path: Path) -> None:
        """One favorite per line, newline terminated."""
        store = FavoritesStore(path)
        store.add("a")
        store.add("b")
        store.persist()
        assert path.read_text() == "a\nb\n"

    def test_existing_mode_kept(self, path: Path) -> None:
        """Rewriting the file keeps its permissions."""
        path.parent.mkdir(parents=True)
        path.write_text("old\n")
        path.chmod(0o644)
        store = FavoritesStore(path)
        store.load()
        store.add("new")
        store.persist()
        assert stat.S_IMODE(path.stat().st_mode) == 0o644
        assert path.read_text() == "old\nnew\n"

    def test_no_temp_files_left(self, path: Path) -> None:
        """The temporary file is renamed into place."""
        store = FavoritesStore(path)
        store.add("a")
        store.persist()
        assert [p.name for p in path.parent.iterdir()] == ["bash_favorites"]

    def test_write_failure_raises_and_keeps_state(self, path: Path) -> None:
        """A failed write reports the error; memory and old file survive."""
        store = FavoritesStore(path)
        store.add("old")
        store.persist()
        store.add("new")
        with patch("histbox.favorites.os.replace", side_effect=OSError("disk full")):
            with pytest.raises(PersistenceWriteError) as exc_info:
                store.persist()
        assert exc_info.value.path == path
        assert store.texts() == ["old", "new"]
        assert store.dirty is True
        assert path.read_text() == "old\n"
        assert [p.name for p in path.parent.iterdir()] == ["bash_favorites"]

    def test_unwritable_directory_raises(self, tmp_path: Path) -> None:
        """A parent that is a file cannot hold the favorites file."""
        blocker = tmp_path / "blocker"
        blocker.write_text("")
        store = FavoritesStore(blocker / "favorites")
        store.add("ls")
        with pytest.raises(PersistenceWriteError):
            store.persist()
