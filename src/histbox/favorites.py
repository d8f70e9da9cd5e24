"""Persistent favorites list."""

from __future__ import annotations

import contextlib
import logging
import os
import stat
import tempfile
from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path

from histbox.exceptions import PersistenceWriteError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Favorite:
    """A pinned command.

    ``added_at`` is only known for favorites added during this session;
    the file stores the text alone.
    """

    text: str
    added_at: datetime | None = None


class FavoritesStore:
    """Favorite commands backed by a one-entry-per-line text file.

    The in-memory list is authoritative for the session. Every mutation
    marks the store dirty until the next successful ``persist()``.

    Args:
        path: Location of the favorites file.
    """

    def __init__(self, path: Path) -> None:
        self._path = path
        self._favorites: dict[str, Favorite] = {}
        self._dirty = False

    @property
    def path(self) -> Path:
        """Location of the favorites file."""
        return self._path

    @property
    def dirty(self) -> bool:
        """True when there are changes not yet written to disk."""
        return self._dirty

    def load(self) -> list[Favorite]:
        """Replace the in-memory list with the file contents.

        A missing file yields an empty list. An unreadable file is logged
        and also yields an empty list.
        """
        self._favorites = {}
        self._dirty = False
        if not self._path.exists():
            return []
        try:
            text = self._path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            logger.warning("Unreadable favorites file %s; starting empty", self._path)
            return []
        for line in text.splitlines():
            entry = line.strip()
            if entry and entry not in self._favorites:
                self._favorites[entry] = Favorite(text=entry)
        return self.list()

    def list(self) -> list[Favorite]:
        """Return favorites in insertion order."""
        return list(self._favorites.values())

    def texts(self) -> list[str]:
        """Return favorite command texts in insertion order."""
        return list(self._favorites)

    def __contains__(self, text: object) -> bool:
        return text in self._favorites

    def __len__(self) -> int:
        return len(self._favorites)

    def contains(self, text: str) -> bool:
        return text in self._favorites

    def add(self, text: str) -> bool:
        """Add a favorite. Returns False if it was already present."""
        if text in self._favorites:
            return False
        self._favorites[text] = Favorite(text=text, added_at=datetime.now(UTC))
        self._dirty = True
        return True

    def remove(self, text: str) -> bool:
        """Remove a favorite. Removing an absent entry is a no-op."""
        if self._favorites.pop(text, None) is None:
            return False
        self._dirty = True
        return True

    def toggle(self, text: str) -> bool:
        """Add or remove a favorite. Returns True if it is now a favorite."""
        if self.remove(text):
            return False
        self.add(text)
        return True

    def persist(self) -> None:
        """Write the list to disk, replacing the previous file atomically.

        Raises:
            PersistenceWriteError: If the file cannot be written. The
                in-memory list is left untouched and stays dirty.
        """
        content = "".join(f"{text}\n" for text in self._favorites)
        tmp_name: str | None = None
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self._path.parent,
                prefix=f".{self._path.name}.",
                suffix=".tmp",
                delete=False,
            ) as fh:
                tmp_name = fh.name
                fh.write(content)
                fh.flush()
                os.fsync(fh.fileno())
            if self._path.exists():
                os.chmod(tmp_name, stat.S_IMODE(self._path.stat().st_mode))
            os.replace(tmp_name, self._path)
            tmp_name = None
        except OSError as e:
            raise PersistenceWriteError(self._path, str(e)) from e
        finally:
            if tmp_name is not None:
                with contextlib.suppress(OSError):
                    os.unlink(tmp_name)
        self._dirty = False
