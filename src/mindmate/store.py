"""Newest-first journal entry collection with a key-value snapshot.

The whole collection is serialized to one key after every change and
read back (then re-sorted) once at startup. Storage problems are logged
and swallowed: a corrupt snapshot loads as an empty journal, and a failed
write leaves the previous snapshot in place.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Protocol

from pydantic import TypeAdapter

from mindmate.config import DEFAULT_STORAGE_KEY
from mindmate.models import JournalEntry

logger = logging.getLogger(__name__)

STORAGE_KEY = DEFAULT_STORAGE_KEY

_entries_adapter = TypeAdapter(list[JournalEntry])


class KeyValueStore(Protocol):
    """Byte-valued key-value storage."""

    def get(self, key: str) -> bytes | None: ...

    def set(self, key: str, value: bytes) -> None: ...


class MemoryKeyValueStore:
    """Dict-backed store for tests and throwaway sessions."""

    def __init__(self, initial: dict[str, bytes] | None = None) -> None:
        self.data: dict[str, bytes] = dict(initial or {})

    def get(self, key: str) -> bytes | None:
        return self.data.get(key)

    def set(self, key: str, value: bytes) -> None:
        self.data[key] = value


class FileKeyValueStore:
    """One JSON file per key inside ``directory``.

    Writes go to a temp file in the same directory and are moved into
    place with ``os.replace``.
    """

    def __init__(self, directory: Path) -> None:
        self.directory = Path(directory)

    def path_for(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get(self, key: str) -> bytes | None:
        path = self.path_for(key)
        if not path.exists():
            return None
        return path.read_bytes()

    def set(self, key: str, value: bytes) -> None:
        path = self.path_for(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_name(path.name + ".tmp")
        try:
            with open(tmp, "wb") as f:
                f.write(value)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp, path)
        except OSError:
            tmp.unlink(missing_ok=True)
            raise


def sort_entries(entries: list[JournalEntry]) -> list[JournalEntry]:
    """Return entries ordered by date, newest first."""
    return sorted(entries, key=lambda e: e.created_at, reverse=True)


class EntryStore:
    """Loads, extends, and snapshots the entry collection."""

    def __init__(self, backend: KeyValueStore, key: str = STORAGE_KEY) -> None:
        self._backend = backend
        self._key = key

    @property
    def key(self) -> str:
        return self._key

    def load(self) -> list[JournalEntry]:
        """Read the snapshot; missing or unreadable data yields an empty list."""
        try:
            raw = self._backend.get(self._key)
        except OSError:
            logger.warning("Failed to read entries from %r", self._key, exc_info=True)
            return []
        if raw is None:
            return []
        try:
            entries = _entries_adapter.validate_json(raw)
        except ValueError:
            logger.warning("Corrupt entry snapshot under %r, starting fresh", self._key)
            return []
        return sort_entries(entries)

    def add(self, entry: JournalEntry, entries: list[JournalEntry]) -> list[JournalEntry]:
        """Return a new collection with ``entry`` first."""
        return [entry, *entries]

    def persist(self, entries: list[JournalEntry]) -> None:
        """Overwrite the snapshot with the full collection."""
        try:
            payload = _entries_adapter.dump_json(entries, by_alias=True, indent=2)
            self._backend.set(self._key, payload)
        except (OSError, ValueError):
            logger.warning("Failed to save entries under %r", self._key, exc_info=True)
