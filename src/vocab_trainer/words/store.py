"""Word Store implementations.

Entries are kept in owner-agnostic insertion order; ``find_by_owner`` filters
that order so quiz sessions see words in the order they were added.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import uuid
from dataclasses import replace
from pathlib import Path
from typing import Iterable, List, Protocol, Sequence

from .models import VocabularyEntry

logger = logging.getLogger(__name__)


class WordStoreError(RuntimeError):
    """Raised when the backing storage cannot be read or written."""


class WordNotFoundError(WordStoreError):
    """Raised when deleting or updating an entry the store does not hold."""


class SupportsUpdatedEntry(Protocol):
    def updated_entry(self) -> VocabularyEntry: ...


class WordStore(Protocol):
    def find_by_owner(self, owner: str) -> List[VocabularyEntry]: ...

    def save(self, entry: VocabularyEntry) -> VocabularyEntry: ...

    def save_all(
        self, entries: Sequence[VocabularyEntry]
    ) -> List[VocabularyEntry]:
        """Insert or replace ``entries`` by id; unknown ids are appended."""
        ...

    def delete(self, entry: VocabularyEntry) -> None: ...


def _assign_id(entry: VocabularyEntry) -> VocabularyEntry:
    if entry.id is not None:
        return entry
    return replace(entry, id=uuid.uuid4().hex)


def _upsert(
    current: List[VocabularyEntry], entries: Iterable[VocabularyEntry]
) -> tuple[List[VocabularyEntry], List[VocabularyEntry]]:
    merged = list(current)
    index = {e.id: i for i, e in enumerate(merged)}
    saved: List[VocabularyEntry] = []
    for entry in entries:
        stored = _assign_id(entry)
        pos = index.get(stored.id)
        if pos is None:
            index[stored.id] = len(merged)
            merged.append(stored)
        else:
            merged[pos] = stored
        saved.append(stored)
    return merged, saved


def _without(
    current: List[VocabularyEntry], entry: VocabularyEntry
) -> List[VocabularyEntry]:
    if entry.id is None:
        raise WordNotFoundError("Cannot delete an entry that was never saved")
    remaining = [e for e in current if e.id != entry.id]
    if len(remaining) == len(current):
        raise WordNotFoundError(f"Word not found: {entry.id}")
    return remaining


class InMemoryWordStore:
    """Word Store kept in a Python list."""

    def __init__(self, entries: Iterable[VocabularyEntry] = ()) -> None:
        self._entries: List[VocabularyEntry] = []
        self.save_all(list(entries))

    def find_by_owner(self, owner: str) -> List[VocabularyEntry]:
        return [e for e in self._entries if e.owner == owner]

    def save(self, entry: VocabularyEntry) -> VocabularyEntry:
        return self.save_all([entry])[0]

    def save_all(
        self, entries: Sequence[VocabularyEntry]
    ) -> List[VocabularyEntry]:
        self._entries, saved = _upsert(self._entries, entries)
        return saved

    def delete(self, entry: VocabularyEntry) -> None:
        self._entries = _without(self._entries, entry)


class JsonlWordStore:
    """Word Store persisted as a JSON-lines file.

    Every write rewrites the whole file through a temp file and an atomic
    rename, so a failed ``save_all`` leaves the previous contents intact.
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def find_by_owner(self, owner: str) -> List[VocabularyEntry]:
        return [e for e in self._read() if e.owner == owner]

    def save(self, entry: VocabularyEntry) -> VocabularyEntry:
        return self.save_all([entry])[0]

    def save_all(
        self, entries: Sequence[VocabularyEntry]
    ) -> List[VocabularyEntry]:
        merged, saved = _upsert(self._read(), entries)
        self._write(merged)
        logger.debug(
            "Saved words",
            extra={"event": "words_saved", "count": len(saved)},
        )
        return saved

    def delete(self, entry: VocabularyEntry) -> None:
        self._write(_without(self._read(), entry))
        logger.info(
            "Deleted word",
            extra={"event": "word_deleted", "word_id": entry.id},
        )

    def _read(self) -> List[VocabularyEntry]:
        if not self.path.exists():
            return []
        entries: List[VocabularyEntry] = []
        with self.path.open("r", encoding="utf-8") as fh:
            for lineno, line in enumerate(fh, start=1):
                line = line.strip()
                if not line:
                    continue
                try:
                    entries.append(VocabularyEntry.from_record(json.loads(line)))
                except (ValueError, TypeError, AttributeError) as exc:
                    raise WordStoreError(
                        f"Invalid word record at {self.path}:{lineno}: {exc}"
                    ) from exc
        return entries

    def _write(self, entries: Sequence[VocabularyEntry]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=".words-", suffix=".tmp", dir=self.path.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                for entry in entries:
                    fh.write(json.dumps(entry.to_record(), ensure_ascii=False))
                    fh.write("\n")
            os.replace(tmp_name, self.path)
        except OSError as exc:
            Path(tmp_name).unlink(missing_ok=True)
            raise WordStoreError(f"Failed to write {self.path}: {exc}") from exc


def commit_progress(
    store: WordStore, updates: Sequence[SupportsUpdatedEntry]
) -> List[VocabularyEntry]:
    """Persist the outcome of a finished quiz in a single store write.

    ``save_all`` is an upsert, so entries deleted while the quiz was running
    are dropped here instead of being written back.
    """

    entries = [update.updated_entry() for update in updates]
    held = {
        e.id
        for owner in {entry.owner for entry in entries}
        for e in store.find_by_owner(owner)
    }
    kept = [entry for entry in entries if entry.id in held]
    skipped = [entry.id for entry in entries if entry.id not in held]
    if skipped:
        logger.warning(
            "Skipped progress for words no longer stored",
            extra={"event": "quiz_progress_skipped", "word_ids": skipped},
        )
    if not kept:
        return []
    return store.save_all(kept)
