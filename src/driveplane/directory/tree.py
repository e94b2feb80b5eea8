"""In-memory directory tree: the source of truth the search index reads from."""

from __future__ import annotations

import time
from collections.abc import Callable, Iterator
from dataclasses import dataclass, replace

import structlog

from driveplane.index.models import IndexEntry, ResourceKind, ResourceRef

logger = structlog.get_logger()


@dataclass(frozen=True, slots=True)
class FileRecord:
    id: str
    path: str
    deleted: bool = False
    created_ms: int = 0
    last_changed_ms: int = 0

    @property
    def ref(self) -> ResourceRef:
        return ResourceRef.file(self.id)


@dataclass(frozen=True, slots=True)
class FolderRecord:
    id: str
    path: str
    deleted: bool = False
    created_ms: int = 0
    last_changed_ms: int = 0

    @property
    def ref(self) -> ResourceRef:
        return ResourceRef.folder(self.id)


Record = FileRecord | FolderRecord


class DirectoryTree:
    """File and folder records keyed by id.

    Deletion is soft: records stay in the tree with deleted=True and are
    still enumerated, so the index builder is the one that drops them.
    """

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._files: dict[str, FileRecord] = {}
        self._folders: dict[str, FolderRecord] = {}
        self._last_mutation_ms = 0
        self._version = 0

    def _now_ms(self) -> int:
        return int(self._clock() * 1000)

    def _touch(self) -> int:
        now = self._now_ms()
        self._last_mutation_ms = now
        self._version += 1
        return now

    def add_file(self, file_id: str, path: str, *, deleted: bool = False) -> FileRecord:
        """Insert or replace a file record. A replaced record keeps its creation time."""
        now = self._touch()
        previous = self._files.get(file_id)
        created = now if previous is None else previous.created_ms
        record = FileRecord(file_id, path, deleted, created, now)
        self._files[file_id] = record
        return record

    def add_folder(self, folder_id: str, path: str, *, deleted: bool = False) -> FolderRecord:
        """Insert or replace a folder record. A replaced record keeps its creation time."""
        now = self._touch()
        previous = self._folders.get(folder_id)
        created = now if previous is None else previous.created_ms
        record = FolderRecord(folder_id, path, deleted, created, now)
        self._folders[folder_id] = record
        return record

    def get(self, ref: ResourceRef) -> Record | None:
        if ref.kind is ResourceKind.FILE:
            return self._files.get(ref.id)
        return self._folders.get(ref.id)

    def mark_deleted(self, ref: ResourceRef) -> Record:
        """Soft-delete a record.

        Raises:
            KeyError: no record with that reference.
        """
        record = self.get(ref)
        if record is None:
            raise KeyError(f"{ref.kind.value} {ref.id!r} not found")
        updated = replace(record, deleted=True, last_changed_ms=self._touch())
        if isinstance(updated, FileRecord):
            self._files[ref.id] = updated
        else:
            self._folders[ref.id] = updated
        logger.debug("record_deleted", kind=ref.kind.value, id=ref.id)
        return updated

    def iter_entries(self) -> Iterator[IndexEntry]:
        """Enumerate every record, files first, each in insertion order."""
        for file in self._files.values():
            yield IndexEntry(file.path, file.ref, file.deleted)
        for folder in self._folders.values():
            yield IndexEntry(folder.path, folder.ref, folder.deleted)

    @property
    def last_mutation_ms(self) -> int:
        """Timestamp of the last write, or 0 for a tree never written to."""
        return self._last_mutation_ms

    @property
    def version(self) -> int:
        """Number of writes so far. Increases by one on every write."""
        return self._version

    def __len__(self) -> int:
        return len(self._files) + len(self._folders)
