"""Uploaded-file metadata registry."""

from __future__ import annotations

from dataclasses import dataclass

from ._keyed_store import KeyedStore


@dataclass(frozen=True, slots=True)
class FileRecord:
    id: str
    original_name: str
    stored_name: str


class FileRegistry(KeyedStore[FileRecord]):
    """In-memory ``id -> FileRecord`` map; starts empty on every run.

    The registry never looks at the disk.  A record whose stored file has
    been removed is still returned here; the serving layer reports it as
    not found.
    """

    def put(self, record: FileRecord) -> None:
        self._put(record.id, record)

    def display_name(self, file_id: str) -> str:
        """Original upload name for tracked ids, else the id itself."""
        record = self.get(file_id)
        return record.original_name if record else file_id
