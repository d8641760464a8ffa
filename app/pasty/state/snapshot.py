"""Atomic JSON snapshots of an in-memory store.

A save writes a temp file next to the target and ``os.replace``s it over
the old snapshot, so the file on disk is always either the previous or the
new complete document.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Protocol

from ..errors import SnapshotError
from ..util.result import Result

logger = logging.getLogger(__name__)


class Snapshottable(Protocol):
    def snapshot(self) -> Any: ...

    def restore(self, data: Any) -> None: ...

    def __len__(self) -> int: ...


class SnapshotFile:
    """Saves and loads one store to one JSON file."""

    def __init__(self, path: Path) -> None:
        self._path = path
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def load(self, store: Snapshottable) -> None:
        """Hydrate *store* from disk.

        A missing file is a normal first run and leaves the store untouched.
        A file that exists but cannot be parsed raises :class:`SnapshotError`.
        """
        if not self._path.exists():
            logger.info("No %s file found, starting with empty data", self._path.name)
            return
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise SnapshotError(f"cannot read snapshot {self._path}: {exc}") from exc
        store.restore(data)
        logger.info("Loaded %d entries from %s", len(store), self._path)

    def save(self, store: Snapshottable) -> Result:
        """Write *store* atomically; failures are logged and returned, never raised."""
        with self._lock:
            # Snapshot order matches write order.
            data = store.snapshot()
            try:
                payload = json.dumps(data, indent=2, ensure_ascii=False) + "\n"
            except (TypeError, ValueError) as exc:
                logger.error("Error serializing snapshot data: %s", exc)
                return Result.fail(f"serialize failed: {exc}")

            tmp_name = ""
            try:
                self._path.parent.mkdir(parents=True, exist_ok=True)
                fd, tmp_name = tempfile.mkstemp(
                    dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp"
                )
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    fh.write(payload)
                    fh.flush()
                    os.fsync(fh.fileno())
                os.replace(tmp_name, self._path)
            except OSError as exc:
                logger.error("Error writing snapshot %s: %s", self._path, exc)
                if tmp_name:
                    Path(tmp_name).unlink(missing_ok=True)
                return Result.fail(f"write failed: {exc}")

        logger.info("Saved %d entries to %s", len(data), self._path)
        return Result.ok(str(self._path), value=len(data))
