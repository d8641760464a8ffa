"""Error taxonomy mapped to HTTP responses by ``server.app.error_middleware``."""

from __future__ import annotations


class PastyError(Exception):
    """Base class for pasty errors."""


class NotFoundError(PastyError):
    """Unknown id, or a known id whose backing file is gone (404)."""


class StorageError(PastyError):
    """Backing storage could not be created, opened or written (500)."""


class SnapshotError(PastyError):
    """A persisted snapshot exists but cannot be parsed -- fatal at startup."""
