"""Outcome type for operations that report failure instead of raising."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class Result:
    """Outcome of a best-effort operation such as a snapshot save.

    Evaluates truthy on success and unpacks to ``(success, message)``::

        ok, msg = snapshot.save(store)
        if not ok:
            logger.warning("save failed: %s", msg)
    """

    success: bool
    message: str = ""
    value: Any = field(default=None, repr=False)

    @classmethod
    def ok(cls, message: str = "", *, value: Any = None) -> Result:
        return cls(success=True, message=message, value=value)

    @classmethod
    def fail(cls, message: str = "") -> Result:
        return cls(success=False, message=message)

    def __bool__(self) -> bool:
        return self.success

    def __iter__(self):
        yield self.success
        yield self.message
