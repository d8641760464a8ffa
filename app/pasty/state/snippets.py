"""Snippet store -- titled text pastes with optional burn-after-reading."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..errors import SnapshotError
from ..util.ids import new_snippet_id
from ._keyed_store import KeyedStore

DEFAULT_TITLE = "None"


@dataclass(frozen=True, slots=True)
class Snippet:
    id: str
    title: str
    text: str
    burn_after_reading: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "text": self.text,
            "burn_after_reading": self.burn_after_reading,
        }

    @classmethod
    def from_dict(cls, snippet_id: str, data: Any) -> Snippet:
        if not isinstance(data, dict):
            raise SnapshotError(f"snippet {snippet_id!r} is not an object")
        title = data.get("title", "")
        text = data.get("text", "")
        burn = data.get("burn_after_reading", False)
        if not isinstance(title, str) or not isinstance(text, str) or not isinstance(burn, bool):
            raise SnapshotError(f"snippet {snippet_id!r} has malformed fields")
        return cls(id=snippet_id, title=title, text=text, burn_after_reading=burn)


class SnippetStore(KeyedStore[Snippet]):
    """In-memory ``id -> Snippet`` map, hydrated from and saved to a snapshot."""

    def put(self, snippet: Snippet) -> None:
        self._put(snippet.id, snippet)

    def create(self, title: str, text: str, burn_after_reading: bool = False) -> Snippet:
        """Store a new snippet under a fresh short id.

        Id allocation and insertion happen under one lock hold, so two
        concurrent creates can never pick the same id.
        """
        with self._lock:
            snippet_id = new_snippet_id(self._items.__contains__)
            snippet = Snippet(
                id=snippet_id,
                title=title or DEFAULT_TITLE,
                text=text,
                burn_after_reading=burn_after_reading,
            )
            self._items[snippet_id] = snippet
        return snippet

    def consume_if_burn(self, snippet_id: str) -> Snippet | None:
        """Return the snippet, removing it in the same step if it is one-shot."""
        with self._lock:
            snippet = self._items.get(snippet_id)
            if snippet is not None and snippet.burn_after_reading:
                del self._items[snippet_id]
            return snippet

    def list(self) -> list[Snippet]:
        """Snippets newest first."""
        with self._lock:
            return list(reversed(self._items.values()))

    # -- snapshot hooks ----------------------------------------------------

    def snapshot(self) -> dict[str, dict[str, Any]]:
        with self._lock:
            return {sid: s.to_dict() for sid, s in self._items.items()}

    def restore(self, data: Any) -> None:
        if not isinstance(data, dict):
            raise SnapshotError("snapshot root must be an object")
        loaded = {sid: Snippet.from_dict(sid, entry) for sid, entry in data.items()}
        with self._lock:
            self._items = loaded
