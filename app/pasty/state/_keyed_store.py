"""Thread-safe keyed map shared by the file registry and the snippet store."""

from __future__ import annotations

import threading
from typing import Generic, TypeVar

V = TypeVar("V")


class KeyedStore(Generic[V]):
    """``id -> value`` map guarded by a lock owned by this instance alone.

    Values are replaced wholesale, never mutated in place, so a reader sees
    either the old or the new value for an id.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._items: dict[str, V] = {}

    def _put(self, key: str, value: V) -> None:
        with self._lock:
            self._items[key] = value

    def get(self, key: str) -> V | None:
        with self._lock:
            return self._items.get(key)

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._items.pop(key, None) is not None

    def list(self) -> list[V]:
        with self._lock:
            return list(self._items.values())

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._items

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)
