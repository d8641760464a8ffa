"""Identifier generation for uploaded files and snippets."""

from __future__ import annotations

import random
import secrets
import time
from collections.abc import Callable

SNIPPET_ID_ALPHABET = "abcdefghijklmnopqrstuvwxyz0123456789"
SNIPPET_ID_LENGTH = 3

_system_rng = secrets.SystemRandom()


def sanitize_name(name: str) -> str:
    """Strip directory components so *name* cannot escape the uploads root.

    Returns ``""`` when nothing usable is left (empty, ``.`` or ``..``).
    """
    base = name.replace("\\", "/").rsplit("/", 1)[-1]
    if base in ("", ".", ".."):
        return ""
    return base


def new_file_id(filename: str, now_ns: int | None = None) -> str:
    """``<unix-nanoseconds>-<basename>``; no collision check is made."""
    stamp = time.time_ns() if now_ns is None else now_ns
    return f"{stamp}-{sanitize_name(filename) or 'upload'}"


def new_snippet_id(
    taken: Callable[[str], bool],
    length: int = SNIPPET_ID_LENGTH,
    rng: random.Random | None = None,
) -> str:
    """Draw random ids until one is not *taken*.

    Callers must hold whatever lock makes ``taken`` and the following insert
    atomic.  With 36**3 ids this only scales to a few thousand live snippets.
    """
    rng = rng or _system_rng
    while True:
        candidate = "".join(rng.choice(SNIPPET_ID_ALPHABET) for _ in range(length))
        if not taken(candidate):
            return candidate
