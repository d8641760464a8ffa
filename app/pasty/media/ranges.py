"""Single-range subset of the HTTP ``Range`` header grammar.

Parsing never raises: the outcome is one of three tagged values and the
serving layer decides what each one means.
"""

from __future__ import annotations

from dataclasses import dataclass

_UNIT = "bytes="


@dataclass(frozen=True, slots=True)
class FullRange:
    """No ``Range`` header -- the whole object is wanted."""


@dataclass(frozen=True, slots=True)
class PartialRange:
    start: int
    end: int  # inclusive

    @property
    def length(self) -> int:
        return self.end - self.start + 1

    def content_range(self, size: int) -> str:
        return f"bytes {self.start}-{self.end}/{size}"


@dataclass(frozen=True, slots=True)
class Unparsable:
    reason: str


RangeSpec = FullRange | PartialRange | Unparsable


def _to_int(text: str) -> int | None:
    if not (text.isascii() and text.isdigit()):
        return None
    return int(text)


def parse_range(header: str | None, size: int) -> RangeSpec:
    """Interpret *header* against an object of *size* bytes.

    Supported forms are ``bytes=s-e``, ``bytes=s-`` and ``bytes=-k``.  The end
    of an explicit range is clamped to ``size - 1`` and a suffix longer than
    the object covers all of it.  Anything else, including a start at or past
    the end of the object, is :class:`Unparsable`.
    """
    if header is None or header == "":
        return FullRange()
    if not header.startswith(_UNIT):
        return Unparsable("unsupported range unit")

    parts = header[len(_UNIT):].split("-")
    if len(parts) != 2:
        return Unparsable("not a single range")
    first, second = parts

    if first == "":
        suffix = _to_int(second)
        if suffix is None:
            return Unparsable("invalid suffix length")
        start = max(size - suffix, 0)
        end = size - 1
    else:
        start = _to_int(first)
        if start is None:
            return Unparsable("invalid start position")
        if second == "":
            end = size - 1
        else:
            end = _to_int(second)
            if end is None or end < start:
                return Unparsable("invalid end position")

    if start >= size:
        return Unparsable("range start beyond object size")
    return PartialRange(start=start, end=min(end, size - 1))
