# app/services/range_resolver.py
from __future__ import annotations

"""
ReelVault — HTTP byte-range resolution
======================================

Pure parsing of a `Range` request header against a known content length.

Supported forms (single range honoured):
    bytes=start-end     → [start, end]
    bytes=start-        → [start, N-1]
    bytes=-suffix       → last `suffix` bytes (clamped to the whole file)

Outcomes
--------
- `None`            → no usable range requested; serve the full body (200)
- `ByteRange`       → one inclusive interval, `0 <= start <= end <= N-1` (206)
- raises `RangeNotSatisfiableException` (416) for anything malformed or out
  of bounds. Nothing is ever partially streamed for a rejected header.

Multiple comma-separated ranges must all be well-formed; only the first is
served (no multipart/byteranges responses).
"""

from dataclasses import dataclass
from typing import Optional

from app.core.exceptions import RangeNotSatisfiableException

_UNIT_PREFIX = "bytes="


@dataclass(frozen=True)
class ByteRange:
    """Inclusive byte interval `[start, end]`."""

    start: int
    end: int

    @property
    def length(self) -> int:
        return self.end - self.start + 1

    def content_range(self, total: int) -> str:
        return f"bytes {self.start}-{self.end}/{total}"


def _parse_int(raw: str) -> Optional[int]:
    raw = raw.strip()
    if not raw or not raw.isascii() or not raw.isdigit():
        return None
    return int(raw)


def _resolve_part(part: str, size: int) -> Optional[ByteRange]:
    """Resolve one `a-b` spec; `None` means the spec is malformed or unsatisfiable."""
    pieces = part.split("-")
    if len(pieces) != 2:
        return None
    first, last = pieces[0].strip(), pieces[1].strip()

    if not first:
        # Suffix form: last N bytes
        suffix = _parse_int(last)
        if suffix is None or suffix == 0 or size == 0:
            return None
        start = max(size - suffix, 0)
        return ByteRange(start, size - 1)

    start = _parse_int(first)
    if start is None:
        return None
    if last:
        end = _parse_int(last)
        if end is None:
            return None
    else:
        end = size - 1

    if start > end or end >= size:
        return None
    return ByteRange(start, end)


def resolve_range(header: Optional[str], size: int) -> Optional[ByteRange]:
    """Resolve a raw `Range` header against `size` bytes.

    Returns `None` when no range was requested. Raises
    `RangeNotSatisfiableException` when the header is malformed, uses another
    unit, or cannot be satisfied for this length.
    """
    if header is None or not header.strip():
        return None

    value = header.strip()
    if not value.lower().startswith(_UNIT_PREFIX):
        raise RangeNotSatisfiableException(header=header, size=size)

    specs = [p.strip() for p in value[len(_UNIT_PREFIX):].split(",")]
    specs = [p for p in specs if p]
    if not specs:
        return None

    resolved = [_resolve_part(p, size) for p in specs]
    if any(r is None for r in resolved):
        raise RangeNotSatisfiableException(header=header, size=size)
    return resolved[0]


__all__ = ["ByteRange", "resolve_range"]
