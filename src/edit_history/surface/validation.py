"""Range checks shared by the engine, the normalizer and surfaces."""

from __future__ import annotations

from .protocol import Selection, SurfaceRangeError


def ensure_range(text: str, start: int, end: int) -> Selection:
    length = len(text)
    if start < 0 or end > length:
        raise SurfaceRangeError("Range out of bounds", start=start, end=end, length=length)
    if start > end:
        raise SurfaceRangeError("Range is inverted", start=start, end=end, length=length)
    return (start, end)
