"""Conversions between character offsets and ``(row, column)`` locations."""

from __future__ import annotations

from typing import Tuple

Location = Tuple[int, int]  # (row, column)


def location_to_offset(text: str, location: Location) -> int:
    lines = text.split("\n")
    row, col = location
    offset = 0
    for i in range(row):
        offset += len(lines[i]) + 1  # newline
    return offset + col


def offset_to_location(text: str, offset: int) -> Location:
    lines = text.split("\n")
    running = 0
    for row, line in enumerate(lines):
        if offset <= running + len(line):
            return (row, offset - running)
        running += len(line) + 1
    return (len(lines) - 1, len(lines[-1]))


__all__ = ["Location", "location_to_offset", "offset_to_location"]
