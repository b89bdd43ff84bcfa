"""Boundary types between the history core and the host text surface."""

from __future__ import annotations

from enum import Enum
from typing import Protocol, Tuple

from .notifications import EditCause, EditNotification

Selection = Tuple[int, int]  # (start, end) character offsets, start <= end


class SelectionPolicy(str, Enum):
    """Where the selection lands after a range replacement.

    Values match the HTML ``setRangeText`` selection modes.
    """

    SELECT = "select"
    CARET_START = "start"
    CARET_END = "end"


class TextSurface(Protocol):
    """Capabilities the history core consumes from the host surface."""

    def get_text(self) -> str:
        ...

    def get_selection(self) -> Selection:
        ...

    def replace_range(
        self, text: str, start: int, end: int, mode: SelectionPolicy
    ) -> None:
        """Replace ``[start, end)`` with ``text`` and place the selection.

        Content and selection must both be updated before returning.
        """
        ...


class SurfaceListener(Protocol):
    """Notification sink a surface drives while the user edits."""

    def on_edit(self, notification: EditNotification) -> None:
        ...

    def before_delete(self, cause: EditCause) -> None:
        ...

    def on_selection_change(self) -> None:
        ...

    def on_composition_start(self) -> None:
        ...

    def on_composition_update(self) -> None:
        ...


class SurfaceRangeError(RuntimeError):
    """Raised when a range does not fit the current surface text."""

    def __init__(self, message: str, *, start: int, end: int, length: int) -> None:
        super().__init__(f"{message}: [{start}, {end}) over {length} characters")
        self.start = start
        self.end = end
        self.length = length


__all__ = [
    "Selection",
    "SelectionPolicy",
    "SurfaceListener",
    "SurfaceRangeError",
    "TextSurface",
]
