"""Text surface boundary: protocols, notifications, and an in-memory surface."""

from .buffer import TextBuffer, place_selection
from .notifications import DELETE_CAUSES, EditCause, EditNotification
from .protocol import (
    Selection,
    SelectionPolicy,
    SurfaceListener,
    SurfaceRangeError,
    TextSurface,
)
from .validation import ensure_range

__all__ = [
    "DELETE_CAUSES",
    "EditCause",
    "EditNotification",
    "Selection",
    "SelectionPolicy",
    "SurfaceListener",
    "SurfaceRangeError",
    "TextBuffer",
    "TextSurface",
    "ensure_range",
    "place_selection",
]
