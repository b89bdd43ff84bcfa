"""Edit notification vocabulary shared by surfaces and the normalizer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class EditCause(str, Enum):
    """Why the surface text changed.

    Every notification is delivered after the surface applied the change.
    Backward and forward deletes are additionally announced through the
    ``before_delete`` hook while the doomed characters are still present.
    """

    TYPED_INSERT = "typed-insert"
    LINE_BREAK = "line-break"
    PASTE = "paste"
    DROP = "drop"
    COMPOSITION_COMMIT = "composition-commit"
    BACKWARD_DELETE = "backward-delete"
    FORWARD_DELETE = "forward-delete"
    DRAG_DELETE = "drag-delete"
    CUT = "cut"
    HISTORY_REPLAY = "history-replay"


DELETE_CAUSES = frozenset({EditCause.BACKWARD_DELETE, EditCause.FORWARD_DELETE})


@dataclass(frozen=True, slots=True)
class EditNotification:
    """One post-mutation change report.

    ``data`` holds the inserted text for typed input, paste, drop and
    composition commits; it is ``None`` for deletions and line breaks.
    """

    cause: EditCause
    data: Optional[str] = None


__all__ = ["DELETE_CAUSES", "EditCause", "EditNotification"]
