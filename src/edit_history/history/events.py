"""Observer plumbing for history changes."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple

from .record import EditRecord

HISTORY_CHANGED = "history.changed"
HISTORY_CLEARED = "history.cleared"


@dataclass(frozen=True, slots=True)
class HistorySnapshot:
    """Both stacks, bottom to top, after a history change.

    ``reason`` is ``"capture"``, ``"undo"``, ``"redo"`` or ``"clear"``;
    ``record`` is the record that was pushed or popped, if any.
    """

    undo: Tuple[EditRecord, ...]
    redo: Tuple[EditRecord, ...]
    reason: str
    record: Optional[EditRecord] = None

    def undo_lines(self) -> Tuple[str, ...]:
        return tuple(record.describe() for record in self.undo)

    def redo_lines(self) -> Tuple[str, ...]:
        return tuple(record.describe() for record in self.redo)


class HistoryBus:
    """Minimal event bus delivering history snapshots to subscribers."""

    def __init__(self) -> None:
        self._subscribers: Dict[str, list[Callable[[HistorySnapshot], None]]] = {}

    def subscribe(
        self, event: str, callback: Callable[[HistorySnapshot], None]
    ) -> None:
        self._subscribers.setdefault(event, []).append(callback)

    def unsubscribe(
        self, event: str, callback: Callable[[HistorySnapshot], None]
    ) -> None:
        callbacks = self._subscribers.get(event, [])
        if callback in callbacks:
            callbacks.remove(callback)

    def emit(self, event: str, snapshot: HistorySnapshot) -> None:
        for callback in list(self._subscribers.get(event, [])):
            callback(snapshot)


__all__ = ["HISTORY_CHANGED", "HISTORY_CLEARED", "HistoryBus", "HistorySnapshot"]
