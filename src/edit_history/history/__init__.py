"""Edit records, the undo/redo engine, and history observers."""

from edit_history.surface import SelectionPolicy

from .engine import HistoryEngine, HistoryError
from .events import HISTORY_CHANGED, HISTORY_CLEARED, HistoryBus, HistorySnapshot
from .record import EditRecord

__all__ = [
    "EditRecord",
    "HISTORY_CHANGED",
    "HISTORY_CLEARED",
    "HistoryBus",
    "HistoryEngine",
    "HistoryError",
    "HistorySnapshot",
    "SelectionPolicy",
]
