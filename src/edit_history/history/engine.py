"""Undo/redo stacks and the replay algorithms that walk them."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, List, Optional, Tuple

from edit_history.runtime import telemetry
from edit_history.surface import TextSurface, ensure_range

from .events import HISTORY_CHANGED, HISTORY_CLEARED, HistoryBus, HistorySnapshot
from .record import EditRecord


class HistoryError(RuntimeError):
    """Raised when a stack holds a record the replay protocol cannot use."""


class HistoryEngine:
    """Owns the undo and redo stacks for one text surface.

    Applying a record, whether undoing or redoing, always means replacing its
    range with its ``prior_text``. Undo pushes the record's inverse onto the
    redo stack; redo pushes back the exact record the inverse came from, so a
    redone action keeps its original chain flags. A record leaves its stack
    only after the surface has accepted it.
    """

    def __init__(
        self,
        surface: TextSurface,
        *,
        bus: Optional[HistoryBus] = None,
        logger_name: Optional[str] = None,
    ) -> None:
        self.surface = surface
        self.bus = bus or HistoryBus()
        self._logger_name = logger_name or "edit_history.history"
        self._undo: List[EditRecord] = []
        self._redo: List[EditRecord] = []
        self._replaying = False

    @property
    def replaying(self) -> bool:
        """True while undo/redo is writing to the surface."""

        return self._replaying

    @property
    def undo_stack(self) -> Tuple[EditRecord, ...]:
        return tuple(self._undo)

    @property
    def redo_stack(self) -> Tuple[EditRecord, ...]:
        return tuple(self._redo)

    def can_undo(self) -> bool:
        return bool(self._undo)

    def can_redo(self) -> bool:
        return bool(self._redo)

    def snapshot(
        self, reason: str = "snapshot", record: Optional[EditRecord] = None
    ) -> HistorySnapshot:
        return HistorySnapshot(
            undo=tuple(self._undo),
            redo=tuple(self._redo),
            reason=reason,
            record=record,
        )

    def capture(self, record: EditRecord) -> None:
        """Push a freshly observed edit and drop everything redoable."""

        if record.inverse_source is not None:
            raise HistoryError("Captured records must not reference an inverse source")
        if self._replaying:
            raise HistoryError("Cannot capture while a replay is in progress")
        with telemetry.span(
            "history::capture",
            logger_name=self._logger_name,
            component="history",
            metadata={"start": record.range_start, "end": record.range_end},
        ):
            self._undo.append(record)
            self._redo.clear()
            self._log_step("history.capture", record)
            self._notify("capture", record)

    def undo(self) -> int:
        """Undo the most recent action; returns the number of records popped."""

        steps = 0
        with self._replay("history::undo") as handle:
            chain = False
            while self._undo:
                record = self._undo[-1]
                self._apply(record)
                self._undo.pop()
                self._redo.append(record.inverted(chains_to_next=chain))
                steps += 1
                self._log_step("history.undo_step", record)
                self._notify("undo", record)
                if not record.chains_to_next:
                    break
                chain = True
            handle.add_metadata("steps", steps)
        return steps

    def redo(self) -> int:
        """Redo the most recently undone action; returns records popped."""

        steps = 0
        with self._replay("history::redo") as handle:
            while self._redo:
                record = self._redo[-1]
                original = record.inverse_source
                if original is None:
                    raise HistoryError("Redo record has no originating undo record")
                self._apply(record)
                self._redo.pop()
                self._undo.append(original)
                steps += 1
                self._log_step("history.redo_step", record)
                self._notify("redo", record)
                if not record.chains_to_next:
                    break
            handle.add_metadata("steps", steps)
        return steps

    def clear(self) -> None:
        self._undo.clear()
        self._redo.clear()
        self.bus.emit(HISTORY_CLEARED, self.snapshot("clear"))
        self.bus.emit(HISTORY_CHANGED, self.snapshot("clear"))

    @contextmanager
    def _replay(self, name: str) -> Iterator[telemetry.SpanHandle]:
        with telemetry.span(
            name, logger_name=self._logger_name, component="history"
        ) as handle:
            self._replaying = True
            try:
                yield handle
            finally:
                self._replaying = False

    def _apply(self, record: EditRecord) -> None:
        ensure_range(self.surface.get_text(), record.range_start, record.range_end)
        self.surface.replace_range(
            record.prior_text,
            record.range_start,
            record.range_end,
            record.selection_policy,
        )

    def _notify(self, reason: str, record: EditRecord) -> None:
        self.bus.emit(HISTORY_CHANGED, self.snapshot(reason, record))

    def _log_step(self, event: str, record: EditRecord) -> None:
        telemetry.record_event(
            event,
            level="debug",
            logger_name=self._logger_name,
            data={
                "range": (record.range_start, record.range_end),
                "chains": record.chains_to_next,
                "undo_depth": len(self._undo),
                "redo_depth": len(self._redo),
            },
        )


__all__ = ["HistoryEngine", "HistoryError"]
