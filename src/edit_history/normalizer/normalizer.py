"""Turns surface edit notifications into captured edit records."""

from __future__ import annotations

from typing import Callable, Dict, Optional

from edit_history.history import (
    HISTORY_CHANGED,
    EditRecord,
    HistoryEngine,
    HistorySnapshot,
)
from edit_history.runtime import telemetry
from edit_history.surface import (
    EditCause,
    EditNotification,
    SelectionPolicy,
    TextSurface,
    ensure_range,
)

from .state import NormalizerState

Builder = Callable[[EditNotification], Optional[EditRecord]]


class Normalizer:
    """Listens to one surface and feeds its edits into a history engine.

    Implements the surface listener protocol. Notifications that arrive while
    the engine is replaying are never captured. A ``history-replay``
    notification outside an engine replay means the host ran its own
    undo/redo; the surface is put back to the last accepted value.
    """

    def __init__(
        self,
        surface: TextSurface,
        engine: HistoryEngine,
        *,
        logger_name: Optional[str] = None,
    ) -> None:
        self.surface = surface
        self.engine = engine
        self.logger = telemetry.get_logger(logger_name or "edit_history.normalizer")
        self._logger_name = logger_name or "edit_history.normalizer"
        self.state = NormalizerState(last_value=surface.get_text())
        self.state.selection.observe(surface.get_text(), surface.get_selection())
        self._builders: Dict[EditCause, Builder] = {
            EditCause.TYPED_INSERT: self._typed_insert,
            EditCause.LINE_BREAK: self._line_break,
            EditCause.PASTE: self._paste,
            EditCause.DROP: self._drop,
            EditCause.COMPOSITION_COMMIT: self._composition_commit,
            EditCause.BACKWARD_DELETE: self._backward_delete,
            EditCause.FORWARD_DELETE: self._forward_delete,
            EditCause.DRAG_DELETE: self._drag_delete,
            EditCause.CUT: self._cut,
        }
        engine.bus.subscribe(HISTORY_CHANGED, self._after_history_change)

    def close(self) -> None:
        """Stop tracking engine replays."""

        self.engine.bus.unsubscribe(HISTORY_CHANGED, self._after_history_change)

    # --- surface listener -----------------------------------------------------
    def on_selection_change(self) -> None:
        self.state.selection.observe(
            self.surface.get_text(), self.surface.get_selection()
        )

    def before_delete(self, cause: EditCause) -> None:
        if cause not in (EditCause.BACKWARD_DELETE, EditCause.FORWARD_DELETE):
            return
        self.state.selection.widen(
            self.surface.get_text(),
            self.surface.get_selection(),
            backward=cause is EditCause.BACKWARD_DELETE,
        )

    def on_composition_start(self) -> None:
        self.state.composition.begin(
            self.state.selection.text, self.surface.get_selection()
        )

    def on_composition_update(self) -> None:
        if self.state.composition.active:
            self.state.composition.track(self.surface.get_selection()[1])

    def on_edit(self, notification: EditNotification) -> None:
        if self.engine.replaying:
            telemetry.record_event(
                "normalizer.replay_suppressed",
                level="debug",
                logger_name=self._logger_name,
                data={"cause": notification.cause.value},
            )
            return
        if notification.cause is EditCause.HISTORY_REPLAY:
            self._revert_native_history()
            return

        record = self._builders[notification.cause](notification)
        self.state.drag_pending = notification.cause is EditCause.DRAG_DELETE
        if record is None:
            return
        self.engine.capture(record)
        self.state.last_value = self.surface.get_text()

    # --- record builders ------------------------------------------------------
    def _typed_insert(self, notification: EditNotification) -> Optional[EditRecord]:
        data = notification.data
        if not data:
            return None
        caret = self.surface.get_selection()[1]
        return self._record(
            data, caret - len(data), self.state.selection.text, SelectionPolicy.CARET_END
        )

    def _line_break(self, notification: EditNotification) -> Optional[EditRecord]:
        del notification
        caret = self.surface.get_selection()[1]
        return self._record(
            "\n", caret - 1, self.state.selection.text, SelectionPolicy.CARET_END
        )

    def _paste(self, notification: EditNotification) -> Optional[EditRecord]:
        data = notification.data
        if not data:
            return None
        # The caret now sits after the pasted text; its start is where the
        # caret (or the replaced selection) began.
        caret = self.surface.get_selection()[1]
        return self._record(
            data, caret - len(data), self.state.selection.text, SelectionPolicy.CARET_END
        )

    def _drop(self, notification: EditNotification) -> Optional[EditRecord]:
        del notification
        start, end = self.surface.get_selection()
        dropped = self.surface.get_text()[start:end]
        # Only a drop that completes a drag-move joins the drag-delete before
        # it. Text dropped in from outside has no source record to chain to,
        # and chaining it would undo the unrelated edit below it as well.
        return self._record(
            dropped,
            start,
            "",
            SelectionPolicy.SELECT,
            chains_to_next=self.state.drag_pending,
        )

    def _composition_commit(
        self, notification: EditNotification
    ) -> Optional[EditRecord]:
        del notification
        composition = self.state.composition
        if not composition.active:
            self.logger.debug("composition commit without a composition start")
            return None
        caret = self.surface.get_selection()[1]
        try:
            if caret == composition.range_start:
                telemetry.record_event(
                    "normalizer.composition_discarded",
                    level="debug",
                    logger_name=self._logger_name,
                    data={"at": caret},
                )
                return None
            composition.track(caret)
            committed = self.surface.get_text()[composition.range_start : caret]
            return self._record(
                committed,
                composition.range_start,
                composition.prior_text,
                SelectionPolicy.CARET_END,
            )
        finally:
            composition.reset()

    def _backward_delete(self, notification: EditNotification) -> Optional[EditRecord]:
        del notification
        caret = self.surface.get_selection()[1]
        return self._record(
            "", caret, self.state.selection.text, SelectionPolicy.CARET_END
        )

    def _forward_delete(self, notification: EditNotification) -> Optional[EditRecord]:
        del notification
        caret = self.surface.get_selection()[1]
        return self._record(
            "", caret, self.state.selection.text, SelectionPolicy.CARET_START
        )

    def _drag_delete(self, notification: EditNotification) -> Optional[EditRecord]:
        del notification
        caret = self.surface.get_selection()[1]
        return self._record("", caret, self.state.selection.text, SelectionPolicy.SELECT)

    def _cut(self, notification: EditNotification) -> Optional[EditRecord]:
        del notification
        start = self.surface.get_selection()[0]
        return self._record("", start, self.state.selection.text, SelectionPolicy.SELECT)

    def _record(
        self,
        replacement: str,
        start: int,
        prior: str,
        policy: SelectionPolicy,
        *,
        chains_to_next: bool = False,
    ) -> Optional[EditRecord]:
        if not replacement and not prior:
            return None
        end = start + len(replacement)
        ensure_range(self.surface.get_text(), start, end)
        return EditRecord(
            replacement_text=replacement,
            range_start=start,
            range_end=end,
            prior_text=prior,
            selection_policy=policy,
            chains_to_next=chains_to_next,
        )

    # --- replay bookkeeping ---------------------------------------------------
    def _revert_native_history(self) -> None:
        current = self.surface.get_text()
        if current == self.state.last_value:
            return
        telemetry.record_event(
            "normalizer.native_history_reverted",
            logger_name=self._logger_name,
            data={"restored_length": len(self.state.last_value)},
        )
        self.surface.replace_range(
            self.state.last_value, 0, len(current), SelectionPolicy.CARET_END
        )

    def _after_history_change(self, snapshot: HistorySnapshot) -> None:
        del snapshot
        self.state.last_value = self.surface.get_text()


__all__ = ["Normalizer"]
