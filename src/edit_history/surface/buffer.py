"""In-memory text surface that reports edits the way an HTML textarea does."""

from __future__ import annotations

from typing import List, Optional

from edit_history.runtime import telemetry

from .notifications import EditCause, EditNotification
from .protocol import Selection, SelectionPolicy, SurfaceListener
from .validation import ensure_range


class TextBuffer:
    """Editable text with a selection, driven by simulated user operations.

    Each user operation mutates the text first and then notifies attached
    listeners in host order: ``before_delete`` (deletes only), ``on_edit``,
    then ``on_selection_change``. :meth:`replace_range` is the programmatic
    path used for history replay; it reports a selection change and, when
    ``notify_replays`` is set, a ``history-replay`` edit.
    """

    def __init__(
        self,
        text: str = "",
        *,
        name: str = "default",
        selection: Optional[Selection] = None,
        notify_replays: bool = False,
    ) -> None:
        self.name = name
        self.version = 0
        self.notify_replays = notify_replays
        self._text = text
        start, end = selection if selection is not None else (len(text), len(text))
        self._selection: Selection = ensure_range(text, start, end)
        self._composing: Optional[Selection] = None
        self._listeners: List[SurfaceListener] = []

    # --- TextSurface ----------------------------------------------------------
    def get_text(self) -> str:
        return self._text

    def get_selection(self) -> Selection:
        return self._selection

    def replace_range(
        self, text: str, start: int, end: int, mode: SelectionPolicy
    ) -> None:
        ensure_range(self._text, start, end)
        with telemetry.span(
            "surface::replace_range",
            component="surface",
            metadata={"buffer": self.name, "start": start, "end": end},
        ):
            self._splice(text, start, end)
            self._selection = place_selection(start, len(text), mode)
            self._selection_changed()
            if self.notify_replays:
                self._edited(EditCause.HISTORY_REPLAY)

    # --- listeners ------------------------------------------------------------
    def attach(self, listener: SurfaceListener) -> None:
        self._listeners.append(listener)

    def detach(self, listener: SurfaceListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    @property
    def text(self) -> str:
        return self._text

    @property
    def selection(self) -> Selection:
        return self._selection

    @property
    def selected_text(self) -> str:
        start, end = self._selection
        return self._text[start:end]

    @property
    def composing(self) -> bool:
        return self._composing is not None

    # --- simulated user operations --------------------------------------------
    def select(self, start: int, end: Optional[int] = None) -> None:
        """Move the caret (``end`` omitted) or select ``[start, end)``."""

        end = start if end is None else end
        if start > end:
            start, end = end, start
        self._selection = ensure_range(self._text, start, end)
        self._selection_changed()

    def type(self, data: str) -> None:
        if data:
            self._insert_over_selection(data, EditCause.TYPED_INSERT, data)

    def line_break(self) -> None:
        self._insert_over_selection("\n", EditCause.LINE_BREAK, None)

    def paste(self, data: str) -> None:
        if data:
            self._insert_over_selection(data, EditCause.PASTE, data)

    def cut(self) -> str:
        start, end = self._selection
        if start == end:
            return ""
        removed = self._text[start:end]
        self._splice("", start, end)
        self._selection = (start, start)
        self._edited(EditCause.CUT)
        self._selection_changed()
        return removed

    def delete_backward(self) -> None:
        start, end = self._selection
        if start == end:
            if start == 0:
                return
            start -= 1
        self._delete(start, end, EditCause.BACKWARD_DELETE)

    def delete_forward(self) -> None:
        start, end = self._selection
        if start == end:
            if end == len(self._text):
                return
            end += 1
        self._delete(start, end, EditCause.FORWARD_DELETE)

    def drag_move(self, target: int) -> None:
        """Drag the current selection and drop it at ``target``.

        ``target`` is an offset in the text as it was before the drag. Drops
        inside the dragged range are ignored, as hosts do.
        """

        ensure_range(self._text, target, target)
        start, end = self._selection
        if start == end or start < target < end:
            return
        dragged = self._text[start:end]
        self._splice("", start, end)
        self._selection = (start, start)
        self._edited(EditCause.DRAG_DELETE)
        self._selection_changed()

        drop_at = target - len(dragged) if target >= end else target
        self._drop(dragged, drop_at)

    def drop(self, data: str, target: int) -> None:
        """Drop text dragged in from outside the surface."""

        ensure_range(self._text, target, target)
        if data:
            self._drop(data, target)

    def start_composition(self) -> None:
        self._composing = self._selection
        for listener in list(self._listeners):
            listener.on_composition_start()

    def update_composition(self, text: str) -> None:
        if self._composing is None:
            raise RuntimeError("No composition in progress")
        start, end = self._composing
        self._splice(text, start, end)
        self._composing = (start, start + len(text))
        self._selection = (start + len(text), start + len(text))
        for listener in list(self._listeners):
            listener.on_composition_update()
        self._selection_changed()

    def end_composition(self) -> None:
        if self._composing is None:
            raise RuntimeError("No composition in progress")
        start, end = self._composing
        self._composing = None
        self._edited(EditCause.COMPOSITION_COMMIT, self._text[start:end])

    def compose(self, *updates: str) -> None:
        """Run a whole composition session; the last update is committed."""

        self.start_composition()
        for update in updates:
            self.update_composition(update)
        self.end_composition()

    def native_history(self, text: str) -> None:
        """Apply the host's own undo/redo result, bypassing the history core."""

        self._splice(text, 0, len(self._text))
        self._selection = (len(text), len(text))
        self._edited(EditCause.HISTORY_REPLAY)
        self._selection_changed()

    # --- internals ------------------------------------------------------------
    def _insert_over_selection(
        self, text: str, cause: EditCause, data: Optional[str]
    ) -> None:
        start, end = self._selection
        self._splice(text, start, end)
        caret = start + len(text)
        self._selection = (caret, caret)
        self._edited(cause, data)
        self._selection_changed()

    def _delete(self, start: int, end: int, cause: EditCause) -> None:
        for listener in list(self._listeners):
            listener.before_delete(cause)
        self._splice("", start, end)
        self._selection = (start, start)
        self._edited(cause)
        self._selection_changed()

    def _drop(self, data: str, at: int) -> None:
        self._splice(data, at, at)
        self._selection = (at, at + len(data))
        self._edited(EditCause.DROP, data)
        self._selection_changed()

    def _splice(self, text: str, start: int, end: int) -> None:
        self._text = self._text[:start] + text + self._text[end:]
        self.version += 1

    def _edited(self, cause: EditCause, data: Optional[str] = None) -> None:
        notification = EditNotification(cause=cause, data=data)
        for listener in list(self._listeners):
            listener.on_edit(notification)

    def _selection_changed(self) -> None:
        for listener in list(self._listeners):
            listener.on_selection_change()


def place_selection(start: int, length: int, mode: SelectionPolicy) -> Selection:
    if mode is SelectionPolicy.SELECT:
        return (start, start + length)
    if mode is SelectionPolicy.CARET_START:
        return (start, start)
    return (start + length, start + length)


__all__ = ["TextBuffer", "place_selection"]
