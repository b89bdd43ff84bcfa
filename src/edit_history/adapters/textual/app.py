"""Executable Textual app demonstrating application-controlled history."""

from __future__ import annotations

import argparse
import os
from dataclasses import dataclass
from typing import Callable, Optional, Sequence

try:  # pragma: no cover - imported only when demo is run
    from textual import events
    from textual.app import App, ComposeResult
    from textual.binding import Binding
    from textual.containers import Horizontal, Vertical
    from textual.widgets import Footer, Header, Static, TextArea
    from textual.widgets.text_area import Selection as AreaSelection
except ModuleNotFoundError as exc:  # pragma: no cover - friendly error for missing dep
    raise RuntimeError(
        "Install the 'textual' package to use edit_history.adapters.textual.app"
    ) from exc

from edit_history.session import EditorSession
from edit_history.surface import EditCause, EditNotification

from .controller import HistoryKeymap, HistoryPanelHooks, TextualHistoryAdapter
from .locations import location_to_offset, offset_to_location
from .surface import TextAreaSurface

KEYMAP = HistoryKeymap()


def _history_bindings(keymap: HistoryKeymap) -> list[Binding]:
    bindings = [Binding(key, "undo", "Undo", show=False) for key in keymap.undo]
    bindings += [Binding(key, "redo", "Redo", show=False) for key in keymap.redo]
    return bindings


class HistoryTextArea(TextArea):
    """TextArea whose edits and undo/redo go through an :class:`EditorSession`.

    The widget performs every mutation itself and then reports it, so the
    normalizer sees the same post-change notifications a textarea host sends:
    the edit first, then the selection it left behind. Selection changes
    caused by the splice itself are held back until the edit is reported.
    """

    BINDINGS = _history_bindings(KEYMAP)

    def __init__(self, text: str = "", **kwargs) -> None:
        super().__init__(text, **kwargs)
        self._suppress_selection = False
        self.history_surface = TextAreaSurface(self)
        self.session = EditorSession(self.history_surface, name="demo")
        self.run_command: Optional[Callable[[str], int]] = None

    async def _on_key(self, event: events.Key) -> None:
        if self.read_only:
            return
        if event.key == "enter":
            insert, cause, data = "\n", EditCause.LINE_BREAK, None
        elif event.is_printable and event.character:
            insert = event.character
            cause, data = EditCause.TYPED_INSERT, event.character
        else:
            return
        event.stop()
        event.prevent_default()
        self._edit(insert, cause, data)

    async def _on_paste(self, event: events.Paste) -> None:
        if self.read_only:
            return
        event.stop()
        event.prevent_default()
        if event.text:
            self._edit(event.text, EditCause.PASTE, event.text)

    def watch_selection(self) -> None:
        session = getattr(self, "session", None)
        if session is not None and not getattr(self, "_suppress_selection", False):
            session.normalizer.on_selection_change()

    def action_undo(self) -> None:
        self._command("undo")

    def action_redo(self) -> None:
        self._command("redo")

    def action_delete_left(self) -> None:
        start, end = self.history_surface.get_selection()
        if start == end:
            start = max(0, start - 1)
        self._delete(start, end, EditCause.BACKWARD_DELETE)

    def action_delete_right(self) -> None:
        start, end = self.history_surface.get_selection()
        if start == end:
            end = min(len(self.text), end + 1)
        self._delete(start, end, EditCause.FORWARD_DELETE)

    def action_delete_word_left(self) -> None:
        start, end = self.history_surface.get_selection()
        if start == end:
            start = location_to_offset(self.text, self.get_cursor_word_left_location())
        self._delete(start, end, EditCause.BACKWARD_DELETE)

    def action_delete_word_right(self) -> None:
        start, end = self.history_surface.get_selection()
        if start == end:
            end = location_to_offset(self.text, self.get_cursor_word_right_location())
        self._delete(start, end, EditCause.FORWARD_DELETE)

    def action_delete_to_start_of_line(self) -> None:
        caret = self.history_surface.get_selection()[1]
        self._delete(self._line_start(caret), caret, EditCause.BACKWARD_DELETE)

    def action_delete_to_end_of_line(self) -> None:
        caret = self.history_surface.get_selection()[1]
        self._delete(caret, self._line_end(caret), EditCause.FORWARD_DELETE)

    def action_delete_to_end_of_line_or_delete_line(self) -> None:
        caret = self.history_surface.get_selection()[1]
        line_start, line_end = self._line_start(caret), self._line_end(caret)
        if line_start == line_end:
            self.action_delete_line()
        elif caret == line_end:
            self.action_delete_right()
        else:
            self.action_delete_to_end_of_line()

    def action_delete_line(self) -> None:
        text = self.text
        start, end = self.history_surface.get_selection()
        start, end = self._line_start(start), self._line_end(end)
        if end < len(text):
            end += 1
        elif start > 0:
            start -= 1
        self._delete(start, end, EditCause.FORWARD_DELETE)

    def action_cut(self) -> None:
        start, end = self.history_surface.get_selection()
        if start == end:
            return
        self.app.copy_to_clipboard(self.selected_text)
        self._splice("", start, end)
        self._report(EditNotification(EditCause.CUT))

    def action_paste(self) -> None:
        data = self.app.clipboard
        if data:
            self._edit(data, EditCause.PASTE, data)

    def _command(self, command: str) -> None:
        if self.run_command is not None:
            self.run_command(command)
        elif command == "undo":
            self.session.undo()
        else:
            self.session.redo()

    def _edit(self, insert: str, cause: EditCause, data: Optional[str]) -> None:
        start, end = self.history_surface.get_selection()
        self._splice(insert, start, end)
        self._report(EditNotification(cause, data))

    def _delete(self, start: int, end: int, cause: EditCause) -> None:
        if start == end:
            return
        if (start, end) != self.history_surface.get_selection():
            # The shadow only knows the selected text, so select the span first.
            text = self.text
            self.selection = AreaSelection(
                offset_to_location(text, start), offset_to_location(text, end)
            )
        self.session.normalizer.before_delete(cause)
        self._splice("", start, end)
        self._report(EditNotification(cause))

    def _report(self, notification: EditNotification) -> None:
        normalizer = self.session.normalizer
        normalizer.on_edit(notification)
        normalizer.on_selection_change()

    def _splice(self, insert: str, start: int, end: int) -> None:
        text = self.text
        self._suppress_selection = True
        try:
            self.replace(
                insert,
                offset_to_location(text, start),
                offset_to_location(text, end),
                maintain_selection_offset=False,
            )
        finally:
            self._suppress_selection = False

    def _line_start(self, offset: int) -> int:
        return self.text.rfind("\n", 0, offset) + 1

    def _line_end(self, offset: int) -> int:
        end = self.text.find("\n", offset)
        return len(self.text) if end == -1 else end


@dataclass
class UIState:
    undo_lines: Sequence[str] = ()
    redo_lines: Sequence[str] = ()
    status_text: str = ""


class HistoryDemoApp(App[None]):
    """Editor pane plus live undo/redo stack panes."""

    CSS = """
	Screen {
		layout: vertical;
	}

	#editor {
		height: 1fr;
	}

	#history {
		height: 12;
	}

	.history-pane {
		width: 1fr;
		border: round $accent;
		padding: 0 1;
		overflow: auto;
	}

	#status-line {
		height: 1;
		background: $surface-darken-1;
		padding: 0 1;
	}
	"""

    BINDINGS = [
        ("ctrl+c", "quit", "Quit"),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, *, text: str = "", show_history: bool = True) -> None:
        super().__init__()
        self._state = UIState()
        self._initial_text = text
        self._show_history = show_history
        self.editor: HistoryTextArea | None = None
        self.adapter: TextualHistoryAdapter | None = None
        self._undo_widget: Static | None = None
        self._redo_widget: Static | None = None
        self._status_widget: Static | None = None

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Vertical():
            self.editor = HistoryTextArea(self._initial_text, id="editor")
            yield self.editor
            if self._show_history:
                with Horizontal(id="history"):
                    self._undo_widget = Static("", classes="history-pane")
                    self._undo_widget.border_title = "undo"
                    self._redo_widget = Static("", classes="history-pane")
                    self._redo_widget.border_title = "redo"
                    yield self._undo_widget
                    yield self._redo_widget
        self._status_widget = Static("", id="status-line")
        yield self._status_widget
        yield Footer()

    def on_mount(self) -> None:
        assert self.editor is not None
        hooks = HistoryPanelHooks(
            update_history=self._update_history,
            update_status=self._update_status,
            log=self.log,
        )
        self.adapter = TextualHistoryAdapter(
            self.editor.session, hooks, keymap=KEYMAP
        )
        self.editor.run_command = self.adapter.run
        self.editor.focus()

    def _update_history(
        self, undo_lines: Sequence[str], redo_lines: Sequence[str]
    ) -> None:
        self._state.undo_lines = undo_lines
        self._state.redo_lines = redo_lines
        if self._undo_widget:
            self._undo_widget.update("\n".join(undo_lines))
        if self._redo_widget:
            self._redo_widget.update("\n".join(redo_lines))

    def _update_status(self, status: str) -> None:
        self._state.status_text = status
        if self._status_widget:
            self._status_widget.update(status)


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Run the edit history Textual demo."
    )
    parser.add_argument(
        "--text",
        default=os.environ.get("EDIT_HISTORY_TEXT", ""),
        help="Initial document text (default: $EDIT_HISTORY_TEXT or empty)",
    )
    parser.add_argument(
        "--no-history-panel",
        action="store_true",
        help="Hide the undo/redo stack panes",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    app = HistoryDemoApp(text=args.text, show_history=not args.no_history_panel)
    app.run()


if __name__ == "__main__":  # pragma: no cover - manual demo
    main()
