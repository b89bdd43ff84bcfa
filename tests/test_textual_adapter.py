from __future__ import annotations

from typing import List, Sequence, Tuple

import pytest

from edit_history.adapters.textual import (
    HistoryKeymap,
    HistoryPanelHooks,
    TextualHistoryAdapter,
    normalize_key,
)
from edit_history.adapters.textual.locations import (
    location_to_offset,
    offset_to_location,
)
from edit_history.session import EditorSession
from edit_history.surface import TextBuffer


class Panel:
    def __init__(self) -> None:
        self.history: List[Tuple[Sequence[str], Sequence[str]]] = []
        self.statuses: List[str] = []
        self.logs: List[str] = []

    def hooks(self) -> HistoryPanelHooks:
        return HistoryPanelHooks(
            update_history=lambda undo, redo: self.history.append((undo, redo)),
            update_status=self.statuses.append,
            log=self.logs.append,
        )


def make_adapter(text: str = "") -> Tuple[TextBuffer, Panel, TextualHistoryAdapter]:
    buffer = TextBuffer(text)
    panel = Panel()
    adapter = TextualHistoryAdapter(EditorSession(buffer), panel.hooks())
    return buffer, panel, adapter


def test_normalize_key_sorts_modifiers() -> None:
    assert normalize_key("Shift+Ctrl+Z") == "ctrl+shift+z"
    assert normalize_key("z") == "z"
    with pytest.raises(ValueError):
        normalize_key("+")


def test_default_keymap_bindings() -> None:
    keymap = HistoryKeymap()

    assert keymap.resolve("ctrl+z") == "undo"
    assert keymap.resolve("ctrl+y") == "redo"
    assert keymap.resolve("shift+ctrl+z") == "redo"
    assert keymap.resolve("z") is None


def test_adapter_renders_initial_history() -> None:
    _, panel, _ = make_adapter()

    assert panel.history == [((), ())]
    assert panel.statuses[-1] == "undo 0 | redo 0"


def test_shortcuts_drive_undo_and_redo() -> None:
    buffer, panel, adapter = make_adapter("abc")
    buffer.type("d")
    assert panel.history[-1] == (("(3-4) value: d, before: ",), ())

    assert adapter.handle_shortcut("z", modifiers=("ctrl",)) is True
    assert buffer.text == "abc"
    undo_lines, redo_lines = panel.history[-1]
    assert undo_lines == ()
    assert redo_lines == ("(3-3) value: , before: d",)

    assert adapter.handle_shortcut("ctrl+shift+z") is True
    assert buffer.text == "abcd"
    assert panel.statuses[-1] == "undo 1 | redo 0"


def test_unbound_keys_are_not_consumed() -> None:
    buffer, _, adapter = make_adapter("abc")

    assert adapter.handle_shortcut("ctrl+a") is False
    assert buffer.text == "abc"


def test_empty_history_reports_status() -> None:
    _, panel, adapter = make_adapter()

    assert adapter.run("redo") == 0
    assert panel.statuses[-1] == "nothing to redo"


def test_unknown_command_rejected() -> None:
    _, _, adapter = make_adapter()

    with pytest.raises(ValueError):
        adapter.run("rewind")


def test_adapter_emits_log_lines() -> None:
    buffer, panel, adapter = make_adapter()
    buffer.type("a")

    adapter.handle_shortcut("ctrl+z")

    assert any(line.startswith("capture <-") for line in panel.logs)
    assert any(line.startswith("undo ->") for line in panel.logs)
    assert any("redo_depth=1" in line for line in panel.logs)


def test_custom_keymap() -> None:
    buffer = TextBuffer("")
    panel = Panel()
    adapter = TextualHistoryAdapter(
        EditorSession(buffer),
        panel.hooks(),
        keymap=HistoryKeymap(undo=("alt+backspace",), redo=("alt+shift+backspace",)),
    )
    buffer.type("x")

    assert adapter.handle_shortcut("ctrl+z") is False
    assert adapter.handle_shortcut("alt+backspace") is True
    assert buffer.text == ""


def test_offset_location_conversions() -> None:
    text = "ab\ncde\n"

    assert offset_to_location(text, 0) == (0, 0)
    assert offset_to_location(text, 2) == (0, 2)
    assert offset_to_location(text, 3) == (1, 0)
    assert offset_to_location(text, 7) == (2, 0)
    assert location_to_offset(text, (1, 2)) == 5
    assert location_to_offset(text, (2, 0)) == 7
