from __future__ import annotations

import asyncio
from typing import Awaitable, Callable

import pytest

pytest.importorskip("textual")

from textual import events  # noqa: E402
from textual.pilot import Pilot  # noqa: E402
from textual.widgets.text_area import Selection  # noqa: E402

from edit_history.adapters.textual.app import HistoryDemoApp  # noqa: E402

Scenario = Callable[[HistoryDemoApp, Pilot], Awaitable[None]]


def run_demo(text: str, scenario: Scenario) -> None:
    async def runner() -> None:
        app = HistoryDemoApp(text=text)
        async with app.run_test() as pilot:
            await pilot.pause()
            await scenario(app, pilot)

    asyncio.run(runner())


async def place(app: HistoryDemoApp, pilot: Pilot, start, end=None) -> None:
    assert app.editor is not None
    app.editor.selection = Selection(start, start if end is None else end)
    await pilot.pause()


def test_backspace_is_recorded_and_undone() -> None:
    async def scenario(app: HistoryDemoApp, pilot: Pilot) -> None:
        editor = app.editor
        assert editor is not None
        await place(app, pilot, (0, 3))

        await pilot.press("backspace")
        assert editor.text == "ab"
        assert editor.session.engine.undo_stack[-1].prior_text == "c"

        await pilot.press("ctrl+z")
        assert editor.text == "abc"

    run_demo("abc", scenario)


def test_typing_over_selection_restores_replaced_text() -> None:
    async def scenario(app: HistoryDemoApp, pilot: Pilot) -> None:
        editor = app.editor
        assert editor is not None
        await place(app, pilot, (0, 1), (0, 3))

        await pilot.press("x")
        assert editor.text == "ax"

        await pilot.press("ctrl+z")
        assert editor.text == "abc"
        await pilot.press("ctrl+y")
        assert editor.text == "ax"

    run_demo("abc", scenario)


def test_forward_delete_and_cut_are_recorded() -> None:
    async def scenario(app: HistoryDemoApp, pilot: Pilot) -> None:
        editor = app.editor
        assert editor is not None
        await place(app, pilot, (0, 0))
        editor.action_delete_right()
        await place(app, pilot, (0, 0), (0, 2))
        editor.action_cut()
        assert editor.text == "d"

        assert editor.session.undo() == 1
        assert editor.text == "bcd"
        assert editor.session.undo() == 1
        assert editor.text == "abcd"

    run_demo("abcd", scenario)


def test_word_deletes_are_recorded() -> None:
    async def scenario(app: HistoryDemoApp, pilot: Pilot) -> None:
        editor = app.editor
        assert editor is not None
        await place(app, pilot, (0, 7))

        editor.action_delete_word_left()
        assert editor.text == "one "
        await place(app, pilot, (0, 0))
        editor.action_delete_word_right()
        assert len(editor.session.engine.undo_stack) == 2

        editor.session.undo()
        editor.session.undo()
        assert editor.text == "one two"

    run_demo("one two", scenario)


def test_line_deletes_are_recorded() -> None:
    async def scenario(app: HistoryDemoApp, pilot: Pilot) -> None:
        editor = app.editor
        assert editor is not None
        await place(app, pilot, (1, 0))
        editor.action_delete_line()
        assert editor.text == "a\nccc"

        await place(app, pilot, (1, 1))
        editor.action_delete_to_end_of_line()
        assert editor.text == "a\nc"
        editor.action_delete_to_start_of_line()
        assert editor.text == "a\n"

        assert len(editor.session.engine.undo_stack) == 3
        for _ in range(3):
            editor.session.undo()
        assert editor.text == "a\nbb\nccc"

    run_demo("a\nbb\nccc", scenario)


def test_bracketed_paste_is_recorded() -> None:
    async def scenario(app: HistoryDemoApp, pilot: Pilot) -> None:
        editor = app.editor
        assert editor is not None
        await place(app, pilot, (0, 1))

        editor.post_message(events.Paste("XY"))
        await pilot.pause()
        assert editor.text == "aXYb"
        assert editor.session.engine.undo_stack[-1].replacement_text == "XY"

        editor.session.undo()
        assert editor.text == "ab"

    run_demo("ab", scenario)
