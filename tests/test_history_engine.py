from __future__ import annotations

from typing import List, Tuple

import pytest

from edit_history.history import (
    HISTORY_CHANGED,
    HISTORY_CLEARED,
    EditRecord,
    HistoryEngine,
    HistoryError,
    HistorySnapshot,
    SelectionPolicy,
)
from edit_history.surface import SurfaceRangeError, TextBuffer


def make_engine(
    text: str = "", selection: Tuple[int, int] | None = None
) -> Tuple[TextBuffer, HistoryEngine]:
    buffer = TextBuffer(text, selection=selection)
    return buffer, HistoryEngine(buffer)


def make_record(
    replacement: str,
    start: int,
    prior: str = "",
    policy: SelectionPolicy = SelectionPolicy.CARET_END,
    *,
    chains: bool = False,
) -> EditRecord:
    return EditRecord(
        replacement_text=replacement,
        range_start=start,
        range_end=start + len(replacement),
        prior_text=prior,
        selection_policy=policy,
        chains_to_next=chains,
    )


def test_undo_then_redo_typed_character() -> None:
    buffer, engine = make_engine("abcd")
    original = make_record("d", 3)
    engine.capture(original)

    assert engine.undo() == 1
    assert buffer.text == "abc"
    assert buffer.selection == (3, 3)
    (pending,) = engine.redo_stack
    assert pending.inverse_source is original
    assert pending.prior_text == "d"
    assert pending.selection_policy is SelectionPolicy.CARET_END

    assert engine.redo() == 1
    assert buffer.text == "abcd"
    assert buffer.selection == (4, 4)
    assert engine.undo_stack[0] is original
    assert engine.redo_stack == ()


def test_capture_clears_redo_stack() -> None:
    buffer, engine = make_engine("ab")
    engine.capture(make_record("b", 1))
    engine.undo()
    assert engine.can_redo()

    buffer.select(1)
    engine.capture(make_record("", 1, "z"))

    assert not engine.can_redo()
    assert len(engine.undo_stack) == 1


def test_empty_stacks_are_silent_noops() -> None:
    buffer, engine = make_engine("abc", selection=(1, 2))
    events: List[HistorySnapshot] = []
    engine.bus.subscribe(HISTORY_CHANGED, events.append)

    assert engine.undo() == 0
    assert engine.redo() == 0

    assert buffer.text == "abc"
    assert buffer.selection == (1, 2)
    assert engine.undo_stack == () and engine.redo_stack == ()
    assert events == []


def test_chained_pair_undoes_and_redoes_as_one_action() -> None:
    # " worldhello": "hello" was dragged from the front to the end.
    buffer, engine = make_engine(" worldhello", selection=(6, 11))
    source = make_record("", 0, "hello", SelectionPolicy.SELECT)
    drop = make_record("hello", 6, "", SelectionPolicy.SELECT, chains=True)
    engine.capture(source)
    engine.capture(drop)

    assert engine.undo() == 2
    assert buffer.text == "hello world"
    assert buffer.selection == (0, 5)
    assert engine.undo_stack == ()
    assert [record.chains_to_next for record in engine.redo_stack] == [False, True]

    assert engine.redo() == 2
    assert buffer.text == " worldhello"
    assert buffer.selection == (6, 11)
    assert engine.undo_stack[0] is source
    assert engine.undo_stack[1] is drop


def test_redo_restores_exact_chain_flags() -> None:
    buffer, engine = make_engine(" worldhello")
    source = make_record("", 0, "hello", SelectionPolicy.SELECT)
    drop = make_record("hello", 6, "", SelectionPolicy.SELECT, chains=True)
    engine.capture(source)
    engine.capture(drop)

    engine.undo()
    engine.redo()

    assert engine.undo() == 2
    assert buffer.text == "hello world"


def test_chain_stops_at_empty_stack() -> None:
    buffer, engine = make_engine("ab")
    engine.capture(make_record("b", 1, chains=True))

    assert engine.undo() == 1
    assert buffer.text == "a"


def test_unchained_records_undo_one_at_a_time() -> None:
    buffer, engine = make_engine("abc")
    engine.capture(make_record("b", 1))
    engine.capture(make_record("c", 2))

    assert engine.undo() == 1
    assert buffer.text == "ab"
    assert engine.undo() == 1
    assert buffer.text == "a"


def test_history_changed_fires_once_per_step() -> None:
    _, engine = make_engine(" worldhello")
    engine.capture(make_record("", 0, "hello", SelectionPolicy.SELECT))
    engine.capture(make_record("hello", 6, "", SelectionPolicy.SELECT, chains=True))
    events: List[HistorySnapshot] = []
    engine.bus.subscribe(HISTORY_CHANGED, events.append)

    engine.undo()

    assert [event.reason for event in events] == ["undo", "undo"]
    assert len(events[0].redo) == 1
    assert len(events[1].redo) == 2
    assert events[-1].undo == ()


def test_out_of_range_record_is_fatal() -> None:
    buffer, engine = make_engine("ab")
    good = make_record("b", 1)
    bad = make_record("xyz", 5)
    engine.capture(good)
    engine.capture(bad)

    with pytest.raises(SurfaceRangeError):
        engine.undo()

    assert buffer.text == "ab"
    assert engine.undo_stack == (good, bad)
    assert engine.undo_stack[-1] is bad
    assert engine.redo_stack == ()


def test_failed_redo_keeps_record_on_redo_stack() -> None:
    buffer, engine = make_engine("ab")
    engine.capture(make_record("b", 1))
    engine.undo()
    pending = engine.redo_stack[-1]
    buffer.replace_range("", 0, 1, SelectionPolicy.CARET_END)

    with pytest.raises(SurfaceRangeError):
        engine.redo()

    assert engine.redo_stack == (pending,)
    assert engine.undo_stack == ()


def test_capture_rejects_redo_side_records() -> None:
    _, engine = make_engine("ab")
    inverse = make_record("b", 1).inverted()

    with pytest.raises(HistoryError):
        engine.capture(inverse)


def test_replaying_flag_is_set_while_surface_changes() -> None:
    class RecordingSurface(TextBuffer):
        engine: HistoryEngine | None = None

        def __init__(self, text: str) -> None:
            super().__init__(text)
            self.seen: List[bool] = []

        def replace_range(self, text, start, end, mode) -> None:
            assert self.engine is not None
            self.seen.append(self.engine.replaying)
            super().replace_range(text, start, end, mode)

    surface = RecordingSurface("ab")
    engine = HistoryEngine(surface)
    surface.engine = engine
    engine.capture(make_record("b", 1))

    engine.undo()

    assert surface.seen == [True]
    assert engine.replaying is False


def test_clear_empties_both_stacks() -> None:
    _, engine = make_engine("abc")
    engine.capture(make_record("b", 1))
    engine.capture(make_record("c", 2))
    engine.undo()
    cleared: List[HistorySnapshot] = []
    engine.bus.subscribe(HISTORY_CLEARED, cleared.append)

    engine.clear()

    assert engine.undo_stack == () and engine.redo_stack == ()
    assert cleared and cleared[0].reason == "clear"
