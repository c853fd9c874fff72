from __future__ import annotations

import pytest

from hecto_engine.buffer import Buffer, Delete, Insert, Position, Range
from hecto_engine.buffer.undo import BATCH, EDIT, UndoHistory


def make_buffer(*lines: str) -> Buffer:
    return Buffer.from_lines(lines)


def type_chars(buffer: Buffer, text: str) -> None:
    for char in text:
        pos = buffer.state.cursor
        buffer.apply(
            Insert(pos, char),
            label="insert_char",
            cursor_after=Position(pos.row, pos.col + 1),
        )


def test_typing_coalesces_into_one_group() -> None:
    buffer = make_buffer("")

    type_chars(buffer, "abc")

    assert buffer.document.lines() == ["abc"]
    assert buffer.undo.depth == 1

    buffer.undo_last()
    assert buffer.document.lines() == [""]
    assert buffer.state.cursor == Position(0, 0)
    assert not buffer.undo.can_undo()


def test_redo_restores_text_and_cursor() -> None:
    buffer = make_buffer("")
    type_chars(buffer, "abc")
    buffer.undo_last()

    buffer.redo_last()

    assert buffer.document.lines() == ["abc"]
    assert buffer.state.cursor == Position(0, 3)
    assert not buffer.undo.can_redo()


def test_close_group_starts_a_new_group() -> None:
    buffer = make_buffer("")
    type_chars(buffer, "a")
    buffer.undo.close_group()
    type_chars(buffer, "b")

    assert buffer.undo.depth == 2
    buffer.undo_last()
    assert buffer.document.lines() == ["a"]


def test_backspaces_coalesce_while_chained() -> None:
    buffer = make_buffer("abc")
    buffer.state.set_cursor(Position(0, 3))

    buffer.apply(Delete(Range(Position(0, 2), Position(0, 3))), label="bs", cursor_after=Position(0, 2))
    buffer.apply(Delete(Range(Position(0, 1), Position(0, 2))), label="bs", cursor_after=Position(0, 1))

    assert buffer.document.lines() == ["a"]
    assert buffer.undo.depth == 1
    buffer.undo_last()
    assert buffer.document.lines() == ["abc"]
    assert buffer.state.cursor == Position(0, 3)


def test_typing_after_a_gap_does_not_coalesce() -> None:
    buffer = make_buffer("xyz")
    buffer.apply(Insert(Position(0, 0), "a"), label="insert_char")
    buffer.apply(Insert(Position(0, 3), "b"), label="insert_char")

    assert buffer.undo.depth == 2


def test_edit_ops_never_join() -> None:
    buffer = make_buffer("")
    buffer.apply(Insert(Position(0, 0), "xy"), label="paste")
    buffer.apply(Insert(Position(0, 2), "zw"), label="paste")

    assert buffer.undo.depth == 2


def test_new_edit_clears_redo() -> None:
    buffer = make_buffer("")
    type_chars(buffer, "a")
    buffer.undo_last()
    assert buffer.undo.can_redo()

    type_chars(buffer, "b")

    assert not buffer.undo.can_redo()
    assert buffer.redo_last() is None


def test_history_limit_drops_oldest_groups() -> None:
    history = UndoHistory(limit=2)
    for index in range(3):
        op = Insert(Position(0, index), "xy")
        history.record(op, Delete(Range(op.pos, op.end())), kind=EDIT)

    assert history.depth == 2


def test_batch_ops_share_group_until_closed() -> None:
    history = UndoHistory()
    op = Insert(Position(0, 0), "a")
    inverse = Delete(Range(Position(0, 0), Position(0, 1)))

    history.record(op, inverse, kind=BATCH)
    history.record(op, inverse, kind=BATCH)
    history.close_group()
    history.record(op, inverse, kind=BATCH)

    assert history.depth == 2


def test_undo_on_empty_history_returns_none() -> None:
    buffer = make_buffer("abc")

    assert buffer.undo_last() is None
    assert buffer.redo_last() is None


def test_undo_redo_round_trip_restores_every_state() -> None:
    buffer = make_buffer("alpha", "beta")
    snapshots = [buffer.document.lines()]
    edits = [
        Insert(Position(0, 5), "\ngamma"),
        Delete(Range(Position(0, 2), Position(1, 3))),
        Insert(Position(0, 0), "> "),
        Delete(Range(Position(1, 0), Position(1, 4))),
    ]
    for op in edits:
        buffer.apply(op, label="edit")
        snapshots.append(buffer.document.lines())

    for expected in reversed(snapshots[:-1]):
        buffer.undo_last()
        assert buffer.document.lines() == expected
    for expected in snapshots[1:]:
        buffer.redo_last()
        assert buffer.document.lines() == expected


def test_transaction_records_one_group() -> None:
    buffer = make_buffer("a b c")

    with buffer.transaction("upper") as tx:
        for col in (4, 2, 0):
            tx.apply(Delete(Range(Position(0, col), Position(0, col + 1))))
            tx.apply(Insert(Position(0, col), "X"))
        tx.commit(Position(0, 5))

    assert buffer.document.lines() == ["X X X"]
    assert buffer.undo.depth == 1
    buffer.undo_last()
    assert buffer.document.lines() == ["a b c"]


def test_transaction_shifts_tracked_carets() -> None:
    buffer = make_buffer("ab ab")

    with buffer.transaction("delete") as tx:
        tx.apply(Delete(Range(Position(0, 3), Position(0, 5))))
        tx.track(Position(0, 3))
        tx.apply(Delete(Range(Position(0, 0), Position(0, 2))))
        tx.track(Position(0, 0))
        carets = tx.carets
        tx.commit(carets[-1])

    assert buffer.document.lines() == [" "]
    assert carets == [Position(0, 0), Position(0, 1)]


def test_transaction_rolls_back_on_error() -> None:
    buffer = make_buffer("hello")

    with pytest.raises(RuntimeError):
        with buffer.transaction("boom") as tx:
            tx.apply(Insert(Position(0, 5), "!"))
            raise RuntimeError("fail")

    assert buffer.document.lines() == ["hello"]
    assert not buffer.undo.can_undo()
