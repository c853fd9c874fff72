from __future__ import annotations

from typing import Any, List, Optional

from hecto_engine.buffer import Position, RenderView
from hecto_engine.commands import (
    EDIT_MODE,
    SEARCH_MODE,
    Command,
    CommandKind,
    CommandResult,
    EditorSession,
    Motion,
)
from hecto_engine.highlight import Category
from hecto_engine.runtime import EngineConfig


def make_session(*lines: str, filename: Optional[str] = None, **config: Any) -> EditorSession:
    return EditorSession(
        list(lines),
        filename=filename,
        config=EngineConfig(**config) if config else None,
    )


def run(session: EditorSession, kind: CommandKind, text: Optional[str] = None) -> CommandResult:
    return session.handle(Command(kind, text=text))


def move(session: EditorSession, motion: Motion, times: int = 1, *, extend: bool = False) -> None:
    for _ in range(times):
        session.handle(Command.move(motion, extend=extend))


def type_text(session: EditorSession, text: str) -> None:
    for char in text:
        session.handle(Command.insert(char))


class RecordingSink:
    def __init__(self) -> None:
        self.views: List[RenderView] = []

    def paint(self, view: RenderView) -> None:
        self.views.append(view)


def test_typing_then_one_undo_removes_the_whole_word() -> None:
    session = make_session()

    type_text(session, "abc")
    assert session.lines() == ["abc"]

    result = run(session, CommandKind.UNDO)

    assert result.status == "undone"
    assert result.changed
    assert session.lines() == [""]
    assert run(session, CommandKind.UNDO).status == "nothing_to_undo"


def test_cursor_jump_closes_the_undo_group() -> None:
    session = make_session()

    type_text(session, "ab")
    move(session, Motion.LEFT)
    type_text(session, "c")
    assert session.lines() == ["acb"]

    run(session, CommandKind.UNDO)
    assert session.lines() == ["ab"]
    run(session, CommandKind.UNDO)
    assert session.lines() == [""]


def test_redo_after_undo() -> None:
    session = make_session()
    type_text(session, "abc")
    run(session, CommandKind.UNDO)

    result = run(session, CommandKind.REDO)

    assert result.status == "redone"
    assert session.lines() == ["abc"]
    assert session.buffer.state.cursor == Position(0, 3)
    assert run(session, CommandKind.REDO).status == "nothing_to_redo"


def test_newline_copies_leading_whitespace() -> None:
    session = make_session("    foo")
    move(session, Motion.END)

    run(session, CommandKind.INSERT_NEWLINE)

    assert session.lines() == ["    foo", "    "]
    assert session.buffer.state.cursor == Position(1, 4)


def test_newline_without_auto_indent() -> None:
    session = make_session("    foo", auto_indent=False)
    move(session, Motion.END)

    run(session, CommandKind.INSERT_NEWLINE)

    assert session.lines() == ["    foo", ""]


def test_tab_inserts_detected_indent_unit() -> None:
    session = make_session("a", "  b")

    run(session, CommandKind.INSERT_TAB)

    assert session.lines() == ["  a", "  b"]


def test_tabs_are_expanded_on_load() -> None:
    session = make_session("a", "  b", "\tc")

    assert session.lines() == ["a", "  b", "  c"]
    assert not session.document.modified


def test_backspace_joins_rows_and_reports_boundary() -> None:
    session = make_session("ab", "cd")

    assert run(session, CommandKind.DELETE_BACKWARD).status == "at_boundary"

    move(session, Motion.DOWN)
    result = run(session, CommandKind.DELETE_BACKWARD)

    assert result.status == "deleted"
    assert session.lines() == ["abcd"]
    assert session.buffer.state.cursor == Position(0, 2)


def test_delete_forward_at_document_end() -> None:
    session = make_session("ab")
    move(session, Motion.DOCUMENT_END)

    result = run(session, CommandKind.DELETE_FORWARD)

    assert result.status == "at_boundary"
    assert not result.changed
    assert session.lines() == ["ab"]


def test_vertical_motion_keeps_preferred_column() -> None:
    session = make_session("long line", "ab", "another line")
    move(session, Motion.END)

    move(session, Motion.DOWN)
    assert session.buffer.state.cursor == Position(1, 2)
    move(session, Motion.DOWN)
    assert session.buffer.state.cursor == Position(2, 9)


def test_typing_replaces_selection() -> None:
    session = make_session("hello world")
    move(session, Motion.END)
    move(session, Motion.LEFT, 5, extend=True)

    type_text(session, "there")

    assert session.lines() == ["hello there"]
    run(session, CommandKind.UNDO)
    run(session, CommandKind.UNDO)
    assert session.lines() == ["hello world"]


def test_delete_all_matches_in_one_undo_group() -> None:
    session = make_session("ab ab ab")

    result = run(session, CommandKind.BEGIN_SEARCH, "ab")
    assert result.mode == SEARCH_MODE
    assert result.status == "search_match"

    result = run(session, CommandKind.DELETE_MATCHES)
    assert result.mode == EDIT_MODE
    assert session.lines() == ["  "]

    run(session, CommandKind.UNDO)
    assert session.lines() == ["ab ab ab"]


def test_batch_edit_leaves_a_caret_per_match() -> None:
    session = make_session("ab ab ab")
    run(session, CommandKind.BEGIN_SEARCH, "ab")
    run(session, CommandKind.DELETE_MATCHES)

    type_text(session, "x")

    assert session.lines() == ["x x x"]


def test_replace_matches() -> None:
    session = make_session("cat hat cat")
    run(session, CommandKind.BEGIN_SEARCH, "cat")

    run(session, CommandKind.REPLACE_MATCHES, "dog")

    assert session.lines() == ["dog hat dog"]


def test_search_next_wraps() -> None:
    session = make_session("foo", "bar", "foo")
    move(session, Motion.DOWN)

    run(session, CommandKind.BEGIN_SEARCH, "foo")
    assert session.buffer.state.cursor == Position(2, 0)

    result = run(session, CommandKind.SEARCH_NEXT)
    assert result.status == "search_wrapped"
    assert session.buffer.state.cursor == Position(0, 0)

    run(session, CommandKind.SEARCH_PREV)
    assert session.buffer.state.cursor == Position(2, 0)


def test_search_without_match_leaves_buffer_alone() -> None:
    session = make_session("abc")

    result = run(session, CommandKind.BEGIN_SEARCH, "zzz")

    assert result.status == "search_no_match"
    assert result.message
    assert session.lines() == ["abc"]
    assert session.buffer.state.cursor == Position(0, 0)


def test_cancel_search_restores_cursor() -> None:
    session = make_session("one two one")
    move(session, Motion.END)

    run(session, CommandKind.BEGIN_SEARCH, "one")
    assert session.buffer.state.cursor == Position(0, 0)

    result = run(session, CommandKind.CANCEL_SEARCH)
    assert result.mode == EDIT_MODE
    assert session.buffer.state.cursor == Position(0, 11)


def test_committed_matches_become_selections() -> None:
    session = make_session("x = 1; x = 2; y = x")
    run(session, CommandKind.BEGIN_SEARCH, "x")
    run(session, CommandKind.ADD_AND_SEARCH)

    run(session, CommandKind.COMMIT_SEARCH)
    assert len(session.buffer.state.selections) == 2

    type_text(session, "z")
    assert session.lines() == ["z = 1; z = 2; y = x"]


def test_editing_during_search_commits_it_first() -> None:
    session = make_session("abc abc")
    run(session, CommandKind.BEGIN_SEARCH, "abc")
    run(session, CommandKind.SEARCH_NEXT)

    result = session.handle(Command.insert("X"))

    assert result.mode == EDIT_MODE
    assert not session.search.active
    assert session.lines() == ["abc Xabc"]


def test_evaluate_selected_expression() -> None:
    session = make_session("total: 2 + 3 * 4")
    move(session, Motion.END)
    move(session, Motion.LEFT, 9, extend=True)

    result = run(session, CommandKind.EVALUATE_EXPRESSION)

    assert result.status == "expression_evaluated"
    assert session.lines() == ["total: 14"]
    run(session, CommandKind.UNDO)
    assert session.lines() == ["total: 2 + 3 * 4"]


def test_expression_errors_leave_text_unchanged() -> None:
    session = make_session("1/0", "2 +")
    move(session, Motion.END, extend=True)

    result = run(session, CommandKind.EVALUATE_EXPRESSION)
    assert result.status == "expression_division_by_zero"
    assert session.lines() == ["1/0", "2 +"]

    run(session, CommandKind.CLEAR_SELECTION)
    move(session, Motion.DOWN)
    move(session, Motion.HOME)
    move(session, Motion.END, extend=True)
    assert run(session, CommandKind.EVALUATE_EXPRESSION).status == "expression_syntax"

    run(session, CommandKind.CLEAR_SELECTION)
    assert run(session, CommandKind.EVALUATE_EXPRESSION).status == "no_selection"


def test_copy_and_paste() -> None:
    session = make_session("hello")
    assert run(session, CommandKind.PASTE).status == "clipboard_empty"
    assert run(session, CommandKind.COPY).status == "no_selection"

    move(session, Motion.END, extend=True)
    assert run(session, CommandKind.COPY).status == "copied"
    move(session, Motion.END)
    run(session, CommandKind.PASTE)

    assert session.lines() == ["hellohello"]


def test_bus_publishes_status_and_changes() -> None:
    session = make_session("abc")
    statuses: List[str] = []
    changes: List[object] = []
    session.bus.subscribe("status", lambda result: statuses.append(result.status))
    session.bus.subscribe("buffer.changed", changes.append)

    session.handle(Command.insert("x"))
    move(session, Motion.RIGHT)

    assert statuses == ["inserted", "cursor_moved"]
    assert len(changes) == 1


def test_render_view_carries_highlight_and_search_state() -> None:
    sink = RecordingSink()
    session = make_session("fn main() {}", "fn other() {}", filename="main.rs")
    session.attach(sink)

    run(session, CommandKind.BEGIN_SEARCH, "fn")

    view = sink.views[-1]
    assert view.grammar == "Rust"
    assert view.mode == SEARCH_MODE
    assert view.rows[0].spans[0].category is Category.KEYWORD
    assert view.search_pattern == "fn"
    assert len(view.matches) == 2
    assert view.current_match is not None


def test_viewport_follows_cursor() -> None:
    session = make_session(*(["line"] * 50))
    session.resize(10)

    move(session, Motion.DOCUMENT_END)

    view = session.render_view()
    assert session.viewport_top == 40
    assert [row.index for row in view.rows] == list(range(40, 50))

    move(session, Motion.DOCUMENT_START)
    assert session.render_view().top == 0
