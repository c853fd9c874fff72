"""Actions driving the search mode."""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional

from hecto_engine.buffer.ops import EditOp, Insert
from hecto_engine.buffer.position import Selection, SelectionSet
from hecto_engine.search.engine import Direction, Match

from .models import EDIT_MODE, SEARCH_MODE, Command, CommandResult

if TYPE_CHECKING:  # pragma: no cover
    from .session import EditorSession


def _inactive() -> CommandResult:
    return CommandResult(consumed=True, status="search_inactive", message="No search in progress")


def _landed(session: "EditorSession", found: Optional[Match], *, status: str = "search_match") -> CommandResult:
    search = session.search
    assert search.state is not None
    if found is None:
        return CommandResult(
            consumed=True,
            switch_to=SEARCH_MODE,
            status="search_no_match",
            message=f"No match for {search.state.pattern!r}",
        )
    state = session.buffer.state
    state.anchor = None
    state.set_cursor(found.start)
    session.bus.emit("search.match", found)
    if search.state.wrapped:
        status = "search_wrapped"
    return CommandResult(consumed=True, switch_to=SEARCH_MODE, status=status)


def begin_search(session: "EditorSession", command: Command) -> CommandResult:
    """Start a search, or refine the running one with a new pattern.

    Refining keeps the cursor saved when the search first began.
    """

    pattern = command.text or ""
    if not pattern:
        return CommandResult(consumed=True, status="search_empty", message="Empty search pattern")
    search = session.search
    origin = search.state.origin if search.state is not None else session.buffer.state.cursor
    found = search.begin(pattern, origin, command.direction or Direction.FORWARD)
    return _landed(session, found)


def search_next(session: "EditorSession", command: Command) -> CommandResult:
    if not session.search.active:
        return _inactive()
    return _landed(session, session.search.next(command.direction or Direction.FORWARD))


def search_prev(session: "EditorSession", command: Command) -> CommandResult:
    del command
    if not session.search.active:
        return _inactive()
    return _landed(session, session.search.next(Direction.BACKWARD))


def add_and_search(session: "EditorSession", command: Command) -> CommandResult:
    del command
    search = session.search
    if not search.active:
        return _inactive()
    assert search.state is not None
    if search.state.current is None:
        return _landed(session, None)
    found = search.add_and_advance()
    session.bus.emit("search.selections", len(search.state.selections))
    if found is None:
        return CommandResult(
            consumed=True,
            switch_to=SEARCH_MODE,
            status="search_added",
            message="No further matches",
        )
    return _landed(session, found, status="search_added")


def _apply_matches(session: "EditorSession", ops: List[EditOp], label: str) -> CommandResult:
    if not ops:
        return _landed(session, None)
    buffer = session.buffer
    with buffer.transaction(label) as tx:
        for op in ops:
            tx.apply(op)
            tx.track(op.end() if isinstance(op, Insert) else op.range.start)
        carets = tx.carets
        tx.commit(carets[-1], SelectionSet(Selection.caret(caret) for caret in carets))
    session.search.commit()
    return CommandResult(
        consumed=True,
        switch_to=EDIT_MODE,
        status="matches_edited",
        message=f"{len(carets)} match(es) changed",
    )


def delete_matches(session: "EditorSession", command: Command) -> CommandResult:
    del command
    if not session.search.active:
        return _inactive()
    return _apply_matches(session, session.search.delete_matches(), "delete_matches")


def replace_matches(session: "EditorSession", command: Command) -> CommandResult:
    if not session.search.active:
        return _inactive()
    return _apply_matches(
        session, session.search.replace_matches(command.text or ""), "replace_matches"
    )


def commit_search(session: "EditorSession", command: Command) -> CommandResult:
    """Leave search at the current match; accumulated matches become selections."""

    del command
    search = session.search
    if search.state is None:
        return _inactive()
    chosen = SelectionSet(search.state.selections)
    if chosen and search.state.current is not None:
        chosen.add(Selection.from_range(search.state.current.as_range()))
    landed = search.commit()

    state = session.buffer.state
    state.clear_selection()
    primary = chosen.primary
    if primary is not None:
        state.adopt(chosen)
        state.set_cursor(primary.cursor)
    elif landed is not None:
        state.set_cursor(landed)
    return CommandResult(consumed=True, switch_to=EDIT_MODE, status="search_committed")


def cancel_search(session: "EditorSession", command: Command) -> CommandResult:
    del command
    search = session.search
    if not search.active:
        return _inactive()
    origin = search.cancel()
    state = session.buffer.state
    state.clear_selection()
    state.set_cursor(session.buffer.document.clamp(origin))
    return CommandResult(consumed=True, switch_to=EDIT_MODE, status="search_cancelled")


__all__ = [
    "begin_search",
    "search_next",
    "search_prev",
    "add_and_search",
    "delete_matches",
    "replace_matches",
    "commit_search",
    "cancel_search",
]
