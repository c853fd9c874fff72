"""Actions that move the cursor or change the selection without editing."""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable, Dict, Optional, Tuple

from hecto_engine.buffer.document import Document
from hecto_engine.buffer.position import ORIGIN, Position
from hecto_engine.buffer.state import BufferState

from .models import Command, CommandResult, Motion

if TYPE_CHECKING:  # pragma: no cover
    from .session import EditorSession

# Target position plus whether the preferred column survives the move.
MotionFn = Callable[[Document, BufferState], Tuple[Position, bool]]


def neighbour(document: Document, pos: Position, *, forward: bool) -> Optional[Position]:
    """The cluster boundary one step away, crossing row ends; ``None`` at the edges."""

    if forward:
        if pos.col < len(document.row(pos.row)):
            return Position(pos.row, pos.col + 1)
        if pos.row + 1 < document.row_count():
            return Position(pos.row + 1, 0)
        return None
    if pos.col > 0:
        return Position(pos.row, pos.col - 1)
    if pos.row > 0:
        return Position(pos.row - 1, len(document.row(pos.row - 1)))
    return None


def _left(document: Document, state: BufferState) -> Tuple[Position, bool]:
    return neighbour(document, state.cursor, forward=False) or state.cursor, False


def _right(document: Document, state: BufferState) -> Tuple[Position, bool]:
    return neighbour(document, state.cursor, forward=True) or state.cursor, False


def _vertical(document: Document, state: BufferState, delta: int) -> Tuple[Position, bool]:
    row = state.cursor.row + delta
    if not 0 <= row < document.row_count():
        return state.cursor, True
    if state.preferred_col is None:
        state.preferred_col = state.cursor.col
    return Position(row, min(state.preferred_col, len(document.row(row)))), True


def _up(document: Document, state: BufferState) -> Tuple[Position, bool]:
    return _vertical(document, state, -1)


def _down(document: Document, state: BufferState) -> Tuple[Position, bool]:
    return _vertical(document, state, 1)


def _home(document: Document, state: BufferState) -> Tuple[Position, bool]:
    return state.cursor.with_col(0), False


def _end(document: Document, state: BufferState) -> Tuple[Position, bool]:
    return state.cursor.with_col(len(document.row(state.cursor.row))), False


def _document_start(document: Document, state: BufferState) -> Tuple[Position, bool]:
    return ORIGIN, False


def _document_end(document: Document, state: BufferState) -> Tuple[Position, bool]:
    return document.end(), False


_MOTIONS: Dict[Motion, MotionFn] = {
    Motion.LEFT: _left,
    Motion.RIGHT: _right,
    Motion.UP: _up,
    Motion.DOWN: _down,
    Motion.HOME: _home,
    Motion.END: _end,
    Motion.DOCUMENT_START: _document_start,
    Motion.DOCUMENT_END: _document_end,
}

_STEP_MOTIONS = frozenset({Motion.LEFT, Motion.RIGHT, Motion.UP, Motion.DOWN})


def move_cursor(session: "EditorSession", command: Command) -> CommandResult:
    if command.motion is None:
        return CommandResult(consumed=False, status="missing_motion")
    buffer = session.buffer
    state = buffer.state
    buffer.undo.close_group()

    if command.extend:
        if state.anchor is None:
            state.selections.clear()
            state.begin_selection()
    elif state.anchor is not None or state.selections:
        state.clear_selection()

    target, keep_column = _MOTIONS[command.motion](buffer.document, state)
    if target == state.cursor and command.motion in _STEP_MOTIONS:
        return CommandResult(consumed=True, status="at_boundary", message="Already at the edge")
    state.set_cursor(target, keep_column=keep_column)
    if command.extend:
        session.bus.emit("selection.changed", {"anchor": state.anchor, "cursor": target})
    return CommandResult(consumed=True, status="cursor_moved")


def begin_selection(session: "EditorSession", command: Command) -> CommandResult:
    del command
    state = session.buffer.state
    state.selections.clear()
    state.begin_selection()
    session.bus.emit("selection.changed", {"anchor": state.anchor, "cursor": state.cursor})
    return CommandResult(consumed=True, status="selection_started")


def clear_selection(session: "EditorSession", command: Command) -> CommandResult:
    del command
    state = session.buffer.state
    state.clear_selection()
    session.bus.emit("selection.changed", None)
    return CommandResult(consumed=True, status="selection_cleared")


__all__ = ["move_cursor", "begin_selection", "clear_selection", "neighbour"]
