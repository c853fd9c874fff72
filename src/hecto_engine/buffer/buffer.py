"""High-level buffer façade combining document, state, undo, and highlighting."""

from __future__ import annotations

from contextlib import AbstractContextManager
from dataclasses import dataclass
from typing import TYPE_CHECKING, ContextManager, Iterable, List, Optional

from hecto_engine.runtime import telemetry
from hecto_engine.runtime.config import EngineConfig

from .clipboard import Clipboard
from .document import Document
from .ops import EditOp, describe, shift_position
from .position import Position, Selection, SelectionSet
from .state import BufferState
from .undo import BATCH, UndoGroup, UndoHistory
from .validation import ensure_selections

if TYPE_CHECKING:  # pragma: no cover
    from hecto_engine.highlight.engine import HighlightEngine


@dataclass(slots=True)
class BufferView:
    version: int
    lines: tuple[str, ...]
    cursor: Position
    selections: tuple[Selection, ...]
    modified: bool


class Buffer:
    """Owns the document and routes every edit through undo and highlighting."""

    def __init__(
        self,
        *,
        name: str = "default",
        document: Optional[Document] = None,
        state: Optional[BufferState] = None,
        undo: Optional[UndoHistory] = None,
        clipboard: Optional[Clipboard] = None,
        highlighter: Optional["HighlightEngine"] = None,
        config: Optional[EngineConfig] = None,
    ) -> None:
        self.name = name
        self.config = config or EngineConfig()
        self.document = document or Document()
        self.state = state or BufferState()
        self.undo = undo or UndoHistory(
            limit=self.config.undo_limit, logger_name="hecto_engine.undo"
        )
        self.clipboard = clipboard or Clipboard()
        self.highlighter = highlighter
        self.refresh_highlight()

    @classmethod
    def from_lines(
        cls, lines: Iterable[str], *, name: str = "default", **kwargs: object
    ) -> "Buffer":
        return cls(name=name, document=Document.from_lines(lines), **kwargs)  # type: ignore[arg-type]

    def snapshot(self) -> BufferView:
        selections = tuple(self.state.selections)
        if not selections and self.state.selection is not None:
            selections = (self.state.selection,)
        return BufferView(
            version=self.document.version,
            lines=tuple(self.document.lines()),
            cursor=self.state.cursor,
            selections=selections,
            modified=self.document.modified,
        )

    def refresh_highlight(self) -> int:
        """Re-tokenize whatever the document reports as dirty."""

        dirty = self.document.take_dirty_range()
        if dirty is None or self.highlighter is None:
            return 0
        return self.highlighter.refresh(self.document, *dirty)

    def apply(
        self,
        op: EditOp,
        *,
        label: str,
        cursor_after: Optional[Position] = None,
        kind: Optional[str] = None,
        boundary: bool = False,
    ) -> EditOp:
        """Apply one op as its own (possibly coalesced) undo step."""

        before = self.state.cursor
        inverse = self.document.apply(op)
        self.undo.record(
            op,
            inverse,
            boundary,
            label=label,
            kind=kind,
            cursor_before=before,
            cursor_after=cursor_after,
        )
        if cursor_after is not None:
            self.state.set_cursor(cursor_after)
        self.state.last_change_tick = self.document.version
        self.refresh_highlight()
        return inverse

    def transaction(self, label: str) -> "Transaction":
        return Transaction(self, label)

    def undo_last(self) -> Optional[List[EditOp]]:
        group = self.undo.peek()
        replayed = self.undo.undo(self._replay)
        if replayed is None or group is None:
            return None
        self._restore_cursor(group.cursor_before)
        return replayed

    def redo_last(self) -> Optional[List[EditOp]]:
        replayed = self.undo.redo(self._replay)
        if replayed is None:
            return None
        group = self.undo.peek()
        if group is not None:
            self._restore_cursor(group.cursor_after)
        return replayed

    def _replay(self, op: EditOp) -> EditOp:
        inverse = self.document.apply(op)
        self.refresh_highlight()
        return inverse

    def _restore_cursor(self, pos: Optional[Position]) -> None:
        self.state.clear_selection()
        if pos is not None:
            self.state.set_cursor(self.document.clamp(pos))
        self.state.last_change_tick = self.document.version


class Transaction(AbstractContextManager["Transaction"]):
    """Batch of ops recorded as a single undo group.

    Ops must be applied last-in-document-order first; carets registered with
    :meth:`track` are shifted through every later op so they stay valid.
    Leaving the block with an exception rolls every applied op back.
    """

    def __init__(self, buffer: Buffer, label: str) -> None:
        self.buffer = buffer
        self.label = label
        self.applied: List[EditOp] = []
        self._carets: List[Position] = []
        self._span_cm: Optional[ContextManager[telemetry.SpanHandle]] = None
        self._cursor_before: Optional[Position] = None
        self._group: Optional[UndoGroup] = None

    def __enter__(self) -> "Transaction":
        self._cursor_before = self.buffer.state.cursor
        self.buffer.undo.close_group()
        self._span_cm = telemetry.span(
            name=f"buffer::{self.label}",
            component="buffer",
            metadata={"buffer": self.buffer.name},
        )
        self._span_cm.__enter__()
        return self

    def apply(self, op: EditOp) -> EditOp:
        inverse = self.buffer.document.apply(op)
        self._group = self.buffer.undo.record(
            op,
            inverse,
            not self.applied,
            label=self.label,
            kind=BATCH,
            cursor_before=self._cursor_before,
        )
        self._carets = [shift_position(caret, op) for caret in self._carets]
        self.applied.append(op)
        return inverse

    def track(self, caret: Position) -> None:
        self._carets.append(caret)

    @property
    def carets(self) -> List[Position]:
        return sorted(set(self._carets))

    def commit(self, cursor_after: Position, selections: Optional[SelectionSet] = None) -> None:
        state = self.buffer.state
        state.clear_selection()
        if selections is not None and len(selections) > 1:
            ensure_selections(selections)
            state.adopt(selections)
        state.set_cursor(cursor_after)
        if self._group is not None:
            self._group.cursor_after = cursor_after

    def __exit__(self, exc_type, exc, tb) -> bool:
        try:
            if exc_type is not None and self.applied:
                self.buffer.undo.rollback(self.buffer.document.apply)
            self.buffer.undo.close_group()
            self.buffer.state.last_change_tick = self.buffer.document.version
            self.buffer.refresh_highlight()
        finally:
            if self._span_cm is not None:
                if exc_type is None:
                    telemetry.record_event(
                        "buffer.batch",
                        level="debug",
                        data={
                            "label": self.label,
                            "ops": [describe(op) for op in self.applied],
                        },
                    )
                self._span_cm.__exit__(exc_type, exc, tb)
        return False


__all__ = ["Buffer", "BufferView", "Transaction"]
