"""Cursor and selection state tied to a document."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from .position import ORIGIN, Position, Range, Selection, SelectionSet


@dataclass(slots=True)
class BufferState:
    """Mutable cursor, selection anchor, and multi-selection set."""

    cursor: Position = ORIGIN
    anchor: Optional[Position] = None
    selections: SelectionSet = field(default_factory=SelectionSet)
    preferred_col: Optional[int] = None
    last_change_tick: int = 0

    def set_cursor(self, pos: Position, *, keep_column: bool = False) -> None:
        self.cursor = pos
        if not keep_column:
            self.preferred_col = None

    def begin_selection(self) -> None:
        self.anchor = self.cursor

    def clear_selection(self) -> None:
        self.anchor = None
        self.selections.clear()

    @property
    def selection(self) -> Optional[Selection]:
        """The anchored selection, if it spans at least one cluster."""

        if self.anchor is None or self.anchor == self.cursor:
            return None
        return Selection(self.anchor, self.cursor)

    @property
    def multi(self) -> bool:
        return len(self.selections) > 1

    def targets(self) -> List[Range]:
        """Ranges an edit command should act on, in document order."""

        if self.selections:
            return self.selections.ranges()
        selection = self.selection
        if selection is not None:
            return [selection.as_range()]
        return [Range.caret(self.cursor)]

    def adopt(self, selections: SelectionSet) -> None:
        self.selections = selections
        self.anchor = None


__all__ = ["BufferState"]
