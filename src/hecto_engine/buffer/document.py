"""Row-oriented text storage; every mutation of the buffer funnels through here."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Optional, Tuple

from . import graphemes
from .ops import Delete, EditOp, Insert
from .position import Position, Range
from .row import Row
from .validation import ensure_position, ensure_range


def _segment_lines(text: str) -> List[List[str]]:
    return [graphemes.split(piece) for piece in text.split("\n")]


@dataclass(slots=True)
class Document:
    """Ordered list of :class:`Row` objects; never fewer than one row.

    Rows are addressed by index only. Each edit marks the rows it touched
    dirty and widens the pending dirty range that the highlighter consumes
    through :meth:`take_dirty_range`.
    """

    _rows: List[Row] = field(default_factory=lambda: [Row()])
    version: int = 0
    modified: bool = False
    _dirty: Optional[Tuple[int, int]] = None

    @classmethod
    def from_lines(cls, lines: Iterable[str]) -> "Document":
        rows = [Row.from_text(line) for line in lines]
        if not rows:
            rows = [Row()]
        document = cls(_rows=rows)
        document._dirty = (0, len(rows) - 1)
        return document

    @classmethod
    def from_text(cls, text: str) -> "Document":
        return cls.from_lines(text.split("\n"))

    def row(self, index: int) -> Row:
        return self._rows[index]

    def row_count(self) -> int:
        return len(self._rows)

    def rows(self, start: int = 0, end: Optional[int] = None) -> Iterator[Row]:
        return iter(self._rows[start:end])

    def lines(self) -> List[str]:
        return [row.text for row in self._rows]

    def text(self) -> str:
        return "\n".join(self.lines())

    def end(self) -> Position:
        last = len(self._rows) - 1
        return Position(last, len(self._rows[last]))

    def clamp(self, pos: Position) -> Position:
        """Snap ``pos`` onto the nearest addressable cluster boundary."""

        row = min(max(pos.row, 0), len(self._rows) - 1)
        col = min(max(pos.col, 0), len(self._rows[row]))
        return Position(row, col)

    def text_in(self, span: Range) -> str:
        start, end = ensure_range(self, span)
        if start.row == end.row:
            return self._rows[start.row].slice(start.col, end.col)
        parts = [self._rows[start.row].slice(start.col)]
        parts.extend(self._rows[i].text for i in range(start.row + 1, end.row))
        parts.append(self._rows[end.row].slice(0, end.col))
        return "\n".join(parts)

    def insert(self, pos: Position, text: str) -> Position:
        """Insert ``text`` at ``pos`` and return the position just past it."""

        ensure_position(self, pos)
        if not text:
            return pos
        pieces = _segment_lines(text)
        row = self._rows[pos.row]
        if len(pieces) == 1:
            row.splice(pos.col, pos.col, pieces[0])
            end = Position(pos.row, pos.col + len(pieces[0]))
        else:
            tail = row.split_off(pos.col)
            row.extend(pieces[0])
            fresh = [Row(clusters=piece) for piece in pieces[1:-1]]
            fresh.append(Row(clusters=pieces[-1] + tail.clusters))
            self._rows[pos.row + 1 : pos.row + 1] = fresh
            end = Position(pos.row + len(pieces) - 1, len(pieces[-1]))
        self._touched_insert(pos.row, end.row - pos.row)
        return end

    def delete(self, span: Range) -> str:
        """Remove ``span`` and return the removed text."""

        start, end = ensure_range(self, span)
        if start == end:
            return ""
        removed = self.text_in(span)
        first = self._rows[start.row]
        if start.row == end.row:
            first.splice(start.col, end.col, ())
        else:
            tail = self._rows[end.row].clusters[end.col :]
            first.splice(start.col, len(first), tail)
            # The row below was last seeded by the final removed row.
            first.end_state = self._rows[end.row].end_state
            del self._rows[start.row + 1 : end.row + 1]
        self._touched_delete(start.row, end.row - start.row)
        return removed

    def apply(self, op: EditOp) -> EditOp:
        """Apply ``op`` and return the op that exactly undoes it."""

        if isinstance(op, Insert):
            end = self.insert(op.pos, op.text)
            return Delete(Range(op.pos, end))
        removed = self.delete(op.range)
        return Insert(op.range.start, removed)

    def expand_tabs(self, unit: str) -> int:
        """Replace tab clusters with ``unit``; returns the rows rewritten."""

        replacement = graphemes.split(unit)
        changed = 0
        for index, row in enumerate(self._rows):
            if "\t" not in row.clusters:
                continue
            expanded: List[str] = []
            for cluster in row.clusters:
                expanded.extend(replacement if cluster == "\t" else (cluster,))
            row.splice(0, len(row), expanded)
            self._widen_dirty(index, index)
            changed += 1
        if changed:
            self.version += 1
        return changed

    def take_dirty_range(self) -> Optional[Tuple[int, int]]:
        dirty, self._dirty = self._dirty, None
        return dirty

    def peek_dirty_range(self) -> Optional[Tuple[int, int]]:
        return self._dirty

    def _touched_insert(self, row: int, added: int) -> None:
        if self._dirty is not None and added:
            lo, hi = self._dirty
            self._dirty = (lo if lo <= row else lo + added, hi if hi <= row else hi + added)
        for index in range(row, row + added + 1):
            self._rows[index].mark_dirty()
        self._widen_dirty(row, row + added)
        self._bump()

    def _touched_delete(self, row: int, removed: int) -> None:
        if self._dirty is not None and removed:
            self._dirty = (
                _collapse(self._dirty[0], row, removed),
                _collapse(self._dirty[1], row, removed),
            )
        self._widen_dirty(row, row)
        self._bump()

    def _widen_dirty(self, lo: int, hi: int) -> None:
        if self._dirty is None:
            self._dirty = (lo, hi)
        else:
            self._dirty = (min(self._dirty[0], lo), max(self._dirty[1], hi))

    def _bump(self) -> None:
        self.version += 1
        self.modified = True


def _collapse(index: int, row: int, removed: int) -> int:
    if index <= row:
        return index
    if index <= row + removed:
        return row
    return index - removed


__all__ = ["Document"]
