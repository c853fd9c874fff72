"""Positions, ranges, and selection sets addressed by row index."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, List, NamedTuple, Optional


class Position(NamedTuple):
    """``(row, col)`` with ``col`` counted in grapheme clusters."""

    row: int
    col: int

    def with_col(self, col: int) -> "Position":
        return Position(self.row, col)


ORIGIN = Position(0, 0)


class Range(NamedTuple):
    """Half-open span ``[start, end)``; construct through :meth:`between`."""

    start: Position
    end: Position

    @classmethod
    def between(cls, a: Position, b: Position) -> "Range":
        return cls(a, b) if a <= b else cls(b, a)

    @classmethod
    def caret(cls, at: Position) -> "Range":
        return cls(at, at)

    @property
    def is_empty(self) -> bool:
        return self.start == self.end

    def contains(self, pos: Position) -> bool:
        return self.start <= pos < self.end

    def overlaps(self, other: "Range") -> bool:
        return self.start < other.end and other.start < self.end


@dataclass(frozen=True, slots=True)
class Selection:
    """Anchor/cursor pair; equal ends denote a caret."""

    anchor: Position
    cursor: Position

    @classmethod
    def caret(cls, at: Position) -> "Selection":
        return cls(at, at)

    @classmethod
    def from_range(cls, span: Range) -> "Selection":
        return cls(span.start, span.end)

    @property
    def start(self) -> Position:
        return min(self.anchor, self.cursor)

    @property
    def end(self) -> Position:
        return max(self.anchor, self.cursor)

    @property
    def is_caret(self) -> bool:
        return self.anchor == self.cursor

    def as_range(self) -> Range:
        return Range(self.start, self.end)


class SelectionSet:
    """Selections kept sorted by start, with overlaps merged on insert."""

    def __init__(self, selections: Iterable[Selection] = ()) -> None:
        self._items: List[Selection] = []
        for selection in selections:
            self.add(selection)

    def __iter__(self) -> Iterator[Selection]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def __getitem__(self, index: int) -> Selection:
        return self._items[index]

    def __repr__(self) -> str:
        return f"SelectionSet({self._items!r})"

    @property
    def primary(self) -> Optional[Selection]:
        return self._items[-1] if self._items else None

    def ranges(self) -> List[Range]:
        return [selection.as_range() for selection in self._items]

    def clear(self) -> None:
        self._items.clear()

    def add(self, selection: Selection) -> Selection:
        """Insert ``selection``; returns the (possibly merged) stored item."""

        start, end = selection.start, selection.end
        kept: List[Selection] = []
        for existing in self._items:
            if _collides(existing.start, existing.end, start, end):
                start = min(start, existing.start)
                end = max(end, existing.end)
            else:
                kept.append(existing)
        if start == selection.start and end == selection.end:
            merged = selection
        else:
            merged = Selection(start, end)
        kept.append(merged)
        kept.sort(key=lambda item: (item.start, item.end))
        self._items = kept
        return merged


def _collides(a_start: Position, a_end: Position, b_start: Position, b_end: Position) -> bool:
    # Adjacent non-empty ranges stay separate; a caret merges into any range
    # it touches.
    if a_start == a_end or b_start == b_end:
        return a_start <= b_end and b_start <= a_end
    return a_start < b_end and b_start < a_end


__all__ = ["Position", "ORIGIN", "Range", "Selection", "SelectionSet"]
