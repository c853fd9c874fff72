"""Invariant checks shared across buffer services.

Failures here mean the engine itself is wrong, so they raise
:class:`InvariantViolation` (an ``AssertionError``) instead of being reported
as a status message.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Sequence

from .position import Position, Range, SelectionSet

if TYPE_CHECKING:  # pragma: no cover
    from hecto_engine.highlight.states import Span

    from .document import Document


class InvariantViolation(AssertionError):
    """Raised when a position, span partition, or selection set is malformed."""

    def __init__(self, message: str, *, position: Optional[Position] = None) -> None:
        super().__init__(message)
        self.position = position


def ensure_position(document: "Document", pos: Position) -> Position:
    row, col = pos
    if row < 0 or row >= document.row_count():
        raise InvariantViolation(f"Row {row} out of range", position=pos)
    if col < 0 or col > len(document.row(row)):
        raise InvariantViolation(f"Column {col} out of range on row {row}", position=pos)
    return pos


def ensure_range(document: "Document", span: Range) -> Range:
    ensure_position(document, span.start)
    ensure_position(document, span.end)
    if span.end < span.start:
        raise InvariantViolation("Range end precedes start", position=span.start)
    return span


def ensure_coverage(row_index: int, length: int, spans: Sequence["Span"]) -> None:
    """Spans must tile ``[0, length)`` left to right without gaps."""

    cursor = 0
    for span in spans:
        start, size = span.start, span.length
        if start != cursor or size <= 0:
            raise InvariantViolation(
                f"Span coverage gap on row {row_index} at column {cursor}",
                position=Position(row_index, cursor),
            )
        cursor += size
    if cursor != length:
        raise InvariantViolation(
            f"Spans on row {row_index} cover {cursor} of {length} columns",
            position=Position(row_index, cursor),
        )


def ensure_selections(selections: SelectionSet) -> None:
    previous: Optional[Range] = None
    for span in selections.ranges():
        if previous is not None and (span.start < previous.start or span.overlaps(previous)):
            raise InvariantViolation("Selections overlap or are unsorted", position=span.start)
        previous = span


__all__ = [
    "InvariantViolation",
    "ensure_position",
    "ensure_range",
    "ensure_coverage",
    "ensure_selections",
]
