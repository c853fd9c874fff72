"""Invertible edit operations applied to a :class:`Document`."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from . import graphemes
from .position import Position, Range


@dataclass(frozen=True, slots=True)
class Insert:
    pos: Position
    text: str

    def end(self) -> Position:
        """Position just past the inserted text, once applied."""

        return advance(self.pos, self.text)

    @property
    def is_single_char(self) -> bool:
        return "\n" not in self.text and graphemes.length(self.text) == 1


@dataclass(frozen=True, slots=True)
class Delete:
    range: Range

    @property
    def is_single_char(self) -> bool:
        start, end = self.range
        return start.row == end.row and end.col - start.col == 1


EditOp = Union[Insert, Delete]


def advance(pos: Position, text: str) -> Position:
    """Where the caret lands after typing ``text`` at ``pos``."""

    lines = text.split("\n")
    if len(lines) == 1:
        return Position(pos.row, pos.col + graphemes.length(text))
    return Position(pos.row + len(lines) - 1, graphemes.length(lines[-1]))


def shift_position(pos: Position, op: EditOp) -> Position:
    """Map ``pos`` through ``op`` applied earlier in the document.

    Positions before the edit are untouched; positions inside a deleted range
    collapse onto its start.
    """

    if isinstance(op, Insert):
        if pos < op.pos:
            return pos
        end = op.end()
        if pos.row == op.pos.row:
            return Position(end.row, end.col + (pos.col - op.pos.col))
        return Position(pos.row + (end.row - op.pos.row), pos.col)

    start, end = op.range
    if pos <= start:
        return pos
    if pos < end:
        return start
    if pos.row == end.row:
        return Position(start.row, start.col + (pos.col - end.col))
    return Position(pos.row - (end.row - start.row), pos.col)


def describe(op: EditOp) -> str:
    if isinstance(op, Insert):
        return f"insert@{op.pos.row}:{op.pos.col}[{len(op.text)}]"
    start, end = op.range
    return f"delete@{start.row}:{start.col}-{end.row}:{end.col}"


__all__ = ["Insert", "Delete", "EditOp", "advance", "shift_position", "describe"]
