"""Undo/redo history built from invertible edit ops."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, List, Optional

from hecto_engine.runtime import telemetry

from .ops import Delete, EditOp, Insert
from .position import Position

Applier = Callable[[EditOp], EditOp]

TYPING = "typing"
BACKSPACE = "backspace"
EDIT = "edit"
BATCH = "batch"


@dataclass(slots=True)
class UndoGroup:
    """Ops undone and redone as one step.

    ``inverses[i]`` undoes ``ops[i]``; they are captured when the op is first
    applied so undo never has to recompute them.
    """

    label: str
    kind: str = EDIT
    ops: List[EditOp] = field(default_factory=list)
    inverses: List[EditOp] = field(default_factory=list)
    cursor_before: Optional[Position] = None
    cursor_after: Optional[Position] = None
    sealed: bool = False

    def __len__(self) -> int:
        return len(self.ops)


def classify(op: EditOp) -> str:
    if isinstance(op, Insert) and op.is_single_char:
        return TYPING
    if isinstance(op, Delete) and op.is_single_char:
        return BACKSPACE
    return EDIT


def _continues(group: UndoGroup, op: EditOp) -> bool:
    last = group.ops[-1]
    if group.kind == TYPING and isinstance(op, Insert) and isinstance(last, Insert):
        return op.pos == last.end()
    if group.kind == BACKSPACE and isinstance(op, Delete) and isinstance(last, Delete):
        return op.range.end == last.range.start
    return False


class UndoHistory:
    """Linear history of :class:`UndoGroup` with a redo stack.

    Single-character typing and backspacing coalesce into the open group as
    long as each op continues exactly where the previous one stopped. Any
    other op, or :meth:`close_group`, starts a fresh group.
    """

    def __init__(self, *, limit: int = 1000, logger_name: str | None = None) -> None:
        self._undo: List[UndoGroup] = []
        self._redo: List[UndoGroup] = []
        self._limit = limit
        self._logger_name = logger_name

    def can_undo(self) -> bool:
        return bool(self._undo)

    def can_redo(self) -> bool:
        return bool(self._redo)

    @property
    def depth(self) -> int:
        return len(self._undo)

    def peek(self) -> Optional[UndoGroup]:
        return self._undo[-1] if self._undo else None

    def clear(self) -> None:
        self._undo.clear()
        self._redo.clear()

    def close_group(self) -> None:
        """Mark a boundary: the next recorded op opens a new group."""

        if self._undo:
            self._undo[-1].sealed = True

    def record(
        self,
        op: EditOp,
        inverse: EditOp,
        group_boundary: bool = False,
        *,
        label: str = "edit",
        cursor_before: Optional[Position] = None,
        cursor_after: Optional[Position] = None,
        kind: Optional[str] = None,
    ) -> UndoGroup:
        """Add an applied ``op`` (and its ``inverse``) to the history.

        ``group_boundary`` forces a new group even if the op would coalesce.
        Ops recorded with ``kind=BATCH`` share one group until
        :meth:`close_group`; ``EDIT`` ops always stand alone.
        """

        self._redo.clear()
        kind = kind or classify(op)
        group = self.peek()
        joins = (
            group is not None
            and not group_boundary
            and not group.sealed
            and group.kind == kind
            and kind != EDIT
            and (kind == BATCH or _continues(group, op))
        )
        if not joins:
            group = UndoGroup(label=label, kind=kind, cursor_before=cursor_before)
            self._undo.append(group)
            if len(self._undo) > self._limit:
                self._undo.pop(0)
        assert group is not None
        group.ops.append(op)
        group.inverses.append(inverse)
        if cursor_after is not None:
            group.cursor_after = cursor_after
        return group

    def undo(self, apply: Applier) -> Optional[List[EditOp]]:
        """Revert the newest group through ``apply``; ``None`` if empty."""

        if not self._undo:
            return None
        group = self._undo.pop()
        replayed: List[EditOp] = []
        for inverse in reversed(group.inverses):
            apply(inverse)
            replayed.append(inverse)
        group.sealed = True
        self._redo.append(group)
        telemetry.record_event(
            "undo.apply",
            level="debug",
            data={"label": group.label, "ops": len(group)},
            logger_name=self._logger_name,
        )
        return replayed

    def rollback(self, apply: Applier) -> None:
        """Revert the newest group without making it redoable."""

        if not self._undo:
            return
        group = self._undo.pop()
        for inverse in reversed(group.inverses):
            apply(inverse)

    def redo(self, apply: Applier) -> Optional[List[EditOp]]:
        """Replay the most recently undone group; ``None`` if nothing to redo."""

        if not self._redo:
            return None
        group = self._redo.pop()
        fresh: List[EditOp] = []
        for op in group.ops:
            fresh.append(apply(op))
        group.inverses = fresh
        self._undo.append(group)
        telemetry.record_event(
            "undo.redo",
            level="debug",
            data={"label": group.label, "ops": len(group)},
            logger_name=self._logger_name,
        )
        return list(group.ops)


__all__ = ["UndoGroup", "UndoHistory", "Applier", "classify", "TYPING", "BACKSPACE", "EDIT", "BATCH"]
