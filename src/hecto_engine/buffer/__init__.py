"""Document model, positions, undo history, and the buffer façade."""

from .buffer import Buffer, BufferView, Transaction
from .clipboard import Clipboard, ClipboardEntry
from .document import Document
from .ops import Delete, EditOp, Insert, shift_position
from .position import ORIGIN, Position, Range, Selection, SelectionSet
from .row import Row
from .state import BufferState
from .undo import UndoGroup, UndoHistory
from .validation import InvariantViolation, ensure_coverage, ensure_position
from .view import RenderRow, RenderView, RendererSink

__all__ = [
    "Buffer",
    "BufferView",
    "Transaction",
    "Clipboard",
    "ClipboardEntry",
    "Document",
    "Delete",
    "EditOp",
    "Insert",
    "shift_position",
    "ORIGIN",
    "Position",
    "Range",
    "Selection",
    "SelectionSet",
    "Row",
    "BufferState",
    "UndoGroup",
    "UndoHistory",
    "InvariantViolation",
    "ensure_coverage",
    "ensure_position",
    "RenderRow",
    "RenderView",
    "RendererSink",
]
