"""Actions that change document text."""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional, Sequence

from hecto_engine.analysis.expression import ExpressionError
from hecto_engine.buffer.ops import Delete, Insert, advance
from hecto_engine.buffer.position import Position, Range, Selection, SelectionSet
from hecto_engine.buffer.undo import EDIT

from .models import Command, CommandResult
from .navigation import neighbour

if TYPE_CHECKING:  # pragma: no cover
    from .session import EditorSession


def replace_ranges(
    session: "EditorSession",
    ranges: Sequence[Range],
    texts: Sequence[str],
    *,
    label: str,
    kind: Optional[str] = None,
) -> List[Position]:
    """Replace each of ``ranges`` (document order) with the matching text.

    A lone insertion or lone deletion is recorded on its own so typing and
    backspacing can coalesce. Anything else runs as one transaction, last
    range first, and leaves a caret after every replacement. Returns the
    resulting carets.
    """

    buffer = session.buffer
    if len(ranges) == 1 and (ranges[0].is_empty or not texts[0]):
        span, text = ranges[0], texts[0]
        if span.is_empty and not text:
            return [span.start]
        op = Insert(span.start, text) if span.is_empty else Delete(span)
        caret = advance(span.start, text)
        buffer.state.clear_selection()
        buffer.apply(op, label=label, cursor_after=caret, kind=kind)
        return [caret]

    with buffer.transaction(label) as tx:
        for span, text in reversed(list(zip(ranges, texts))):
            if not span.is_empty:
                tx.apply(Delete(span))
            if text:
                tx.apply(Insert(span.start, text))
            tx.track(advance(span.start, text))
        carets = tx.carets
        tx.commit(carets[-1], SelectionSet(Selection.caret(caret) for caret in carets))
    return carets


def insert_char(session: "EditorSession", command: Command) -> CommandResult:
    text = command.text or ""
    if not text:
        return CommandResult(consumed=False, status="empty_insert")
    targets = session.buffer.state.targets()
    replace_ranges(session, targets, [text] * len(targets), label="insert_char")
    return CommandResult(consumed=True, status="inserted")


def insert_tab(session: "EditorSession", command: Command) -> CommandResult:
    del command
    unit = session.indent.unit
    targets = session.buffer.state.targets()
    replace_ranges(session, targets, [unit] * len(targets), label="insert_tab")
    return CommandResult(consumed=True, status="inserted")


def insert_newline(session: "EditorSession", command: Command) -> CommandResult:
    del command
    document = session.buffer.document
    targets = session.buffer.state.targets()
    texts = []
    for span in targets:
        indent = ""
        if session.config.auto_indent:
            before = document.row(span.start.row).clusters[: span.start.col]
            indent = session.indent.leading(before)
        texts.append("\n" + indent)
    replace_ranges(session, targets, texts, label="insert_newline")
    return CommandResult(consumed=True, status="inserted")


def _delete(session: "EditorSession", *, forward: bool) -> CommandResult:
    document = session.buffer.document
    targets = session.buffer.state.targets()
    # Only chained backspaces coalesce; forward and selection deletes stand alone.
    kind: Optional[str] = EDIT
    if any(not span.is_empty for span in targets):
        spans = targets
        label = "delete_selection"
    else:
        spans = []
        for span in targets:
            other = neighbour(document, span.start, forward=forward)
            spans.append(Range.caret(span.start) if other is None else Range.between(span.start, other))
        label = "delete_forward" if forward else "delete_backward"
        if not forward:
            kind = None

    if all(span.is_empty for span in spans):
        return CommandResult(consumed=True, status="at_boundary", message="Nothing to delete")
    replace_ranges(session, spans, [""] * len(spans), label=label, kind=kind)
    return CommandResult(consumed=True, status="deleted")


def delete_backward(session: "EditorSession", command: Command) -> CommandResult:
    del command
    return _delete(session, forward=False)


def delete_forward(session: "EditorSession", command: Command) -> CommandResult:
    del command
    return _delete(session, forward=True)


def undo(session: "EditorSession", command: Command) -> CommandResult:
    del command
    if session.buffer.undo_last() is None:
        return CommandResult(consumed=True, status="nothing_to_undo", message="Nothing to undo")
    return CommandResult(consumed=True, status="undone")


def redo(session: "EditorSession", command: Command) -> CommandResult:
    del command
    if session.buffer.redo_last() is None:
        return CommandResult(consumed=True, status="nothing_to_redo", message="Nothing to redo")
    return CommandResult(consumed=True, status="redone")


def _selected(session: "EditorSession") -> List[Range]:
    return [span for span in session.buffer.state.targets() if not span.is_empty]


def copy(session: "EditorSession", command: Command) -> CommandResult:
    del command
    spans = _selected(session)
    if not spans:
        return CommandResult(consumed=True, status="no_selection", message="Nothing selected")
    document = session.buffer.document
    entry = session.buffer.clipboard.copy([document.text_in(span) for span in spans])
    session.bus.emit("clipboard.copy", entry.text)
    return CommandResult(consumed=True, status="copied", message=f"Copied {len(spans)} selection(s)")


def paste(session: "EditorSession", command: Command) -> CommandResult:
    del command
    buffer = session.buffer
    targets = buffer.state.targets()
    pieces = buffer.clipboard.pieces_for(len(targets))
    if pieces is None:
        return CommandResult(consumed=True, status="clipboard_empty", message="Clipboard is empty")
    replace_ranges(session, targets, pieces, label="paste", kind=EDIT)
    return CommandResult(consumed=True, status="pasted")


def evaluate_expression(session: "EditorSession", command: Command) -> CommandResult:
    """Replace every selection with the value of the arithmetic it holds.

    Nothing changes unless every selection evaluates.
    """

    del command
    spans = _selected(session)
    if not spans:
        return CommandResult(consumed=True, status="no_selection", message="Select an expression first")
    document = session.buffer.document
    results: List[str] = []
    for span in spans:
        try:
            results.append(session.evaluator.evaluate_to_text(document.text_in(span)))
        except ExpressionError as exc:
            return CommandResult(consumed=True, status=exc.kind, message=str(exc))
    replace_ranges(session, spans, results, label="evaluate_expression")
    return CommandResult(consumed=True, status="expression_evaluated", message=", ".join(results))


__all__ = [
    "replace_ranges",
    "insert_char",
    "insert_tab",
    "insert_newline",
    "delete_backward",
    "delete_forward",
    "undo",
    "redo",
    "copy",
    "paste",
    "evaluate_expression",
]
