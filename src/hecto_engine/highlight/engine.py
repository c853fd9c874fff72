"""Incremental, row-by-row syntax highlighter."""

from __future__ import annotations

from typing import Callable, Dict, List, Sequence, Tuple

from hecto_engine.buffer.document import Document
from hecto_engine.buffer.validation import ensure_coverage
from hecto_engine.runtime.telemetry import span

from .grammar import PLAIN_TEXT, Grammar
from .states import (
    BLOCK_COMMENT,
    LINE_COMMENT,
    NORMAL,
    Category,
    LexState,
    Span,
    StateKind,
)

# One tokenizer step: (new state, category, clusters consumed).
Step = Tuple[LexState, Category, int]
StepFn = Callable[["HighlightEngine", LexState, Sequence[str], int], Step]


def _is_word(cluster: str) -> bool:
    head = cluster[0]
    return head.isalnum() or head == "_"


def _is_digit(cluster: str) -> bool:
    return cluster[0].isdigit()


def _starts_with(clusters: Sequence[str], index: int, token: Tuple[str, ...]) -> bool:
    if not token:
        return False
    return tuple(clusters[index : index + len(token)]) == token


class HighlightEngine:
    """Turns rows into category spans for one grammar.

    Each row is tokenized from the state the previous row exited in. After an
    edit only the touched rows are re-tokenized, plus however many following
    rows see their exiting state change.
    """

    def __init__(self, grammar: Grammar = PLAIN_TEXT, *, logger_name: str | None = None) -> None:
        self.grammar = grammar
        self._logger_name = logger_name
        self.rows_scanned = 0

    def tokenize_row(
        self, clusters: Sequence[str], entering: LexState = NORMAL
    ) -> Tuple[Tuple[Span, ...], LexState]:
        """Return the spans for ``clusters`` and the state the row exits in."""

        state = NORMAL if entering.kind is StateKind.LINE_COMMENT else entering
        length = len(clusters)
        if self.grammar.is_plain:
            whole = (Span(0, length, Category.PLAIN),) if length else ()
            return whole, NORMAL

        spans: List[Span] = []
        index = 0
        while index < length:
            state, category, consumed = _STEPS[state.kind](self, state, clusters, index)
            if spans and spans[-1].category is category:
                last = spans[-1]
                spans[-1] = Span(last.start, last.length + consumed, category)
            else:
                spans.append(Span(index, consumed, category))
            index += consumed
        return tuple(spans), self._exit_state(state)

    def _exit_state(self, state: LexState) -> LexState:
        if state.kind is StateKind.LINE_COMMENT:
            return NORMAL
        if state.kind is StateKind.STRING and not self.grammar.multiline_strings:
            return NORMAL
        return state

    def _step_normal(self, state: LexState, clusters: Sequence[str], i: int) -> Step:
        grammar = self.grammar
        cluster = clusters[i]
        opener, _ = grammar.block_tokens
        line_token = grammar.line_comment_token

        if _starts_with(clusters, i, line_token):
            return LINE_COMMENT, Category.COMMENT, len(line_token)
        if _starts_with(clusters, i, opener):
            return BLOCK_COMMENT, Category.COMMENT, len(opener)
        if grammar.characters and cluster == "'":
            size = _char_literal_size(clusters, i)
            if size:
                return state, Category.STRING, size
        if cluster in grammar.strings:
            return LexState.in_string(cluster), Category.STRING, 1
        if grammar.numbers and _is_digit(cluster):
            return state, Category.NUMBER, _run_length(clusters, i, _number_part)
        if _is_word(cluster):
            size = _run_length(clusters, i, _is_word)
            word = "".join(clusters[i : i + size])
            if word in grammar.keywords:
                return state, Category.KEYWORD, size
            if word in grammar.types:
                return state, Category.TYPE, size
            return state, Category.IDENTIFIER, size
        if len(cluster) == 1 and cluster in grammar.operators:
            return state, Category.OPERATOR, 1
        return state, Category.PLAIN, 1

    def _step_line_comment(self, state: LexState, clusters: Sequence[str], i: int) -> Step:
        return state, Category.COMMENT, len(clusters) - i

    def _step_block_comment(self, state: LexState, clusters: Sequence[str], i: int) -> Step:
        _, closer = self.grammar.block_tokens
        if _starts_with(clusters, i, closer):
            return NORMAL, Category.COMMENT, len(closer)
        return state, Category.COMMENT, 1

    def _step_string(self, state: LexState, clusters: Sequence[str], i: int) -> Step:
        cluster = clusters[i]
        if cluster == "\\" and i + 1 < len(clusters):
            return state, Category.STRING, 2
        if cluster == state.delimiter:
            return NORMAL, Category.STRING, 1
        return state, Category.STRING, 1

    def highlight_all(self, document: Document) -> int:
        return self.refresh(document, 0, document.row_count() - 1)

    def refresh(self, document: Document, lo: int, hi: int) -> int:
        """Re-tokenize rows ``lo..hi`` and any rows their end states affect.

        Scanning stops at the first row at or past ``hi`` whose new exiting
        state equals the one cached before the edit. Returns the number of
        rows tokenized.
        """

        count = document.row_count()
        lo = max(0, min(lo, count - 1))
        hi = max(lo, min(hi, count - 1))
        # A previous row with no trusted end state cannot seed ``lo``.
        while lo > 0 and (
            document.row(lo - 1).dirty or document.row(lo - 1).end_state is None
        ):
            lo -= 1

        with span(
            "highlight::refresh",
            logger_name=self._logger_name,
            component="highlight",
            metadata={"grammar": self.grammar.name},
        ) as handle:
            state = document.row(lo - 1).end_state if lo > 0 else NORMAL
            assert state is not None
            scanned = 0
            index = lo
            while index < count:
                row = document.row(index)
                previous = row.end_state
                spans, exiting = self.tokenize_row(row.clusters, state)
                ensure_coverage(index, len(row), spans)
                row.store_highlight(spans, exiting)
                scanned += 1
                if index >= hi and exiting == previous:
                    break
                if index + 1 < count:
                    document.row(index + 1).mark_dirty()
                state = exiting
                index += 1
            handle.add_metadata("rows", scanned)
            handle.add_metadata("range", f"{lo}-{index}")

        self.rows_scanned += scanned
        return scanned


def _char_literal_size(clusters: Sequence[str], i: int) -> int:
    # 'x' or '\x'; anything else (e.g. a Rust lifetime) is not a literal.
    if i + 2 < len(clusters) and clusters[i + 1] != "\\" and clusters[i + 2] == "'":
        return 3
    if i + 3 < len(clusters) and clusters[i + 1] == "\\" and clusters[i + 3] == "'":
        return 4
    return 0


def _number_part(cluster: str) -> bool:
    return _is_word(cluster) or cluster == "."


def _run_length(clusters: Sequence[str], i: int, predicate: Callable[[str], bool]) -> int:
    end = i + 1
    while end < len(clusters) and predicate(clusters[end]):
        end += 1
    return end - i


_STEPS: Dict[StateKind, StepFn] = {
    StateKind.NORMAL: HighlightEngine._step_normal,
    StateKind.LINE_COMMENT: HighlightEngine._step_line_comment,
    StateKind.BLOCK_COMMENT: HighlightEngine._step_block_comment,
    StateKind.STRING: HighlightEngine._step_string,
}


__all__ = ["HighlightEngine"]
