from __future__ import annotations

from typing import List, Tuple

import pytest

from hecto_engine.buffer import Buffer, Delete, Insert, Position, Range, graphemes
from hecto_engine.buffer.validation import ensure_coverage
from hecto_engine.highlight import (
    PLAIN_TEXT,
    Category,
    Grammar,
    GrammarConflictError,
    GrammarRegistry,
    HighlightEngine,
    Span,
    StateKind,
    load_default_grammars,
)
from hecto_engine.highlight.defaults import PYTHON, RUST


def make_engine(grammar: Grammar = RUST) -> HighlightEngine:
    return HighlightEngine(grammar)


def make_buffer(lines: List[str], grammar: Grammar = RUST) -> Buffer:
    return Buffer.from_lines(lines, highlighter=make_engine(grammar))


def tokens(engine: HighlightEngine, text: str) -> List[Tuple[str, Category]]:
    clusters = graphemes.split(text)
    spans, _ = engine.tokenize_row(clusters)
    return [("".join(clusters[s.start : s.end]), s.category) for s in spans]


def row_categories(buffer: Buffer, index: int) -> List[Category]:
    return [span.category for span in buffer.document.row(index).spans]


def fresh_spans(buffer: Buffer, grammar: Grammar = RUST) -> List[Tuple[Span, ...]]:
    rebuilt = make_buffer(buffer.document.lines(), grammar)
    return [row.spans for row in rebuilt.document.rows()]


def test_tokenize_rust_row() -> None:
    engine = make_engine()

    assert tokens(engine, "let x = 42; // hi") == [
        ("let", Category.KEYWORD),
        (" ", Category.PLAIN),
        ("x", Category.IDENTIFIER),
        (" ", Category.PLAIN),
        ("=", Category.OPERATOR),
        (" ", Category.PLAIN),
        ("42", Category.NUMBER),
        ("; ", Category.PLAIN),
        ("// hi", Category.COMMENT),
    ]


def test_types_and_char_literals() -> None:
    engine = make_engine()

    assert tokens(engine, "u8 'a'") == [
        ("u8", Category.TYPE),
        (" ", Category.PLAIN),
        ("'a'", Category.STRING),
    ]


def test_plain_grammar_yields_single_span() -> None:
    engine = make_engine(PLAIN_TEXT)

    assert tokens(engine, "let x = 1") == [("let x = 1", Category.PLAIN)]
    assert engine.tokenize_row([])[0] == ()


def test_spans_cover_every_row() -> None:
    lines = [
        "fn main() {",
        '    let s = "multi',
        '    line";',
        "    /* open",
        "       close */ let y = 3.5;",
        "",
        "}",
    ]
    buffer = make_buffer(lines)

    for index, row in enumerate(buffer.document.rows()):
        ensure_coverage(index, len(row), row.spans)
        assert not row.dirty


def test_multiline_string_carries_into_next_row() -> None:
    buffer = make_buffer(['let s = "abc', 'def";'])

    assert buffer.document.row(0).end_state is not None
    assert buffer.document.row(0).end_state.kind is StateKind.STRING
    assert row_categories(buffer, 1) == [Category.STRING, Category.PLAIN]


def test_single_line_strings_close_at_row_end() -> None:
    buffer = make_buffer(['s = "abc', "x = 1"], grammar=PYTHON)

    assert buffer.document.row(0).end_state is not None
    assert buffer.document.row(0).end_state.kind is StateKind.NORMAL
    assert row_categories(buffer, 1)[0] is Category.IDENTIFIER


def test_opening_block_comment_rehighlights_following_rows() -> None:
    buffer = make_buffer(["let a = 1;", "let b = 2;", "let c = 3;"])

    buffer.apply(Insert(Position(0, 0), "/*"), label="insert")

    for index in range(3):
        assert row_categories(buffer, index) == [Category.COMMENT]

    buffer.apply(Insert(Position(0, 12), "*/"), label="insert")
    assert row_categories(buffer, 1)[0] is Category.KEYWORD
    assert row_categories(buffer, 2)[0] is Category.KEYWORD


def test_local_edit_only_rescans_touched_row() -> None:
    engine = make_engine()
    buffer = Buffer.from_lines([f"let v{i} = {i};" for i in range(50)], highlighter=engine)
    before = engine.rows_scanned

    buffer.apply(Insert(Position(10, 4), "x"), label="insert_char")

    assert engine.rows_scanned - before == 1
    assert row_categories(buffer, 10)[0] is Category.KEYWORD


def test_merging_rows_rehighlights_row_below() -> None:
    buffer = make_buffer(["a", "/*", "b", "*/ x", "y"])
    assert row_categories(buffer, 3)[0] is Category.COMMENT

    buffer.apply(Delete(Range(Position(0, 1), Position(2, 0))), label="delete")

    assert buffer.document.lines() == ["ab", "*/ x", "y"]
    assert row_categories(buffer, 1)[0] is Category.OPERATOR
    assert [row.spans for row in buffer.document.rows()] == fresh_spans(buffer)


def test_undoing_multirow_insert_rehighlights_row_below() -> None:
    buffer = make_buffer(["a", "x */ y"])
    buffer.apply(Insert(Position(0, 1), "\n/*"), label="insert")
    assert row_categories(buffer, 2)[0] is Category.COMMENT

    buffer.undo_last()

    assert buffer.document.lines() == ["a", "x */ y"]
    assert row_categories(buffer, 1)[0] is Category.IDENTIFIER
    assert [row.spans for row in buffer.document.rows()] == fresh_spans(buffer)


def test_registry_picks_grammar_by_extension() -> None:
    registry = load_default_grammars(GrammarRegistry())

    assert registry.for_filename("src/main.rs") is RUST
    assert registry.for_filename("tool.PY") is PYTHON
    assert registry.for_filename("notes.txt") is PLAIN_TEXT
    assert registry.for_filename(None) is PLAIN_TEXT
    assert registry.get("Rust") is RUST


def test_registry_rejects_conflicting_extension() -> None:
    registry = load_default_grammars(GrammarRegistry())

    with pytest.raises(GrammarConflictError):
        registry.register(Grammar(name="Other", extensions=("rs",)))

    replacement = Grammar(name="Rust", extensions=("rs", "rlib"), keywords=frozenset({"fn"}))
    registry.register(replacement, replace=True)
    assert registry.for_extension(".rlib") is replacement
