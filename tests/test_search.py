from __future__ import annotations

from typing import Tuple

import pytest

from hecto_engine.buffer import Document, Position, Range
from hecto_engine.search import Direction, Match, SearchEngine


def make_search(*lines: str, case_sensitive: bool = False) -> Tuple[Document, SearchEngine]:
    document = Document.from_lines(lines)
    return document, SearchEngine(document, case_sensitive=case_sensitive)


def test_forward_search_wraps_to_document_start() -> None:
    _, search = make_search("foo", "bar", "foo")

    first = search.begin("foo", Position(1, 0))
    assert first == Match(Position(2, 0), Position(2, 3))
    assert search.state is not None and not search.state.wrapped

    second = search.next()
    assert second == Match(Position(0, 0), Position(0, 3))
    assert search.state.wrapped


def test_backward_search_and_direction_switch() -> None:
    _, search = make_search("foo bar foo")

    found = search.begin("foo", Position(0, 5), Direction.BACKWARD)
    assert found is not None and found.start == Position(0, 0)

    found = search.next(Direction.FORWARD)
    assert found is not None and found.start == Position(0, 8)


def test_case_insensitive_by_default() -> None:
    _, search = make_search("Hello HELLO")

    assert search.begin("hello", Position(0, 0)) == Match(Position(0, 0), Position(0, 5))
    assert len(search.all_matches()) == 2


def test_case_sensitive_search() -> None:
    _, search = make_search("Hello", case_sensitive=True)

    assert search.begin("hello", Position(0, 0)) is None


def test_case_folding_compares_single_clusters() -> None:
    _, search = make_search("Straße")

    assert search.begin("STRASSE", Position(0, 0)) is None
    assert search.begin("STRA\u1e9eE", Position(0, 0)) == Match(Position(0, 0), Position(0, 6))


def test_pattern_spanning_rows() -> None:
    _, search = make_search("ab", "cd", "ab", "ce")

    found = search.begin("b\nc", Position(0, 0))
    assert found == Match(Position(0, 1), Position(1, 1))
    assert [match.start for match in search.all_matches()] == [Position(0, 1), Position(2, 1)]


def test_delete_matches_emits_ops_last_match_first() -> None:
    document, search = make_search("ab ab ab")
    search.begin("ab", Position(0, 0))

    ops = search.delete_matches()

    assert [op.range for op in ops] == [
        Range(Position(0, 6), Position(0, 8)),
        Range(Position(0, 3), Position(0, 5)),
        Range(Position(0, 0), Position(0, 2)),
    ]
    for op in ops:
        document.apply(op)
    assert document.lines() == ["  "]


def test_accumulated_selections_limit_batch_targets() -> None:
    document, search = make_search("x x x")
    search.begin("x", Position(0, 0))

    search.add_and_advance()

    assert search.targets() == [
        Range(Position(0, 0), Position(0, 1)),
        Range(Position(0, 2), Position(0, 3)),
    ]
    for op in search.replace_matches("yy"):
        document.apply(op)
    assert document.lines() == ["yy yy x"]


def test_cache_follows_document_changes() -> None:
    document, search = make_search("one", "two")
    search.begin("two", Position(0, 0))
    assert len(search.all_matches()) == 1

    document.insert(Position(0, 3), " two")

    assert len(search.all_matches()) == 2


def test_matches_are_scanned_lazily() -> None:
    _, search = make_search(*(["target"] + ["filler"] * 200))

    search.begin("target", Position(0, 0))

    assert search.rows_matched == 1


def test_commit_and_cancel() -> None:
    _, search = make_search("abc abc")

    search.begin("abc", Position(0, 2))
    assert search.commit() == Position(0, 4)
    assert not search.active

    search.begin("abc", Position(0, 2))
    assert search.cancel() == Position(0, 2)
    assert not search.active


def test_invalid_usage() -> None:
    _, search = make_search("abc")

    with pytest.raises(ValueError):
        search.begin("", Position(0, 0))
    with pytest.raises(RuntimeError):
        search.next()
