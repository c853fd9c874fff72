"""Incremental literal search with multi-match selection and batch edits."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, List, NamedTuple, Optional, Sequence

from hecto_engine.buffer import graphemes
from hecto_engine.buffer.document import Document
from hecto_engine.buffer.ops import Delete, EditOp, Insert
from hecto_engine.buffer.position import Position, Range, Selection, SelectionSet
from hecto_engine.runtime import telemetry


class Direction(str, Enum):
    FORWARD = "forward"
    BACKWARD = "backward"


class Match(NamedTuple):
    start: Position
    end: Position

    def as_range(self) -> Range:
        return Range(self.start, self.end)


@dataclass(slots=True)
class SearchState:
    """Lives from ``begin`` until ``commit`` or ``cancel``."""

    pattern: str
    direction: Direction
    origin: Position
    current: Optional[Match] = None
    selections: SelectionSet = field(default_factory=SelectionSet)
    wrapped: bool = False


class SearchEngine:
    """Finds occurrences of a pattern in a :class:`Document`.

    Matches are located one row at a time, only as far as a request needs,
    and remembered per row until the document changes. Patterns may span
    rows by containing newlines.
    """

    def __init__(
        self,
        document: Document,
        *,
        case_sensitive: bool = False,
        logger_name: str | None = None,
    ) -> None:
        self.document = document
        self.case_sensitive = case_sensitive
        self.state: Optional[SearchState] = None
        self._logger_name = logger_name
        self._parts: List[List[str]] = []
        self._cache: Dict[int, List[Match]] = {}
        self._cache_version = -1
        self.rows_matched = 0

    @property
    def active(self) -> bool:
        return self.state is not None

    def _require(self) -> SearchState:
        if self.state is None:
            raise RuntimeError("No search in progress")
        return self.state

    def _fold(self, clusters: Sequence[str]) -> List[str]:
        return list(clusters) if self.case_sensitive else graphemes.casefold(clusters)

    def begin(
        self,
        pattern: str,
        from_pos: Position,
        direction: Direction = Direction.FORWARD,
    ) -> Optional[Match]:
        """Start searching for ``pattern`` and jump to the nearest match."""

        if not pattern:
            raise ValueError("search pattern cannot be empty")
        self._parts = [self._fold(graphemes.split(part)) for part in pattern.split("\n")]
        self._cache.clear()
        self._cache_version = self.document.version
        origin = self.document.clamp(from_pos)
        self.state = SearchState(pattern=pattern, direction=direction, origin=origin)
        found = self._find(origin, direction, inclusive=True)
        self._land(found)
        telemetry.record_event(
            "search.begin",
            level="debug",
            data={"pattern": pattern, "found": found is not None},
            logger_name=self._logger_name,
        )
        return found

    def next(self, direction: Optional[Direction] = None) -> Optional[Match]:
        state = self._require()
        if direction is not None:
            state.direction = direction
        anchor = state.current.start if state.current else state.origin
        found = self._find(anchor, state.direction, inclusive=state.current is None)
        self._land(found)
        return found

    def add_and_advance(self) -> Optional[Match]:
        """Select the current match, then move to the following one."""

        state = self._require()
        if state.current is None:
            return None
        state.selections.add(Selection.from_range(state.current.as_range()))
        found = self._find(state.current.start, Direction.FORWARD, inclusive=False)
        self._land(found)
        return found

    def targets(self) -> List[Range]:
        """Ranges a batch edit acts on, in document order.

        With nothing accumulated this is every match in the document;
        otherwise the accumulated selections plus the current match.
        """

        state = self._require()
        if not state.selections:
            return [match.as_range() for match in self.all_matches()]
        chosen = SelectionSet(state.selections)
        if state.current is not None:
            chosen.add(Selection.from_range(state.current.as_range()))
        return chosen.ranges()

    def delete_matches(self) -> List[EditOp]:
        """Ops deleting every target, ordered from the last match to the first."""

        return [Delete(span) for span in reversed(self.targets())]

    def replace_matches(self, text: str) -> List[EditOp]:
        ops: List[EditOp] = []
        for span in reversed(self.targets()):
            ops.append(Delete(span))
            if text:
                ops.append(Insert(span.start, text))
        return ops

    def commit(self) -> Optional[Position]:
        """Leave search; the cursor belongs at the current match, if any."""

        state = self._require()
        self.state = None
        return state.current.start if state.current else None

    def cancel(self) -> Position:
        """Abandon search and hand back the cursor saved by ``begin``."""

        state = self._require()
        self.state = None
        return state.origin

    def all_matches(self) -> List[Match]:
        """Every non-overlapping match in document order."""

        found: List[Match] = []
        for row in range(self.document.row_count()):
            for match in self._row_matches(row):
                if found and match.start < found[-1].end:
                    continue
                found.append(match)
        return found

    def matches_between(self, first_row: int, last_row: int) -> Iterator[Match]:
        last_row = min(last_row, self.document.row_count() - 1)
        for row in range(max(first_row, 0), last_row + 1):
            yield from self._row_matches(row)

    def _land(self, found: Optional[Match]) -> None:
        state = self._require()
        if found is not None:
            state.current = found

    def _find(self, pos: Position, direction: Direction, *, inclusive: bool) -> Optional[Match]:
        state = self._require()
        count = self.document.row_count()
        forward = direction is Direction.FORWARD
        for step in range(count + 1):
            row = (pos.row + step) % count if forward else (pos.row - step) % count
            candidates = self._row_matches(row)
            for match in candidates if forward else reversed(candidates):
                if step == 0:
                    if forward:
                        ok = match.start >= pos if inclusive else match.start > pos
                    else:
                        ok = match.start <= pos if inclusive else match.start < pos
                elif step == count:
                    ok = match.start < pos if forward else match.start > pos
                else:
                    ok = True
                if ok:
                    state.wrapped = step == count or (
                        row < pos.row if forward else row > pos.row
                    )
                    return match
        return None

    def _row_matches(self, row: int) -> List[Match]:
        if self._cache_version != self.document.version:
            self._cache.clear()
            self._cache_version = self.document.version
        cached = self._cache.get(row)
        if cached is None:
            cached = self._scan_row(row)
            self._cache[row] = cached
            self.rows_matched += 1
        return cached

    def _scan_row(self, row: int) -> List[Match]:
        parts = self._parts
        if not parts:
            return []
        text = self._fold(self.document.row(row).clusters)
        if len(parts) == 1:
            return [
                Match(Position(row, col), Position(row, col + len(parts[0])))
                for col in _occurrences(text, parts[0])
            ]

        last_row = row + len(parts) - 1
        if last_row >= self.document.row_count():
            return []
        head, tail = parts[0], parts[-1]
        if len(text) < len(head) or text[len(text) - len(head):] != head:
            return []
        for offset, middle in enumerate(parts[1:-1], start=1):
            if self._fold(self.document.row(row + offset).clusters) != middle:
                return []
        closing = self._fold(self.document.row(last_row).clusters)
        if closing[: len(tail)] != tail:
            return []
        return [Match(Position(row, len(text) - len(head)), Position(last_row, len(tail)))]


def _occurrences(text: List[str], needle: List[str]) -> Iterator[int]:
    size = len(needle)
    if not size:
        return
    col = 0
    limit = len(text) - size
    while col <= limit:
        if text[col : col + size] == needle:
            yield col
            col += size
        else:
            col += 1


__all__ = ["Direction", "Match", "SearchEngine", "SearchState"]
