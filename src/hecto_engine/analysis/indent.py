"""One-shot indentation detection run when a document is loaded."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Optional, Sequence

from hecto_engine.buffer import graphemes
from hecto_engine.buffer.document import Document
from hecto_engine.runtime.config import EngineConfig


@dataclass(frozen=True, slots=True)
class IndentPolicy:
    unit_width: int
    uses_tabs: bool
    detected: bool = False

    @property
    def unit(self) -> str:
        """Whitespace for one indentation level."""

        return "\t" if self.uses_tabs else " " * self.unit_width

    def leading(self, clusters: Sequence[str]) -> str:
        """Leading whitespace of a row, reused by auto-indent on newline."""

        return graphemes.join(clusters[: graphemes.leading_whitespace(clusters)])


class IndentDetector:
    """Infers indent width and tabs-vs-spaces from existing rows.

    Space-indented rows vote with the difference between consecutive distinct
    depths; the most common difference wins and ties go to the smaller width.
    Rows indented with a mix of tabs and spaces are ignored, blank rows too.
    """

    def __init__(self, config: Optional[EngineConfig] = None) -> None:
        self.config = config or EngineConfig()

    def fallback(self) -> IndentPolicy:
        return IndentPolicy(
            unit_width=self.config.indent_fallback_width,
            uses_tabs=self.config.indent_fallback_tabs,
        )

    def detect(self, document: Document) -> IndentPolicy:
        deltas: Counter[int] = Counter()
        tab_rows = 0
        space_rows = 0
        previous: Optional[int] = None

        for row in document.rows():
            clusters = row.clusters
            depth = graphemes.leading_whitespace(clusters)
            if depth == len(clusters):
                continue
            run = set(clusters[:depth])
            if run == {"\t"}:
                tab_rows += 1
                continue
            if len(run) > 1:
                continue
            if depth:
                space_rows += 1
            if previous is not None and depth != previous:
                deltas[abs(depth - previous)] += 1
            previous = depth

        if tab_rows > space_rows:
            return IndentPolicy(self.config.indent_fallback_width, uses_tabs=True, detected=True)
        if not deltas:
            return self.fallback()
        width = min(deltas, key=lambda size: (-deltas[size], size))
        return IndentPolicy(unit_width=width, uses_tabs=False, detected=True)


def detect(document: Document, config: Optional[EngineConfig] = None) -> IndentPolicy:
    return IndentDetector(config).detect(document)


__all__ = ["IndentPolicy", "IndentDetector", "detect"]
