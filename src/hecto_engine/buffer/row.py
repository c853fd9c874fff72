"""A single line of text plus its cached highlight state."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterable, List, Optional, Sequence, Tuple

from . import graphemes

if TYPE_CHECKING:  # pragma: no cover
    from hecto_engine.highlight.states import LexState, Span


@dataclass(slots=True)
class Row:
    """Owns its clusters; ``spans`` are only trustworthy while not ``dirty``."""

    clusters: List[str] = field(default_factory=list)
    spans: Tuple["Span", ...] = ()
    end_state: Optional["LexState"] = None
    dirty: bool = True
    version: int = 0

    @classmethod
    def from_text(cls, text: str) -> "Row":
        return cls(clusters=graphemes.split(text))

    @property
    def text(self) -> str:
        return graphemes.join(self.clusters)

    def __len__(self) -> int:
        return len(self.clusters)

    def slice(self, start: int = 0, end: Optional[int] = None) -> str:
        return graphemes.join(self.clusters[start:end])

    def mark_dirty(self) -> None:
        self.dirty = True
        self.version += 1

    def splice(self, start: int, end: int, clusters: Iterable[str]) -> List[str]:
        """Replace ``clusters[start:end]``; returns the removed clusters."""

        removed = self.clusters[start:end]
        self.clusters[start:end] = list(clusters)
        self.mark_dirty()
        return removed

    def split_off(self, col: int) -> "Row":
        tail = Row(clusters=self.clusters[col:])
        del self.clusters[col:]
        self.mark_dirty()
        return tail

    def extend(self, clusters: Sequence[str]) -> None:
        self.clusters.extend(clusters)
        self.mark_dirty()

    def store_highlight(self, spans: Tuple["Span", ...], end_state: "LexState") -> None:
        self.spans = spans
        self.end_state = end_state
        self.dirty = False


__all__ = ["Row"]
