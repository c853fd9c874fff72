"""Boundary types handed to the renderer collaborator."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional, Protocol, Tuple

from .position import Position, Range, Selection

if TYPE_CHECKING:  # pragma: no cover
    from hecto_engine.highlight.states import Span


@dataclass(frozen=True, slots=True)
class RenderRow:
    index: int
    text: str
    spans: Tuple["Span", ...]


@dataclass(frozen=True, slots=True)
class RenderView:
    """Everything a renderer needs to paint one frame; never mutated."""

    top: int
    rows: Tuple[RenderRow, ...]
    cursor: Position
    selections: Tuple[Selection, ...]
    mode: str
    grammar: str
    row_count: int
    modified: bool
    search_pattern: Optional[str] = None
    matches: Tuple[Range, ...] = ()
    current_match: Optional[Range] = None
    status: Optional[str] = None
    attributes: dict[str, str] = field(default_factory=dict)


class RendererSink(Protocol):
    """Implemented by hosts that paint the editor."""

    def paint(self, view: RenderView) -> None:
        """Draw ``view``; called after every processed command."""
        ...


__all__ = ["RenderRow", "RenderView", "RendererSink"]
