"""In-process clipboard used by the copy and paste commands."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import Deque, List, Optional, Sequence, Tuple


@dataclass(frozen=True, slots=True)
class ClipboardEntry:
    pieces: Tuple[str, ...]

    @property
    def text(self) -> str:
        return "\n".join(self.pieces)


class Clipboard:
    """Most-recent-first ring of copied text.

    Copying several selections at once keeps each piece, so a paste into the
    same number of carets can hand one piece to each; otherwise every caret
    receives the joined text.
    """

    def __init__(self, *, capacity: int = 32) -> None:
        self._ring: Deque[ClipboardEntry] = deque(maxlen=capacity)

    def __len__(self) -> int:
        return len(self._ring)

    def copy(self, texts: Sequence[str]) -> ClipboardEntry:
        entry = ClipboardEntry(pieces=tuple(texts))
        self._ring.appendleft(entry)
        return entry

    def latest(self) -> Optional[ClipboardEntry]:
        return self._ring[0] if self._ring else None

    def pieces_for(self, carets: int) -> Optional[List[str]]:
        entry = self.latest()
        if entry is None:
            return None
        if carets > 1 and len(entry.pieces) == carets:
            return list(entry.pieces)
        return [entry.text] * carets


__all__ = ["Clipboard", "ClipboardEntry"]
