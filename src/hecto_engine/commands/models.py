"""Command vocabulary exchanged with the key-dispatch collaborator."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Optional

from hecto_engine.search.engine import Direction


EDIT_MODE = "edit"
SEARCH_MODE = "search"


class CommandKind(str, Enum):
    INSERT_CHAR = "insert-char"
    INSERT_TAB = "insert-tab"
    INSERT_NEWLINE = "insert-newline"
    DELETE_BACKWARD = "delete-char-backward"
    DELETE_FORWARD = "delete-char-forward"
    MOVE_CURSOR = "move-cursor"
    BEGIN_SELECTION = "begin-selection"
    CLEAR_SELECTION = "clear-selection"
    UNDO = "undo"
    REDO = "redo"
    BEGIN_SEARCH = "begin-search"
    SEARCH_NEXT = "search-next"
    SEARCH_PREV = "search-prev"
    ADD_AND_SEARCH = "add-and-search"
    DELETE_MATCHES = "delete-matches"
    REPLACE_MATCHES = "replace-matches"
    COMMIT_SEARCH = "commit-search"
    CANCEL_SEARCH = "cancel-search"
    EVALUATE_EXPRESSION = "evaluate-expression"
    COPY = "copy"
    PASTE = "paste"


EDIT_KINDS = frozenset(
    {
        CommandKind.INSERT_CHAR,
        CommandKind.INSERT_TAB,
        CommandKind.INSERT_NEWLINE,
        CommandKind.DELETE_BACKWARD,
        CommandKind.DELETE_FORWARD,
        CommandKind.UNDO,
        CommandKind.REDO,
        CommandKind.DELETE_MATCHES,
        CommandKind.REPLACE_MATCHES,
        CommandKind.EVALUATE_EXPRESSION,
        CommandKind.PASTE,
    }
)

SEARCH_KINDS = frozenset(
    {
        CommandKind.BEGIN_SEARCH,
        CommandKind.SEARCH_NEXT,
        CommandKind.SEARCH_PREV,
        CommandKind.ADD_AND_SEARCH,
        CommandKind.DELETE_MATCHES,
        CommandKind.REPLACE_MATCHES,
        CommandKind.COMMIT_SEARCH,
        CommandKind.CANCEL_SEARCH,
    }
)


class Motion(str, Enum):
    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    DOWN = "down"
    HOME = "home"
    END = "end"
    DOCUMENT_START = "document-start"
    DOCUMENT_END = "document-end"


@dataclass(frozen=True, slots=True)
class Command:
    """One normalized input event.

    ``text`` carries typed characters, search patterns, and replacement text;
    ``motion`` and ``extend`` describe cursor movement.
    """

    kind: CommandKind
    text: Optional[str] = None
    motion: Optional[Motion] = None
    extend: bool = False
    direction: Optional[Direction] = None

    @property
    def is_edit(self) -> bool:
        return self.kind in EDIT_KINDS

    @property
    def is_search(self) -> bool:
        return self.kind in SEARCH_KINDS

    @classmethod
    def insert(cls, text: str) -> "Command":
        return cls(CommandKind.INSERT_CHAR, text=text)

    @classmethod
    def move(cls, motion: Motion, *, extend: bool = False) -> "Command":
        return cls(CommandKind.MOVE_CURSOR, motion=motion, extend=extend)

    @classmethod
    def search(cls, pattern: str) -> "Command":
        return cls(CommandKind.BEGIN_SEARCH, text=pattern)

    @classmethod
    def of(cls, kind: CommandKind) -> "Command":
        return cls(kind)


@dataclass(slots=True)
class CommandResult:
    """Outcome reported back to the dispatcher after each command."""

    consumed: bool
    switch_to: Optional[str] = None
    status: str = "ok"
    message: Optional[str] = None
    mode: str = EDIT_MODE
    changed: bool = False


class SessionBus:
    """Minimal event bus the session uses to notify collaborators."""

    def __init__(self) -> None:
        self._subscribers: Dict[str, list[Callable[[object], None]]] = {}

    def subscribe(self, event: str, callback: Callable[[object], None]) -> None:
        self._subscribers.setdefault(event, []).append(callback)

    def emit(self, event: str, payload: object | None = None) -> None:
        for callback in self._subscribers.get(event, []):
            callback(payload)


__all__ = [
    "EDIT_MODE",
    "SEARCH_MODE",
    "CommandKind",
    "EDIT_KINDS",
    "SEARCH_KINDS",
    "Motion",
    "Command",
    "CommandResult",
    "SessionBus",
]
