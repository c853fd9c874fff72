"""Lexer states and highlight categories shared by grammars and the engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Category(str, Enum):
    KEYWORD = "keyword"
    TYPE = "type"
    IDENTIFIER = "identifier"
    NUMBER = "number"
    STRING = "string"
    COMMENT = "comment"
    OPERATOR = "operator"
    PLAIN = "plain"


class StateKind(str, Enum):
    NORMAL = "normal"
    LINE_COMMENT = "line_comment"
    BLOCK_COMMENT = "block_comment"
    STRING = "string"


@dataclass(frozen=True, slots=True)
class LexState:
    """Tokenizer state at a row boundary; compared by value."""

    kind: StateKind = StateKind.NORMAL
    delimiter: Optional[str] = None

    @classmethod
    def in_string(cls, delimiter: str) -> "LexState":
        return cls(StateKind.STRING, delimiter)

    @property
    def is_normal(self) -> bool:
        return self.kind is StateKind.NORMAL


NORMAL = LexState()
LINE_COMMENT = LexState(StateKind.LINE_COMMENT)
BLOCK_COMMENT = LexState(StateKind.BLOCK_COMMENT)


@dataclass(frozen=True, slots=True)
class Span:
    """``length`` clusters starting at column ``start`` share ``category``."""

    start: int
    length: int
    category: Category

    @property
    def end(self) -> int:
        return self.start + self.length


__all__ = [
    "Category",
    "StateKind",
    "LexState",
    "NORMAL",
    "LINE_COMMENT",
    "BLOCK_COMMENT",
    "Span",
]
