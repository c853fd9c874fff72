"""Grammar-driven, incremental syntax highlighting."""

from .defaults import DEFAULT_GRAMMARS, load_default_grammars
from .engine import HighlightEngine
from .grammar import PLAIN_TEXT, Grammar, GrammarConflictError, GrammarRegistry
from .states import Category, LexState, Span, StateKind

__all__ = [
    "DEFAULT_GRAMMARS",
    "load_default_grammars",
    "HighlightEngine",
    "PLAIN_TEXT",
    "Grammar",
    "GrammarConflictError",
    "GrammarRegistry",
    "Category",
    "LexState",
    "Span",
    "StateKind",
]
