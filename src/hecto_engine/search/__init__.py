"""Incremental search and multi-match editing."""

from .engine import Direction, Match, SearchEngine, SearchState

__all__ = ["Direction", "Match", "SearchEngine", "SearchState"]
