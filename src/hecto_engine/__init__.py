"""Editing core for a terminal text editor."""

__all__ = [
    "analysis",
    "buffer",
    "commands",
    "highlight",
    "runtime",
    "search",
]

__version__ = "0.1.0"
