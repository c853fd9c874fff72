"""Command vocabulary and the session that processes it."""

from .models import (
    EDIT_MODE,
    SEARCH_MODE,
    Command,
    CommandKind,
    CommandResult,
    Motion,
    SessionBus,
)
from .session import EditorSession

__all__ = [
    "EDIT_MODE",
    "SEARCH_MODE",
    "Command",
    "CommandKind",
    "CommandResult",
    "Motion",
    "SessionBus",
    "EditorSession",
]
