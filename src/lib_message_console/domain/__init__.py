"""Domain entities and value objects used by the capture console."""

from __future__ import annotations

from .document import BadLocationError, DocumentEvent, EventKind, StyledRun, TextDocument
from .line_buffer import Emission, LineBuffer
from .modes import ConsoleMode

__all__ = [
    "BadLocationError",
    "ConsoleMode",
    "DocumentEvent",
    "Emission",
    "EventKind",
    "LineBuffer",
    "StyledRun",
    "TextDocument",
]
