"""Port describing the styled text store the sinks write into."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from lib_message_console.domain.document import DocumentListener


@runtime_checkable
class DocumentPort(Protocol):
    """Ordered styled text with line addressing and change notifications."""

    @property
    def length(self) -> int:
        """Return the number of characters currently stored."""

    def insert(self, offset: int, text: str, style: Any = None, *, at_start: bool | None = None) -> None:
        """Insert ``text`` at ``offset``; raise ``BadLocationError`` when out of range.

        ``at_start`` tells listeners whether the text was put at the head of
        the document or appended to its end.
        """

    def remove(self, offset: int, length: int) -> None:
        """Delete ``length`` characters starting at ``offset``."""

    def get_text(self, offset: int, length: int) -> str:
        """Return ``length`` characters starting at ``offset``."""

    def line_count(self) -> int:
        """Return the number of lines (line feeds plus one)."""

    def line_end_offset(self, index: int) -> int:
        """Return the offset just past the terminator of line ``index``."""

    def add_listener(self, listener: DocumentListener, *, first: bool = False) -> None:
        """Subscribe ``listener`` to change notifications."""

    def remove_listener(self, listener: DocumentListener) -> None:
        """Unsubscribe ``listener``."""


__all__ = ["DocumentPort"]
