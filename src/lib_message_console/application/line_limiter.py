"""Keep a document within a maximum number of lines.

Purpose
-------
Prevent unbounded growth of captured output by trimming the oldest lines
(append mode) or the newest lines (insert mode) whenever an insertion pushes
the document over its limit.

Contents
--------
* :class:`LineLimiter` - document listener with an explicit attach/detach
  lifecycle.

System Role
-----------
Installed by :meth:`lib_message_console.console.MessageConsole.set_message_lines`.
The limiter subscribes ahead of every other listener and trims inside the
triggering notification, so no other subscriber sees an over-limit document.
"""

from __future__ import annotations

import logging
import os

from lib_message_console.application.ports.document import DocumentPort
from lib_message_console.domain.document import DocumentEvent, EventKind
from lib_message_console.domain.modes import ConsoleMode


LOGGER = logging.getLogger(__name__)


class LineLimiter:
    """Trim a document to ``max_lines`` after every insertion.

    Examples
    --------
    >>> from lib_message_console.domain.document import TextDocument
    >>> doc = TextDocument()
    >>> limiter = LineLimiter(2, mode=ConsoleMode.APPEND, eol="\\n")
    >>> limiter.attach(doc)
    >>> doc.insert(0, "one\\ntwo\\nthree")
    >>> doc.text()
    'two\\nthree'
    """

    def __init__(self, max_lines: int, *, mode: ConsoleMode, eol: str = os.linesep) -> None:
        if max_lines <= 0:
            raise ValueError("max_lines must be positive")
        if not eol:
            raise ValueError("eol must not be empty")
        self._max_lines = max_lines
        self._mode = mode
        self._eol = eol
        self._document: DocumentPort | None = None
        self._trimmed_lines = 0

    @property
    def max_lines(self) -> int:
        return self._max_lines

    @property
    def mode(self) -> ConsoleMode:
        return self._mode

    @property
    def eol(self) -> str:
        """End-of-line marker removed together with the last retained line in insert mode."""

        return self._eol

    @property
    def attached(self) -> bool:
        """Return ``True`` while subscribed to a document."""

        return self._document is not None

    @property
    def trimmed_lines(self) -> int:
        """Total number of lines removed since construction."""

        return self._trimmed_lines

    def attach(self, document: DocumentPort) -> None:
        """Subscribe to ``document`` ahead of its other listeners."""
        if self._document is not None:
            raise RuntimeError("LineLimiter is already attached to a document")
        document.add_listener(self._on_change, first=True)
        self._document = document

    def detach(self) -> None:
        """Unsubscribe from the current document; no-op when detached."""
        document = self._document
        if document is None:
            return
        document.remove_listener(self._on_change)
        self._document = None

    def trim(self) -> int:
        """Remove excess lines now and return how many were removed."""
        document = self._document
        if document is None:
            return 0
        excess = document.line_count() - self._max_lines
        if excess <= 0:
            return 0
        if self._mode.is_append:
            document.remove(0, document.line_end_offset(excess - 1))
        else:
            start = self._terminator_start(document, document.line_end_offset(self._max_lines - 1))
            document.remove(start, document.length - start)
        self._trimmed_lines += excess
        LOGGER.debug("Trimmed %d line(s) to keep %d", excess, self._max_lines)
        return excess

    def _terminator_start(self, document: DocumentPort, line_end: int) -> int:
        # The last retained line keeps no terminator, so the whole marker goes.
        width = len(self._eol)
        if width <= line_end and document.get_text(line_end - width, width) == self._eol:
            return line_end - width
        return line_end - 1

    def _on_change(self, event: DocumentEvent) -> None:
        if event.kind is EventKind.INSERT:
            self.trim()


__all__ = ["LineLimiter"]
