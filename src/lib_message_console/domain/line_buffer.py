"""Line framing policy for one producer.

Purpose
-------
Fold the fragments a producer flushes (``"message"`` followed by a separate
end-of-line flush, or any other chunking) into complete text blocks and decide
whether a block is appended to the end of the document or inserted at its
head.

Contents
--------
* :class:`Emission` - a framed block ready for the document.
* :class:`LineBuffer` - per-producer pending text plus the framing rules.

System Role
-----------
Pure policy: the caller passes in the current document length and performs the
insertion. :class:`lib_message_console.application.output_sink.OutputSink`
calls :meth:`LineBuffer.feed` on the rendering thread so that reading the
length and inserting happen as one unit.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

from .modes import ConsoleMode


@dataclass(frozen=True, slots=True)
class Emission:
    """Complete block produced by :meth:`LineBuffer.feed`."""

    text: str
    at_start: bool


class LineBuffer:
    """Accumulate flushed fragments and frame them into whole lines.

    Append mode never emits a bare end-of-line marker: it is held back and
    prefixed to the next fragment, so the document never ends in an empty
    line. Insert mode holds everything back until the marker arrives and then
    emits ``message + marker`` at the head of the document.

    Examples
    --------
    >>> buffer = LineBuffer(mode=ConsoleMode.APPEND, eol="\\n")
    >>> buffer.feed("hello", document_length=0)
    Emission(text='hello', at_start=False)
    >>> buffer.feed("\\n", document_length=5) is None
    True
    >>> buffer.feed("world", document_length=5)
    Emission(text='\\nworld', at_start=False)
    """

    def __init__(self, *, mode: ConsoleMode, eol: str = os.linesep) -> None:
        if not eol:
            raise ValueError("eol must not be empty")
        self._mode = mode
        self._eol = eol
        self._pending: list[str] = []
        self._first_line = mode.is_append

    @property
    def mode(self) -> ConsoleMode:
        return self._mode

    @property
    def eol(self) -> str:
        """Return the end-of-line marker that completes a logical line."""

        return self._eol

    @property
    def pending(self) -> str:
        """Return text held back for the next emission."""

        return "".join(self._pending)

    @property
    def first_line(self) -> bool:
        """Return ``True`` until the first block has been emitted in append mode."""

        return self._first_line

    def feed(self, message: str, *, document_length: int) -> Emission | None:
        """Add ``message`` and return the framed block once one is complete."""
        if self._mode.is_append:
            return self._feed_append(message, document_length)
        return self._feed_insert(message, document_length)

    def _feed_append(self, message: str, document_length: int) -> Emission | None:
        # A cleared document must not inherit a marker held back for it.
        if document_length == 0:
            self._pending.clear()
        self._pending.append(message)
        if message == self._eol:
            return None
        return self._emit(document_length)

    def _feed_insert(self, message: str, document_length: int) -> Emission | None:
        self._pending.append(message)
        if message != self._eol:
            return None
        return self._emit(document_length)

    def _emit(self, document_length: int) -> Emission:
        text = "".join(self._pending)
        # Separates this producer from output another sink already wrote,
        # unless a held-back marker already does.
        if self._first_line and document_length != 0 and not text.startswith(self._eol):
            text = "\n" + text
        self._first_line = False
        self._pending.clear()
        return Emission(text=text, at_start=not self._mode.is_append)


__all__ = ["Emission", "LineBuffer"]
