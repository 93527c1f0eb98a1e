"""Byte sink that turns a producer's flushes into styled document blocks.

Purpose
-------
Intercept the raw output of one producer (typically standard output or
standard error), frame it into whole lines with :class:`LineBuffer`, insert the
result into the shared document with the producer's style and forward a copy
to an optional pass-through writer.

Contents
--------
* :class:`OutputSink` - ``write(bytes)`` / ``flush()`` stream collaborator.

System Role
-----------
Each producer thread owns one sink. :meth:`OutputSink.flush` decodes on the
producer thread and then marshals framing plus insertion onto the rendering
thread as one :class:`ScheduledTask`, blocking until it has been applied.
Insertions that fail because their offset went stale are discarded and counted
rather than raised.
"""

from __future__ import annotations

import logging
import os
from typing import Any, Callable

from lib_message_console.application.ports.document import DocumentPort
from lib_message_console.application.ports.scheduler import ScheduledTask, SchedulerPort
from lib_message_console.application.ports.viewport import ViewportPort
from lib_message_console.application.ports.writer import TextWriterPort
from lib_message_console.domain.document import BadLocationError
from lib_message_console.domain.line_buffer import Emission, LineBuffer
from lib_message_console.domain.modes import ConsoleMode


LOGGER = logging.getLogger(__name__)

DiagnosticHook = Callable[[str, dict[str, Any]], None] | None
ViewportProvider = Callable[[], ViewportPort | None]


class OutputSink:
    """Collect a producer's bytes and publish them as framed, styled blocks.

    Examples
    --------
    >>> from lib_message_console.adapters.render_thread import InlineScheduler
    >>> from lib_message_console.domain.document import TextDocument
    >>> doc = TextDocument()
    >>> sink = OutputSink(document=doc, scheduler=InlineScheduler(), mode=ConsoleMode.APPEND, eol="\\n")
    >>> sink.write(b"hello")
    5
    >>> sink.flush()
    >>> doc.text()
    'hello'
    """

    def __init__(
        self,
        *,
        document: DocumentPort,
        scheduler: SchedulerPort,
        mode: ConsoleMode,
        style: Any = None,
        passthrough: TextWriterPort | None = None,
        viewport: ViewportProvider | None = None,
        eol: str = os.linesep,
        encoding: str = "utf-8",
        diagnostic: DiagnosticHook = None,
    ) -> None:
        """Configure the sink.

        Parameters
        ----------
        document:
            Shared document receiving the framed blocks.
        scheduler:
            Rendering-thread dispatcher; every document access goes through it.
        mode:
            Framing mode of the owning console.
        style:
            Opaque style tag attached to inserted runs; ``None`` keeps the
            document default.
        passthrough:
            Optional writer receiving each block verbatim after insertion.
        viewport:
            Callable returning the current viewport (or ``None``); resolved on
            every emission so the console may swap viewports later.
        eol:
            End-of-line marker completing a logical line.
        encoding:
            Codec used to decode flushed bytes. Malformed input raises.
        diagnostic:
            Optional ``(name, payload)`` callback informed about discarded
            insertions.
        """
        self._document = document
        self._scheduler = scheduler
        self._style = style
        self._passthrough = passthrough
        self._viewport = viewport
        self._encoding = encoding
        self._diagnostic = diagnostic
        self._bytes = bytearray()
        self._line_buffer = LineBuffer(mode=mode, eol=eol)
        self._dropped_blocks = 0

    @property
    def mode(self) -> ConsoleMode:
        return self._line_buffer.mode

    @property
    def eol(self) -> str:
        return self._line_buffer.eol

    @property
    def encoding(self) -> str:
        return self._encoding

    @property
    def style(self) -> Any:
        return self._style

    @property
    def passthrough(self) -> TextWriterPort | None:
        return self._passthrough

    @property
    def line_buffer(self) -> LineBuffer:
        return self._line_buffer

    @property
    def dropped_blocks(self) -> int:
        """Number of blocks lost because the document rejected their offset."""

        return self._dropped_blocks

    def writable(self) -> bool:
        return True

    def write(self, data: bytes | bytearray | memoryview) -> int:
        """Append raw bytes; nothing reaches the document before :meth:`flush`."""
        self._bytes.extend(data)
        return len(data)

    def flush(self) -> None:
        """Decode buffered bytes and publish them through the framing policy.

        Raises
        ------
        UnicodeDecodeError
            When the buffered bytes are not valid for :attr:`encoding`. The
            malformed batch is discarded.
        """
        try:
            message = bytes(self._bytes).decode(self._encoding)
        except UnicodeDecodeError:
            self._bytes.clear()
            raise
        if not message:
            return
        try:
            self._scheduler.invoke_and_wait(ScheduledTask(lambda: self._publish(message), name="sink_flush"))
        finally:
            self._bytes.clear()

    def _publish(self, message: str) -> None:
        """Frame ``message`` and apply it; runs on the rendering thread."""
        emission = self._line_buffer.feed(message, document_length=self._document.length)
        if emission is None:
            return
        self._insert(emission)
        if self._passthrough is not None:
            self._passthrough.write(emission.text)

    def _insert(self, emission: Emission) -> None:
        offset = 0 if emission.at_start else self._document.length
        try:
            self._document.insert(offset, emission.text, self._style, at_start=emission.at_start)
        except BadLocationError as exc:
            self._note_discarded(offset, emission, exc)
            return
        viewport = self._viewport() if self._viewport is not None else None
        if viewport is None:
            return
        if emission.at_start:
            _best_effort(lambda: viewport.set_caret_position(0))
        else:
            self._scheduler.invoke_later(ScheduledTask(lambda: _best_effort(viewport.scroll_to_bottom), name="scroll_to_bottom"))

    def _note_discarded(self, offset: int, emission: Emission, exc: BadLocationError) -> None:
        self._dropped_blocks += 1
        LOGGER.debug("Discarded %d characters at stale offset %d: %s", len(emission.text), offset, exc)
        if self._diagnostic is None:
            return
        try:
            self._diagnostic(
                "sink_insert_discarded",
                {"offset": offset, "length": len(emission.text), "dropped_blocks": self._dropped_blocks},
            )
        except Exception as diagnostic_exc:  # noqa: BLE001
            LOGGER.error("Sink diagnostic hook raised while reporting a discarded block", exc_info=diagnostic_exc)


def _best_effort(action: Callable[[], None]) -> None:
    """Run a viewport update, logging instead of raising on failure."""
    try:
        action()
    except Exception as exc:  # noqa: BLE001
        LOGGER.debug("Viewport update failed; ignoring", exc_info=exc)


__all__ = ["OutputSink"]
