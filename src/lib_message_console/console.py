"""Message console façade wiring sinks, limiter, viewport, and scheduler.

Purpose
-------
Expose the entry point host applications use: create a console over a
document, obtain per-producer sinks or text streams (optionally colour coded
and mirrored to another writer), capture ``sys.stdout`` / ``sys.stderr`` for
a bounded scope, and cap the number of retained lines.

Contents
--------
* :class:`MessageConsole` - composition root of the capture pipeline.

System Role
-----------
Nothing here touches process-wide streams implicitly: redirection only happens
inside :meth:`MessageConsole.capture_stdout` / :meth:`MessageConsole.capture_stderr`,
and only for the duration of the ``with`` block.
"""

from __future__ import annotations

import logging
import os
from contextlib import contextmanager, redirect_stderr, redirect_stdout
from typing import Any, Callable, Iterator

from lib_message_console.adapters.render_thread import InlineScheduler
from lib_message_console.adapters.streams import SinkTextStream
from lib_message_console.application.line_limiter import LineLimiter
from lib_message_console.application.output_sink import OutputSink
from lib_message_console.application.ports.document import DocumentPort
from lib_message_console.application.ports.scheduler import ScheduledTask, SchedulerPort
from lib_message_console.application.ports.viewport import ViewportPort
from lib_message_console.application.ports.writer import TextWriterPort
from lib_message_console.config import ConsoleSettings
from lib_message_console.domain.document import TextDocument
from lib_message_console.domain.modes import ConsoleMode


LOGGER = logging.getLogger(__name__)

_UNSET: Any = object()


class MessageConsole:
    """Display text from several producers in one document.

    Each producer can have its text shown in a different style. Text is either
    appended to the end of the document or inserted as its first line, and the
    number of retained lines can be limited.

    Examples
    --------
    >>> console = MessageConsole(eol="\\n")
    >>> out = console.redirect_out()
    >>> print("hello", file=out)
    >>> print("world", file=out)
    >>> console.document.text()
    'hello\\nworld'
    """

    def __init__(
        self,
        document: DocumentPort | None = None,
        *,
        append: bool = True,
        scheduler: SchedulerPort | None = None,
        viewport: ViewportPort | None = None,
        eol: str = os.linesep,
        out_style: Any = None,
        err_style: Any = None,
        diagnostic: Callable[[str, dict[str, Any]], None] | None = None,
    ) -> None:
        """Wire the console.

        Parameters
        ----------
        document:
            Shared document; a fresh :class:`TextDocument` when omitted.
        append:
            ``True`` appends output at the end, ``False`` inserts it at the
            head. Fixed for the console's lifetime.
        scheduler:
            Rendering-thread dispatcher. Defaults to :class:`InlineScheduler`,
            which is only safe with a single producer thread; pass a started
            :class:`~lib_message_console.adapters.render_thread.RenderThread`
            for concurrent producers.
        viewport:
            Optional view scrolled (append mode) or re-positioned (insert mode)
            after each emission. Can be replaced later via :attr:`viewport`.
        eol:
            End-of-line marker shared by every sink.
        out_style / err_style:
            Default styles for :meth:`redirect_out` / :meth:`redirect_err`.
        diagnostic:
            Optional ``(name, payload)`` hook handed to every sink.
        """
        self._document: DocumentPort = document if document is not None else TextDocument()
        self._mode = ConsoleMode.from_flag(append)
        self._scheduler: SchedulerPort = scheduler if scheduler is not None else InlineScheduler()
        self._viewport = viewport
        self._eol = eol
        self._out_style = out_style
        self._err_style = err_style
        self._diagnostic = diagnostic
        self._limiter: LineLimiter | None = None

    @classmethod
    def from_settings(
        cls,
        settings: ConsoleSettings,
        *,
        document: DocumentPort | None = None,
        scheduler: SchedulerPort | None = None,
        viewport: ViewportPort | None = None,
        diagnostic: Callable[[str, dict[str, Any]], None] | None = None,
    ) -> "MessageConsole":
        """Build a console from resolved :class:`ConsoleSettings`."""
        console = cls(
            document,
            append=settings.mode.is_append,
            scheduler=scheduler,
            viewport=viewport,
            eol=settings.eol,
            out_style=settings.out_style,
            err_style=settings.err_style,
            diagnostic=diagnostic,
        )
        if settings.max_lines is not None:
            console.set_message_lines(settings.max_lines)
        return console

    @property
    def document(self) -> DocumentPort:
        return self._document

    @property
    def mode(self) -> ConsoleMode:
        return self._mode

    @property
    def is_append(self) -> bool:
        return self._mode.is_append

    @property
    def scheduler(self) -> SchedulerPort:
        return self._scheduler

    @property
    def eol(self) -> str:
        return self._eol

    @property
    def viewport(self) -> ViewportPort | None:
        """View repositioned after each emission; ``None`` disables repositioning."""

        return self._viewport

    @viewport.setter
    def viewport(self, viewport: ViewportPort | None) -> None:
        self._viewport = viewport

    @property
    def limiter(self) -> LineLimiter | None:
        """Currently attached :class:`LineLimiter`, if any."""

        return self._limiter

    def create_sink(self, style: Any = None, passthrough: TextWriterPort | None = None) -> OutputSink:
        """Return a new byte sink writing into this console's document."""
        return OutputSink(
            document=self._document,
            scheduler=self._scheduler,
            mode=self._mode,
            style=style,
            passthrough=passthrough,
            viewport=lambda: self._viewport,
            eol=self._eol,
            diagnostic=self._diagnostic,
        )

    def redirect_out(self, style: Any = _UNSET, passthrough: TextWriterPort | None = None) -> SinkTextStream:
        """Return a text stream for standard-output style producers.

        ``style`` defaults to the console's ``out_style``. When ``passthrough``
        is given, every block is written to it after it reached the document.
        """
        chosen = self._out_style if style is _UNSET else style
        return SinkTextStream(self.create_sink(chosen, passthrough))

    def redirect_err(self, style: Any = _UNSET, passthrough: TextWriterPort | None = None) -> SinkTextStream:
        """Return a text stream for standard-error style producers (``err_style`` by default)."""
        chosen = self._err_style if style is _UNSET else style
        return SinkTextStream(self.create_sink(chosen, passthrough))

    @contextmanager
    def capture_stdout(self, style: Any = _UNSET, passthrough: TextWriterPort | None = None) -> Iterator[SinkTextStream]:
        """Route ``sys.stdout`` into the console for the duration of the block."""
        stream = self.redirect_out(style, passthrough)
        with redirect_stdout(stream):
            yield stream

    @contextmanager
    def capture_stderr(self, style: Any = _UNSET, passthrough: TextWriterPort | None = None) -> Iterator[SinkTextStream]:
        """Route ``sys.stderr`` into the console for the duration of the block."""
        stream = self.redirect_err(style, passthrough)
        with redirect_stderr(stream):
            yield stream

    def set_message_lines(self, lines: int) -> LineLimiter:
        """Limit the document to ``lines`` lines.

        The previous limiter is detached before the new one is attached, on the
        rendering thread. The limit applies from the next document change on.
        """
        limiter = LineLimiter(lines, mode=self._mode, eol=self._eol)

        def swap() -> None:
            if self._limiter is not None:
                self._limiter.detach()
            limiter.attach(self._document)
            self._limiter = limiter

        self._scheduler.invoke_and_wait(ScheduledTask(swap, name="set_message_lines"))
        LOGGER.debug("Line limit set to %d (%s mode)", lines, self._mode.value)
        return limiter


__all__ = ["MessageConsole"]
