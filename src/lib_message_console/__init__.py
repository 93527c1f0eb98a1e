"""Capture producer output into a colour-coded, line-limited text document.

Typical use::

    from lib_message_console import MessageConsole, RenderThread

    render = RenderThread()
    render.start()
    console = MessageConsole(scheduler=render)
    console.set_message_lines(500)
    with console.capture_stdout(style="green"):
        print("hello")
"""

from __future__ import annotations

from .__init__conf__ import summary_info
from .adapters import InlineScheduler, RenderThread, RichViewport, SinkTextStream
from .application import LineLimiter, OutputSink
from .application.ports import ScheduledTask
from .config import ConsoleSettings, load_settings
from .console import MessageConsole
from .domain import BadLocationError, ConsoleMode, DocumentEvent, EventKind, LineBuffer, StyledRun, TextDocument

__all__ = [
    "BadLocationError",
    "ConsoleMode",
    "ConsoleSettings",
    "DocumentEvent",
    "EventKind",
    "InlineScheduler",
    "LineBuffer",
    "LineLimiter",
    "MessageConsole",
    "OutputSink",
    "RenderThread",
    "RichViewport",
    "ScheduledTask",
    "SinkTextStream",
    "StyledRun",
    "TextDocument",
    "load_settings",
    "summary_info",
]
