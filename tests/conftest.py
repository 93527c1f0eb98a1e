"""Shared fixtures for the capture console tests."""

from __future__ import annotations

from io import StringIO
from typing import Iterator

import pytest
from rich.console import Console

from lib_message_console.adapters.render_thread import InlineScheduler, RenderThread
from lib_message_console.domain.document import DocumentEvent, TextDocument

EOL = "\n"


@pytest.fixture
def record_console() -> Console:
    """Rich console writing into memory with recording enabled."""
    return Console(file=StringIO(), record=True, width=120, color_system=None)


@pytest.fixture
def document() -> TextDocument:
    return TextDocument()


@pytest.fixture
def inline_scheduler() -> InlineScheduler:
    return InlineScheduler()


@pytest.fixture
def render_thread() -> Iterator[RenderThread]:
    render = RenderThread(stop_timeout=5.0)
    render.start()
    yield render
    render.stop(drain=True)


class EventRecorder:
    """Document listener capturing events together with the line count it observed."""

    def __init__(self, document: TextDocument) -> None:
        self.document = document
        self.events: list[DocumentEvent] = []
        self.observed_line_counts: list[int] = []

    def __call__(self, event: DocumentEvent) -> None:
        self.events.append(event)
        self.observed_line_counts.append(self.document.line_count())


@pytest.fixture
def event_recorder(document: TextDocument) -> EventRecorder:
    recorder = EventRecorder(document)
    document.add_listener(recorder)
    return recorder
