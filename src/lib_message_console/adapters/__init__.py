"""Adapter implementations for the capture console ports."""

from __future__ import annotations

from .render_thread import InlineScheduler, RenderThread
from .streams import SinkTextStream
from .viewport import RichViewport

__all__ = [
    "InlineScheduler",
    "RenderThread",
    "RichViewport",
    "SinkTextStream",
]
