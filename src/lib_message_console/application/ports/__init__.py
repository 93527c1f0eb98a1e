"""Protocols describing the collaborators the capture core depends on."""

from __future__ import annotations

from .document import DocumentPort
from .scheduler import ScheduledTask, SchedulerPort
from .viewport import ViewportPort
from .writer import TextWriterPort

__all__ = [
    "DocumentPort",
    "ScheduledTask",
    "SchedulerPort",
    "TextWriterPort",
    "ViewportPort",
]
