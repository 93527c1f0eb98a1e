"""Application layer: output sinks, line limiting, and collaborator ports."""

from __future__ import annotations

from .line_limiter import LineLimiter
from .output_sink import OutputSink

__all__ = ["LineLimiter", "OutputSink"]
