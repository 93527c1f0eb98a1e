"""Viewport adapters."""

from __future__ import annotations

from .rich_viewport import RichViewport

__all__ = ["RichViewport"]
