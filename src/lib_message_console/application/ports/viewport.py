"""Viewport port describing the scrollable view over the document.

Purpose
-------
Let sinks reposition the view after output arrives without knowing how the
document is displayed.

Contents
--------
* :class:`ViewportPort` - runtime-checkable protocol with ``scroll_to_bottom``
  and ``set_caret_position``.

System Role
-----------
Both calls are best-effort conveniences; callers log and ignore failures.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class ViewportPort(Protocol):
    """Scrollable view over a document."""

    def scroll_to_bottom(self) -> None:
        """Show the end of the document."""

    def set_caret_position(self, offset: int) -> None:
        """Move the caret (and the view) to ``offset``."""


__all__ = ["ViewportPort"]
