"""Port for the optional pass-through writer receiving a copy of each block."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class TextWriterPort(Protocol):
    """Any text stream; ``sys.__stdout__`` and ``io.StringIO`` both qualify."""

    def write(self, text: str) -> int | None:
        """Write ``text`` verbatim."""


__all__ = ["TextWriterPort"]
