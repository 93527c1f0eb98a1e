"""Framing mode shared by every sink attached to one console.

Purpose
-------
Decide where new output lands in the document and which end of the document
the line limiter trims.

Contents
--------
* :class:`ConsoleMode` enum with name/flag conversion helpers.
"""

from __future__ import annotations

from enum import Enum


class ConsoleMode(Enum):
    """Append output at the end of the document or insert it at the head."""

    APPEND = "append"
    INSERT = "insert"

    @property
    def is_append(self) -> bool:
        """Return ``True`` when new output goes to the end of the document."""

        return self is ConsoleMode.APPEND

    @classmethod
    def from_name(cls, name: str) -> "ConsoleMode":
        """Resolve a case-insensitive mode name.

        Examples
        --------
        >>> ConsoleMode.from_name(" Insert ")
        <ConsoleMode.INSERT: 'insert'>
        """
        normalized = name.strip().lower()
        try:
            return cls(normalized)
        except ValueError as exc:
            raise ValueError(f"Unknown console mode: {name!r}") from exc

    @classmethod
    def from_flag(cls, append: bool) -> "ConsoleMode":
        return cls.APPEND if append else cls.INSERT


__all__ = ["ConsoleMode"]
