"""In-memory styled text document.

Purpose
-------
Hold the captured output as an ordered sequence of styled runs, address it by
character offset and by line, and notify subscribers about every mutation.

Contents
--------
* :class:`BadLocationError` - raised for offsets outside the document.
* :class:`EventKind` / :class:`DocumentEvent` - change notifications.
* :class:`StyledRun` - a text span carrying an optional style tag.
* :class:`TextDocument` - the document itself.

System Role
-----------
The single shared mutable resource. It is not thread-safe: every mutation is
expected to run on the rendering thread (see
:mod:`lib_message_console.adapters.render_thread`).
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Iterator

#: Line separator used for line addressing. Every end-of-line marker
#: (``"\n"`` or ``"\r\n"``) ends with it.
LINE_FEED = "\n"


class BadLocationError(IndexError):
    """Offset or length does not address a valid range in the document."""


class EventKind(Enum):
    INSERT = "insert"
    REMOVE = "remove"


@dataclass(frozen=True, slots=True)
class DocumentEvent:
    """Describe one mutation of a :class:`TextDocument`."""

    kind: EventKind
    offset: int
    length: int
    #: Insertions: the writer put text at the head rather than appending it.
    #: Removals: the removed range began at offset 0.
    at_start: bool = False

    @property
    def delta(self) -> int:
        """Signed change of the document length."""

        return self.length if self.kind is EventKind.INSERT else -self.length


@dataclass(frozen=True, slots=True)
class StyledRun:
    """Span of text rendered with ``style`` (``None`` means the default style)."""

    text: str
    style: Any = None


DocumentListener = Callable[[DocumentEvent], None]


class TextDocument:
    """Ordered, styled character buffer with change notifications.

    Examples
    --------
    >>> doc = TextDocument()
    >>> doc.insert(0, "world")
    >>> doc.insert(0, "hello ", "red")
    >>> doc.text()
    'hello world'
    >>> [run.style for run in doc.runs()]
    ['red', None]
    """

    def __init__(self, text: str = "", style: Any = None) -> None:
        self._runs: list[StyledRun] = [StyledRun(text, style)] if text else []
        self._text = text
        self._listeners: list[DocumentListener] = []

    @property
    def length(self) -> int:
        """Return the number of characters in the document."""

        return len(self._text)

    def __len__(self) -> int:
        return len(self._text)

    def text(self) -> str:
        """Return the full document content without styling."""

        return self._text

    def get_text(self, offset: int, length: int) -> str:
        """Return ``length`` characters starting at ``offset``."""
        self._check_range(offset, length)
        return self._text[offset : offset + length]

    def runs(self) -> list[StyledRun]:
        """Return a copy of the styled runs from the head of the document."""

        return list(self._runs)

    def __iter__(self) -> Iterator[StyledRun]:
        return iter(list(self._runs))

    def insert(self, offset: int, text: str, style: Any = None, *, at_start: bool | None = None) -> None:
        """Insert ``text`` at ``offset`` with ``style``.

        ``at_start`` records the writer's intent on the emitted event. When
        omitted it is ``True`` only for offset 0 in a non-empty document, since
        an insertion into an empty document is indistinguishable from an append.

        Raises
        ------
        BadLocationError
            When ``offset`` lies outside ``[0, length]``.
        """
        if offset < 0 or offset > len(self._text):
            raise BadLocationError(f"Invalid insert offset {offset} for document of length {len(self._text)}")
        if not text:
            return
        if at_start is None:
            at_start = offset == 0 and bool(self._text)
        index = self._split_at(offset)
        self._runs.insert(index, StyledRun(text, style))
        self._coalesce()
        self._text = self._text[:offset] + text + self._text[offset:]
        self._notify(DocumentEvent(EventKind.INSERT, offset, len(text), at_start))

    def remove(self, offset: int, length: int) -> None:
        """Delete ``length`` characters starting at ``offset``."""
        self._check_range(offset, length)
        if length == 0:
            return
        start = self._split_at(offset)
        end = self._split_at(offset + length)
        del self._runs[start:end]
        self._coalesce()
        self._text = self._text[:offset] + self._text[offset + length :]
        self._notify(DocumentEvent(EventKind.REMOVE, offset, length, offset == 0))

    def clear(self) -> None:
        """Remove the whole content."""
        self.remove(0, len(self._text))

    # Line addressing ---------------------------------------------------

    def line_count(self) -> int:
        """Return the number of lines: line feeds plus one.

        A trailing line feed therefore opens an empty last line.

        Examples
        --------
        >>> TextDocument("a\\nb\\n").line_count()
        3
        >>> TextDocument().line_count()
        1
        """

        return self._text.count(LINE_FEED) + 1

    def line_end_offset(self, index: int) -> int:
        """Return the offset just past the terminator of line ``index``.

        For the last line (which has no terminator) the document length is
        returned.
        """
        if index < 0:
            raise BadLocationError(f"Invalid line index {index}")
        position = -1
        for _ in range(index + 1):
            position = self._text.find(LINE_FEED, position + 1)
            if position == -1:
                break
        if position == -1:
            if index >= self.line_count():
                raise BadLocationError(f"Invalid line index {index} for document with {self.line_count()} lines")
            return len(self._text)
        return position + 1

    def lines(self) -> list[str]:
        """Return the document split into lines (terminators removed)."""

        return self._text.split(LINE_FEED)

    # Subscriptions -----------------------------------------------------

    def add_listener(self, listener: DocumentListener, *, first: bool = False) -> None:
        """Subscribe ``listener``; ``first`` places it ahead of existing ones."""
        if first:
            self._listeners.insert(0, listener)
        else:
            self._listeners.append(listener)

    def remove_listener(self, listener: DocumentListener) -> None:
        """Unsubscribe ``listener``; unknown listeners are ignored."""
        try:
            self._listeners.remove(listener)
        except ValueError:
            return

    @property
    def listeners(self) -> tuple[DocumentListener, ...]:
        return tuple(self._listeners)

    # Internals ---------------------------------------------------------

    def _check_range(self, offset: int, length: int) -> None:
        if offset < 0 or length < 0 or offset + length > len(self._text):
            raise BadLocationError(f"Invalid range ({offset}, {length}) for document of length {len(self._text)}")

    def _split_at(self, offset: int) -> int:
        """Ensure a run boundary at ``offset`` and return the index of the run starting there."""
        position = 0
        for index, run in enumerate(self._runs):
            if position == offset:
                return index
            end = position + len(run.text)
            if offset < end:
                cut = offset - position
                self._runs[index : index + 1] = [
                    StyledRun(run.text[:cut], run.style),
                    StyledRun(run.text[cut:], run.style),
                ]
                return index + 1
            position = end
        return len(self._runs)

    def _coalesce(self) -> None:
        merged: list[StyledRun] = []
        for run in self._runs:
            if not run.text:
                continue
            if merged and merged[-1].style == run.style:
                merged[-1] = StyledRun(merged[-1].text + run.text, run.style)
            else:
                merged.append(run)
        self._runs = merged

    def _notify(self, event: DocumentEvent) -> None:
        for listener in tuple(self._listeners):
            listener(event)


__all__ = [
    "BadLocationError",
    "DocumentEvent",
    "DocumentListener",
    "EventKind",
    "LINE_FEED",
    "StyledRun",
    "TextDocument",
]
