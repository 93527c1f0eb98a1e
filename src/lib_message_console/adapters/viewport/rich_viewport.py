"""Rich-powered viewport implementing :class:`ViewportPort`.

Purpose
-------
Display the captured document on a terminal: styled runs become Rich
:class:`~rich.text.Text` spans, and a fixed-height window follows the caret or
the end of the output.

Contents
--------
* :class:`RichViewport` - viewport adapter used by the CLI demo and by hosts
  without a GUI toolkit.

System Role
-----------
Human-facing sink of the console; runs on the rendering thread like every other
document reader.
"""

from __future__ import annotations

from rich.console import Console
from rich.text import Text

from lib_message_console.application.ports.document import DocumentPort
from lib_message_console.application.ports.viewport import ViewportPort
from lib_message_console.domain.document import LINE_FEED, BadLocationError, TextDocument


class RichViewport(ViewportPort):
    """Window of ``height`` lines over a :class:`TextDocument`.

    Examples
    --------
    >>> from io import StringIO
    >>> doc = TextDocument("one\\ntwo\\nthree")
    >>> viewport = RichViewport(doc, console=Console(file=StringIO(), record=True), height=2)
    >>> viewport.scroll_to_bottom()
    >>> viewport.visible_lines()
    ['two', 'three']
    """

    def __init__(
        self,
        document: TextDocument,
        *,
        console: Console | None = None,
        height: int | None = None,
        no_color: bool = False,
    ) -> None:
        """Bind the viewport to ``document``; ``height=None`` shows every line."""
        if height is not None and height <= 0:
            raise ValueError("height must be positive")
        self._document = document
        self._console = console if console is not None else Console(no_color=no_color)
        self._height = height
        self._no_color = no_color
        self._top_line = 0
        self._caret = 0

    @property
    def document(self) -> DocumentPort:
        return self._document

    @property
    def console(self) -> Console:
        return self._console

    @property
    def top_line(self) -> int:
        """Index of the first visible line."""

        return self._top_line

    @property
    def caret_position(self) -> int:
        return self._caret

    def scroll_to_bottom(self) -> None:
        """Move the window so the last line is visible."""
        self._top_line = self._bottom_top_line()

    def set_caret_position(self, offset: int) -> None:
        """Place the caret at ``offset`` and scroll its line into view."""
        if offset < 0 or offset > self._document.length:
            raise BadLocationError(f"Invalid caret offset {offset} for document of length {self._document.length}")
        self._caret = offset
        caret_line = self._document.text().count(LINE_FEED, 0, offset)
        if caret_line < self._top_line:
            self._top_line = caret_line
        elif self._height is not None and caret_line >= self._top_line + self._height:
            self._top_line = caret_line - self._height + 1

    def visible_lines(self) -> list[str]:
        """Return the plain text of the lines inside the window."""
        lines = self._document.lines()
        top = min(self._top_line, self._bottom_top_line())
        end = None if self._height is None else top + self._height
        return lines[top:end]

    def render(self) -> Text:
        """Return the whole document as styled Rich text."""
        text = Text()
        for run in self._document.runs():
            style = None if self._no_color else run.style
            text.append(run.text, style=style)
        return text

    def render_window(self) -> Text:
        """Return the visible window as styled Rich text."""
        lines = self.render().split(LINE_FEED, allow_blank=True)
        top = min(self._top_line, self._bottom_top_line())
        end = len(lines) if self._height is None else top + self._height
        return Text(LINE_FEED).join(lines[top:end])

    def refresh(self) -> None:
        """Print the visible window to the console."""
        self._console.print(self.render_window(), highlight=False, markup=False)

    def _bottom_top_line(self) -> int:
        if self._height is None:
            return 0
        return max(0, self._document.line_count() - self._height)


__all__ = ["RichViewport"]
