"""Text stream front-end for :class:`OutputSink`.

Hosts hand a :class:`SinkTextStream` to ``print(..., file=stream)`` or install
it with :func:`contextlib.redirect_stdout`. Every ``write`` call is encoded,
passed to the sink and flushed immediately, the way an auto-flushing print
stream behaves: ``print("x")`` therefore flushes ``"x"`` and the end-of-line
marker separately, which is what the line framing expects.
"""

from __future__ import annotations

import io

from lib_message_console.application.output_sink import OutputSink


class SinkTextStream(io.TextIOBase):
    """Auto-flushing text stream writing through an :class:`OutputSink`.

    ``"\\n"`` (and ``"\\r\\n"``) in written text is translated to the sink's
    end-of-line marker.
    """

    def __init__(self, sink: OutputSink) -> None:
        super().__init__()
        self._sink = sink

    @property
    def sink(self) -> OutputSink:
        return self._sink

    @property
    def encoding(self) -> str:  # type: ignore[override]
        return self._sink.encoding

    def writable(self) -> bool:
        return True

    def write(self, s: str) -> int:
        if self.closed:
            raise ValueError("I/O operation on closed stream")
        if not isinstance(s, str):
            raise TypeError(f"write() argument must be str, not {type(s).__name__}")
        if not s:
            return 0
        text = s.replace("\r\n", "\n")
        if self._sink.eol != "\n":
            text = text.replace("\n", self._sink.eol)
        self._sink.write(text.encode(self._sink.encoding))
        self._sink.flush()
        return len(s)

    def flush(self) -> None:
        if self.closed:
            return
        self._sink.flush()


__all__ = ["SinkTextStream"]
