from __future__ import annotations

import pytest

from lib_message_console.domain.document import BadLocationError, DocumentEvent, EventKind, StyledRun, TextDocument
from tests.os_markers import OS_AGNOSTIC

pytestmark = [OS_AGNOSTIC]


def test_insert_at_end_and_head_builds_text() -> None:
    doc = TextDocument()
    doc.insert(0, "middle")
    doc.insert(doc.length, " end")
    doc.insert(0, "start ")
    assert doc.text() == "start middle end"
    assert doc.length == len("start middle end")
    assert len(doc) == doc.length


def test_insert_keeps_styles_per_run() -> None:
    doc = TextDocument()
    doc.insert(0, "out", "green")
    doc.insert(3, "err", "red")
    doc.insert(6, "more", "red")
    assert doc.runs() == [StyledRun("out", "green"), StyledRun("errmore", "red")]


def test_insert_inside_run_splits_it() -> None:
    doc = TextDocument("abcd", "blue")
    doc.insert(2, "XY", None)
    assert doc.runs() == [StyledRun("ab", "blue"), StyledRun("XY", None), StyledRun("cd", "blue")]


@pytest.mark.parametrize("offset", [-1, 4])
def test_insert_outside_document_raises(offset: int) -> None:
    doc = TextDocument("abc")
    with pytest.raises(BadLocationError):
        doc.insert(offset, "x")


def test_bad_location_is_an_index_error() -> None:
    assert issubclass(BadLocationError, IndexError)


def test_insert_empty_text_is_silent() -> None:
    doc = TextDocument()
    events: list[DocumentEvent] = []
    doc.add_listener(events.append)
    doc.insert(0, "")
    assert events == []


def test_remove_across_runs() -> None:
    doc = TextDocument()
    doc.insert(0, "aaa", "x")
    doc.insert(3, "bbb", "y")
    doc.insert(6, "ccc", "x")
    doc.remove(2, 5)
    assert doc.text() == "aacc"
    assert doc.runs() == [StyledRun("aacc", "x")]


def test_remove_outside_document_raises() -> None:
    doc = TextDocument("abc")
    with pytest.raises(BadLocationError):
        doc.remove(1, 5)


def test_clear_empties_document() -> None:
    doc = TextDocument("abc\ndef")
    doc.clear()
    assert doc.text() == ""
    assert doc.runs() == []
    assert doc.line_count() == 1


def test_listeners_receive_insert_and_remove_events() -> None:
    doc = TextDocument()
    events: list[DocumentEvent] = []
    doc.add_listener(events.append)
    doc.insert(0, "hello")
    doc.insert(5, " world")
    doc.remove(0, 6)
    assert events == [
        DocumentEvent(EventKind.INSERT, 0, 5, False),
        DocumentEvent(EventKind.INSERT, 5, 6, False),
        DocumentEvent(EventKind.REMOVE, 0, 6, True),
    ]
    assert [event.delta for event in events] == [5, 6, -6]


def test_first_listener_is_notified_before_others() -> None:
    doc = TextDocument()
    order: list[str] = []
    doc.add_listener(lambda event: order.append("late"))
    doc.add_listener(lambda event: order.append("early"), first=True)
    doc.insert(0, "x")
    assert order == ["early", "late"]


def test_remove_listener_ignores_unknown_listener() -> None:
    doc = TextDocument()
    doc.remove_listener(print)
    assert doc.listeners == ()


@pytest.mark.parametrize(
    "text, expected",
    [("", 1), ("one", 1), ("one\ntwo", 2), ("one\ntwo\n", 3), ("a\r\nb", 2)],
)
def test_line_count_counts_line_feeds_plus_one(text: str, expected: int) -> None:
    assert TextDocument(text).line_count() == expected


def test_line_end_offsets_include_terminator() -> None:
    doc = TextDocument("ab\ncde\nf")
    assert doc.line_end_offset(0) == 3
    assert doc.line_end_offset(1) == 7
    assert doc.line_end_offset(2) == 8
    with pytest.raises(BadLocationError):
        doc.line_end_offset(3)


def test_lines_and_get_text() -> None:
    doc = TextDocument("ab\ncd")
    assert doc.lines() == ["ab", "cd"]
    assert doc.get_text(1, 3) == "b\nc"


def test_insert_events_carry_writer_intent() -> None:
    doc = TextDocument()
    events: list[DocumentEvent] = []
    doc.add_listener(events.append)
    doc.insert(0, "first", at_start=False)
    doc.insert(0, "head ")
    doc.insert(0, "newest ", at_start=True)
    doc.insert(doc.length, " tail")
    assert [event.at_start for event in events] == [False, True, True, False]


def test_insert_into_empty_document_defaults_to_append() -> None:
    doc = TextDocument()
    events: list[DocumentEvent] = []
    doc.add_listener(events.append)
    doc.insert(0, "only")
    assert events == [DocumentEvent(EventKind.INSERT, 0, 4, False)]
