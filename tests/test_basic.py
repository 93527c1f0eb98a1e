"""Metadata helpers backing the CLI banner."""

from __future__ import annotations

import pytest

from lib_message_console import __init__conf__, summary_info


def test_summary_info_contains_metadata() -> None:
    summary = summary_info()
    assert "Info for lib_message_console" in summary
    assert "version" in summary
    assert __init__conf__.version in summary
    assert summary.endswith("\n")


def test_summary_info_is_idempotent() -> None:
    assert summary_info() == summary_info()


def test_print_info_defaults_to_stdout(capsys: pytest.CaptureFixture[str]) -> None:
    __init__conf__.print_info()
    captured = capsys.readouterr()
    assert captured.out == summary_info()
    assert captured.err == ""
