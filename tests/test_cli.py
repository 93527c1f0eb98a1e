"""CLI behaviour coverage for the click command group."""

from __future__ import annotations

import re

import pytest
from click.testing import CliRunner

from lib_message_console import __init__conf__
from lib_message_console import cli as cli_mod
from lib_message_console.__init__conf__ import summary_info

ANSI_RE = re.compile(r"\x1b\[[0-9;]*m")


def strip_ansi(text: str) -> str:
    """Return ``text`` without ANSI colour codes.

    Examples
    --------
    >>> strip_ansi("\x1b[31mred\x1b[0m")
    'red'
    """

    return ANSI_RE.sub("", text)


def run_cli(args: list[str] | None = None) -> tuple[int, str]:
    runner = CliRunner()
    result = runner.invoke(cli_mod.cli, args or [], prog_name=__init__conf__.shell_command)
    return result.exit_code, strip_ansi(result.output)


def test_cli_without_subcommand_prints_summary() -> None:
    exit_code, stdout = run_cli()
    assert exit_code == 0
    assert stdout == summary_info()


def test_cli_info_command_matches_summary() -> None:
    exit_code, stdout = run_cli(["info"])
    assert exit_code == 0
    assert stdout == summary_info()


def test_cli_version_flag() -> None:
    exit_code, stdout = run_cli(["--version"])
    assert exit_code == 0
    assert stdout.strip() == __init__conf__.version


def test_demo_renders_both_producers() -> None:
    exit_code, stdout = run_cli(["demo", "--lines", "3", "--no-color"])
    assert exit_code == 0
    lines = [line for line in stdout.splitlines() if line.strip()]
    assert sorted(lines) == sorted([f"{label} line {index}" for label in ("stdout", "stderr") for index in (1, 2, 3)])


def test_demo_respects_line_limit_in_append_mode() -> None:
    exit_code, stdout = run_cli(["demo", "--lines", "4", "--max-lines", "3", "--mode", "append", "--no-color"])
    assert exit_code == 0
    lines = [line for line in stdout.splitlines() if line.strip()]
    assert len(lines) == 3


def test_demo_insert_mode_shows_newest_first() -> None:
    exit_code, stdout = run_cli(["demo", "--lines", "2", "--mode", "insert", "--max-lines", "2", "--no-color"])
    assert exit_code == 0
    lines = [line for line in stdout.splitlines() if line.strip()]
    assert len(lines) == 2
    assert lines[0].endswith("line 2")


def test_demo_rejects_invalid_limit() -> None:
    exit_code, _ = run_cli(["demo", "--max-lines", "0"])
    assert exit_code != 0


def test_main_returns_zero_for_info(capsys: pytest.CaptureFixture[str]) -> None:
    assert cli_mod.main(["info"]) == 0
    assert "Info for lib_message_console" in capsys.readouterr().out


def test_main_reports_usage_errors() -> None:
    assert cli_mod.main(["demo", "--lines", "zero"]) == 2
