"""Configuration helpers: ``.env`` loading and environment-driven settings.

Purpose
-------
Resolve console settings from explicit arguments, environment variables and
optional ``.env`` files, in that order of precedence.

Contents
--------
* :func:`enable_dotenv` - load the nearest ``.env`` once per process.
* :func:`dotenv_requested` - decide whether the CLI should load ``.env``.
* :class:`ConsoleSettings` / :func:`load_settings` - validated settings.

Environment variables
---------------------
``MESSAGE_CONSOLE_MODE``
    ``append`` (default) or ``insert``.
``MESSAGE_CONSOLE_MAX_LINES``
    Positive integer; unset or empty keeps the output unbounded.
``MESSAGE_CONSOLE_OUT_STYLE`` / ``MESSAGE_CONSOLE_ERR_STYLE``
    Rich style strings for standard output / standard error text;
    ``default`` (or empty) keeps the document default.
``MESSAGE_CONSOLE_USE_DOTENV``
    Truthy values make the CLI load ``.env`` unless ``--no-use-dotenv`` wins.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from dotenv import find_dotenv, load_dotenv

from lib_message_console.domain.modes import ConsoleMode


LOGGER = logging.getLogger(__name__)

DOTENV_ENV_VAR = "MESSAGE_CONSOLE_USE_DOTENV"
MODE_ENV_VAR = "MESSAGE_CONSOLE_MODE"
MAX_LINES_ENV_VAR = "MESSAGE_CONSOLE_MAX_LINES"
OUT_STYLE_ENV_VAR = "MESSAGE_CONSOLE_OUT_STYLE"
ERR_STYLE_ENV_VAR = "MESSAGE_CONSOLE_ERR_STYLE"

DEFAULT_ERR_STYLE = "red"

_TRUTHY = {"1", "true", "yes", "on"}
_DEFAULT_STYLE_NAMES = {"", "default", "none"}

_dotenv_attempted = False
_dotenv_path: Path | None = None


def enable_dotenv() -> Path | None:
    """Load the nearest ``.env`` (searching upwards from the working directory).

    Existing environment variables keep precedence. The lookup happens once per
    process; later calls return the cached result.

    Returns
    -------
    Path | None
        Resolved path of the loaded file, ``None`` when none was found.
    """
    global _dotenv_attempted, _dotenv_path
    if _dotenv_attempted:
        return _dotenv_path
    _dotenv_attempted = True
    found = find_dotenv(usecwd=True)
    if not found:
        LOGGER.debug("No .env file found above %s", Path.cwd())
        return None
    load_dotenv(found, override=False)
    _dotenv_path = Path(found).resolve()
    LOGGER.debug("Loaded environment overrides from %s", _dotenv_path)
    return _dotenv_path


def dotenv_requested(flag: bool | None, environ: Mapping[str, str] | None = None) -> bool:
    """Return whether ``.env`` should be loaded; an explicit ``flag`` wins.

    Examples
    --------
    >>> dotenv_requested(None, {DOTENV_ENV_VAR: "yes"})
    True
    >>> dotenv_requested(False, {DOTENV_ENV_VAR: "yes"})
    False
    """
    if flag is not None:
        return flag
    env = os.environ if environ is None else environ
    return env.get(DOTENV_ENV_VAR, "").strip().lower() in _TRUTHY


def _reset_dotenv_state_for_testing() -> None:
    global _dotenv_attempted, _dotenv_path
    _dotenv_attempted = False
    _dotenv_path = None


@dataclass(frozen=True, slots=True)
class ConsoleSettings:
    """Resolved console configuration."""

    mode: ConsoleMode = ConsoleMode.APPEND
    max_lines: int | None = None
    out_style: str | None = None
    err_style: str | None = DEFAULT_ERR_STYLE
    eol: str = os.linesep

    def __post_init__(self) -> None:
        if self.max_lines is not None and self.max_lines <= 0:
            raise ValueError("max_lines must be positive")
        if not self.eol:
            raise ValueError("eol must not be empty")


def load_settings(
    *,
    mode: ConsoleMode | str | None = None,
    max_lines: int | None = None,
    out_style: str | None = None,
    err_style: str | None = None,
    eol: str | None = None,
    environ: Mapping[str, str] | None = None,
) -> ConsoleSettings:
    """Merge explicit arguments over environment variables over defaults.

    Raises
    ------
    ValueError
        When an environment variable or argument holds an invalid value.
    """
    env = os.environ if environ is None else environ

    if mode is None:
        raw_mode = env.get(MODE_ENV_VAR, "").strip()
        resolved_mode = ConsoleMode.from_name(raw_mode) if raw_mode else ConsoleMode.APPEND
    elif isinstance(mode, str):
        resolved_mode = ConsoleMode.from_name(mode)
    else:
        resolved_mode = mode

    resolved_max = max_lines if max_lines is not None else _parse_max_lines(env.get(MAX_LINES_ENV_VAR))
    resolved_out = _resolve_style(out_style, env.get(OUT_STYLE_ENV_VAR), default=None)
    resolved_err = _resolve_style(err_style, env.get(ERR_STYLE_ENV_VAR), default=DEFAULT_ERR_STYLE)

    return ConsoleSettings(
        mode=resolved_mode,
        max_lines=resolved_max,
        out_style=resolved_out,
        err_style=resolved_err,
        eol=eol if eol is not None else os.linesep,
    )


def _parse_max_lines(raw: str | None) -> int | None:
    if raw is None or not raw.strip():
        return None
    try:
        value = int(raw.strip())
    except ValueError as exc:
        raise ValueError(f"{MAX_LINES_ENV_VAR} must be an integer, got {raw!r}") from exc
    if value <= 0:
        raise ValueError(f"{MAX_LINES_ENV_VAR} must be positive, got {value}")
    return value


def _resolve_style(explicit: str | None, raw: str | None, *, default: str | None) -> str | None:
    candidate = explicit if explicit is not None else raw
    if candidate is None:
        return default
    cleaned = candidate.strip()
    if cleaned.lower() in _DEFAULT_STYLE_NAMES:
        return None
    return cleaned


__all__ = [
    "ConsoleSettings",
    "DOTENV_ENV_VAR",
    "ERR_STYLE_ENV_VAR",
    "MAX_LINES_ENV_VAR",
    "MODE_ENV_VAR",
    "OUT_STYLE_ENV_VAR",
    "dotenv_requested",
    "enable_dotenv",
    "load_settings",
]
