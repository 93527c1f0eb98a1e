"""Command line interface built with click.

Purpose
-------
Offer a metadata banner plus a ``demo`` command that runs concurrent producers
through a :class:`MessageConsole` and renders the captured, colour-coded result.

Contents
--------
* :func:`cli` - command group (``--version``, ``--use-dotenv/--no-use-dotenv``).
* :func:`info` / :func:`demo` - subcommands.
* :func:`main` - test-friendly wrapper returning an exit code.
"""

from __future__ import annotations

import threading
from typing import Sequence, TextIO

import click
from rich.console import Console

from . import __init__conf__, config
from .adapters.render_thread import RenderThread
from .adapters.viewport.rich_viewport import RichViewport
from .console import MessageConsole
from .domain.document import TextDocument

CLICK_CONTEXT_SETTINGS = {"help_option_names": ["-h", "--help"]}


@click.group(invoke_without_command=True, context_settings=CLICK_CONTEXT_SETTINGS)
@click.version_option(version=__init__conf__.version, prog_name=__init__conf__.shell_command, message="%(version)s")
@click.option(
    "--use-dotenv/--no-use-dotenv",
    default=None,
    help=f"Load the nearest .env before running (defaults to ${config.DOTENV_ENV_VAR}).",
)
@click.pass_context
def cli(ctx: click.Context, use_dotenv: bool | None) -> None:
    """Capture producer output into a colour-coded, line-limited console."""

    if config.dotenv_requested(use_dotenv):
        config.enable_dotenv()
    if ctx.invoked_subcommand is None:
        click.echo(__init__conf__.summary_info(), nl=False)


@cli.command("info", context_settings=CLICK_CONTEXT_SETTINGS)
def info() -> None:
    """Print package metadata."""

    click.echo(__init__conf__.summary_info(), nl=False)


@cli.command("demo", context_settings=CLICK_CONTEXT_SETTINGS)
@click.option("--lines", "line_count", type=click.IntRange(min=1), default=5, show_default=True, help="Lines written by each producer.")
@click.option("--max-lines", type=click.IntRange(min=1), default=None, help=f"Lines to retain (defaults to ${config.MAX_LINES_ENV_VAR}).")
@click.option("--mode", type=click.Choice(["append", "insert"], case_sensitive=False), default=None, help=f"Framing mode (defaults to ${config.MODE_ENV_VAR}).")
@click.option("--out-style", default=None, help="Rich style for the stdout producer.")
@click.option("--err-style", default=None, help="Rich style for the stderr producer.")
@click.option("--height", type=click.IntRange(min=1), default=None, help="Viewport height; all lines when omitted.")
@click.option("--no-color", is_flag=True, help="Render without styles.")
def demo(
    line_count: int,
    max_lines: int | None,
    mode: str | None,
    out_style: str | None,
    err_style: str | None,
    height: int | None,
    no_color: bool,
) -> None:
    """Run two producer threads through a console and print the result."""

    settings = config.load_settings(mode=mode, max_lines=max_lines, out_style=out_style, err_style=err_style, eol="\n")
    render = RenderThread()
    render.start()
    document = TextDocument()
    viewport = RichViewport(document, console=Console(no_color=no_color), height=height, no_color=no_color)
    try:
        console = MessageConsole.from_settings(settings, document=document, scheduler=render, viewport=viewport)
        producers = [
            threading.Thread(target=_produce, args=(console.redirect_out(), "stdout", line_count), name="demo-stdout"),
            threading.Thread(target=_produce, args=(console.redirect_err(), "stderr", line_count), name="demo-stderr"),
        ]
        for producer in producers:
            producer.start()
        for producer in producers:
            producer.join()
        render.wait_until_idle()
    finally:
        render.stop(drain=True)
    viewport.refresh()


def _produce(stream: TextIO, label: str, count: int) -> None:
    for index in range(1, count + 1):
        print(f"{label} line {index}", file=stream)


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command group and return an exit code instead of exiting.

    Examples
    --------
    >>> main(["--version"])  # doctest: +ELLIPSIS
    0.1...
    0
    """

    args = list(argv) if argv is not None else None
    try:
        cli.main(args=args, prog_name=__init__conf__.shell_command, standalone_mode=False)
    except click.ClickException as error:
        error.show()
        return error.exit_code
    except click.exceptions.Abort:
        return 1
    return 0


__all__ = ["cli", "demo", "info", "main"]
