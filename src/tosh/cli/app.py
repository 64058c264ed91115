"""CLI main module for tosh."""

from __future__ import annotations

import os
import sys
from collections.abc import Iterator
from pathlib import Path
from typing import NoReturn

import typer
from loguru import logger

from tosh.cli.loop import prompt_lines, run_loop, stream_lines, unbuffered_lines
from tosh.cli.render import create_cli_renderer
from tosh.config import Settings, apply_config, load_settings, sync_environment
from tosh.core.session import Session
from tosh.errors import ConfigurationError
from tosh.logging_utils import configure_logging

app = typer.Typer(
    name="tosh",
    help="TOSH - a very simple shell.",
    add_completion=False,
)


def _exit_with_error(message: str) -> NoReturn:
    typer.echo(f"tosh: {message}", err=True)
    raise typer.Exit(1)


def _load_startup_settings(*, verbose: bool, debug: bool, read_config: bool) -> Settings:
    """Environment, then the config file, then the command-line flags."""

    settings = sync_environment()
    configure_logging(debug=debug or settings.debug)
    if read_config:
        try:
            apply_config(settings.resolve_config_path())
        except ConfigurationError as exc:
            logger.error("{}", exc)
    if verbose:
        os.environ["TOSH_VERBOSE"] = "ON"
    if debug:
        os.environ["TOSH_DEBUG"] = "ON"
    return load_settings()


def _stdin_lines() -> Iterator[str]:
    try:
        fd = sys.stdin.fileno()
    except (OSError, ValueError):
        # not backed by a descriptor, e.g. an in-memory stream
        return stream_lines(sys.stdin)
    return unbuffered_lines(fd)


@app.command()
def main(
    script: Path | None = typer.Argument(None, help="Read commands from this file instead of stdin"),  # noqa: B008
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Trace launched commands"),
    debug: bool = typer.Option(False, "--debug", "-d", help="Print debug log lines"),
    subshell: bool = typer.Option(False, "--subshell", hidden=True, help="Evaluate one substitution"),
) -> None:
    """Start the interpreter."""

    try:
        settings = _load_startup_settings(verbose=verbose, debug=debug, read_config=not subshell)
    except ConfigurationError as exc:
        _exit_with_error(str(exc))
    configure_logging(debug=settings.debug)

    interactive = script is None and not subshell and sys.stdin.isatty()
    session = Session(settings=settings, interactive=interactive)

    try:
        if script is not None:
            try:
                handle = script.open(encoding="utf-8", errors="surrogateescape")
            except OSError as exc:
                _exit_with_error(f"I couldn't read {script}: {exc.strerror or exc}")
            with handle:
                run_loop(session, stream_lines(handle))
        elif interactive:
            renderer = create_cli_renderer(settings.resolve_hist_path(), settings.hist_len)
            run_loop(session, prompt_lines(renderer, session))
        else:
            run_loop(session, _stdin_lines())
    except KeyboardInterrupt:
        session.trace("\nReceived a SIGINT!")
