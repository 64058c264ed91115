"""The read / tokenize / expand / dispatch loop."""

from __future__ import annotations

import os
import socket
from collections.abc import Iterable, Iterator

from loguru import logger

from tosh.cli.prompt import render_prompt
from tosh.cli.render import Renderer
from tosh.config import sync_environment
from tosh.core.dispatcher import dispatch
from tosh.core.expansion import expand_arguments
from tosh.core.session import Session
from tosh.core.tokenizer import tokenize
from tosh.core.types import Continuation
from tosh.errors import ConfigurationError, TokenizeError
from tosh.logging_utils import configure_logging

LINE_ENCODING = "utf-8"


def unbuffered_lines(fd: int) -> Iterator[str]:
    """Yield lines from ``fd`` one byte at a time.

    Reading no further than the current line leaves the rest of the input for
    the programs we launch, which inherit the same descriptor.
    """

    buffer = bytearray()
    while True:
        byte = os.read(fd, 1)
        if not byte:
            break
        if byte == b"\n":
            yield buffer.decode(LINE_ENCODING, "surrogateescape")
            buffer.clear()
            continue
        buffer += byte
    if buffer:
        yield buffer.decode(LINE_ENCODING, "surrogateescape")


def stream_lines(lines: Iterable[str]) -> Iterator[str]:
    for line in lines:
        yield line.rstrip("\n")


def prompt_lines(renderer: Renderer, session: Session) -> Iterator[str]:
    """Yield interactive lines until end of input."""

    while True:
        message = render_prompt(
            session.settings.prompt,
            cwd=str(session.cwd),
            user=os.environ.get("USER"),
            host=socket.gethostname(),
        )
        try:
            yield renderer.get_user_input(message)
        except EOFError:
            return


def refresh_session(session: Session) -> None:
    """Pick up changes made to the ``TOSH_*`` variables since the last line."""

    try:
        session.settings = sync_environment()
    except ConfigurationError as exc:
        logger.error("{}", exc)
    configure_logging(debug=session.debug)


def run_line(line: str, session: Session) -> Continuation:
    """Interpret one raw line."""

    try:
        args = tokenize(line)
    except TokenizeError as exc:
        logger.error("{}", exc)
        return Continuation.CONTINUE
    return dispatch(expand_arguments(args), session)


def run_loop(session: Session, lines: Iterable[str]) -> None:
    """Run lines until ``quit`` or the end of input."""

    iterator = iter(lines)
    while True:
        refresh_session(session)
        line = next(iterator, None)
        if line is None:
            logger.debug("end of input")
            return
        if run_line(line, session) is Continuation.TERMINATE:
            return
