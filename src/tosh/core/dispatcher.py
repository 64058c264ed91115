"""Route an argument vector to a builtin or an external program."""

from __future__ import annotations

import subprocess

from loguru import logger

from tosh.core.builtins import BUILTINS, flush_standard_streams
from tosh.core.session import Session
from tosh.core.types import Continuation
from tosh.errors import ProcessLaunchError


def start_process(args: list[str]) -> subprocess.Popen[bytes]:
    """Start ``args[0]`` from ``PATH`` with the shell's own standard streams."""

    flush_standard_streams()
    try:
        return subprocess.Popen(args)  # noqa: S603
    except (OSError, ValueError) as exc:
        raise ProcessLaunchError(args[0], getattr(exc, "strerror", None) or str(exc)) from exc


def wait_for(process: subprocess.Popen[bytes]) -> int:
    """Block until the child exits or is killed by a signal.

    An interrupt is delivered to the child through the shared process group;
    we keep waiting until the child has actually gone.
    """

    while True:
        try:
            return process.wait()
        except KeyboardInterrupt:
            logger.debug("interrupted while waiting for {}", process.pid)


def launch(args: list[str], session: Session) -> Continuation:
    try:
        process = start_process(args)
    except ProcessLaunchError as exc:
        logger.error("{}", exc)
        return Continuation.CONTINUE

    session.trace(f"[launching {args[0]} with pid {process.pid}]")
    status = wait_for(process)
    session.trace(f"[{args[0]} terminated with exit code {status}]")
    return Continuation.CONTINUE


def dispatch(args: list[str], session: Session) -> Continuation:
    """Run one fully expanded command line."""

    if not args:
        if session.interactive:
            session.trace("\n...what do you want to do?")
        return Continuation.CONTINUE

    builtin = BUILTINS.get(args[0])
    if builtin is not None:
        session.trace(f"[launching builtin {args[0]}]")
        return builtin(args, session)

    return launch(args, session)
