"""Inline command substitution through a subordinate interpreter."""

from __future__ import annotations

import os
import subprocess
import sys
from collections.abc import Sequence
from dataclasses import dataclass

from loguru import logger

from tosh.errors import ProcessLaunchError

SUBSTITUTION_CHAR = "$"
SUBSHELL_FLAG = "--subshell"
OUTPUT_ENCODING = "utf-8"
# Options forced off in the subordinate interpreter, whatever the parent has.
QUIET_ENVIRONMENT = {"TOSH_VERBOSE": "OFF", "TOSH_DEBUG": "OFF"}
# `-c` puts the working directory first on sys.path as ""; drop it before
# importing anything so files in that directory cannot shadow modules.
SUBSHELL_BOOTSTRAP = (
    "import sys; sys.path[:] = [entry for entry in sys.path if entry]; "
    "from tosh.cli.app import app; app(prog_name='tosh')"
)


@dataclass(frozen=True)
class SubstitutionSpan:
    """Offsets of one ``$...`` expression inside an argument."""

    expr_start: int
    expr_end: int
    match_start: int
    match_end: int

    def expression(self, arg: str) -> str:
        return arg[self.expr_start : self.expr_end]

    def splice(self, arg: str, replacement: str) -> str:
        return arg[: self.match_start] + replacement + arg[self.match_end :]


def find_substitution(arg: str) -> SubstitutionSpan | None:
    """Locate the first ``$(expr)`` or ``$word`` in ``arg``.

    The parenthesised form ends at the first ``)``, so ``$(a (b))`` stops
    after ``b``. Nested substitutions are not supported.
    """

    start = arg.find(SUBSTITUTION_CHAR)
    if start < 0:
        return None

    if arg.startswith("(", start + 1):
        close = arg.find(")", start + 2)
        if close < 0:
            return None
        return SubstitutionSpan(start + 2, close, start, close + 1)

    end = start + 1
    while end < len(arg) and not arg[end].isspace():
        end += 1
    if end == start + 1:
        return None
    return SubstitutionSpan(start + 1, end, start, end)


def subshell_command() -> list[str]:
    """Command line that runs a non-interactive tosh over stdin/stdout."""

    return [sys.executable, "-c", SUBSHELL_BOOTSTRAP, SUBSHELL_FLAG]


def strip_final_newline(output: str) -> str:
    if output.endswith("\n"):
        return output[:-1]
    return output


def evaluate(expression: str, *, command: Sequence[str] | None = None) -> str:
    """Run ``expression`` as one line in a subordinate interpreter and capture its output.

    The child gets its own session: directory changes and option changes made
    inside it never reach this process. Output is read until end of file, so
    it may be arbitrarily large.
    """

    argv = list(command) if command is not None else subshell_command()
    env = {**os.environ, **QUIET_ENVIRONMENT}
    logger.debug("evaluating {!r} with {}", expression, argv)

    try:
        process = subprocess.Popen(  # noqa: S603
            argv,
            stdin=subprocess.PIPE,
            stdout=subprocess.PIPE,
            env=env,
        )
    except (OSError, ValueError) as exc:
        raise ProcessLaunchError(argv[0], getattr(exc, "strerror", None) or str(exc)) from exc
    try:
        output, _ = process.communicate((expression + "\n").encode(OUTPUT_ENCODING, "surrogateescape"))
    finally:
        if process.poll() is None:
            logger.debug("killing lingering subshell {}", process.pid)
            process.kill()
        process.wait()
        for stream in (process.stdin, process.stdout):
            if stream is not None:
                stream.close()

    logger.debug("subshell {} exited with {}", process.pid, process.returncode)
    return strip_final_newline(output.decode(OUTPUT_ENCODING, "surrogateescape"))


def expand_substitution(arg: str, *, command: Sequence[str] | None = None) -> str:
    """Replace the first substitution in ``arg`` with its captured output.

    Returns ``arg`` unchanged when it holds no substitution. ``$()`` becomes
    the empty string without starting a subshell.
    """

    span = find_substitution(arg)
    if span is None:
        return arg

    expression = span.expression(arg)
    output = evaluate(expression, command=command) if expression else ""
    return span.splice(arg, output)
