"""Per-argument expansions: home directory, command substitution, globbing."""

from __future__ import annotations

import glob
import os
from collections.abc import Callable, Iterable

from loguru import logger

from tosh.core.substitution import expand_substitution
from tosh.errors import NoHomeDirectoryError, ProcessLaunchError

HOME_CHAR = "~"


def expand_home(arg: str, home: str | None) -> str:
    """Replace every ``~`` in ``arg`` with ``home``, left to right."""

    position = arg.find(HOME_CHAR)
    if position < 0:
        return arg
    if home is None:
        logger.error("{}", NoHomeDirectoryError())
        return arg

    while position >= 0:
        arg = arg[:position] + home + arg[position + 1 :]
        position = arg.find(HOME_CHAR, position + len(home))
    return arg


def expand_pattern(arg: str) -> list[str]:
    """Expand ``arg`` as a glob pattern; an unmatched pattern stays literal."""

    matches = sorted(glob.glob(arg))
    if not matches:
        return [arg]
    logger.debug("{} matched {}", arg, matches)
    return matches


def expand_argument(
    arg: str,
    *,
    home: str | None,
    substitute: Callable[[str], str] = expand_substitution,
) -> list[str]:
    """Run one argument through the expansion pipeline.

    Home expansion and command substitution rewrite the text; the glob step
    may turn the result into several arguments.
    """

    arg = expand_home(arg, home)
    try:
        arg = substitute(arg)
    except ProcessLaunchError as exc:
        logger.error("{}", exc)
    return expand_pattern(arg)


def expand_arguments(
    args: Iterable[str],
    *,
    home: str | None = None,
    substitute: Callable[[str], str] = expand_substitution,
) -> list[str]:
    """Expand each argument in order, accumulating the final vector.

    ``home`` defaults to the ``HOME`` environment variable.
    """

    if home is None:
        home = os.environ.get("HOME")
    expanded: list[str] = []
    for arg in args:
        expanded.extend(expand_argument(arg, home=home, substitute=substitute))
    return expanded
