"""Commands implemented by the interpreter itself."""

from __future__ import annotations

import os
import sys
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType

from loguru import logger

from tosh.config import apply_config, render_value, tracked_variables
from tosh.core.session import Session
from tosh.core.types import Continuation
from tosh.errors import ConfigurationError, NoHomeDirectoryError

BuiltinHandler = Callable[[list[str], Session], Continuation]


@dataclass(frozen=True)
class Builtin:
    """One builtin command and its help line."""

    name: str
    summary: str
    handler: BuiltinHandler

    def __call__(self, args: list[str], session: Session) -> Continuation:
        return self.handler(args, session)


def flush_standard_streams() -> None:
    sys.stdout.flush()
    sys.stderr.flush()


def builtin_cd(args: list[str], session: Session) -> Continuation:
    if len(args) > 2:
        logger.error("cd: too many arguments")
        return Continuation.CONTINUE

    target: str | Path
    if len(args) == 1:
        home = os.environ.get("HOME")
        if home is None:
            logger.error("cd: {}", NoHomeDirectoryError())
            return Continuation.CONTINUE
        target = home
    elif args[1] == "-":
        if session.previous_dir is None:
            logger.error("cd: no previous directory")
            return Continuation.CONTINUE
        target = session.previous_dir
    else:
        target = args[1]

    try:
        session.change_directory(target)
    except (OSError, ValueError) as exc:
        logger.error("cd: {}: {}", target, getattr(exc, "strerror", None) or exc)
    return Continuation.CONTINUE


def builtin_exec(args: list[str], session: Session) -> Continuation:
    """Replace this process with another program; only returns on failure."""

    if len(args) < 2:
        logger.error("exec: expected a program to run")
        return Continuation.CONTINUE

    session.trace(f"[replacing tosh with {args[1]}]")
    flush_standard_streams()
    try:
        os.execvp(args[1], args[1:])  # noqa: S606
    except (OSError, ValueError) as exc:
        logger.error("exec: {}: {}", args[1], getattr(exc, "strerror", None) or exc)
    return Continuation.CONTINUE


def builtin_help(_args: list[str], session: Session) -> Continuation:
    console = session.console
    console.print("\n[bold]---=== TOSH - a very simple shell. ===---[/bold]")
    console.print("\nType program names and arguments, and hit enter.")
    console.print("The following are built in:")
    width = max(len(name) for name in BUILTINS)
    for builtin in BUILTINS.values():
        console.print(f"- {builtin.name:<{width}}  {builtin.summary}", markup=False)
    console.print()
    return Continuation.CONTINUE


def builtin_quit(_args: list[str], session: Session) -> Continuation:
    session.trace("Bye bye! :)")
    return Continuation.TERMINATE


def builtin_showenv(_args: list[str], session: Session) -> Continuation:
    for variable, name in tracked_variables().items():
        value = render_value(getattr(session.settings, name))
        session.console.print(f"{variable}={value}", markup=False)
    return Continuation.CONTINUE


def builtin_readconfig(_args: list[str], session: Session) -> Continuation:
    path = session.settings.resolve_config_path()
    try:
        session.settings = apply_config(path)
    except ConfigurationError as exc:
        logger.error("readconfig: {}", exc)
        return Continuation.CONTINUE
    session.trace(f"[read config from {path}]")
    return Continuation.CONTINUE


def _build_registry(builtins: list[Builtin]) -> Mapping[str, Builtin]:
    return MappingProxyType({builtin.name: builtin for builtin in builtins})


BUILTINS: Mapping[str, Builtin] = _build_registry(
    [
        Builtin("cd", "change directory (no argument: home, '-': previous)", builtin_cd),
        Builtin("exec", "replace the shell with a program", builtin_exec),
        Builtin("help", "show this help", builtin_help),
        Builtin("quit", "leave the shell", builtin_quit),
        Builtin("showenv", "show the shell variables", builtin_showenv),
        Builtin("readconfig", "reload the config file", builtin_readconfig),
    ]
)
