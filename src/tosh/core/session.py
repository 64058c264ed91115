"""Mutable state carried by one running interpreter."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from rich.console import Console

from tosh.config import Settings


def _default_console() -> Console:
    return Console(highlight=False, emoji=False, soft_wrap=True)


@dataclass
class Session:
    """Session context shared by the loop, the dispatcher and the builtins.

    The working directory is the process's own, so external programs inherit
    it; the previous directory is what ``cd -`` returns to.
    """

    settings: Settings
    interactive: bool = False
    previous_dir: Path | None = None
    console: Console = field(default_factory=_default_console)

    @property
    def verbose(self) -> bool:
        return self.settings.verbose

    @property
    def debug(self) -> bool:
        return self.settings.debug

    @property
    def cwd(self) -> Path:
        return Path.cwd()

    def change_directory(self, target: str | os.PathLike[str]) -> None:
        """Change the working directory, remembering the one we leave."""

        current = self.cwd
        os.chdir(target)
        self.previous_dir = current

    def trace(self, message: str) -> None:
        """Print a verbose-mode trace line on stdout."""

        if self.verbose:
            self.console.print(message, markup=False)
