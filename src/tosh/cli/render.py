"""Terminal input for tosh."""

from __future__ import annotations

from pathlib import Path

from loguru import logger
from prompt_toolkit import PromptSession
from prompt_toolkit.formatted_text import FormattedText
from prompt_toolkit.history import FileHistory, History, InMemoryHistory


def trim_history(path: Path, limit: int) -> None:
    """Keep only the newest ``limit`` entries of a history file."""

    entries = list(FileHistory(str(path)).load_history_strings())  # newest first
    if len(entries) <= limit:
        return
    logger.debug("trimming {} from {} to {} entries", path, len(entries), limit)
    path.write_bytes(b"")
    history = FileHistory(str(path))
    for entry in reversed(entries[:limit]):
        history.store_string(entry)


def open_history(path: Path | None, limit: int | None = None) -> History:
    """File-backed history, or an in-memory one when the file is unusable."""

    if path is None:
        return InMemoryHistory()
    try:
        path.touch(exist_ok=True)
        if limit is not None:
            trim_history(path, limit)
    except OSError as exc:
        logger.error("I couldn't open the history file {}: {}", path, exc.strerror or exc)
        return InMemoryHistory()
    return FileHistory(str(path))


class Renderer:
    """Reads interactive lines with prompt_toolkit, recording them in history."""

    def __init__(self, history_path: Path | None = None, history_length: int | None = None) -> None:
        history = open_history(history_path, history_length)
        self._prompt_session: PromptSession[str] = PromptSession(history=history)

    def get_user_input(self, message: FormattedText) -> str:
        """Prompt user for input."""
        return self._prompt_session.prompt(message)


def create_cli_renderer(history_path: Path | None = None, history_length: int | None = None) -> Renderer:
    """Create and return a Renderer instance."""
    return Renderer(history_path, history_length)
