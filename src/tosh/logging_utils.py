"""Runtime logging helpers."""

from __future__ import annotations

import sys

import loguru
from loguru import logger

_FORMATS = {
    "DEBUG": "log: {message}\n",
}
_DEFAULT_FORMAT = "tosh: {message}\n"
_CONFIGURED_LEVEL: str | None = None
_HANDLER_ID: int | None = None


def _format(record: loguru.Record) -> str:
    return _FORMATS.get(record["level"].name, _DEFAULT_FORMAT)


def _write_stderr(message: loguru.Message) -> None:
    # resolved per message so redirected stderr streams are honoured
    sys.stderr.write(message)
    sys.stderr.flush()


def configure_logging(*, debug: bool = False) -> None:
    """Configure process-level logging; a no-op when the level is unchanged.

    The first call drops loguru's default handler; later calls only replace
    the handler installed here.
    """

    global _CONFIGURED_LEVEL, _HANDLER_ID
    level = "DEBUG" if debug else "WARNING"
    if level == _CONFIGURED_LEVEL:
        return

    if _HANDLER_ID is None:
        logger.remove()
    else:
        logger.remove(_HANDLER_ID)
    _HANDLER_ID = logger.add(
        _write_stderr,
        level=level,
        format=_format,
        colorize=False,
        backtrace=False,
        diagnose=False,
    )
    _CONFIGURED_LEVEL = level
