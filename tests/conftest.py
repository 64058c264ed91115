from __future__ import annotations

import os
from collections.abc import Iterator
from pathlib import Path

import pytest
from loguru import logger

from tosh.config import ENV_PREFIX, Settings, default_environment
from tosh.core.session import Session
from tosh.logging_utils import configure_logging


@pytest.fixture(autouse=True, scope="session")
def _configure_logging_once() -> None:
    configure_logging()


@pytest.fixture(autouse=True)
def home(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Path:
    # Every tracked variable goes through setenv so it is restored even when
    # the shell itself writes os.environ during the test.
    for name in [name for name in os.environ if name.startswith(ENV_PREFIX)]:
        monkeypatch.delenv(name)
    for name, value in default_environment().items():
        monkeypatch.setenv(name, value)
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(tmp_path)
    return home


@pytest.fixture
def session() -> Session:
    return Session(settings=Settings())


@pytest.fixture
def log_messages() -> Iterator[list[str]]:
    messages: list[str] = []
    handler_id = logger.add(lambda message: messages.append(message.record["message"]), level="WARNING")
    yield messages
    logger.remove(handler_id)
