"""Shared core types."""

from __future__ import annotations

from enum import Enum


class Continuation(Enum):
    """What the driving loop should do after a command."""

    CONTINUE = "continue"
    TERMINATE = "terminate"
