"""Application-level exception types for tosh."""

from __future__ import annotations


class ToshError(Exception):
    """Base exception for tosh."""


class TokenizeError(ToshError):
    """Raised when a command line cannot be split into arguments."""


class MismatchedBracketsError(TokenizeError):
    """Raised when a line ends with unbalanced parentheses."""

    def __init__(self) -> None:
        super().__init__("mismatched brackets")


class MismatchedQuotesError(TokenizeError):
    """Raised when a line ends inside a single-quoted string."""

    def __init__(self) -> None:
        super().__init__("mismatched quotes")


class NoHomeDirectoryError(ToshError):
    """Raised when HOME is needed but not set."""

    def __init__(self) -> None:
        super().__init__("I couldn't find your home directory. :(")


class ProcessLaunchError(ToshError):
    """Raised when an external program cannot be started."""

    def __init__(self, program: str, reason: str) -> None:
        super().__init__(f"{program}: {reason}")
        self.program = program
        self.reason = reason


class ConfigurationError(ToshError):
    """Raised when shell variables or the config file hold invalid values."""
