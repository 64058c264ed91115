"""tosh - a very simple shell."""

from .core import Continuation, Session, dispatch, expand_arguments, tokenize

__version__ = "0.1.0"

__all__ = ["Continuation", "Session", "dispatch", "expand_arguments", "tokenize"]
