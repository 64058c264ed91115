"""Tokenizing, expansion and dispatch of command lines."""

from .dispatcher import dispatch
from .expansion import expand_arguments, expand_home, expand_pattern
from .session import Session
from .substitution import expand_substitution, find_substitution
from .tokenizer import tokenize
from .types import Continuation

__all__ = [
    "Continuation",
    "Session",
    "dispatch",
    "expand_arguments",
    "expand_home",
    "expand_pattern",
    "expand_substitution",
    "find_substitution",
    "tokenize",
]
