"""Split one raw command line into an argument vector."""

from __future__ import annotations

from loguru import logger

from tosh.errors import MismatchedBracketsError, MismatchedQuotesError

COMMENT_CHAR = "#"
QUOTE_CHAR = "'"
ESCAPE_CHAR = "\\"
SEPARATORS = frozenset(" \t")
LINE_END = frozenset("\n\0")


class Lexer:
    """Character-by-character lexer for a single line.

    Whitespace separates arguments only at bracket depth 0 and outside single
    quotes. Parentheses are kept in the argument text; quotes are dropped.
    """

    def __init__(self, line: str) -> None:
        self._line = line
        self._pos = 0
        self._depth = 0
        self._quoted = False
        self._args: list[str] = []
        self._current: list[str] = []
        self._started = False

    def run(self) -> list[str]:
        line = self._line
        while self._pos < len(line):
            char = line[self._pos]
            if char in LINE_END:
                break
            if char == COMMENT_CHAR and self._depth == 0 and not self._quoted:
                break
            self._step(char)
        return self._finish()

    def _step(self, char: str) -> None:
        if char == "(":
            self._append(char)
            if not self._quoted:
                self._depth += 1
        elif char == ")":
            self._append(char)
            if not self._quoted:
                self._depth -= 1
        elif char == QUOTE_CHAR:
            self._quoted = not self._quoted
            self._started = True
        elif char == ESCAPE_CHAR:
            following = self._line[self._pos + 1 : self._pos + 2]
            if following in (QUOTE_CHAR, ESCAPE_CHAR):
                self._append(following)
            elif following in LINE_END:
                self._pos += 1
                return
            # a backslash before anything else is dropped with that character
            self._pos += 2
            return
        elif char in SEPARATORS and self._depth == 0 and not self._quoted:
            self._close()
        else:
            self._append(char)
        self._pos += 1

    def _append(self, char: str) -> None:
        self._current.append(char)
        self._started = True

    def _close(self) -> None:
        if self._started:
            self._args.append("".join(self._current))
        self._current = []
        self._started = False

    def _finish(self) -> list[str]:
        if self._depth != 0:
            raise MismatchedBracketsError
        if self._quoted:
            raise MismatchedQuotesError
        self._close()
        return self._args


def tokenize(line: str) -> list[str]:
    """Split ``line`` into arguments.

    Returns an empty list when nothing was entered. Raises
    ``MismatchedBracketsError`` or ``MismatchedQuotesError`` for malformed
    lines; in that case nothing must be executed.
    """

    args = Lexer(line).run()
    logger.debug("tokenized {!r} into {}", line, args)
    return args
