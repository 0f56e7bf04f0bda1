"""Position-tracked character scanner.

Wraps a source string with one character of lookahead and a running
(line, column) cursor. Both the strict parser and the linter drive their own
Scanner instance over the same grammar.

Cursor rules:
- Every line break character (see charsets.VERTICAL_WHITESPACE) advances the
  line and resets the column to 1.
- A CR directly followed by LF counts as one line break: the CR only advances
  the column, the LF then moves to the next line.

Thread Safety:
Scanner instances are single-use. Create one per source string.
All state is instance-local; no shared mutable state.

"""

from __future__ import annotations

from collections.abc import Callable

from cni_format.charsets import is_horizontal_whitespace, is_vertical_whitespace, is_whitespace
from cni_format.location import Position


class Scanner:
    """Character scanner with line/column tracking.

    Usage:
        >>> scanner = Scanner("a\\r\\nb")
        >>> scanner.advance(), scanner.advance(), scanner.advance()
        ('a', '\\r', '\\n')
        >>> scanner.position
        (2, 1)

    End of input is signalled by ``None`` from peek() and advance().

    """

    __slots__ = (
        "_source",
        "_source_len",  # Cached len(source) to avoid repeated calls
        "_pos",
        "lineno",
        "col",
    )

    def __init__(self, source: str) -> None:
        self._source = source
        self._source_len = len(source)
        self._pos = 0
        self.lineno = 1
        self.col = 1

    @property
    def position(self) -> Position:
        """Current cursor as ``(line, col)``, both 1-indexed."""
        return (self.lineno, self.col)

    @property
    def offset(self) -> int:
        """Number of characters consumed so far."""
        return self._pos

    def at_end(self) -> bool:
        return self._pos >= self._source_len

    def peek(self) -> str | None:
        """Peek at current character without advancing.

        Returns:
            Current character or None at end of input.
        """
        if self._pos >= self._source_len:
            return None
        return self._source[self._pos]

    def advance(self) -> str | None:
        """Consume one character, updating line/column tracking.

        Returns:
            The consumed character, or None at end of input.
        """
        if self._pos >= self._source_len:
            return None

        char = self._source[self._pos]
        self._pos += 1

        if char == "\r" and self._pos < self._source_len and self._source[self._pos] == "\n":
            # CRLF: the LF does the line accounting
            self.col += 1
        elif is_vertical_whitespace(char):
            self.lineno += 1
            self.col = 1
        else:
            self.col += 1

        return char

    def advance_while(self, predicate: Callable[[str], bool]) -> str:
        """Consume characters while predicate holds.

        Returns:
            The consumed text (possibly empty).
        """
        start = self._pos
        while (char := self.peek()) is not None and predicate(char):
            self.advance()
        return self._source[start : self._pos]

    def skip_whitespace(self) -> None:
        """Skip horizontal and vertical whitespace."""
        while (char := self.peek()) is not None and is_whitespace(char):
            self.advance()

    def skip_horizontal_whitespace(self) -> None:
        """Skip whitespace up to, not including, the next line break."""
        while (char := self.peek()) is not None and is_horizontal_whitespace(char):
            self.advance()

    def skip_line(self) -> None:
        """Skip to the end of the current line, consuming the line break."""
        while (char := self.peek()) is not None and not is_vertical_whitespace(char):
            self.advance()
        # CRLF takes two calls, the CR does not move to the next line
        if self.advance() == "\r" and self.peek() == "\n":
            self.advance()
