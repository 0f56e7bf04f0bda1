"""Strict CNI parser.

Turns CNI source text into a lazy stream of fully qualified ``(key, value)``
pairs in declaration order. The first deviation from the grammar raises a
ParseError; no resynchronization is attempted (that is the linter's job).

Grammar per statement:
    - whitespace and blank lines are skipped
    - ``#`` (and ``;`` with the ini dialect) starts a comment to end of line
    - ``[name]`` sets the current section, ``[]`` returns to the top level
    - ``key = value`` where value is a bareword or a backtick raw value

Thread Safety:
Parser instances are single-use and not thread-safe. Create one per source.

"""

from __future__ import annotations

from collections.abc import Iterator

from cni_format.charsets import (
    RAW_DELIMITER,
    is_comment_start,
    is_key_char,
    is_valid_key,
    is_value_char,
    strip_whitespace,
)
from cni_format.config import Dialect, resolve_dialect
from cni_format.errors import ErrorKind, ParseError
from cni_format.location import Position
from cni_format.scanner import Scanner
from cni_format.utils.logger import get_logger

logger = get_logger(__name__)


class CniParser:
    """Lazy iterator over the key/value pairs of a CNI document.

    Visits all pairs in declaration order, including pairs that a later
    statement overwrites. Raises ParseError at the first syntax error; after
    that (or after the end of input) the iterator stays exhausted.

    Usage:
        >>> parser = CniParser("[server]\\nport = 8080\\n")
        >>> for key, value in parser:
        ...     print(key, value, parser.last_position)
        server.port 8080 (2, 8)

    If you just want the resulting key/value store, use parse().

    """

    __slots__ = (
        "_scanner",
        "_dialect",
        "_source_file",
        "_section",  # Current section name, "" at top level
        "_last_position",  # Start of the most recently returned value
        "_done",
    )

    def __init__(
        self,
        source: str,
        *,
        dialect: Dialect | None = None,
        source_file: str | None = None,
    ) -> None:
        """Initialize parser with source text.

        Args:
            source: CNI source text
            dialect: Dialect options (uses the context dialect if None)
            source_file: Optional source file path for error messages
        """
        self._scanner = Scanner(source)
        self._dialect = resolve_dialect(dialect)
        self._source_file = source_file
        self._section = ""
        self._last_position: Position | None = None
        self._done = False

    @property
    def dialect(self) -> Dialect:
        return self._dialect

    @property
    def section(self) -> str:
        """Name of the section the parser is currently in."""
        return self._section

    @property
    def last_position(self) -> Position | None:
        """Position of the value of the most recently returned pair.

        Returns None before the first pair and after an error.
        """
        return self._last_position

    def __iter__(self) -> Iterator[tuple[str, str]]:
        return self

    def __next__(self) -> tuple[str, str]:
        if self._done:
            raise StopIteration

        self._last_position = None
        try:
            pair = self._next_pair()
        except ParseError as err:
            self._done = True
            logger.debug("Parse failed: %s", err)
            raise

        if pair is None:
            self._done = True
            raise StopIteration
        return pair

    # =========================================================================
    # Statements
    # =========================================================================

    def _next_pair(self) -> tuple[str, str] | None:
        """Parse until the next key/value pair, or None at end of input."""
        scanner = self._scanner
        while True:
            scanner.skip_whitespace()
            char = scanner.peek()
            if char is None:
                return None
            if is_comment_start(char, self._dialect):
                scanner.skip_line()
            elif char == "[":
                self._parse_section_header()
            else:
                return self._parse_pair()

    def _parse_section_header(self) -> None:
        scanner = self._scanner
        start = scanner.position
        scanner.advance()  # consume [
        scanner.skip_whitespace()

        if scanner.peek() is None:
            raise self._error(ErrorKind.EXPECTED_SECTION_END, start)

        # The section name may be empty
        name = self._parse_key()
        if not is_valid_key(name):
            raise self._error(ErrorKind.INVALID_KEY, start)

        scanner.skip_whitespace()
        if scanner.advance() != "]":
            raise self._error(ErrorKind.EXPECTED_SECTION_END, start)

        self._section = name
        self._skip_comment()

    def _parse_pair(self) -> tuple[str, str]:
        scanner = self._scanner
        start = scanner.position

        key = self._parse_key()
        if not key:
            raise self._error(ErrorKind.EXPECTED_KEY, start)
        if not is_valid_key(key):
            raise self._error(ErrorKind.INVALID_KEY, start)
        if self._section:
            key = f"{self._section}.{key}"

        after_key = scanner.position
        scanner.skip_whitespace()
        if scanner.advance() != "=":
            raise self._error(ErrorKind.EXPECTED_EQUALS, after_key)
        # a value never starts on the next line
        scanner.skip_horizontal_whitespace()

        value_position = scanner.position
        value = self._parse_value()
        self._skip_comment()

        self._last_position = value_position
        return key, value

    # =========================================================================
    # Tokens
    # =========================================================================

    def _parse_key(self) -> str:
        dialect = self._dialect
        return self._scanner.advance_while(lambda c: is_key_char(c, dialect))

    def _parse_value(self) -> str:
        scanner = self._scanner
        if scanner.peek() != RAW_DELIMITER:
            dialect = self._dialect
            return strip_whitespace(scanner.advance_while(lambda c: is_value_char(c, dialect)))

        # Raw value; errors point at the opening backtick
        start = scanner.position
        scanner.advance()
        parts: list[str] = []
        while True:
            char = scanner.advance()
            if char is None:
                raise self._error(ErrorKind.UNTERMINATED_RAW, start)
            if char == RAW_DELIMITER:
                if scanner.peek() != RAW_DELIMITER:
                    break
                scanner.advance()  # doubled backtick is a literal one
            parts.append(char)
        return "".join(parts)

    def _skip_comment(self) -> None:
        """Skip whitespace and a trailing comment, if any."""
        scanner = self._scanner
        scanner.skip_whitespace()
        char = scanner.peek()
        if char is not None and is_comment_start(char, self._dialect):
            scanner.skip_line()

    def _error(self, kind: ErrorKind, position: Position) -> ParseError:
        line, col = position
        return ParseError(kind, line, col, source_file=self._source_file)


def parse(
    source: str,
    *,
    dialect: Dialect | None = None,
    source_file: str | None = None,
) -> dict[str, str]:
    """Parse CNI source into a flat ``{qualified key: value}`` mapping.

    Later statements overwrite earlier ones with the same key.

    Args:
        source: CNI source text
        dialect: Dialect options (uses the context dialect if None)
        source_file: Optional source file path for error messages

    Returns:
        Dict in first-declaration order of the keys.

    Raises:
        ParseError: If the text is not valid CNI.

    Example:
        >>> parse("[a]\\nb = c  # comment\\nd = `raw ``value```")
        {'a.b': 'c', 'a.d': 'raw `value`'}
    """
    return dict(CniParser(source, dialect=dialect, source_file=source_file))
