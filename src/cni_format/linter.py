"""Diagnostic linter for CNI source.

Walks the same grammar as the strict parser but never stops on malformed
input. Every syntactic unit produces zero or more diagnostics, after which the
linter resynchronizes at the next plausible statement boundary and keeps
scanning until the end of input.

Diagnostics are ranges (start inclusive, end exclusive) so tools can underline
exact spans. They are produced in source order: the diagnostics of one unit
are buffered and sorted by start position before they are yielded.

Heuristics:
- An unterminated raw value remembers the first ``key =`` pattern inside it
  and suggests that a closing backtick was meant to go there.
- Comments and line breaks inside section headings are reported separately
  from missing ``]``, which is only reported when no ``]`` follows.
- An unknown character at statement start turns the rest of its line into a
  comment so one mistake does not cascade into a diagnostic per character.

Thread Safety:
Linter instances are single-use. Create one per source string.

"""

from __future__ import annotations

import sys
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
from typing import TextIO

from cni_format.charsets import (
    RAW_DELIMITER,
    is_comment_start,
    is_key_char,
    is_value_char,
    is_vertical_whitespace,
    is_whitespace,
)
from cni_format.config import Dialect, resolve_dialect
from cni_format.location import Position, SourceLocation
from cni_format.scanner import Scanner
from cni_format.utils.logger import get_logger

logger = get_logger(__name__)


class Severity(Enum):
    """How serious a diagnostic is."""

    INFO = "info"
    SYNTAX_ERROR = "syntax error"


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """A single linter finding.

    Formats as ``LINE:COL-LINE:COL SEVERITY: MESSAGE``.

    Attributes:
        location: Span the diagnostic refers to
        severity: INFO or SYNTAX_ERROR
        message: Human-readable explanation

    """

    location: SourceLocation
    severity: Severity
    message: str

    def __str__(self) -> str:
        return f"{self.location.range_str()} {self.severity.value}: {self.message}"

    @property
    def start(self) -> Position:
        return self.location.start

    @property
    def end(self) -> Position:
        return self.location.end


@dataclass(slots=True)
class _StatementGuess:
    """Lookahead window kept while scanning a raw value.

    Tracks where the most recent run of key characters started and keeps the
    first such run that was followed by ``=``. If the raw value turns out to
    be unterminated, that run is probably the next statement.
    """

    last_key: Position | None = None
    detected: Position | None = None

    def key_char(self, position: Position) -> None:
        if self.last_key is None:
            self.last_key = position

    def equals(self) -> None:
        if self.detected is None and self.last_key is not None:
            self.detected = self.last_key
        self.last_key = None

    def reset(self) -> None:
        self.last_key = None


@dataclass(frozen=True, slots=True)
class _CommentRun:
    start: Position
    end: Position


class Linter:
    """Best-effort CNI linter.

    Usage:
        >>> linter = Linter("[section\\nkey = `value\\n")
        >>> for diagnostic in linter.diagnostics():
        ...     print(diagnostic)
        1:9-1:10 syntax error: Expected ']' for end of section heading.
        2:7-3:1 syntax error: Expected '`' at end of raw value.

    The scan always covers the whole input; every branch of the dispatch
    consumes at least one character.

    """

    __slots__ = ("_scanner", "_dialect", "_pending")

    def __init__(self, source: str, *, dialect: Dialect | None = None) -> None:
        """Initialize linter with source text.

        Args:
            source: CNI source text
            dialect: Dialect options (uses the context dialect if None)
        """
        self._scanner = Scanner(source)
        self._dialect = resolve_dialect(dialect)
        self._pending: list[Diagnostic] = []

    def diagnostics(self) -> Iterator[Diagnostic]:
        """Scan the whole source, yielding diagnostics in source order."""
        scanner = self._scanner
        infos = errors = 0

        while (char := scanner.peek()) is not None:
            before = scanner.offset
            self._dispatch(char)
            if scanner.offset == before:
                # every branch must consume input
                scanner.advance()

            if self._pending:
                self._pending.sort(key=lambda d: d.start)
                for diagnostic in self._pending:
                    if diagnostic.severity is Severity.INFO:
                        infos += 1
                    else:
                        errors += 1
                    yield diagnostic
                self._pending.clear()

        logger.debug("Lint finished: %d syntax errors, %d infos", errors, infos)

    # =========================================================================
    # Dispatch
    # =========================================================================

    def _dispatch(self, char: str) -> None:
        scanner = self._scanner
        dialect = self._dialect

        if is_whitespace(char):
            self._lint_whitespace()
        elif is_comment_start(char, dialect):
            scanner.skip_line()
        elif char == "]":
            self._error(SourceLocation.point(scanner.position), "Unexpected closing square bracket.")
            scanner.advance()
        elif char == "[":
            self._lint_section_header()
        elif is_key_char(char, dialect) or char == RAW_DELIMITER:
            # a backtick here looks like an attempt at a raw key, which the
            # key check reports
            self._lint_statement()
        elif char == "=":
            self._error(SourceLocation.point(scanner.position), "Expected key before '='.")
            scanner.advance()
        else:
            self._error(
                SourceLocation.point(scanner.position), "Expected key and '=' before value."
            )
            # so we do not generate an error for every char on this line
            scanner.skip_line()

    def _report(self, location: SourceLocation, severity: Severity, message: str) -> None:
        self._pending.append(Diagnostic(location, severity, message))

    def _error(self, location: SourceLocation, message: str) -> None:
        self._report(location, Severity.SYNTAX_ERROR, message)

    def _info(self, location: SourceLocation, message: str) -> None:
        self._report(location, Severity.INFO, message)

    # =========================================================================
    # Units
    # =========================================================================

    def _lint_whitespace(self) -> None:
        """Report horizontal whitespace that runs into a line break or EOF.

        Blank lines and indentation in front of a statement are fine.
        """
        scanner = self._scanner
        scanner.advance_while(is_vertical_whitespace)

        start = end = scanner.position
        broke_line = False
        while (char := scanner.peek()) is not None and is_whitespace(char):
            scanner.advance()
            if is_vertical_whitespace(char):
                end = scanner.position
                broke_line = True

        if scanner.position == start:
            return
        if broke_line:
            self._info(SourceLocation.span(start, end), "unnecessary whitespace")
        elif scanner.at_end():
            self._info(SourceLocation.span(start, scanner.position), "unnecessary whitespace")

    def _lint_section_header(self) -> None:
        scanner = self._scanner
        bracket = scanner.position
        scanner.advance()  # consume [
        start = scanner.position

        # end positions of the optional parts of the heading
        whitespace_before: Position | None = None
        word: Position | None = None
        whitespace_after: Position | None = None

        scanner.skip_whitespace()
        if scanner.position != start:
            whitespace_before = scanner.position

        # do not report on comments yet, maybe the heading is broken
        comment_before = self._skip_header_comments()

        before_word = scanner.position
        self._check_key()
        if scanner.position != before_word:
            word = scanner.position

            scanner.skip_whitespace()
            if scanner.position != word:
                whitespace_after = scanner.position

        comment_after = self._skip_header_comments()

        if scanner.peek() != "]":
            if word is not None:
                expected_at = word
            elif comment_before is not None:
                expected_at = comment_before.end
            else:
                expected_at = start
            self._error(
                SourceLocation.point(expected_at), "Expected ']' for end of section heading."
            )
            return

        scanner.advance()  # consume ]
        end = scanner.position

        if word is None:
            if comment_before is not None:
                self._info(
                    SourceLocation.span(bracket, end),
                    "This section heading only contains a comment, is this intentional?",
                )
            else:
                self._info(
                    SourceLocation.span(bracket, end),
                    "This section heading is empty. You can avoid empty section headings "
                    "by putting items in this section at the start of the file.",
                )

        if comment_before is not None:
            self._info(
                SourceLocation.span(comment_before.start, comment_before.end),
                "This is not a good place to put a comment, "
                "consider putting it before the section heading.",
            )
        elif whitespace_before is not None and whitespace_before[0] != start[0]:
            self._info(
                SourceLocation.span(start, whitespace_before), "A line break here may be confusing."
            )

        if comment_after is not None:
            self._info(
                SourceLocation.span(comment_after.start, comment_after.end),
                "This is not a good place to put a comment, "
                "consider putting it after the section heading.",
            )
        elif word is not None and whitespace_after is not None and whitespace_after[0] != word[0]:
            self._info(
                SourceLocation.span(word, whitespace_after), "A line break here may be confusing."
            )

    def _skip_header_comments(self) -> _CommentRun | None:
        """Skip comments (and the whitespace after them) inside a heading."""
        scanner = self._scanner
        dialect = self._dialect
        first: Position | None = None
        last: Position | None = None

        while (char := scanner.peek()) is not None and is_comment_start(char, dialect):
            if first is None:
                first = scanner.position
            scanner.advance_while(lambda c: not is_vertical_whitespace(c))
            last = scanner.position
            scanner.skip_whitespace()

        if first is None or last is None:
            return None
        return _CommentRun(first, last)

    def _check_key(self) -> None:
        """Consume a key or section name, reporting misplaced dots and raw keys."""
        scanner = self._scanner
        dialect = self._dialect
        raw_start: Position | None = None

        char = scanner.peek()
        if char == ".":
            self._error(
                SourceLocation.point(scanner.position),
                "A key or section heading can not start with a dot.",
            )
        elif char == RAW_DELIMITER:
            raw_start = scanner.position
            scanner.advance()

        previous: str | None = None
        while (char := scanner.peek()) is not None and is_key_char(char, dialect):
            position = scanner.position
            scanner.advance()
            if char == ".":
                following = scanner.peek()
                if previous == ".":
                    self._error(
                        SourceLocation.point(position),
                        "A key or section heading can not contain two consecutive dots.",
                    )
                if previous is not None and (
                    following is None or not is_key_char(following, dialect)
                ):
                    self._error(
                        SourceLocation.point(position),
                        "A key or section heading can not end with a dot.",
                    )
            previous = char

        if raw_start is not None:
            if scanner.peek() == RAW_DELIMITER:
                scanner.advance()
            self._error(
                SourceLocation.span(raw_start, scanner.position),
                "A key or section heading can not be a raw value.",
            )
        elif scanner.peek() == RAW_DELIMITER:
            position = scanner.position
            scanner.advance()
            self._error(
                SourceLocation.point(position),
                "A key or section heading can not be a raw value.",
            )

    def _lint_statement(self) -> None:
        scanner = self._scanner
        self._check_key()

        key_end = scanner.position
        scanner.skip_whitespace()
        if scanner.peek() != "=":
            self._error(SourceLocation.point(key_end), "Expected '=' after key.")
            # the rest of this line is not a statement; a later line may be
            if scanner.lineno == key_end[0]:
                scanner.skip_line()
            return
        scanner.advance()  # consume =

        scanner.skip_horizontal_whitespace()
        if scanner.peek() == RAW_DELIMITER:
            self._lint_raw_value()
        else:
            dialect = self._dialect
            scanner.advance_while(lambda c: is_value_char(c, dialect))

    def _lint_raw_value(self) -> None:
        scanner = self._scanner
        dialect = self._dialect
        start = scanner.position
        scanner.advance()  # consume opening backtick

        guess = _StatementGuess()
        while (char := scanner.peek()) is not None:
            if char == "=":
                guess.equals()
                scanner.advance()
            elif char == RAW_DELIMITER:
                tick = scanner.position
                scanner.advance()
                guess.reset()
                following = scanner.peek()
                if following == RAW_DELIMITER:
                    scanner.advance()  # escaped backtick
                elif following is not None and is_key_char(following, dialect):
                    self._error(
                        SourceLocation.point(tick),
                        "Unescaped backtick inside raw value. "
                        "Use '``' to represent a backtick in a raw value.",
                    )
                else:
                    return
            elif is_key_char(char, dialect):
                guess.key_char(scanner.position)
                scanner.advance()
            elif is_whitespace(char):
                # could be the whitespace between a key and its equal sign
                scanner.skip_whitespace()
                if scanner.peek() != "=":
                    guess.reset()
            else:
                guess.reset()
                scanner.advance()

        self._error(
            SourceLocation.span(start, scanner.position), "Expected '`' at end of raw value."
        )
        if guess.detected is not None:
            self._info(
                SourceLocation.point(guess.detected),
                "This looks like a new statement, did you forget to put a backtick here?",
            )


def lint(
    source: str,
    *,
    dialect: Dialect | None = None,
    out: TextIO | None = None,
) -> None:
    """Lint CNI source, writing one line per diagnostic.

    Args:
        source: CNI source text
        dialect: Dialect options (uses the context dialect if None)
        out: Text stream to write to (defaults to sys.stdout)

    Example:
        >>> lint("[a]]\\n")
        1:4-1:5 syntax error: Unexpected closing square bracket.
    """
    out = out if out is not None else sys.stdout
    for diagnostic in Linter(source, dialect=dialect).diagnostics():
        out.write(f"{diagnostic}\n")
