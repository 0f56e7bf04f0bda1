"""Exception classes for cni_format.

The strict parser raises ParseError on the first syntax error; the typed
deserializer raises DeserializeError. The linter never raises for malformed
input, it reports diagnostics instead.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(Enum):
    """Syntax error kinds raised by the strict parser."""

    EXPECTED_SECTION_END = 'expected "]"'
    INVALID_KEY = "invalid key, can not start or end with a dot or contain empty parts"
    EXPECTED_KEY = "expected key"
    EXPECTED_EQUALS = 'expected "="'
    UNTERMINATED_RAW = "unterminated raw value"

    @property
    def message(self) -> str:
        return self.value


class DeserializeKind(Enum):
    """Error kinds raised while mapping a document onto typed records."""

    # syntax errors from the parser
    EXPECTED_SECTION_END = 'expected "]"'
    INVALID_KEY = "invalid key, can not start or end with a dot or contain empty parts"
    EXPECTED_KEY = "expected key"
    EXPECTED_EQUALS = 'expected "="'
    UNTERMINATED_RAW = "unterminated raw value"

    # data representation errors
    INT = "malformed integer"
    FLOAT = "malformed float"
    BOOL = "malformed boolean"
    DUPLICATE_KEY = "key appears multiple times"
    EXPECTED_VALUE = "expected a value"
    UNSUPPORTED_TYPE = "unsupported field type"

    @classmethod
    def from_error_kind(cls, kind: ErrorKind) -> DeserializeKind:
        return cls[kind.name]


def _format_location(
    lineno: int | None, col_offset: int | None, source_file: str | None
) -> str:
    location = ""
    if source_file:
        location = f"{source_file}:"
    if lineno is not None:
        location += f"{lineno}:"
        if col_offset is not None:
            location += f"{col_offset}:"
    if location:
        location = location.rstrip(":") + " "
    return location


class CniError(Exception):
    """Base exception for all cni_format errors.

    Subclass this for specific error categories.
    """

    pass


class ParseError(CniError):
    """Syntax error in CNI source.

    Raised by the strict parser at the first deviation from the grammar.
    Parsing cannot continue after it.
    """

    def __init__(
        self,
        kind: ErrorKind,
        lineno: int,
        col_offset: int,
        source_file: str | None = None,
    ) -> None:
        """Initialize parse error.

        Args:
            kind: What went wrong
            lineno: Line number where error occurred (1-indexed)
            col_offset: Column where error occurred (1-indexed)
            source_file: Path to source file (optional)
        """
        self.kind = kind
        self.message = kind.message
        self.lineno = lineno
        self.col_offset = col_offset
        self.source_file = source_file

        location = _format_location(lineno, col_offset, source_file)
        super().__init__(f"{location}{self.message}")

    @property
    def position(self) -> tuple[int, int]:
        return (self.lineno, self.col_offset)


class DeserializeError(CniError):
    """Error while converting a CNI document into typed records.

    Positions point at the start of the offending value. They are 0 when no
    value is available, e.g. for a missing field in an empty document.
    """

    def __init__(
        self,
        kind: DeserializeKind,
        lineno: int = 0,
        col_offset: int = 0,
        detail: str | None = None,
    ) -> None:
        """Initialize deserialize error.

        Args:
            kind: Category of the failure
            lineno: Line of the value (1-indexed, 0 if unknown)
            col_offset: Column of the value (1-indexed, 0 if unknown)
            detail: Extra context such as the key name or rejected text
        """
        self.kind = kind
        self.lineno = lineno
        self.col_offset = col_offset
        self.detail = detail

        message = kind.value
        if detail:
            message = f"{message}: {detail}"
        self.message = message
        super().__init__(f"line {lineno}:{col_offset}: {message}")

    @classmethod
    def from_parse_error(cls, err: ParseError) -> DeserializeError:
        return cls(DeserializeKind.from_error_kind(err.kind), err.lineno, err.col_offset)
