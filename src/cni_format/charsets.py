"""Character classification for the CNI grammar.

All sets are frozensets for O(1) membership testing and are built once at
module import. Predicates that depend on the dialect take it as an explicit
argument; nothing here reads the context configuration.

Usage:
    from cni_format.charsets import is_key_char

    if is_key_char(char, dialect):
        ...
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from cni_format.config import Dialect

# Perl / Raku "\v": LF, VT, FF, CR, NEL, LINE SEPARATOR, PARAGRAPH SEPARATOR
VERTICAL_WHITESPACE: frozenset[str] = frozenset("\n\x0b\x0c\r\x85\u2028\u2029")

# str.isspace() also accepts the ASCII information separators, which are not
# Unicode White_Space characters
_NOT_WHITESPACE: frozenset[str] = frozenset("\x1c\x1d\x1e\x1f")

# Core key charset: [0-9a-zA-Z_.-]
KEY_CHARS: frozenset[str] = frozenset(
    "0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ_.-"
)

# Never allowed in a key, even with the more-keys extension
KEY_EXCLUDED_CHARS: frozenset[str] = frozenset("[]=`")

COMMENT_CHAR = "#"
INI_COMMENT_CHAR = ";"
RAW_DELIMITER = "`"


def is_vertical_whitespace(char: str) -> bool:
    """Check if char is a line break character."""
    return char in VERTICAL_WHITESPACE


def is_whitespace(char: str) -> bool:
    """Check if char is Unicode whitespace, horizontal or vertical."""
    return char.isspace() and char not in _NOT_WHITESPACE


def is_horizontal_whitespace(char: str) -> bool:
    return is_whitespace(char) and char not in VERTICAL_WHITESPACE


def is_comment_start(char: str, dialect: Dialect) -> bool:
    """Check if char starts a comment.

    ``#`` always does; ``;`` only with the ini dialect.
    """
    return char == COMMENT_CHAR or (dialect.ini and char == INI_COMMENT_CHAR)


def is_key_char(char: str, dialect: Dialect) -> bool:
    """Check if char may appear in a key or section name.

    Without more-keys this is ``[0-9a-zA-Z_.-]``. With more-keys anything is
    allowed except brackets, ``=``, backtick, whitespace and comment starts.
    Dot placement is validated on the whole key, not here.
    """
    if dialect.more_keys:
        return not (
            char in KEY_EXCLUDED_CHARS
            or is_comment_start(char, dialect)
            or is_whitespace(char)
        )
    return char in KEY_CHARS


def is_value_char(char: str, dialect: Dialect) -> bool:
    """Check if char continues a bareword value."""
    return not (is_comment_start(char, dialect) or char in VERTICAL_WHITESPACE)


def is_valid_key(key: str) -> bool:
    """Check dot placement: no leading, trailing or doubled dots."""
    return not (key.startswith(".") or key.endswith(".") or ".." in key)


def strip_whitespace(text: str) -> str:
    """Strip leading and trailing Unicode whitespace from text."""
    start, end = 0, len(text)
    while start < end and is_whitespace(text[start]):
        start += 1
    while end > start and is_whitespace(text[end - 1]):
        end -= 1
    return text[start:end]
