"""
cni_format: CNI configuration format for Python

Parses, lints, formats and deserializes CNI: a line-oriented configuration
language with ``[section]`` headings, dotted keys, bareword values and
backtick-delimited raw values. Zero runtime dependencies.

Quick Start:
    >>> from cni_format import parse
    >>> parse("[server]\\nhost = example.org\\nmotd = `Hello,\\nWorld`")
    {'server.host': 'example.org', 'server.motd': 'Hello,\\nWorld'}

    >>> # Report problems instead of raising
    >>> from cni_format import lint
    >>> lint("[server\\n")
    1:8-1:9 syntax error: Expected ']' for end of section heading.

Dialects:
    >>> from cni_format import Dialect
    >>> parse("key = value ; comment", dialect=Dialect(ini=True))
    {'key': 'value'}

Command line:
    cniutil lint|dump|format FILES
"""

from cni_format.api import (
    section_leaves,
    section_tree,
    sub_leaves,
    sub_tree,
    walk_leaves,
    walk_tree,
)
from cni_format.config import (
    Dialect,
    dialect_context,
    get_dialect,
    reset_dialect,
    set_dialect,
)
from cni_format.deserialize import from_str
from cni_format.errors import (
    CniError,
    DeserializeError,
    DeserializeKind,
    ErrorKind,
    ParseError,
)
from cni_format.format import dump, dump_csv, dump_null, format_cni, format_value, to_str
from cni_format.linter import Diagnostic, Linter, Severity, lint
from cni_format.location import Position, SourceLocation
from cni_format.parser import CniParser, parse
from cni_format.scanner import Scanner

__version__ = "0.1.0"


__all__ = [  # noqa: RUF022 grouped by category
    # Version
    "__version__",
    # Core API
    "parse",
    "CniParser",
    "lint",
    "Linter",
    # Diagnostics
    "Diagnostic",
    "Severity",
    "Position",
    "SourceLocation",
    "Scanner",
    # Configuration
    "Dialect",
    "dialect_context",
    "get_dialect",
    "reset_dialect",
    "set_dialect",
    # Errors
    "CniError",
    "DeserializeError",
    "DeserializeKind",
    "ErrorKind",
    "ParseError",
    # Section queries
    "section_leaves",
    "section_tree",
    "sub_leaves",
    "sub_tree",
    "walk_leaves",
    "walk_tree",
    # Serialization
    "dump",
    "dump_csv",
    "dump_null",
    "format_cni",
    "format_value",
    "from_str",
    "to_str",
]
