"""Typed deserialization of CNI documents into dataclasses.

Maps the flat key/value result of the strict parser onto a dataclass tree.
Field names are keys; a nested dataclass field reads the section named after
the field, and a ``dict[str, T]`` field collects that section's sub-tree.

Supported field types:
    - str, int, float, bool
    - ``T | None`` (an empty value or a missing key gives None)
    - nested dataclasses
    - ``dict[str, T]`` with a scalar ``T``

Unlike parse(), a key that appears twice is an error. Every conversion error
points at the value that caused it.

Example:
    >>> from dataclasses import dataclass
    >>> @dataclass
    ... class Server:
    ...     host: str
    ...     port: int = 80
    >>> from_str("host = example.org\\nport = 8080", Server)
    Server(host='example.org', port=8080)

"""

from __future__ import annotations

import dataclasses
import re
import types
import typing
from typing import Any, TypeVar

from cni_format.api import sub_tree
from cni_format.config import Dialect
from cni_format.errors import DeserializeError, DeserializeKind, ParseError
from cni_format.location import Position
from cni_format.parser import CniParser
from cni_format.utils.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")

TRUE_WORDS: frozenset[str] = frozenset({"1", "+", "true", "yes", "on", "up"})
FALSE_WORDS: frozenset[str] = frozenset({"0", "-", "false", "no", "off", "down"})

_INT_RE = re.compile(r"[+-]?[0-9]+")
_FLOAT_RE = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|inf|infinity|nan)",
    re.IGNORECASE,
)

# Parsed entry: value and the position of its first character
_Entry = tuple[str, Position]

_MISSING = object()


def from_str(source: str, cls: type[T], *, dialect: Dialect | None = None) -> T:
    """Deserialize CNI source into an instance of the dataclass ``cls``.

    Args:
        source: CNI source text
        cls: Dataclass type to build
        dialect: Dialect options (uses the context dialect if None)

    Returns:
        A new ``cls`` instance.

    Raises:
        DeserializeError: On syntax errors, duplicate keys, values that do
            not convert to the field type and missing fields without default.
    """
    return _build(cls, _collect(source, dialect), "")


def _collect(source: str, dialect: Dialect | None) -> dict[str, _Entry]:
    parser = CniParser(source, dialect=dialect)
    entries: dict[str, _Entry] = {}
    try:
        for key, value in parser:
            position = parser.last_position or (0, 0)
            if key in entries:
                raise DeserializeError(DeserializeKind.DUPLICATE_KEY, *position, detail=key)
            entries[key] = (value, position)
    except ParseError as err:
        raise DeserializeError.from_parse_error(err) from err
    return entries


def _qualify(path: str, name: str) -> str:
    return f"{path}.{name}" if path else name


def _build(cls: type[T], entries: dict[str, _Entry], path: str) -> T:
    if not (isinstance(cls, type) and dataclasses.is_dataclass(cls)):
        raise DeserializeError(DeserializeKind.UNSUPPORTED_TYPE, detail=repr(cls))

    hints = typing.get_type_hints(cls)
    kwargs: dict[str, Any] = {}
    for field in dataclasses.fields(cls):
        if not field.init:
            continue
        qualified = _qualify(path, field.name)
        value = _field_value(hints[field.name], field.name, entries, qualified)
        if value is _MISSING:
            if (
                field.default is not dataclasses.MISSING
                or field.default_factory is not dataclasses.MISSING
            ):
                continue
            logger.debug("No value for field %s of %s", qualified, cls.__name__)
            raise DeserializeError(DeserializeKind.EXPECTED_VALUE, detail=qualified)
        kwargs[field.name] = value
    return cls(**kwargs)


def _optional_inner(tp: Any) -> Any | None:
    """Return T for ``T | None`` / ``Optional[T]``, otherwise None."""
    if typing.get_origin(tp) not in (typing.Union, types.UnionType):
        return None
    args = [arg for arg in typing.get_args(tp) if arg is not type(None)]
    if len(args) != 1 or len(typing.get_args(tp)) != 2:
        return None
    return args[0]


def _field_value(tp: Any, name: str, entries: dict[str, _Entry], qualified: str) -> Any:
    inner = _optional_inner(tp)
    if inner is not None:
        if name in entries and entries[name][0] == "":
            return None
        value = _field_value(inner, name, entries, qualified)
        return None if value is _MISSING else value

    if isinstance(tp, type) and dataclasses.is_dataclass(tp):
        section = sub_tree(entries, name)
        if not section:
            return _MISSING
        return _build(tp, section, qualified)

    if typing.get_origin(tp) is dict:
        key_type, value_type = typing.get_args(tp) or (str, str)
        if key_type is not str:
            raise DeserializeError(DeserializeKind.UNSUPPORTED_TYPE, detail=repr(tp))
        section = sub_tree(entries, name)
        if not section:
            return _MISSING
        return {key: _convert(value_type, entry) for key, entry in section.items()}

    if name not in entries:
        return _MISSING
    return _convert(tp, entries[name])


def _convert(tp: Any, entry: _Entry) -> Any:
    """Convert one raw string value to a scalar field type."""
    value, (lineno, col) = entry
    if tp is str:
        return value
    # bool before int, bool is a subclass of int
    if tp is bool:
        word = value.lower()
        if word in TRUE_WORDS:
            return True
        if word in FALSE_WORDS:
            return False
        raise DeserializeError(DeserializeKind.BOOL, lineno, col, detail=value)
    if tp is int:
        if not _INT_RE.fullmatch(value):
            raise DeserializeError(DeserializeKind.INT, lineno, col, detail=value)
        return int(value)
    if tp is float:
        if not _FLOAT_RE.fullmatch(value):
            raise DeserializeError(DeserializeKind.FLOAT, lineno, col, detail=value)
        return float(value)
    raise DeserializeError(DeserializeKind.UNSUPPORTED_TYPE, lineno, col, detail=repr(tp))


__all__ = ["FALSE_WORDS", "TRUE_WORDS", "from_str"]
