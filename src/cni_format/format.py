"""Render flat key/value data as CNI text.

Three layouts are available:

- to_str: compact CNI with as few section headings as possible
- format_cni: the layout of ``cniutil format``, which only opens a section
  heading for sections with enough entries
- dump: arbitrary ``PREFIX key INFIX value POSTFIX`` records, with CSV and
  NUL-terminated presets

Values that a bareword cannot represent are written as raw values.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from cni_format.api import section_tree, sub_leaves, sub_tree
from cni_format.charsets import (
    COMMENT_CHAR,
    INI_COMMENT_CHAR,
    RAW_DELIMITER,
    is_vertical_whitespace,
    is_whitespace,
)

# An empty bareword followed by a comment, so the line reads as intentional
EMPTY_VALUE = "#empty"


def _needs_raw(value: str) -> bool:
    if is_whitespace(value[0]) or is_whitespace(value[-1]):
        return True
    return any(
        char in (RAW_DELIMITER, COMMENT_CHAR, INI_COMMENT_CHAR) or is_vertical_whitespace(char)
        for char in value
    )


def format_value(value: str) -> str:
    """Format a single value as a bareword or raw value.

    Example:
        >>> format_value("plain text")
        'plain text'
        >>> format_value("tick`")
        '`tick```'
        >>> format_value("")
        '#empty'
    """
    if not value:
        return EMPTY_VALUE
    if _needs_raw(value):
        return RAW_DELIMITER + value.replace(RAW_DELIMITER, RAW_DELIMITER * 2) + RAW_DELIMITER
    return value


def _items(data: Mapping[str, str] | Iterable[tuple[str, str]]) -> list[tuple[str, str]]:
    if isinstance(data, Mapping):
        return [(key, str(value)) for key, value in data.items()]
    return [(key, str(value)) for key, value in data]


def _section_order(key: str) -> tuple[bool, list[str]]:
    # keys without dots first, then grouped by section
    return ("." in key, key.split("."))


def to_str(data: Mapping[str, str] | Iterable[tuple[str, str]]) -> str:
    """Turn a key/value store into CNI text.

    The first dot separated part of a key is used as its section name, so the
    output has as few section headings as possible.

    Args:
        data: Mapping or iterable of ``(key, value)`` pairs

    Returns:
        CNI text, one statement per line.

    Example:
        >>> to_str({"ccc": "plain", "a.b": "with section"})
        'ccc = plain\\n[a]\\nb = with section\\n'
    """
    lines: list[str] = []
    section = ""
    for key, value in sorted(_items(data), key=lambda item: _section_order(item[0])):
        new_section, dot, rest = key.partition(".")
        if dot:
            if new_section != section:
                lines.append(f"[{new_section}]\n")
                section = new_section
            key = rest
        lines.append(f"{key} = {format_value(value)}\n")
    return "".join(lines)


def _flat(data: Mapping[str, str]) -> list[str]:
    return [f"{key} = {format_value(data[key])}\n" for key in sorted(data)]


def format_cni(
    data: Mapping[str, str] | Iterable[tuple[str, str]],
    *,
    section_threshold: int = 10,
) -> str:
    """Strictly formatted CNI text.

    Top-level keys come first, followed by keys that stay fully qualified.
    Every section with at least ``section_threshold`` entries then gets its
    own heading; deeper sections are considered before shallower ones.

    Args:
        data: Mapping or iterable of ``(key, value)`` pairs
        section_threshold: Entries a section needs before it gets a heading.
            Zero disables section headings entirely.

    Returns:
        CNI text with keys sorted inside every block.

    """
    remaining = dict(_items(data))
    if section_threshold <= 0:
        return "".join(_flat(remaining))

    top = sub_leaves(remaining, "")
    for key in top:
        del remaining[key]

    # long before short, then alphabetically
    sections = sorted(section_tree(remaining, ""), key=lambda name: (-len(name), name))
    blocks: list[str] = []
    for section in sections:
        entries = sub_tree(remaining, section)
        if len(entries) < section_threshold:
            continue
        blocks.append(f"[{section}]\n")
        blocks.extend(_flat(entries))
        for key in entries:
            del remaining[f"{section}.{key}"]

    # qualified keys must come before the first heading
    return "".join(_flat(top) + _flat(remaining) + blocks)


def dump(
    data: Mapping[str, str] | Iterable[tuple[str, str]],
    *,
    prefix: str = "",
    infix: str = " ",
    postfix: str = "\n",
) -> str:
    """Write every entry as ``prefix + key + infix + value + postfix``.

    Entries keep the order of ``data``; values are written verbatim.
    """
    return "".join(f"{prefix}{key}{infix}{value}{postfix}" for key, value in _items(data))


def dump_csv(data: Mapping[str, str] | Iterable[tuple[str, str]]) -> str:
    """Comma separated ``key,"value"`` records, doubling quotes in values."""
    quoted = [(key, value.replace('"', '""')) for key, value in _items(data)]
    return dump(quoted, infix=',"', postfix='"\n')


def dump_null(data: Mapping[str, str] | Iterable[tuple[str, str]]) -> str:
    """``key=value`` records terminated by NUL, for values containing line feeds."""
    return dump(data, infix="=", postfix="\0")


__all__ = [
    "EMPTY_VALUE",
    "dump",
    "dump_csv",
    "dump_null",
    "format_cni",
    "format_value",
    "to_str",
]
