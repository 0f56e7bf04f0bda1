"""Section queries over parsed CNI data.

CNI documents parse to a flat mapping of fully qualified keys. These helpers
view that mapping as a tree of sections:

- sub_tree / sub_leaves: copy the entries below a section, with the section
  prefix removed (recursive / direct children only)
- walk_tree / walk_leaves: lazily filter an iterable of pairs, keeping the
  full keys
- section_tree / section_leaves: list the (sub)section names below a section

A section prefix only matches at a dot boundary, so section ``a`` contains
``a.b`` but not ``ab.c``. The empty section name is the top level.

Example:
    >>> data = {"a": "1", "srv.host": "x", "srv.tls.cert": "y"}
    >>> sub_tree(data, "srv")
    {'host': 'x', 'tls.cert': 'y'}
    >>> sub_leaves(data, "srv")
    {'host': 'x'}
    >>> section_tree(data, "")
    ['srv', 'srv.tls']

"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from typing import TypeVar

V = TypeVar("V")


def _relative_key(key: str, section: str) -> str | None:
    """Return ``key`` relative to ``section``, or None if it is not inside it."""
    if not section:
        return key
    if key.startswith(section) and key[len(section) : len(section) + 1] == ".":
        return key[len(section) + 1 :]
    return None


def sub_tree(data: Mapping[str, V], section: str) -> dict[str, V]:
    """Entries anywhere below ``section``, keyed relative to it."""
    result: dict[str, V] = {}
    for key, value in data.items():
        relative = _relative_key(key, section)
        if relative is not None:
            result[relative] = value
    return result


def sub_leaves(data: Mapping[str, V], section: str) -> dict[str, V]:
    """Entries directly inside ``section``, keyed relative to it."""
    return {key: value for key, value in sub_tree(data, section).items() if "." not in key}


def walk_tree(pairs: Iterable[tuple[str, V]], section: str) -> Iterator[tuple[str, V]]:
    """Lazily yield the pairs anywhere below ``section``, keys unchanged."""
    for key, value in pairs:
        if _relative_key(key, section) is not None:
            yield key, value


def walk_leaves(pairs: Iterable[tuple[str, V]], section: str) -> Iterator[tuple[str, V]]:
    """Lazily yield the pairs directly inside ``section``, keys unchanged."""
    for key, value in pairs:
        relative = _relative_key(key, section)
        if relative is not None and "." not in relative:
            yield key, value


def section_tree(data: Iterable[str], section: str) -> list[str]:
    """Sorted names of every (sub)section below ``section``, relative to it.

    Args:
        data: Mapping or iterable of fully qualified keys
        section: Section to list, ``""`` for the top level

    """
    sections: set[str] = set()
    for key in data:
        relative = _relative_key(key, section)
        if relative is None:
            continue
        parts = relative.split(".")[:-1]
        for depth in range(1, len(parts) + 1):
            sections.add(".".join(parts[:depth]))
    return sorted(sections)


def section_leaves(data: Iterable[str], section: str) -> list[str]:
    """Sorted names of the sections directly below ``section``."""
    return [name for name in section_tree(data, section) if "." not in name]


__all__ = [
    "section_leaves",
    "section_tree",
    "sub_leaves",
    "sub_tree",
    "walk_leaves",
    "walk_tree",
]
