"""ContextVar-based dialect configuration for cni_format.

Provides context-local configuration using Python's ContextVars (PEP 567).
The dialect selects the opt-in CNI extensions: ``ini`` (``;`` comments) and
``more_keys`` (wide key charset).

Usage:
    # Explicit dialect per call
    data = parse(text, dialect=Dialect(ini=True))

    # Or set it for everything in the current context
    from cni_format.config import Dialect, dialect_context

    with dialect_context(Dialect(more_keys=True)):
        data = parse(text)
        lint(text)

Thread Safety:
    ContextVars are thread-local by design. Each thread has independent storage,
    so no locks are needed.

"""

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Dialect:
    """Immutable dialect options for one parse or lint pass.

    Attributes:
        ini: Accept ``;`` as an additional comment start character
        more_keys: Allow any character in keys except ``[ ] = `` ` ``,
            whitespace and comment starts

    """

    ini: bool = False
    more_keys: bool = False

    @classmethod
    def from_dict(cls, config_dict: dict) -> "Dialect":
        """Create Dialect from dictionary.

        Only includes keys that are valid Dialect fields; unknown keys
        are silently ignored. Dashed spellings (``more-keys``) are accepted.

        Args:
            config_dict: Dictionary with option values.

        Returns:
            New Dialect instance with values from dict.

        Example:
            >>> Dialect.from_dict({"ini": True, "more-keys": True, "x": 1})
            Dialect(ini=True, more_keys=True)

        """
        valid_fields = {f.name for f in cls.__dataclass_fields__.values()}
        filtered = {}
        for key, value in config_dict.items():
            name = key.replace("-", "_")
            if name in valid_fields:
                filtered[name] = bool(value)
        return cls(**filtered)


# Module-level default dialect (reused, never recreated)
_DEFAULT_DIALECT: Dialect = Dialect()

_dialect: ContextVar[Dialect] = ContextVar("cni_dialect", default=_DEFAULT_DIALECT)


def get_dialect() -> Dialect:
    """Get the dialect active in the current context."""
    return _dialect.get()


def set_dialect(dialect: Dialect) -> None:
    """Set the dialect for the current context.

    Args:
        dialect: Dialect instance to use for this context.

    """
    _dialect.set(dialect)


def reset_dialect() -> None:
    """Reset to the core dialect (no extensions)."""
    _dialect.set(_DEFAULT_DIALECT)


def resolve_dialect(dialect: Dialect | None) -> Dialect:
    """Return ``dialect``, or the context dialect when it is None."""
    return dialect if dialect is not None else _dialect.get()


@contextmanager
def dialect_context(dialect: Dialect) -> Iterator[None]:
    """Context manager for temporary dialect changes.

    Args:
        dialect: Dialect to use within the context.

    Yields:
        None

    Example:
        >>> with dialect_context(Dialect(ini=True)):
        ...     parse("a = b ; comment")
        {'a': 'b'}

    Properly restores the previous dialect even if an exception is raised.

    """
    previous = _dialect.get()
    _dialect.set(dialect)
    try:
        yield
    finally:
        _dialect.set(previous)


__all__ = [
    "Dialect",
    "dialect_context",
    "get_dialect",
    "reset_dialect",
    "resolve_dialect",
    "set_dialect",
]
