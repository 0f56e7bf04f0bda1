"""Minimal logging utilities for cni_format.

Provides a simple get_logger function that wraps the standard library logging.
The library never configures handlers; applications (and the ``cniutil``
command) decide where records go.

Example:
    >>> from cni_format.utils.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.debug("Parsing document")
"""

from __future__ import annotations

import logging


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the given name.

    Returns a standard library logger with the "cni_format." prefix.

    Args:
        name: Logger name (typically __name__)

    Returns:
        logging.Logger instance

    Example:
        >>> logger = get_logger("mymodule")
        >>> logger.name
        'cni_format.mymodule'
    """
    if not (name == "cni_format" or name.startswith("cni_format.")):
        name = f"cni_format.{name}"
    return logging.getLogger(name)
