"""Minimal logging utilities for inkpress.

Provides a simple get_logger function that wraps the standard library logging.
The library never installs handlers; applications configure logging.

Example:
    >>> from inkpress.utils.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.debug("Converting document")
"""

from __future__ import annotations

import logging


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the given name.

    Returns a standard library logger with the "inkpress." prefix.

    Args:
        name: Logger name (typically __name__)

    Returns:
        logging.Logger instance

    Example:
        >>> logger = get_logger("mymodule")
        >>> logger.name
        'inkpress.mymodule'
    """
    if not (name == "inkpress" or name.startswith("inkpress.")):
        name = f"inkpress.{name}"
    return logging.getLogger(name)
