"""Logging helpers for arroyo.

Every module asks for its logger through get_logger so that all output lives
under the ``arroyo`` namespace. No handlers are attached here; the host
application decides where records go.

Example:
    >>> from arroyo.utils.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.debug("Tokenizing buffer of %d chars", 42)
"""

from __future__ import annotations

import logging


def get_logger(name: str) -> logging.Logger:
    """Get a logger namespaced under ``arroyo``.

    Args:
        name: Logger name (typically __name__)

    Returns:
        logging.Logger instance

    Example:
        >>> get_logger("stream").name
        'arroyo.stream'
    """
    if not (name == "arroyo" or name.startswith("arroyo.")):
        name = f"arroyo.{name}"
    return logging.getLogger(name)
