# cosdata/logging.py
"""
Logging setup for the cosdata client.

Every module logs under the ``cosdata`` namespace:
    from cosdata.logging import get_logger
    logger = get_logger(__name__)     # -> "cosdata.<module>"

The library never installs handlers on import. Applications (and the
``cosdata`` CLI) call configure_logging() once at startup. httpx and
httpcore are kept at WARNING unless ``http_level`` says otherwise, so
per-request lines from httpx only show up when asked for.
"""

import logging
import sys
from typing import Optional, TextIO

LOGGER_NAME = "cosdata"

DEFAULT_FORMAT = "[%(levelname)s] %(name)s: %(message)s"

HTTP_LOGGERS = ("httpx", "httpcore")


def configure_logging(
    level: int = logging.INFO,
    fmt: str = DEFAULT_FORMAT,
    stream: Optional[TextIO] = None,
    http_level: int = logging.WARNING,
) -> logging.Logger:
    """
    Configure the ``cosdata`` logger and the httpx transport loggers.

    A stderr handler is added to the root logger only if the application
    has not configured one, so repeated calls never duplicate output.

    Args:
        level: Level for the ``cosdata`` namespace
        fmt: Format of the fallback handler
        stream: Stream of the fallback handler (default: stderr)
        http_level: Level for the httpx and httpcore loggers
    """
    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setFormatter(logging.Formatter(fmt))
        root.addHandler(handler)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    for name in HTTP_LOGGERS:
        logging.getLogger(name).setLevel(http_level)

    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Return a logger inside the ``cosdata`` namespace.

    Names already under ``cosdata`` are used as-is; anything else
    (e.g. ``__main__``) is nested below it.
    """
    if name != LOGGER_NAME and not name.startswith(f"{LOGGER_NAME}."):
        name = f"{LOGGER_NAME}.{name}"
    return logging.getLogger(name)
