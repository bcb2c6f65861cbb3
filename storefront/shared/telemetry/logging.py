"""Logging configuration for processes embedding the gateway.

Library modules only create loggers (``get_logger(__name__)``); the
embedding process calls setup_logging() once at startup.
"""

import logging
import sys

from storefront.core.config import get_settings

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Request lines from these include the API key query parameter
_QUIET_LOGGERS = ("httpx", "httpcore")


def setup_logging(level: int | None = None) -> None:
    """Configure process-wide logging to stdout.

    Args:
        level: Root level; defaults to DEBUG when settings.debug is True,
            otherwise INFO. httpx and httpcore never log below WARNING.
    """
    if level is None:
        level = logging.DEBUG if get_settings().debug else logging.INFO
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))


def get_logger(name: str) -> logging.Logger:
    """Return the logger for a module (pass __name__)."""
    return logging.getLogger(name)
