"""Logging helpers.

Every module grabs its logger with ``get_logger(__name__)``; the CLI and the
web app call ``configure_logging`` once at startup.
"""

import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_configured = False


def configure_logging(level: str = "INFO") -> None:
    """Attach a single stderr handler to the package root logger."""
    global _configured
    root = logging.getLogger("salesdesk")
    root.setLevel(level.upper())
    if _configured:
        return
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    _configured = True


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
