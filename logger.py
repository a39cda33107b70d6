"""Logging for the storefront API: one ``storefront`` tree, configured from settings."""
import logging
import sys
from typing import Optional

from config import settings

ROOT = "storefront"
LOG_FORMAT = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"

_handler: Optional[logging.Handler] = None


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """Attach a stdout handler to the ``storefront`` logger once and set its level.

    Calling it again only changes the level.
    """
    global _handler
    root = logging.getLogger(ROOT)
    root.setLevel((level or settings.LOG_LEVEL).upper())
    if _handler is None:
        _handler = logging.StreamHandler(sys.stdout)
        _handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(_handler)
        root.propagate = False
    return root


def get_logger(name: str) -> logging.Logger:
    if _handler is None:
        configure_logging()
    return logging.getLogger(f"{ROOT}.{name}")
