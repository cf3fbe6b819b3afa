"""
Logging for the storefront.

    from storefront.logging import get_logger, loggable
    logger = get_logger(__name__)
    logger.info(f"Fetching category {loggable(category)}")

LOG_LEVEL picks the level (INFO by default). LOG_FORMAT=simple drops the
timestamp for hosts that add their own.
"""

import logging
import os
import sys
from functools import cache

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FORMAT_SIMPLE = "%(levelname)s - %(name)s - %(message)s"

# Loggers of the HTTP stack; the catalog client logs its own failures
QUIET_LOGGERS = ("httpx", "httpcore")

# Visitor text must not be able to forge log lines (CWE-117)
_CONTROL_CHARS = str.maketrans({"\n": "\\n", "\r": "\\r", "\t": "\\t", "\x00": None})


def configure_logging(level: str | None = None, fmt: str | None = None) -> bool:
    """
    Attach a stdout handler to the root logger.

    Does nothing when the root logger already has handlers (pytest, uvicorn
    with its own config). Returns True when a handler was installed.
    """
    root = logging.getLogger()
    if root.handlers:
        return False

    level_name = (level or os.environ.get("LOG_LEVEL", "INFO")).upper()
    numeric = getattr(logging, level_name, logging.INFO)
    simple = (fmt or os.environ.get("LOG_FORMAT", "")).lower() == "simple"

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(numeric)
    handler.setFormatter(logging.Formatter(LOG_FORMAT_SIMPLE if simple else LOG_FORMAT))
    root.setLevel(numeric)
    root.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    return True


configure_logging()


@cache
def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def loggable(value: str | None, max_length: int = 50) -> str:
    """Category names and search text as a single, bounded log token."""
    if not value:
        return "N/A"
    text = str(value).translate(_CONTROL_CHARS)
    return text if len(text) <= max_length else text[:max_length] + "..."


__all__ = [
    "LOG_FORMAT",
    "LOG_FORMAT_SIMPLE",
    "configure_logging",
    "get_logger",
    "loggable",
]
