"""
Logging for the storefront core.

One stdout handler is installed on the root logger the first time this module
is imported, unless the host application already configured logging.

Environment:
    LOG_LEVEL   DEBUG, INFO (default), WARNING, ERROR
    LOG_FORMAT  "simple" drops timestamps (the host adds its own)

Messages may carry record ids, cart keys and backend error text, all of which
can come from outside the process. Pass them through the sanitizers below.
"""

import logging
import os
import sys
from functools import cache

DETAILED_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
SIMPLE_FORMAT = "%(levelname)s - %(name)s - %(message)s"

# Client libraries that log every request at INFO
QUIET_LOGGERS = ("httpx", "httpcore", "upstash_redis")

_CONTROL_CHARS = {"\n": "\\n", "\r": "\\r", "\t": "\\t", "\x00": ""}


def configure_logging(level: str | None = None, fmt: str | None = None) -> bool:
    """
    Install the storefront handler on the root logger.

    Returns:
        False when the root logger already has handlers (left untouched)
    """
    root = logging.getLogger()
    if root.handlers:
        return False

    level_name = (level or os.environ.get("LOG_LEVEL", "INFO")).upper()
    log_level = getattr(logging, level_name, logging.INFO)
    simple = (fmt or os.environ.get("LOG_FORMAT", "")).lower() == "simple"

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(log_level)
    handler.setFormatter(logging.Formatter(SIMPLE_FORMAT if simple else DETAILED_FORMAT))
    root.setLevel(log_level)
    root.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    return True


configure_logging()


@cache
def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def _escape(value: object) -> str:
    text = str(value)
    for char, replacement in _CONTROL_CHARS.items():
        text = text.replace(char, replacement)
    return text


def sanitize_id_for_logging(id_value: str | None) -> str:
    """Record id prefix (8 chars, control chars escaped); "N/A" when empty."""
    if not id_value:
        return "N/A"
    return _escape(id_value)[:8]


def sanitize_text_for_logging(value: object, max_length: int = 80) -> str:
    """
    Free text from a collaborator (backend error messages, decline reasons,
    exception text) made safe for a single log line.

    Control characters are escaped and long values truncated with "...".
    """
    if value is None or value == "":
        return "N/A"
    text = _escape(value)
    if len(text) <= max_length:
        return text
    return text[:max_length] + "..."


__all__ = [
    "configure_logging",
    "get_logger",
    "sanitize_id_for_logging",
    "sanitize_text_for_logging",
]
