"""Centralized logging configuration for receiptbox.

Usage:
    from receiptbox.runtime import get_logger
    logger = get_logger(__name__)

    logger.debug("Decoded %d rows", count)
    logger.warning("Dropped malformed row")

Environment variables:
    RECEIPTBOX_LOG_LEVEL: Set log level (DEBUG, INFO, WARNING, ERROR). Default: INFO
"""

import logging
import os
import sys

DEFAULT_LOG_LEVEL = logging.INFO

LOG_NAMESPACE = "receiptbox"
LOG_FORMAT = "%(levelname)s [%(name)s] %(message)s"
LOG_FORMAT_DEBUG = "%(levelname)s [%(name)s:%(lineno)d] %(message)s"

_LEVEL_NAMES = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
}

_logging_configured = False


def level_from_env() -> int:
    """Resolve the log level from RECEIPTBOX_LOG_LEVEL, falling back to the default."""
    env_level = os.environ.get("RECEIPTBOX_LOG_LEVEL", "").upper()
    return _LEVEL_NAMES.get(env_level, DEFAULT_LOG_LEVEL)


def configure_logging(level: int | None = None) -> None:
    """Configure the receiptbox logger namespace.

    Args:
        level: Log level to use. If None, reads from RECEIPTBOX_LOG_LEVEL
               or uses DEFAULT_LOG_LEVEL.
    """
    global _logging_configured

    if _logging_configured:
        return

    if level is None:
        level = level_from_env()

    log_format = LOG_FORMAT_DEBUG if level == logging.DEBUG else LOG_FORMAT

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(log_format))

    root_logger = logging.getLogger(LOG_NAMESPACE)
    root_logger.setLevel(level)
    root_logger.addHandler(handler)
    # Leave propagation on so pytest's caplog still sees records.
    root_logger.propagate = True

    _logging_configured = True


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the given module name.

    Module names already inside the namespace (``receiptbox.runtime.x``) are
    used as-is; anything else is nested under it.
    """
    configure_logging()

    if name == LOG_NAMESPACE or name.startswith(f"{LOG_NAMESPACE}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOG_NAMESPACE}.{name}")


def set_log_level(level: int) -> None:
    """Change the log level at runtime, switching formats to/from DEBUG."""
    logger = logging.getLogger(LOG_NAMESPACE)
    logger.setLevel(level)

    for handler in logger.handlers:
        if level == logging.DEBUG:
            handler.setFormatter(logging.Formatter(LOG_FORMAT_DEBUG))
        else:
            handler.setFormatter(logging.Formatter(LOG_FORMAT))
