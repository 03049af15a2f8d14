"""Logging helpers for stockbook.

Modules obtain their logger with ``get_logger(__name__)``; the host
application calls ``configure_logging()`` once to attach a handler to the
``stockbook`` logger.

Usage:
    from stockbook.utils.logging import configure_logging, get_logger

    configure_logging("DEBUG")
    logger = get_logger(__name__)
    logger.info("Imported %d sheets", 3)
"""

import logging
from typing import Optional

ROOT_LOGGER_NAME = "stockbook"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_HANDLER_FLAG = "_stockbook_handler"


def get_logger(name: str) -> logging.Logger:
    """Return a logger inside the ``stockbook`` namespace.

    Args:
        name: Usually ``__name__`` of the calling module.

    Returns:
        The named logger.
    """
    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """Attach a stream handler to the ``stockbook`` logger.

    Calling this more than once only updates the level.

    Args:
        level: Log level name. Defaults to the configured ``log_level``.

    Returns:
        The package root logger.
    """
    if level is None:
        from stockbook.config import get_settings

        level = get_settings().log_level

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level.upper())

    if not any(getattr(h, _HANDLER_FLAG, False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        setattr(handler, _HANDLER_FLAG, True)
        logger.addHandler(handler)

    return logger
