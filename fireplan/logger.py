"""Logging helpers for the fireplan package."""

from __future__ import annotations

import logging
from typing import Optional, Union

ROOT_LOGGER_NAME = "fireplan"
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def get_app_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a logger under the ``fireplan`` namespace.

    Args:
        name: Dotted suffix or a module ``__name__``. Module names that
            already start with ``fireplan`` are used as-is.

    Returns:
        logging.Logger: The namespaced logger.
    """
    if not name:
        return logging.getLogger(ROOT_LOGGER_NAME)
    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def configure_logging(level: Union[int, str] = logging.INFO) -> logging.Logger:
    """Attach a single stream handler to the package logger.

    Calling this more than once only updates the level.

    Args:
        level: Logging level name or number.

    Returns:
        logging.Logger: The configured package logger.
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    logger.setLevel(level)

    if not any(getattr(h, "_fireplan_handler", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._fireplan_handler = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
    return logger


__all__ = ["get_app_logger", "configure_logging", "ROOT_LOGGER_NAME"]
