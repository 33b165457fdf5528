"""Logging setup shared by the app factory and the CLI scripts."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"
HANDLER_NAME = "users_api"


def configure_logging(level: str = "INFO") -> logging.Logger:
    """
    Attach a single console handler to the package logger.

    Calling it again only updates the level, so building several apps in the
    same process (tests) does not duplicate log lines.
    """
    logger = logging.getLogger("users_api")
    logger.setLevel(getattr(logging, (level or "INFO").upper(), logging.INFO))
    if not any(h.get_name() == HANDLER_NAME for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.set_name(HANDLER_NAME)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    return logger
