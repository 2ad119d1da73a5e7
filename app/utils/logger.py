# app/utils/logger.py
"""
Centralised logging configuration for the parking backend.

  console        everything at LOG_LEVEL
  logs/app.log   everything at LOG_LEVEL, rotated
  logs/audit.log action-log mirror (app.services.action_log_service), rotated

Call get_logger(__name__) at the top of every module.
"""

import logging
import os
from logging.handlers import RotatingFileHandler

from app.config import settings

LOG_LEVEL = settings.LOG_LEVEL.upper()
LOG_DIR = settings.LOG_DIR or os.path.join(
    os.path.dirname(os.path.dirname(os.path.dirname(__file__))), "logs"
)
AUDIT_LOGGER = "app.services.action_log_service"

# Third-party loggers that are too chatty at INFO
QUIET_LOGGERS = {
    "sqlalchemy.engine": logging.WARNING,
    "uvicorn.access": logging.WARNING,
    "httpx": logging.WARNING,
}

_configured = False


def _rotating(filename: str, level, fmt: logging.Formatter) -> RotatingFileHandler:
    # Keeps last 10 × 5MB files
    handler = RotatingFileHandler(
        filename=os.path.join(LOG_DIR, filename),
        maxBytes=5 * 1024 * 1024,
        backupCount=10,
        encoding="utf-8",
    )
    handler.setLevel(level)
    handler.setFormatter(fmt)
    return handler


def _configure_root_logger():
    global _configured
    if _configured:
        return
    _configured = True
    os.makedirs(LOG_DIR, exist_ok=True)

    fmt = logging.Formatter(
        fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    console = logging.StreamHandler()
    console.setLevel(LOG_LEVEL)
    console.setFormatter(fmt)

    root = logging.getLogger()
    root.setLevel(LOG_LEVEL)
    root.addHandler(console)
    root.addHandler(_rotating("app.log", LOG_LEVEL, fmt))

    # Audit lines are DEBUG so they stay out of the console by default
    audit = logging.getLogger(AUDIT_LOGGER)
    audit.setLevel(logging.DEBUG)
    audit.addHandler(_rotating("audit.log", logging.DEBUG, fmt))

    for name, level in QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(level)


def get_logger(name: str) -> logging.Logger:
    """Get a named logger. Call this at the top of every module."""
    _configure_root_logger()
    return logging.getLogger(name)
