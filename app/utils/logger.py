# app/utils/logger.py
"""
Centralised logging configuration for the API server and the CLI client.
Logs to console and to a rotating file under settings.LOG_DIR.
The file handler is attached on first use, not at import.
"""

import logging
import os
from logging.handlers import RotatingFileHandler
from typing import Optional

from app.config import settings

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_configured = False


def log_file_path() -> Optional[str]:
    """Where the rotating log lives, or None when LOG_DIR is empty."""
    if not settings.LOG_DIR:
        return None
    return os.path.join(os.path.expanduser(settings.LOG_DIR), settings.LOG_FILE)


def _file_handler(path: str, level: str, fmt: logging.Formatter) -> Optional[logging.Handler]:
    try:
        os.makedirs(os.path.dirname(path), exist_ok=True)
        handler = RotatingFileHandler(
            filename=path,
            maxBytes=5 * 1024 * 1024,   # 10 files of 5MB
            backupCount=10,
            encoding="utf-8",
        )
    except OSError as e:
        logging.getLogger(__name__).warning(f"[LOG] File logging disabled, cannot open {path}: {e}")
        return None
    handler.setLevel(level)
    handler.setFormatter(fmt)
    return handler


def _configure_root_logger():
    global _configured
    if _configured:
        return
    _configured = True

    level = settings.LOG_LEVEL.upper()
    fmt = logging.Formatter(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    root = logging.getLogger()
    root.setLevel(level)

    console = logging.StreamHandler()
    console.setLevel(level)
    console.setFormatter(fmt)
    root.addHandler(console)

    path = log_file_path()
    if path is not None:
        handler = _file_handler(path, level, fmt)
        if handler is not None:
            root.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    """Get a named logger. Call this at the top of every module."""
    _configure_root_logger()
    return logging.getLogger(name)
