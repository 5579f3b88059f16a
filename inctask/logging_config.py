from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
import os
from typing import Optional


_DEFAULT_MAX_BYTES = 5 * 1024 * 1024
_DEFAULT_BACKUP_COUNT = 5
_ENV_LOG_PATH = "INCTASK_LOG_PATH"
_PACKAGE_LOGGER = "inctask"


def configure_file_logging(
    log_path: Optional[str] = None,
    verbose: bool = False,
    max_bytes: int = _DEFAULT_MAX_BYTES,
    backup_count: int = _DEFAULT_BACKUP_COUNT,
) -> logging.Logger:
    """
    Attach a rotating file handler to the package logger so that decisions
    made by the engine, the monitors and the store end up in one file.

    The path comes from ``log_path``, then $INCTASK_LOG_PATH, then
    ``inctask.log``. Calling this twice for the same file adds one handler.
    """
    logger = logging.getLogger(_PACKAGE_LOGGER)
    level = logging.DEBUG if verbose else logging.INFO
    logger.setLevel(level)

    resolved_path = log_path or os.environ.get(_ENV_LOG_PATH) or "inctask.log"
    resolved_path = os.path.abspath(resolved_path)

    for handler in logger.handlers:
        if isinstance(handler, RotatingFileHandler) and os.path.normcase(
            getattr(handler, "baseFilename", "")
        ) == os.path.normcase(resolved_path):
            handler.setLevel(level)
            return logger

    os.makedirs(os.path.dirname(resolved_path), exist_ok=True)
    handler = RotatingFileHandler(
        resolved_path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
    )
    handler.setLevel(level)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    logger.addHandler(handler)
    return logger
