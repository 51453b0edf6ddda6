from __future__ import annotations

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import TextIO

from .json_formatter import JSONFormatter

_LOGGER_NAME = "accountlib"
_HANDLER_TAG = "_accountlib_handler"
_LOG_FILE_NAME = "accountlib.log"


def _parse_level(raw: str) -> int:
    normalized = raw.strip().upper()
    return getattr(logging, normalized, logging.INFO)


def _find_tagged(logger: logging.Logger, tag: str) -> logging.Handler | None:
    return next((h for h in logger.handlers if getattr(h, _HANDLER_TAG, None) == tag), None)


def _attach(logger: logging.Logger, handler: logging.Handler, tag: str) -> None:
    handler.setFormatter(JSONFormatter())
    setattr(handler, _HANDLER_TAG, tag)
    logger.addHandler(handler)


def _resolve_log_dir(explicit: str | Path | None) -> Path | None:
    if explicit is not None:
        return Path(explicit)
    env_dir = os.getenv("ACCOUNTLIB_LOG_DIR")
    if env_dir and os.getenv("ACCOUNTLIB_LOG_TO_FILE", "off").strip().casefold() == "on":
        return Path(env_dir)
    return None


def configure_logging(
    log_dir: str | Path | None = None,
    level: str | None = None,
    *,
    stream: TextIO | None = None,
) -> logging.Logger:
    """Route the ``accountlib`` logger tree to JSON handlers.

    An explicit ``log_dir`` always adds a rotating file; otherwise a file is
    written only when ``ACCOUNTLIB_LOG_TO_FILE=on`` and ``ACCOUNTLIB_LOG_DIR``
    is set. Repeated calls reuse the handlers already attached.
    """
    logger = logging.getLogger(_LOGGER_NAME)
    logger.setLevel(_parse_level(level or os.getenv("ACCOUNTLIB_LOG_LEVEL", "INFO")))
    logger.propagate = False

    if _find_tagged(logger, "stream") is None:
        _attach(logger, logging.StreamHandler(stream or sys.stderr), "stream")

    target_dir = _resolve_log_dir(log_dir)
    if target_dir is not None:
        log_path = Path(os.path.abspath(target_dir / _LOG_FILE_NAME))
        tag = f"file:{log_path}"
        if _find_tagged(logger, tag) is None:
            target_dir.mkdir(parents=True, exist_ok=True)
            file_handler = RotatingFileHandler(
                filename=log_path,
                maxBytes=int(os.getenv("ACCOUNTLIB_LOG_MAX_BYTES", "5000000")),
                backupCount=int(os.getenv("ACCOUNTLIB_LOG_BACKUP_COUNT", "5")),
                encoding="utf-8",
            )
            _attach(logger, file_handler, tag)

    return logger
