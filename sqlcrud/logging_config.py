"""Logging configuration for sqlcrud.

Provides a JSON formatted logger named ``sqlcrud`` and template reload
statistics. Modules log through ``logging.getLogger(__name__)`` and so
inherit the handlers installed by :func:`get_logger`.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Optional

LOG_NAME = "sqlcrud"
LOG_FILE = Path("logs/sqlcrud.log")
MAX_BYTES = 5 * 1024 * 1024
BACKUP_COUNT = 3

# Attributes present on every LogRecord. Anything else is an extra field.
_RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.INFO, "", 0, "", (), None)).keys()
) | {"message", "asctime"}


class JsonFormatter(logging.Formatter):
    """Render log records as single-line JSON objects."""

    def format(self, record: logging.LogRecord) -> str:  # noqa: D401 - short description
        payload: dict[str, Any] = {
            "time": datetime.fromtimestamp(record.created, timezone.utc).isoformat(
                timespec="seconds"
            ),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        extras = {k: v for k, v in record.__dict__.items() if k not in _RECORD_ATTRS}
        if extras:
            payload["extra"] = extras
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def get_logger(log_file: Optional[Path] = None, level: Optional[str] = None) -> logging.Logger:
    """Return the package logger, installing handlers on first use."""
    logger = logging.getLogger(LOG_NAME)
    if logger.handlers:
        return logger

    if level is None:
        from sqlcrud.config.settings import settings

        level = settings.log_level
    logger.setLevel(level)

    formatter = JsonFormatter()

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)

    path = Path(log_file) if log_file is not None else LOG_FILE
    path.parent.mkdir(parents=True, exist_ok=True)
    file_handler = RotatingFileHandler(
        path,
        maxBytes=MAX_BYTES,
        backupCount=BACKUP_COUNT,
        encoding="utf-8",
    )
    file_handler.setFormatter(formatter)

    logger.addHandler(stream_handler)
    logger.addHandler(file_handler)
    logger.propagate = False
    return logger


class ReloadStats:
    """Counts template lookups served from the registry versus reloaded from disk."""

    def __init__(self) -> None:
        self.hits = 0
        self.reloads = 0

    def record_hit(self) -> None:
        self.hits += 1

    def record_reload(self) -> None:
        self.reloads += 1

    @property
    def hit_rate(self) -> float:
        """Percentage of lookups that needed no reload."""
        total = self.hits + self.reloads
        return (self.hits / total * 100) if total else 0.0

    def log_hit_rate(self) -> None:
        logging.getLogger(LOG_NAME).info(
            "Template cache hit-rate",
            extra={"hit_rate": round(self.hit_rate, 2), "reloads": self.reloads},
        )
