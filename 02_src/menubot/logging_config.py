"""Structured JSON logging for the menu bot.

Every line is one JSON object. Calls that concern a particular conversation
pass ``extra=log_context(tenant_id, sender, message_id)`` so that operators can
filter the log by tenant or trace a single webhook delivery.
"""

import json
import logging
import logging.config
import os
from datetime import datetime, timezone
from pathlib import Path

from .config import DEFAULT_LOG_PATH

CONTEXT_ATTR = "context"


def log_context(
    tenant_id: str | None,
    sender: str | None,
    message_id: str | None = None,
) -> dict:
    """Build the ``extra`` mapping rendered under "context" by JSONFormatter."""
    context = {"tenant_id": tenant_id, "sender": sender}
    if message_id:
        context["message_id"] = message_id
    return {CONTEXT_ATTR: context}


class JSONFormatter(logging.Formatter):
    """Render records as single-line JSON, keeping Arabic text readable."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        context = getattr(record, CONTEXT_ATTR, None)
        if context:
            entry["context"] = context

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, ensure_ascii=False, default=str)


def setup_logging(
    log_level: str | None = None,
    log_file: str | None = None,
) -> None:
    """
    Configure the root logger with a rotating JSON file and JSON stdout.

    Args:
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL.
                   Defaults to the LOG_LEVEL env var, then INFO.
        log_file: Log file path. Defaults to 04_logs/app.log.
    """
    level = (log_level or os.getenv("LOG_LEVEL", "INFO")).upper()
    log_path = Path(log_file) if log_file else DEFAULT_LOG_PATH
    log_path.parent.mkdir(parents=True, exist_ok=True)

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "json": {"()": "menubot.logging_config.JSONFormatter"},
            },
            "handlers": {
                "file": {
                    "class": "logging.handlers.RotatingFileHandler",
                    "filename": str(log_path),
                    "maxBytes": 10 * 1024 * 1024,
                    "backupCount": 5,
                    "formatter": "json",
                    "encoding": "utf-8",
                },
                "console": {
                    "class": "logging.StreamHandler",
                    "formatter": "json",
                    "stream": "ext://sys.stdout",
                },
            },
            "root": {"level": level, "handlers": ["file", "console"]},
            # uvicorn's access log duplicates the webhook's own records
            "loggers": {"uvicorn.access": {"level": "WARNING"}},
        }
    )


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
