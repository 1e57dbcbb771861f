"""Logging for VoiceDraft.

Everything logs under the `voicedraft` logger. Request-scoped fields
(request_id, model, attempt...) are passed through `extra=` and rendered as
key=value pairs in text mode or as a `context` object in JSON mode.

Environment:
    VOICEDRAFT_LOG_LEVEL   DEBUG / INFO (default) / WARNING / ERROR
    VOICEDRAFT_LOG_FORMAT  text (default) or json, for stdout
    VOICEDRAFT_LOG_FILE    optional path of a rotating JSON log
"""

import json
import logging
import os
import sys
from datetime import UTC, datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path

_STANDARD_ATTRS = frozenset(logging.makeLogRecord({}).__dict__) | {"asctime", "message"}
_TEXT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


def _extra_fields(record: logging.LogRecord) -> dict:
    """Fields attached via `extra=`; None values are dropped."""
    return {
        key: value
        for key, value in record.__dict__.items()
        if key not in _STANDARD_ATTRS and not key.startswith("_") and value is not None
    }


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.now(UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if fields := _extra_fields(record):
            payload["context"] = fields
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


class ContextTextFormatter(logging.Formatter):
    """Standard text line followed by ` | key=value ...` for extra fields."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        fields = _extra_fields(record)
        if not fields:
            return line
        return line + " | " + " ".join(f"{k}={v}" for k, v in sorted(fields.items()))


def _stdout_handler(json_output: bool) -> logging.Handler:
    handler = logging.StreamHandler(sys.stdout)
    if json_output:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(ContextTextFormatter(fmt=_TEXT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    return handler


def _file_handler(path: str) -> logging.Handler:
    log_path = Path(path).expanduser()
    log_path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        filename=log_path,
        maxBytes=10 * 1024 * 1024,
        backupCount=5,
        encoding="utf-8",
    )
    handler.setFormatter(JsonFormatter())
    return handler


def setup_logging(level: str | None = None, fmt: str | None = None) -> logging.Logger:
    """Attach handlers to the `voicedraft` logger once; later calls only adjust the level."""
    level = level or os.getenv("VOICEDRAFT_LOG_LEVEL", "INFO")
    fmt = fmt or os.getenv("VOICEDRAFT_LOG_FORMAT", "text")

    app_logger = logging.getLogger("voicedraft")
    app_logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    if app_logger.handlers:
        return app_logger

    app_logger.addHandler(_stdout_handler(json_output=fmt.lower() == "json"))
    if log_file := os.getenv("VOICEDRAFT_LOG_FILE"):
        app_logger.addHandler(_file_handler(log_file))
    return app_logger


logger = setup_logging()


def get_logger(name: str | None = None) -> logging.Logger:
    """`voicedraft.<name>`, or the application logger itself."""
    if name:
        return logging.getLogger(f"voicedraft.{name}")
    return logger
