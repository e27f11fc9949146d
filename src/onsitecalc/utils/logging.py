"""JSON Lines logging for calculator requests and engine diagnostics.

Every record written by the ``onsitecalc`` logger tree becomes one JSON object
per line. Fields passed through ``extra=`` (``expression``, ``error``,
``tokens`` ...) are lifted into the object, so engine warnings such as
``measurement_evaluation_failed`` carry the offending expression.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict
from uuid import uuid4

__all__ = [
    "LOGGER_NAME",
    "JsonLogFormatter",
    "configure_json_logger",
    "flush_handlers",
    "log_event",
]

LOGGER_NAME = "onsitecalc"

# Attributes every LogRecord carries; anything else arrived through ``extra=``.
_RECORD_ATTRIBUTES = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message", "asctime"}


def _timestamp(created: float) -> str:
    stamp = datetime.fromtimestamp(created, tz=timezone.utc).isoformat(timespec="milliseconds")
    return stamp.replace("+00:00", "Z")


class JsonLogFormatter(logging.Formatter):
    """One JSON object per record: timestamp, level, logger, event and extras."""

    def format(self, record: logging.LogRecord) -> str:
        message = record.getMessage()
        payload: Dict[str, Any] = {
            "timestamp": _timestamp(record.created),
            "level": record.levelname.lower(),
            "logger": record.name,
            "event": message,
        }
        payload.update(
            (key, value) for key, value in vars(record).items() if key not in _RECORD_ATTRIBUTES
        )
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def configure_json_logger(log_path: Path | None, level: int | str = logging.INFO) -> logging.Logger:
    """Route the ``onsitecalc`` logger to a JSONL file.

    Child loggers (``onsitecalc.engine.evaluator``, ``onsitecalc.service`` ...)
    propagate into it. Without ``log_path`` a :class:`logging.NullHandler`
    replaces any previous file handler.
    """

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    if log_path is not None:
        log_path = Path(log_path)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler: logging.Handler = logging.FileHandler(log_path, encoding="utf-8")
        handler.setFormatter(JsonLogFormatter())
    else:
        handler = logging.NullHandler()

    logger.addHandler(handler)
    return logger


def flush_handlers(logger: logging.Logger) -> None:
    for handler in logger.handlers:
        handler.flush()


def log_event(logger: logging.Logger, event: str, *, trace_id: str | None = None, **fields: Any) -> str:
    """Log ``event`` at INFO with ``fields``; returns the trace id shared by a request's events."""

    trace_id = trace_id or uuid4().hex
    logger.info(event, extra={"trace_id": trace_id, **fields})
    return trace_id
