"""
Structured logging configuration.

Service code logs through ``get_logger(__name__)`` and attaches structured
fields with ``extra_data={...}``. The grading core logs through plain
``logging`` loggers; its records pass through the same handlers.
"""

import sys
import logging
from typing import Any, Dict, List, Optional
from datetime import datetime, timezone
import json
from pathlib import Path

from .config import settings


def _extra_fields(record: logging.LogRecord) -> Dict[str, Any]:
    return getattr(record, "extra_data", None) or {}


class StructuredFormatter(logging.Formatter):
    """One JSON object per line"""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "service": settings.APP_NAME,
            "environment": settings.ENVIRONMENT,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        # Structured fields sit at the top level so log search can filter on exam_id etc.
        entry.update(_extra_fields(record))

        return json.dumps(entry, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable lines with structured fields appended as key=value"""

    def __init__(self):
        super().__init__(
            fmt="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S"
        )

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        fields = _extra_fields(record)
        if fields:
            line += " " + " ".join(f"{key}={value}" for key, value in fields.items())
        return line


def _build_handlers(formatter: logging.Formatter, level: int) -> List[logging.Handler]:
    console = logging.StreamHandler(sys.stdout)
    handlers: List[logging.Handler] = [console]

    if settings.LOG_FILE:
        log_path = Path(settings.LOG_FILE)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path, encoding="utf-8"))

    for handler in handlers:
        handler.setFormatter(formatter)
        handler.setLevel(level)
    return handlers


def setup_logging(level: Optional[str] = None, log_format: Optional[str] = None) -> None:
    """
    Configure root logging for the service.

    Args:
        level: Overrides LOG_LEVEL
        log_format: "json" or "text"; overrides LOG_FORMAT
    """
    log_level = getattr(logging, (level or settings.LOG_LEVEL).upper(), logging.INFO)
    formatter = StructuredFormatter() if (log_format or settings.LOG_FORMAT) == "json" else TextFormatter()

    logging.basicConfig(
        level=log_level,
        handlers=_build_handlers(formatter, log_level),
        force=True
    )

    # Per-request access lines duplicate the route logs
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


class LoggerAdapter(logging.LoggerAdapter):
    """
    Logger accepting ``extra_data=`` on every call.

    Per-call fields are merged over the adapter's permanent context.
    """

    def process(self, msg: str, kwargs: Dict[str, Any]) -> tuple:
        fields = {**self.extra, **kwargs.pop("extra_data", {})}
        kwargs.setdefault("extra", {})["extra_data"] = fields
        return msg, kwargs


def get_logger(name: str) -> LoggerAdapter:
    """Logger for service modules"""
    return LoggerAdapter(logging.getLogger(name), {})


def get_context_logger(name: str, **context: Any) -> LoggerAdapter:
    """
    Logger carrying permanent fields.

    Example:
        logger = get_context_logger(__name__, exam_id="uceed-2024")
        logger.info("Exam graded", extra_data={"total_marks": 42.5})
    """
    return LoggerAdapter(logging.getLogger(name), context)
