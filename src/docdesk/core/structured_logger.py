"""
Structured logging utilities for application-wide logging
"""

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Optional

from .config import LoggingSettings


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging"""

    def format(self, record: logging.LogRecord) -> str:
        log_obj = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        # Add exception info if present
        if record.exc_info:
            log_obj["exception"] = self.formatException(record.exc_info)

        # Add extra fields if present
        if hasattr(record, "extra_data"):
            log_obj.update(record.extra_data)

        return json.dumps(log_obj, default=str)


TEXT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def configure_logging(settings: Optional[LoggingSettings] = None) -> None:
    """Install a single stdout handler on the ``docdesk`` logger tree."""
    settings = settings or LoggingSettings()
    logger = logging.getLogger("docdesk")
    logger.setLevel(settings.level)

    handler = logging.StreamHandler(sys.stdout)
    if settings.format == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))

    # Replace handlers so repeated app construction does not duplicate output
    for existing in list(logger.handlers):
        logger.removeHandler(existing)
    logger.addHandler(handler)


def log_with_data(logger: logging.Logger, level: int, message: str, **data) -> None:
    """Log a message carrying structured fields for the JSON formatter."""
    logger.log(level, message, extra={"extra_data": data})
