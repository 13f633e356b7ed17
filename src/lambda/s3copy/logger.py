"""JSON-lines logging for copy operations."""

import json
import logging
import os
import sys
from datetime import datetime, timezone


class JSONFormatter(logging.Formatter):
    """One JSON document per record, tagged with the copy operation it belongs to."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "service": os.environ.get("S3COPY_SERVICE_NAME")
            or os.environ.get("AWS_LAMBDA_FUNCTION_NAME", "local"),
            "operation_id": getattr(record, "operation_id", ""),
        }
        entry.update(getattr(record, "fields", None) or {})

        if record.exc_info and record.exc_info[0] is not None:
            entry["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "stacktrace": self.formatException(record.exc_info),
            }
        return json.dumps(entry, default=str)


def get_logger(name: str) -> logging.Logger:
    """Logger writing JSON lines to stdout; safe to call repeatedly."""
    logger = logging.getLogger(name)
    if logger.handlers:
        return logger
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JSONFormatter())
    logger.addHandler(handler)
    logger.setLevel(os.environ.get("LOG_LEVEL", "INFO").upper())
    logger.propagate = False
    return logger


def log_with_context(
    logger: logging.Logger,
    level: int,
    message: str,
    operation_id: str = "",
    exc_info: bool = False,
    **fields,
) -> None:
    """Log ``message`` with the copy's operation id and structured ``fields``."""
    logger.log(
        level,
        message,
        extra={"operation_id": operation_id, "fields": fields},
        exc_info=exc_info,
    )
