"""JSON log formatting for recpipe log files."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

# Record attributes set by OperationContextFilter
CONTEXT_FIELDS = ("operation", "subject")


class JSONFormatter(logging.Formatter):
    """Render each record as one JSON object per line.

    Keys: timestamp (UTC ISO-8601), level, message, logger, plus a context
    object with the operation and subject when an operation is running and
    the formatted traceback when the record carries one.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
        }

        context = {
            field: value
            for field in CONTEXT_FIELDS
            if (value := getattr(record, field, None)) is not None
        }
        if context:
            entry["context"] = context

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry)
