"""JSON log output for the workflow engine.

The service records rejected definitions, refused transitions and committed
state changes with ``extra=`` fields such as ``definition_id``, ``instance_id``
and ``kind``. Each record becomes one JSON line on stdout so those fields stay
queryable. The ``serve`` command shares the same handler with uvicorn.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import Any

# Stock LogRecord attributes; whatever remains on a record is a caller field.
_RESERVED_LOG_RECORD_ATTRS: set[str] = set(
    logging.LogRecord("", logging.INFO, "", 0, "", None, None).__dict__
) | {"asctime", "message", "taskName"}


class JsonFormatter(logging.Formatter):
    """Render a record as one JSON line.

    Caller fields go under ``"extra"``. Ids, enum kinds and datetimes that
    ``json`` cannot encode natively are written with ``str()``.
    """

    def format(self, record: logging.LogRecord) -> str:  # noqa: A003 (record)
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        extra = {
            key: value
            for key, value in record.__dict__.items()
            if key not in _RESERVED_LOG_RECORD_ATTRS and not key.startswith("_")
        }
        if extra:
            payload["extra"] = extra

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, default=str)


def configure_logging(level: str) -> None:
    """Send every logger, uvicorn's included, to one JSON stdout handler."""

    root = logging.getLogger()

    # `main` may call this more than once per process.
    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(JsonFormatter())

    root.addHandler(handler)
    root.setLevel(level.upper())

    # Access and error lines from `serve` go through the root handler.
    for name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        uv_logger = logging.getLogger(name)
        uv_logger.handlers = []
        uv_logger.propagate = True
