"""Logging setup for the CLI and GUI entry points.

The engine only creates module loggers; entry points call ``setup_logging``
once at startup. JSON output surfaces the ``record_id`` and ``storage_key``
extras that RecordStore attaches to its log records.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone

_EXTRA_FIELDS = ("record_id", "storage_key", "count")


class JSONFormatter(logging.Formatter):
    """Format log records as one JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in _EXTRA_FIELDS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False)


def setup_logging(level: str = "WARNING", fmt: str = "text") -> logging.Handler:
    """
    Install a stream handler on the root logger.

    Parameters
    ----------
    level:
        Level name; unknown names fall back to WARNING.
    fmt:
        ``"json"`` for structured output, anything else for plain text.

    Returns
    -------
    logging.Handler
        The installed handler (callers may remove it again).
    """
    handler = logging.StreamHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.WARNING))
    return handler
