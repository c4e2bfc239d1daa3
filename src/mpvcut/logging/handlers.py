"""Custom logging formatters for mpvcut."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any

# Attributes every LogRecord has; anything else came from ``extra=``.
_RESERVED_ATTRS: frozenset[str] = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", None, None))
) | {"message", "asctime", "cut_tag"}


class JSONFormatter(logging.Formatter):
    """Format log records as one JSON object per line.

    Keys: ``timestamp`` (ISO-8601 UTC), ``level``, ``logger``, ``message``,
    ``cut`` when a cut is running, ``context`` for ``extra=`` values and
    ``exception`` when exc_info is set.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        cut_number = getattr(record, "cut_number", None)
        if cut_number is not None:
            entry["cut"] = {
                "number": cut_number,
                "source": getattr(record, "cut_source", None),
            }

        context = {
            key: value
            for key, value in vars(record).items()
            if key not in _RESERVED_ATTRS
            and not key.startswith(("_", "cut_"))
        }
        if context:
            entry["context"] = context

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)
