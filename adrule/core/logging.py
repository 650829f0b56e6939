"""ADRULE — Structured JSON Logging.

Every logger lives under the ``adrule.`` namespace and writes one JSON object
per line to stdout. Request-scoped context (rule id, backend endpoint) is
attached with :func:`bind`.
"""

import logging
import json
import sys
from datetime import datetime, timezone
from typing import Any, MutableMapping, Tuple

from adrule.config import settings

# Record attributes copied into the JSON line when set
EXTRA_FIELDS: Tuple[str, ...] = (
    "endpoint",
    "method",
    "rule_id",
    "status_code",
    "duration_ms",
    "attempt",
)


class JSONFormatter(logging.Formatter):
    """Produces structured JSON log lines."""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "source": f"{record.module}:{record.lineno}",
        }
        if record.exc_info and record.exc_info[0] is not None:
            log_entry["exception"] = self.formatException(record.exc_info)
        for key in EXTRA_FIELDS:
            value = getattr(record, key, None)
            if value is not None:
                log_entry[key] = value
        return json.dumps(log_entry, default=str)


class ContextAdapter(logging.LoggerAdapter):
    """Merges bound context into each record's ``extra``."""

    def process(
        self, msg: Any, kwargs: MutableMapping[str, Any]
    ) -> tuple[Any, MutableMapping[str, Any]]:
        kwargs["extra"] = {**self.extra, **kwargs.get("extra", {})}
        return msg, kwargs


def get_logger(name: str) -> logging.Logger:
    """Return a named logger with structured JSON handler."""
    logger = logging.getLogger(f"adrule.{name}")
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(JSONFormatter())
        logger.addHandler(handler)
    logger.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))
    return logger


def bind(logger: logging.Logger, **context: Any) -> ContextAdapter:
    """Wrap ``logger`` so every line carries ``context`` as extra fields."""
    return ContextAdapter(logger, context)
