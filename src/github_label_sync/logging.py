"""Structured logging configuration.

Each record becomes one JSON line on stdout. Fields passed through `extra=`
are grouped under "extra"; the run context (repository, mode) set by
`configure_logging` is stamped on every line under "run" so that the output of
several sync jobs in one workflow log can be told apart.
"""

from __future__ import annotations

import json
import logging
import sys
from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any, TextIO

# Keys present on a bare LogRecord; anything else arrived via `extra=`.
_RECORD_KEYS: frozenset[str] = frozenset(logging.makeLogRecord({}).__dict__) | {
    "message",
    "asctime",
}

# PyGithub and urllib3 log every request at DEBUG.
_CHATTY_LOGGERS = ("github", "urllib3")


def record_extras(record: logging.LogRecord) -> dict[str, Any]:
    """Return the fields a caller attached to `record` through `extra=`."""

    return {
        key: value
        for key, value in vars(record).items()
        if key not in _RECORD_KEYS and not key.startswith("_")
    }


class JsonFormatter(logging.Formatter):
    """Format records as single-line JSON, optionally tagged with a run context."""

    def __init__(self, context: Mapping[str, Any] | None = None) -> None:
        super().__init__()
        self._context = dict(context or {})

    def format(self, record: logging.LogRecord) -> str:  # noqa: A003 (record)
        payload: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if self._context:
            payload["run"] = self._context

        extras = record_extras(record)
        if extras:
            payload["extra"] = extras

        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, default=str)


def configure_logging(
    level: str,
    *,
    context: Mapping[str, Any] | None = None,
    stream: TextIO | None = None,
) -> None:
    """Replace the root handlers with one JSON handler at `level`."""

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)

    handler = logging.StreamHandler(stream=stream or sys.stdout)
    handler.setFormatter(JsonFormatter(context))
    root.addHandler(handler)
    root.setLevel(level.upper())

    floor = max(root.level, logging.INFO)
    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(floor)
