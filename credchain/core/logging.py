"""Logging configuration for the credential registry.

Two output modes, picked by LOG_JSON:

  _ContainerFormatter: one human-readable line per record, for local
    runs and `docker logs`.  WARNING and above carry [file:line].

  _JsonFormatter: JSON Lines for log aggregation.  Request context
    (request_id, method, path, status, timing) and registry context
    (credential_id, validation_score) become top-level keys so they can
    be filtered without regex.

Everything goes to stdout.  setup_logging() is called once from
credchain.main before routers are imported.
"""

from __future__ import annotations

import json
import logging
import sys


class _ContainerFormatter(logging.Formatter):
    """Single-line formatter for container stdout."""

    _BASE_FMT = "%(asctime)s %(levelname)-8s %(name)s  %(message)s"
    _LOC_SUFFIX = "  [%(filename)s:%(lineno)d]"

    def __init__(self) -> None:
        super().__init__(datefmt="%Y-%m-%dT%H:%M:%S%z")

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:
        base = super().formatTime(record, datefmt)
        # .NNN goes before the +0000 offset
        return f"{base[:-5]}.{int(record.msecs):03d}{base[-5:]}"

    def format(self, record: logging.LogRecord) -> str:
        if record.levelno >= logging.WARNING:
            self._style._fmt = self._BASE_FMT + self._LOC_SUFFIX
        else:
            self._style._fmt = self._BASE_FMT
        return super().format(record)


class _JsonFormatter(logging.Formatter):
    """One JSON object per line."""

    _CONTEXT_FIELDS = (
        "request_id",
        "method",
        "path",
        "status_code",
        "duration_ms",
        "credential_id",
        "validation_score",
    )

    def __init__(self) -> None:
        super().__init__(datefmt="%Y-%m-%dT%H:%M:%S%z")

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, object] = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for key in self._CONTEXT_FIELDS:
            value = getattr(record, key, None)
            if value is not None:
                entry[key] = value

        if record.exc_info and record.exc_info[0] is not None:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


def setup_logging(level_name: str, *, json_format: bool = False) -> None:
    """Configure the root logger.

    Args:
        level_name: debug/info/warning/error.  Unknown names fall back to INFO.
        json_format: emit JSON Lines instead of the container format.
    """
    level = getattr(logging, level_name.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(_JsonFormatter() if json_format else _ContainerFormatter())

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    root.addHandler(handler)

    for name in (
        "uvicorn",
        "uvicorn.access",
        "uvicorn.error",
        "sqlalchemy.engine",
        "httpcore",
        "httpx",
        "PIL",
    ):
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
