"""Process logging configuration.

Provides JSON and text formatters and a one-call
``configure_logging`` function driven by the configuration aggregate.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from proxyconf.core.types import LogFormat

if TYPE_CHECKING:
    from proxyconf.config.settings import GlobalConfiguration

# Attributes that are part of the standard LogRecord; everything
# else is considered "extra" and gets included in structured output.
_STANDARD_ATTRS = frozenset(
    {
        "args",
        "created",
        "exc_info",
        "exc_text",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "message",
        "module",
        "msecs",
        "msg",
        "name",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "stack_info",
        "taskName",
        "thread",
        "threadName",
    }
)

# Level names accepted in ``logLevel`` that the logging module spells differently
_LEVEL_ALIASES = {
    "WARN": logging.WARNING,
    "FATAL": logging.CRITICAL,
    "PANIC": logging.CRITICAL,
}


# ---------------------------------------------------------------------------
# Formatters
# ---------------------------------------------------------------------------


class StructuredFormatter(logging.Formatter):
    """JSON-lines formatter.

    Every record becomes a single JSON object on one line containing
    the standard fields plus any *extra* attributes passed by the
    caller.
    """

    def format(self, record: logging.LogRecord) -> str:
        record.message = record.getMessage()

        data: dict = {
            "timestamp": datetime.fromtimestamp(
                record.created,
                tz=UTC,
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.message,
        }

        for key, value in record.__dict__.items():
            if key not in _STANDARD_ATTRS and not key.startswith("_"):
                data.setdefault(key, value)

        if record.exc_info and record.exc_info[0] is not None:
            data["exception"] = self.formatException(record.exc_info)

        if record.stack_info:
            data["stack_info"] = self.formatStack(record.stack_info)

        return json.dumps(data, default=str)


class TextFormatter(logging.Formatter):
    """Human-readable formatter for console use."""

    _FMT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

    def __init__(self) -> None:
        super().__init__(fmt=self._FMT, datefmt="%Y-%m-%d %H:%M:%S")


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def resolve_level(name: str) -> int:
    """Map a ``logLevel`` value to a :mod:`logging` level.

    Unknown names fall back to ``ERROR``.
    """
    upper = name.upper()
    if upper in _LEVEL_ALIASES:
        return _LEVEL_ALIASES[upper]
    level = logging.getLevelName(upper)
    return level if isinstance(level, int) else logging.ERROR


def configure_logging(config: GlobalConfiguration) -> logging.Logger:
    """Configure the ``proxyconf`` logger hierarchy from the configuration.

    ``debug: true`` forces the DEBUG level.  Output goes to
    ``traefikLog.filePath`` when set, stderr otherwise.

    Returns the root ``proxyconf`` logger.
    """
    level = logging.DEBUG if config.debug else resolve_level(config.log_level)

    root = logging.getLogger("proxyconf")
    root.setLevel(level)
    for handler in root.handlers:
        handler.close()
    root.handlers.clear()
    root.propagate = False

    traefik_log = config.traefik_log
    formatter: logging.Formatter
    if traefik_log is not None and traefik_log.format == LogFormat.JSON:
        formatter = StructuredFormatter()
    else:
        formatter = TextFormatter()

    handler: logging.Handler = logging.StreamHandler(sys.stderr)
    open_error: OSError | None = None
    if traefik_log is not None and traefik_log.file_path:
        try:
            handler = logging.FileHandler(traefik_log.file_path, encoding="utf-8")
        except OSError as exc:
            open_error = exc

    handler.setFormatter(formatter)
    root.addHandler(handler)

    if open_error is not None:
        root.warning(
            "Could not open log file %s, logging to stderr: %s",
            traefik_log.file_path,  # type: ignore[union-attr]
            open_error,
        )
    return root
