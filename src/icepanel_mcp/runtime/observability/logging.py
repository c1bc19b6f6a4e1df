"""Logging setup for the IcePanel client.

Every module logs through a named stdlib logger under ``icepanel_mcp``.
``configure_logging`` installs a single stderr handler, human-readable for
development and JSON for production. stdout is left untouched so a stdio
transport can own it.

Quick Start:
    >>> from icepanel_mcp.runtime.observability import configure_logging
    >>> configure_logging(level="DEBUG", format="json")
"""

from __future__ import annotations

import logging
import sys
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Literal, TextIO

import orjson

if TYPE_CHECKING:
    from icepanel_mcp.foundation.config import LoggingSettings

ROOT_LOGGER = "icepanel_mcp"

# Attributes present on every LogRecord; anything else came in through `extra=`
_RESERVED = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


def _extras(record: logging.LogRecord) -> dict[str, object]:
    return {k: v for k, v in vars(record).items() if k not in _RESERVED and not k.startswith("_")}


class TextFormatter(logging.Formatter):
    """``2024-01-03 10:30:45 [warning] icepanel_mcp.client retrying method=GET attempt=1``"""

    def format(self, record: logging.LogRecord) -> str:
        ts = datetime.fromtimestamp(record.created).strftime("%Y-%m-%d %H:%M:%S")
        extra = " ".join(f"{k}={v}" for k, v in _extras(record).items())
        line = f"{ts} [{record.levelname.lower()}] {record.name} {record.getMessage()}"
        if extra:
            line = f"{line} {extra}"
        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


class JsonFormatter(logging.Formatter):
    """One JSON object per line, extras merged at the top level."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, object] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname.lower(),
            "logger": record.name,
            "event": record.getMessage(),
            **_extras(record),
        }
        if record.exc_info:
            entry["exc_info"] = self.formatException(record.exc_info)
        return orjson.dumps(entry, default=str, option=orjson.OPT_NON_STR_KEYS).decode()


def get_logger(name: str) -> logging.Logger:
    """Logger namespaced under ``icepanel_mcp``."""
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")


def configure_logging(
    settings: LoggingSettings | None = None,
    *,
    level: str | None = None,
    format: Literal["json", "text"] | None = None,
    stream: TextIO | None = None,
) -> logging.Logger:
    """Configure the ``icepanel_mcp`` logger hierarchy. Safe to call repeatedly.

    Explicit ``level``/``format`` arguments win over ``settings``.
    """
    level = level or (settings.level if settings else "INFO")
    format = format or (settings.format if settings else "text")

    root = logging.getLogger(ROOT_LOGGER)
    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(JsonFormatter() if format == "json" else TextFormatter())
    root.addHandler(handler)
    root.setLevel(level.upper())
    root.propagate = False
    return root
