# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Structured JSON logger for bertembed.

Every log entry is a single JSON line carrying a timestamp, the level, the
source logger name and the message, plus whatever the caller attached via
``extra``. The numeric modules log through plain ``logging.getLogger``; an
application that wants JSON output calls ``get_logger`` once for its root
name (``"bertembed"``) and child loggers inherit the handlers.

The JSON structure looks like:
  {"ts": "2026-...", "level": "DEBUG", "module": "bertembed.model.embedding", "msg": "table_built", ...}
"""

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

# Attributes every LogRecord carries; anything else came in through `extra`.
_STANDARD_ATTRS = frozenset(
    {
        "name",
        "msg",
        "args",
        "created",
        "relativeCreated",
        "exc_info",
        "exc_text",
        "stack_info",
        "lineno",
        "funcName",
        "pathname",
        "filename",
        "module",
        "levelno",
        "levelname",
        "processName",
        "process",
        "threadName",
        "thread",
        "message",
        "msecs",
        "taskName",
    }
)


class JsonFormatter(logging.Formatter):
    """
    Formats log records as single-line JSON objects.

    Mandatory fields:
      ts: ISO 8601 UTC timestamp
      level: log level name
      module: the logger name (usually the Python module path)
      msg: the formatted message string

    Extra keyword context (tensor shapes, table names, phases) is merged into
    the object. Values that aren't JSON-native are stringified.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, object] = {
            "ts": datetime.now(tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "module": record.name,
            "msg": record.getMessage(),
        }

        for key, value in record.__dict__.items():
            if key not in _STANDARD_ATTRS and not key.startswith("_"):
                entry[key] = value

        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


_VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def resolve_log_level(level_name: str) -> int:
    """Turn a level name string into the corresponding logging constant."""
    upper = level_name.upper()
    if upper not in _VALID_LOG_LEVELS:
        raise ValueError(
            f"Invalid log level '{level_name}'. Must be one of: {', '.join(sorted(_VALID_LOG_LEVELS))}"
        )
    return getattr(logging, upper)


def get_logger(
    name: str,
    log_level: str = "INFO",
    log_file: Optional[Path] = None,
) -> logging.Logger:
    """
    Create a structured JSON logger.

    Calling this twice for the same name only updates the level; handlers are
    attached once.

    Args:
        name: Logger name, typically ``"bertembed"`` or ``__name__``.
        log_level: One of DEBUG, INFO, WARNING, ERROR, CRITICAL.
        log_file: Optional path to a log file. If provided, logs go to both
                  stdout and the file.

    Returns:
        A configured logging.Logger that outputs structured JSON.
    """
    logger = logging.getLogger(name)
    level = resolve_log_level(log_level)
    logger.setLevel(level)

    if logger.handlers:
        return logger

    formatter = JsonFormatter()

    stdout_handler = logging.StreamHandler(stream=sys.stdout)
    stdout_handler.setLevel(level)
    stdout_handler.setFormatter(formatter)
    logger.addHandler(stdout_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(str(log_file), encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.propagate = False

    return logger
