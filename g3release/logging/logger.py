# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Structured JSON logger for g3release.

Release tooling runs inside packaging jobs (dpkg-buildpackage, rpmbuild, CI),
where the only reliable consumer of our output is another program. So every
log entry is one JSON object per line: timestamped, leveled, and tagged with
the emitting module. print() is not used anywhere in the package.

  {"ts": "2026-...", "level": "INFO", "module": "g3release.release.metadata.synchronizer",
   "msg": "Updated changelog", "path": "g3proxy/debian/changelog"}

`get_logger` is the only way modules obtain a logger.
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

# Attributes every LogRecord carries. Anything else on the record came from
# the caller's `extra=` and gets merged into the JSON entry.
_RECORD_ATTRS: frozenset[str] = frozenset(
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
      module: the logger name
      msg: the formatted message

    Extra context (package, version, path, anchor, ...) is merged in as
    additional keys. When the record carries exception info, the formatted
    traceback goes under "exc".
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, object] = {
            "ts": datetime.now(tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "module": record.name,
            "msg": record.getMessage(),
        }

        for key, value in record.__dict__.items():
            if key not in _RECORD_ATTRS and not key.startswith("_"):
                entry[key] = value

        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


_VALID_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def _resolve_log_level(level_name: str) -> int:
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

    Args:
        name: Logger name, typically __name__ of the calling module.
        log_level: One of DEBUG, INFO, WARNING, ERROR, CRITICAL.
        log_file: Optional path to a log file. If provided, logs go to both
                  stdout and the file.

    Returns:
        A configured logging.Logger that outputs structured JSON.
    """
    logger = logging.getLogger(name)
    level = _resolve_log_level(log_level)
    logger.setLevel(level)

    # Calling get_logger twice for the same name must not stack handlers,
    # but a later call may still change the level or add a log file.
    for handler in logger.handlers:
        handler.setLevel(level)

    formatter = JsonFormatter()

    if not logger.handlers:
        stdout_handler = logging.StreamHandler(stream=sys.stdout)
        stdout_handler.setLevel(level)
        stdout_handler.setFormatter(formatter)
        logger.addHandler(stdout_handler)

    if log_file is not None:
        _drop_other_file_handlers(logger, log_file)
        if not _has_file_handler(logger, log_file):
            log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(str(log_file), encoding="utf-8")
            file_handler.setLevel(level)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)

    logger.propagate = False

    return logger


def _has_file_handler(logger: logging.Logger, log_file: Path) -> bool:
    target = os.path.abspath(log_file)
    return any(
        isinstance(handler, logging.FileHandler) and handler.baseFilename == target
        for handler in logger.handlers
    )


# A logger writes to at most one log file; a new log_file replaces the old one.
def _drop_other_file_handlers(logger: logging.Logger, log_file: Path) -> None:
    target = os.path.abspath(log_file)
    for handler in list(logger.handlers):
        if isinstance(handler, logging.FileHandler) and handler.baseFilename != target:
            logger.removeHandler(handler)
            handler.close()


def configure_loggers(
    prefix: str,
    log_level: str = "INFO",
    log_file: Optional[Path] = None,
) -> list[logging.Logger]:
    """
    Apply log_level and log_file to `prefix` and every logger already created
    under it. Module loggers are created at import time with defaults, so
    this is how a run's config reaches them.
    """
    names = [
        name
        for name, existing in logging.Logger.manager.loggerDict.items()
        if isinstance(existing, logging.Logger)
        and (name == prefix or name.startswith(prefix + "."))
    ]
    if prefix not in names:
        names.append(prefix)
    return [get_logger(name, log_level=log_level, log_file=log_file) for name in sorted(names)]
