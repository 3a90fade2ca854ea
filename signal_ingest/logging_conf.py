"""Logging setup: structlog events rendered as JSON lines by stdlib handlers."""

from __future__ import annotations

import logging.config
import os
from collections import deque
from pathlib import Path
from typing import Any

import structlog

LOGGER_NAME = "signal_ingest"
JSON_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

# handler name -> (file name, minimum level)
LOG_FILES: dict[str, tuple[str, str]] = {
    "ingest_file": ("ingest.log", "INFO"),
    "error_file": ("error.log", "ERROR"),
}

_configured = False


def log_dir() -> Path:
    home = os.environ.get("SIGNAL_INGEST_HOME")
    root = Path(home).expanduser().resolve() if home else Path(__file__).resolve().parents[1]
    return root / "logs"


def ingest_log_path() -> Path:
    return log_dir() / LOG_FILES["ingest_file"][0]


def error_log_path() -> Path:
    return log_dir() / LOG_FILES["error_file"][0]


def logging_settings(directory: Path, verbose: bool = False) -> dict[str, Any]:
    """Build the ``dictConfig`` mapping for the console and the per-level log files."""

    level = "DEBUG" if verbose else "INFO"
    handlers: dict[str, dict[str, Any]] = {
        "console": {"class": "logging.StreamHandler", "level": level, "formatter": "json"},
    }
    for name, (filename, file_level) in LOG_FILES.items():
        handlers[name] = {
            "class": "logging.FileHandler",
            "level": file_level,
            "filename": str(directory / filename),
            "formatter": "json",
            "encoding": "utf-8",
        }
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {"()": "pythonjsonlogger.json.JsonFormatter", "fmt": JSON_FORMAT},
        },
        "handlers": handlers,
        "loggers": {
            LOGGER_NAME: {"handlers": list(handlers), "level": level, "propagate": False},
        },
    }


def configure_logging(verbose: bool = False) -> structlog.BoundLogger:
    """Install handlers once per process and return the package logger."""

    global _configured
    if not _configured:
        directory = log_dir()
        directory.mkdir(parents=True, exist_ok=True)
        logging.config.dictConfig(logging_settings(directory, verbose))
        structlog.configure(
            processors=[
                structlog.contextvars.merge_contextvars,
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.stdlib.add_log_level,
                structlog.processors.StackInfoRenderer(),
                structlog.processors.format_exc_info,
                structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
            ],
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=True,
        )
        _configured = True
    return structlog.get_logger(LOGGER_NAME)


def tail_log(path: Path, line_count: int = 100) -> list[str]:
    """Return the last ``line_count`` lines of a log file, or nothing if it was never written."""

    if not path.exists():
        return []
    with path.open("r", encoding="utf-8", errors="ignore") as stream:
        return list(deque(stream, maxlen=line_count))


__all__ = [
    "configure_logging",
    "error_log_path",
    "ingest_log_path",
    "log_dir",
    "logging_settings",
    "tail_log",
]
