"""
Changelog Issues Logging
========================

Log setup for the CLI: short human-readable lines on stderr and JSON lines
in the optional log file. Components log through ``get_logger_for_component``
so every record carries the component name and, where known, the feed URL
or target repository. A sync run ends with one summary line from
``PerformanceLogger`` holding its duration and entry/issue counts.
"""

import json
import logging
import logging.handlers
import sys
import time
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

ROOT_LOGGER_NAME = "changelog_issues"

# Record attributes copied into the JSON "context" object, in this order
CONTEXT_FIELDS = (
    "component",
    "feed_url",
    "repository",
    "operation",
    "duration_seconds",
    "success",
    "counts",
    "error_type",
    "error_code",
)


def _record_context(record: logging.LogRecord) -> Dict[str, Any]:
    return {
        field: getattr(record, field)
        for field in CONTEXT_FIELDS
        if getattr(record, field, None) is not None
    }


class JsonLineFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "time": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        context = _record_context(record)
        if context:
            payload["context"] = context
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)

        return json.dumps(payload, ensure_ascii=False, default=str)


class ConsoleFormatter(logging.Formatter):
    """``HH:MM:SS LEVEL [component] message``, level colored on terminals."""

    LEVEL_COLORS = {
        "DEBUG": "\033[36m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def __init__(self, use_color: bool = False):
        super().__init__()
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        level = f"{record.levelname:<7}"
        if self.use_color and record.levelname in self.LEVEL_COLORS:
            level = f"{self.LEVEL_COLORS[record.levelname]}{level}{self.RESET}"

        source = getattr(record, "component", None) or record.name
        line = (
            f"{datetime.fromtimestamp(record.created):%H:%M:%S} {level} "
            f"[{source}] {record.getMessage()}"
        )
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def configure_application_logging(
    log_level: str = "INFO",
    log_file: Optional[str] = None,
    enable_console: bool = True,
    structured_logging: bool = False,
    max_file_size_mb: int = 10,
    backup_count: int = 5,
) -> logging.Logger:
    """Configure the ``changelog_issues`` logger tree.

    Args:
        log_level: Level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Rotating JSON log file, if any
        enable_console: Log to stderr (stdout carries command output)
        structured_logging: Use JSON lines on the console too
        max_file_size_mb: Rotation size of the log file
        backup_count: Rotated files to keep

    Returns:
        The configured package logger
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(log_level.upper())
    # Reconfiguring in one process replaces the previous handlers
    logger.handlers.clear()

    if enable_console:
        console_handler = logging.StreamHandler(sys.stderr)
        if structured_logging:
            console_handler.setFormatter(JsonLineFormatter())
        else:
            console_handler.setFormatter(ConsoleFormatter(use_color=sys.stderr.isatty()))
        logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_path,
            maxBytes=max_file_size_mb * 1024 * 1024,
            backupCount=backup_count,
            encoding="utf-8",
        )
        file_handler.setFormatter(JsonLineFormatter())
        logger.addHandler(file_handler)

    logging.getLogger("aiohttp").setLevel(logging.WARNING)
    return logger


class ComponentLogger(logging.LoggerAdapter):
    """Adapter stamping fixed context on every record; call-site ``extra`` wins."""

    def process(self, msg: Any, kwargs: Dict[str, Any]) -> tuple:
        kwargs["extra"] = {**self.extra, **kwargs.get("extra", {})}
        return msg, kwargs


def get_logger_for_component(
    component_name: str,
    feed_url: Optional[str] = None,
    repository: Optional[str] = None,
) -> ComponentLogger:
    """Logger named ``changelog_issues.<component_name>`` with its context.

    Args:
        component_name: e.g. 'feed_fetcher', 'rss_parser', 'changelog_sync'
        feed_url: Feed the component works on, if fixed
        repository: Target owner/name repository, if fixed
    """
    context = {"component": component_name}
    if feed_url:
        context["feed_url"] = feed_url
    if repository:
        context["repository"] = repository

    return ComponentLogger(logging.getLogger(f"{ROOT_LOGGER_NAME}.{component_name}"), context)


class PerformanceLogger:
    """Times a block and logs one summary line with the counts recorded in it.

    Usage:
        with PerformanceLogger(logger, "changelog sync") as perf:
            ...
            perf.record(entries=3, new_entries=1, issues_created=1)
    """

    def __init__(self, logger: Any, operation: str):
        self.logger = logger
        self.operation = operation
        self.counts: Dict[str, int] = {}
        self._started: Optional[float] = None

    def record(self, **counts: int) -> None:
        self.counts.update(counts)

    def __enter__(self) -> "PerformanceLogger":
        self._started = time.monotonic()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        duration = time.monotonic() - self._started
        summary = ", ".join(f"{name}={value}" for name, value in self.counts.items())
        suffix = f" ({summary})" if summary else ""
        context = {
            "operation": self.operation,
            "duration_seconds": round(duration, 3),
            "success": exc_type is None,
            "counts": dict(self.counts),
        }

        if exc_type is None:
            self.logger.info(f"Completed {self.operation} in {duration:.2f}s{suffix}", extra=context)
        else:
            self.logger.error(
                f"Failed {self.operation} after {duration:.2f}s{suffix}: {exc_val}", extra=context
            )
