"""Logging configuration for Nagios Notify."""

import json
import logging
import logging.handlers
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Literal, Optional

from nagios_notify.config.exceptions import ConfigInvalid

from .context import get_log_context

LogFormat = Literal["json", "key-value"]

SERVICE_NAME = "nagios-notify"


class ContextualFilter(logging.Filter):
    """Filter that enriches log records with static metadata and active context.

    This filter merges:
    1. Static fields (service, environment) into every record
    2. Active context from LogContextVar (alert_type, host, service, ...)
    """

    def __init__(self, service: str = SERVICE_NAME, environment: str = "local"):
        super().__init__()
        self.service = service
        self.environment = environment

    def filter(self, record: logging.LogRecord) -> bool:
        record.service = self.service
        record.environment = self.environment

        for key, value in get_log_context().items():
            if not hasattr(record, key):
                setattr(record, key, value)

        return True


class JSONFormatter(logging.Formatter):
    """JSON formatter for structured logging.

    Produces single-line JSON objects with stable field names. Non-ASCII
    text (plugin output, Japanese descriptions) is written as-is.
    """

    # Standard log record attributes to exclude from extras
    STANDARD_ATTRS = {
        "name", "msg", "args", "created", "filename", "funcName", "levelname",
        "levelno", "lineno", "module", "msecs", "message", "pathname", "process",
        "processName", "relativeCreated", "thread", "threadName", "asctime",
        "exc_info", "exc_text", "stack_info", "taskName"
    }

    def format(self, record: logging.LogRecord) -> str:
        log_obj: Dict[str, Any] = {
            "timestamp": self._format_timestamp(record.created),
            "level": record.levelname,
            "message": record.getMessage(),
        }

        for key, value in record.__dict__.items():
            if key not in self.STANDARD_ATTRS and not key.startswith("_"):
                if isinstance(value, datetime):
                    log_obj[key] = value.isoformat()
                elif isinstance(value, (str, int, float, bool, type(None), list, dict)):
                    log_obj[key] = value
                else:
                    log_obj[key] = str(value)

        if record.exc_info:
            log_obj["exc_info"] = self.formatException(record.exc_info)

        return json.dumps(log_obj, ensure_ascii=False)

    def _format_timestamp(self, created: float) -> str:
        """Format timestamp as ISO-8601 UTC with microseconds and a 'Z' suffix."""
        dt = datetime.fromtimestamp(created, tz=timezone.utc)
        return dt.strftime("%Y-%m-%dT%H:%M:%S.%fZ")


class KeyValueFormatter(logging.Formatter):
    """Key-value formatter for human-readable logs.

    Produces logs in format:
    timestamp [level] logger: message key1=value1 key2=value2
    """

    SKIP_ATTRS = {
        "name", "msg", "args", "created", "filename", "funcName", "levelname",
        "levelno", "lineno", "module", "msecs", "message", "pathname", "process",
        "processName", "relativeCreated", "thread", "threadName", "asctime",
        "exc_info", "exc_text", "stack_info", "taskName", "service", "environment"
    }

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)

        extras = []
        for key, value in sorted(record.__dict__.items()):
            if key in self.SKIP_ATTRS or key.startswith("_"):
                continue

            if isinstance(value, str):
                # Quote strings with spaces or special chars
                if " " in value or "=" in value or "," in value or value == "":
                    value_str = f'"{value}"'
                else:
                    value_str = value
            elif isinstance(value, datetime):
                value_str = value.isoformat()
            elif isinstance(value, bool):
                value_str = str(value).lower()
            elif value is None:
                value_str = "null"
            else:
                value_str = str(value)

            extras.append(f"{key}={value_str}")

        if extras:
            return f"{base} {' '.join(extras)}"
        return base


def build_handler(log_file: Optional[Path] = None) -> logging.Handler:
    """Create the log handler: a log file when configured, stderr otherwise.

    WatchedFileHandler reopens the file after external rotation (logrotate),
    since every alert is a separate short-lived process appending to it.

    Raises:
        ConfigInvalid: If the log file or its directory cannot be opened
    """
    if log_file is None:
        return logging.StreamHandler(sys.stderr)

    log_file = Path(log_file)
    try:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        return logging.handlers.WatchedFileHandler(log_file, encoding="utf-8")
    except OSError as e:
        raise ConfigInvalid(
            f"Cannot open log file: {log_file}",
            errors=[str(e)],
            suggestions=[
                "Check that the directory exists and is writable by the monitoring user",
                "Unset logging.file to log to stderr",
            ],
        ) from e


def configure_logging(
    level: str = "INFO",
    format_type: LogFormat = "key-value",
    log_file: Optional[Path] = None,
    environment: str = "local",
) -> None:
    """
    Configure the root logger with the specified level, format and destination.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_type: Output format - 'json' for JSON logs or 'key-value' for human-readable
        log_file: File to append to; stderr when None
        environment: Environment label (production, staging, local)

    Raises:
        ValueError: If level or format_type is invalid
        ConfigInvalid: If log_file cannot be opened
    """
    # Accept LogLevel/LogFormat members as well as plain strings
    level = str(getattr(level, "value", level)).upper()
    format_type = getattr(format_type, "value", format_type)

    numeric_level = getattr(logging, level, None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Invalid log level: {level}")

    if format_type not in ("json", "key-value"):
        raise ValueError(f"Invalid log format: {format_type}. Must be 'json' or 'key-value'")

    handler = build_handler(log_file)

    if format_type == "json":
        formatter = JSONFormatter()
    else:
        formatter = KeyValueFormatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S%z",
        )

    handler.setFormatter(formatter)
    handler.addFilter(ContextualFilter(service=SERVICE_NAME, environment=environment))

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    # Remove existing handlers to avoid duplicates
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    logging.getLogger(__name__).debug(
        "Logging configured",
        extra={
            "event": "logging.configured",
            "component": "logging",
            "log_level": level,
            "log_format": format_type,
            "log_file": str(log_file) if log_file else None,
        },
    )
