"""
Logging setup for the docsan CLI and HTTP service.

Console output goes to stderr through Rich, or as one JSON object per line
when structured logging is requested. A log file, when configured, receives
the same records in plain text.
"""

import json
import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.logging import RichHandler

from docsan.correlation import get_correlation_id

console = Console(stderr=True)
_configured = False

FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s [%(correlation_id)s] %(message)s"

# LogRecord attributes that are not user-supplied extras
_STANDARD_ATTRS = frozenset(
    {
        "name",
        "msg",
        "args",
        "created",
        "filename",
        "funcName",
        "levelname",
        "levelno",
        "lineno",
        "module",
        "msecs",
        "message",
        "pathname",
        "process",
        "processName",
        "relativeCreated",
        "thread",
        "threadName",
        "taskName",
        "exc_info",
        "exc_text",
        "stack_info",
        "correlation_id",
    }
)


class CorrelationIdFilter(logging.Filter):
    """
    Logging filter that ensures correlation_id is always present in records.

    Usage:
        >>> handler.addFilter(CorrelationIdFilter())
    """

    def __init__(self, default_value: str = "-") -> None:
        """
        Initialise the filter.

        Args:
            default_value: Value to use when no correlation ID is current
        """
        super().__init__()
        self.default_value = default_value

    def filter(self, record: logging.LogRecord) -> bool:
        """Add correlation ID to record if not already present."""
        if getattr(record, "correlation_id", None) is None:
            record.correlation_id = get_correlation_id() or self.default_value
        return True


class JSONFormatter(logging.Formatter):
    """Structured JSON formatter with correlation IDs and service metadata."""

    def __init__(self, service_name: str, service_version: str):
        """
        Initialise JSON formatter.

        Args:
            service_name: Name of the service (e.g., "docsan")
            service_version: Version of the service
        """
        super().__init__()
        self.service_name = service_name
        self.service_version = service_version

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_entry: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "correlation_id": getattr(record, "correlation_id", None) or get_correlation_id() or "-",
            "service_name": self.service_name,
            "service_version": self.service_version,
        }

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _STANDARD_ATTRS and not key.startswith("_"):
                log_entry[key] = value

        # Single line for log shippers
        return json.dumps(log_entry, ensure_ascii=False, default=str)


def configure_logging(
    level: str | int = logging.INFO,
    *,
    log_file: str | Path | None = None,
    json_format: bool = False,
    verbose: bool = False,
) -> None:
    """Configure logging. Call once at startup; later calls are ignored.

    Args:
        level: Logging level name or number.
        log_file: Optional file receiving a plain-text copy of every record.
        json_format: Write JSON lines to stderr instead of Rich output.
        verbose: Force DEBUG and show locals in Rich tracebacks.
    """
    global _configured
    if _configured:
        return

    from docsan import __version__

    if verbose:
        level = logging.DEBUG

    console_handler: logging.Handler
    if json_format:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(JSONFormatter("docsan", __version__))
    else:
        console_handler = RichHandler(
            console=console,
            rich_tracebacks=True,
            tracebacks_show_locals=verbose,
        )
        console_handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    console_handler.addFilter(CorrelationIdFilter())
    handlers: list[logging.Handler] = [console_handler]

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="w", encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        file_handler.addFilter(CorrelationIdFilter())
        handlers.append(file_handler)

    logging.basicConfig(level=level, handlers=handlers, force=True)

    # Suppress noisy third-party loggers
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

    _configured = True
