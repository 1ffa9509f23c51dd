"""Centralized logging configuration for oratestkit.

All loggers live under the ``oratestkit`` namespace. ``configure_logging`` can
switch the namespace to structured JSON output so harness activity (DDL,
privileged sessions, statistics queries) is easy to pick out of CI logs.
"""

import logging
import sys
from contextvars import ContextVar
from typing import TYPE_CHECKING, Any, Optional

import msgspec

if TYPE_CHECKING:
    from logging import LogRecord

__all__ = (
    "StructuredFormatter",
    "configure_logging",
    "get_logger",
    "get_test_id",
    "log_with_context",
    "set_log_level",
    "set_test_id",
    "test_id_var",
)

ROOT_LOGGER_NAME = "oratestkit"

# Identifier of the currently running test, if any
test_id_var: "ContextVar[Optional[str]]" = ContextVar("test_id", default=None)

_json_encoder = msgspec.json.Encoder()


def set_test_id(test_id: Optional[str]) -> None:
    """Set the test identifier for the current context.

    Args:
        test_id: The test identifier to set, or None to clear
    """
    test_id_var.set(test_id)


def get_test_id() -> Optional[str]:
    """Get the current test identifier.

    Returns:
        The current test identifier or None if not set
    """
    return test_id_var.get()


class StructuredFormatter(logging.Formatter):
    """Structured JSON formatter with test identifier support."""

    def format(self, record: "LogRecord") -> str:
        """Format log record as structured JSON.

        Args:
            record: The log record to format

        Returns:
            JSON formatted log entry
        """
        log_entry: "dict[str, Any]" = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if test_id := get_test_id():
            log_entry["test_id"] = test_id

        if hasattr(record, "extra_fields"):
            log_entry.update(record.extra_fields)  # pyright: ignore

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return _json_encoder.encode(log_entry).decode("utf-8")


class CurrentTestFilter(logging.Filter):
    """Filter that adds the test identifier to log records."""

    def filter(self, record: "LogRecord") -> bool:
        if test_id := get_test_id():
            record.test_id = test_id  # type: ignore[attr-defined]
        return True


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Get a logger instance under the ``oratestkit`` namespace.

    Args:
        name: Logger name. If not provided, returns the root oratestkit logger.

    Returns:
        Configured logger instance
    """
    if name is None:
        return logging.getLogger(ROOT_LOGGER_NAME)

    if not name.startswith(ROOT_LOGGER_NAME):
        name = f"{ROOT_LOGGER_NAME}.{name}"

    logger = logging.getLogger(name)

    if not any(isinstance(f, CurrentTestFilter) for f in logger.filters):
        logger.addFilter(CurrentTestFilter())

    return logger


def set_log_level(level: str) -> None:
    """Set the level of the oratestkit namespace without touching its handlers.

    Args:
        level: Logging level name, case-insensitive
    """
    logging.getLogger(ROOT_LOGGER_NAME).setLevel(getattr(logging, level.upper()))


def configure_logging(
    level: str = "INFO",
    format_style: str = "structured",
    log_to_file: Optional[str] = None,
    extra_handlers: "Optional[list[logging.Handler]]" = None,
) -> None:
    """Configure logging for the oratestkit namespace.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_style: Log format style ("structured" for JSON, "simple" for text)
        log_to_file: Optional file path to log to
        extra_handlers: Additional handlers to add
    """
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(getattr(logging, level.upper()))
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    if format_style == "structured":
        formatter: logging.Formatter = StructuredFormatter()
    else:
        formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_to_file:
        file_handler = logging.FileHandler(log_to_file)
        file_handler.setFormatter(StructuredFormatter())  # Always use structured for files
        root_logger.addHandler(file_handler)

    if extra_handlers:
        for handler in extra_handlers:
            root_logger.addHandler(handler)

    root_logger.propagate = False

    root_logger.debug(
        "oratestkit logging configured",
        extra={
            "extra_fields": {
                "level": level,
                "format_style": format_style,
                "handlers_count": len(root_logger.handlers),
            }
        },
    )


def log_with_context(logger: logging.Logger, level: int, message: str, **extra_fields: Any) -> None:
    """Log a message with structured extra fields.

    Args:
        logger: The logger to use
        level: Log level
        message: Log message
        **extra_fields: Additional fields to include in structured logs
    """
    if not logger.isEnabledFor(level):
        return
    logger.log(level, message, extra={"extra_fields": extra_fields})
