"""Logging configuration for ticket insights."""

import logging
import os
import sys
import threading
import time
import types
import uuid
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, cast

# Default logger configuration
DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] [%(name)s] [%(context)s] %(message)s"
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_DIRECTORY = "logs"
MAX_LOG_SIZE = 10 * 1024 * 1024  # 10 MB
LOG_BACKUP_COUNT = 5

# Per-thread context shared by every logger, so records from library loggers
# created before setup_logger() still carry it
_context_data = threading.local()


def get_context() -> dict[str, Any]:
    """Return a copy of the current thread's logging context."""
    return dict(getattr(_context_data, "data", {}))


def _replace_context(data: dict[str, Any]) -> None:
    _context_data.data = data


def format_context(data: dict[str, Any]) -> str:
    """Format context as `operation=X,trace_id=Y,...`."""
    if not data:
        return "no-context"
    return ",".join(f"{k}={v}" for k, v in data.items())


class ContextFilter(logging.Filter):
    """Adds the current thread's context to every record as `context`."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "context"):
            record.context = format_context(get_context())
        return True


class ContextualLogger(logging.Logger):
    """Logger that maintains context between related operations."""

    def set_context(self, **kwargs: Any) -> None:
        """
        Sets context values for the current thread.

        Args:
            **kwargs: Key-value pairs to add to the context
        """
        data = get_context()
        data.update(kwargs)
        _replace_context(data)

    def clear_context(self) -> None:
        """Removes all context data for the current thread."""
        _replace_context({})


class LoggingContextManager:
    """Context manager for logging an operation with timing and a trace id."""

    def __init__(self, logger: logging.Logger, operation: str, **context: Any) -> None:
        """
        Initializes the logging context manager.

        Args:
            logger: Logger to report on
            operation: Name of the operation being executed
            **context: Additional context data
        """
        self.logger = logger
        self.operation = operation
        self.context = context.copy()
        self.start_time = time.monotonic()
        self.trace_id = context.get("trace_id", str(uuid.uuid4())[:8])
        self.old_context: dict[str, Any] = {}

    def __enter__(self) -> "LoggingContextManager":
        """Starts the logging context."""
        self.old_context = get_context()

        self.context["operation"] = self.operation
        self.context["trace_id"] = self.trace_id
        _replace_context({**self.old_context, **self.context})

        self.logger.info(f"Operation started: {self.operation}")
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: types.TracebackType | None,
    ) -> None:
        """Finalizes the logging context."""
        duration = time.monotonic() - self.start_time

        if exc_type:
            self.logger.error(
                f"Operation failed: {self.operation} after {duration:.3f}s - {exc_val}"
            )
        else:
            self.logger.debug(
                f"Operation completed: {self.operation} in {duration:.3f}s"
            )

        _replace_context(self.old_context)


def setup_logger(
    name: str = "ticket-insights",
    level: str | None = None,
    log_to_file: bool = False,
    log_dir: str | None = None,
    log_format: str | None = None,
) -> ContextualLogger:
    """
    Configures and returns a contextual logger.

    Console output goes to stderr so that command output on stdout stays
    machine-readable. Calling this again for the same name replaces the
    handlers instead of adding more.

    Args:
        name: Logger name
        level: Log level (DEBUG, INFO, etc.)
        log_to_file: If True, also logs to a rotating file
        log_dir: Directory to store log files
        log_format: Log format

    Returns:
        Configured contextual logger
    """
    logging.setLoggerClass(ContextualLogger)
    logger = logging.getLogger(name)

    log_level = level or os.getenv("LOG_LEVEL", DEFAULT_LOG_LEVEL)
    logger.setLevel(getattr(logging, log_level.upper()))

    formatter = logging.Formatter(log_format or os.getenv("LOG_FORMAT", DEFAULT_FORMAT))
    context_filter = ContextFilter()

    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    console_handler.addFilter(context_filter)
    logger.addHandler(console_handler)

    if log_to_file:
        log_directory = log_dir or os.getenv("LOG_DIR", DEFAULT_LOG_DIRECTORY)
        Path(log_directory).mkdir(parents=True, exist_ok=True)

        log_file = Path(log_directory) / f"{name}.log"
        file_handler = RotatingFileHandler(
            log_file, maxBytes=MAX_LOG_SIZE, backupCount=LOG_BACKUP_COUNT
        )
        file_handler.setFormatter(formatter)
        file_handler.addFilter(context_filter)
        logger.addHandler(file_handler)

    # Prevents propagation to the root logger
    logger.propagate = False

    return cast(ContextualLogger, logger)


def log_operation(
    logger: logging.Logger, operation: str, **context: Any
) -> LoggingContextManager:
    """
    Creates a context manager for operation logging.

    Args:
        logger: Logger to report on
        operation: Name of the operation
        **context: Additional context data

    Returns:
        Context manager configured for operation logging
    """
    return LoggingContextManager(logger, operation, **context)
