"""Structured logging configuration for OsmTrace."""

import logging
import logging.handlers
import sys
import time
from functools import wraps
from pathlib import Path
from typing import Optional

FILE_FORMAT = "%(asctime)s %(levelname)-8s [%(name)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Loggers held at WARNING whatever level OsmTrace runs at
HTTP_LOGGERS = ("urllib3", "requests")


class TraceFormatter(logging.Formatter):
    """Console formatter: timestamp, level, [component], message, (operation).

    ``component`` defaults to the last part of the logger name and
    ``operation`` is set by LogContext. Levels are colored only when asked to
    or when stderr is a terminal.
    """

    COLORS = {
        "DEBUG": "\033[36m",  # Cyan
        "INFO": "\033[32m",  # Green
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def __init__(self, use_color: Optional[bool] = None):
        super().__init__()
        if use_color is None:
            use_color = hasattr(sys.stderr, "isatty") and sys.stderr.isatty()
        self.use_color = use_color

    def format(self, record):
        operation = getattr(record, "operation", "general")
        component = getattr(record, "component", record.name.split(".")[-1])

        timestamp = self.formatTime(record, DATE_FORMAT)

        if self.use_color:
            color = self.COLORS.get(record.levelname, "")
            level_str = f"{color}{record.levelname:8}{self.RESET}"
        else:
            level_str = f"{record.levelname:8}"

        component_str = f"[{component}]"
        message = record.getMessage()

        operation_str = ""
        if operation != "general":
            operation_str = f" ({operation})"

        formatted = (
            f"{timestamp} {level_str} {component_str:15} {message}{operation_str}"
        )
        if record.exc_info:
            formatted = f"{formatted}\n{self.formatException(record.exc_info)}"
        return formatted


def _console_handler(level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(TraceFormatter())
    return handler


def _file_handler(
    log_file: str, level: int, max_bytes: int, backup_count: int
) -> logging.Handler:
    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    handler = logging.handlers.RotatingFileHandler(
        log_path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT))
    return handler


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    console: bool = True,
    max_bytes: int = 10 * 1024 * 1024,
    backup_count: int = 5,
) -> None:
    """Route OsmTrace logging to stderr and, optionally, a rotating file.

    Any handlers already on the root logger are replaced, so calling this
    twice does not duplicate output. The file gets plain lines without ANSI
    colors.

    Args:
        level: Logging level name, case-insensitive (unknown names mean INFO)
        log_file: Path of the log file; empty or None disables file output
        console: Whether to log to stderr
        max_bytes: Size at which the log file is rotated
        backup_count: Number of rotated files kept
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()

    if console:
        root_logger.addHandler(_console_handler(numeric_level))
    if log_file:
        root_logger.addHandler(
            _file_handler(log_file, numeric_level, max_bytes, backup_count)
        )

    for name in HTTP_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.getLogger(__name__).debug(
        f"Logging initialized: level={level}, console={console}, file={log_file}"
    )


class LogContext:
    """Tag every record created inside the block with an operation name.

    Used around MapExtract loads and refreshes so console lines end in
    ``(load)`` or ``(refresh)``. Start and completion are logged at DEBUG,
    a failure at ERROR; the exception itself still propagates.
    """

    def __init__(self, operation: str, logger: Optional[logging.Logger] = None):
        self.operation = operation
        self.logger = logger or logging.getLogger()
        self._previous_factory = None

    def __enter__(self):
        previous = logging.getLogRecordFactory()
        operation = self.operation

        def tagged_factory(*args, **kwargs):
            record = previous(*args, **kwargs)
            record.operation = operation
            return record

        self._previous_factory = previous
        logging.setLogRecordFactory(tagged_factory)
        self.logger.debug(f"Started operation: {operation}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            self.logger.debug(f"Completed operation: {self.operation}")
        else:
            self.logger.error(f"Operation failed: {self.operation}: {exc_val}")

        logging.setLogRecordFactory(self._previous_factory)
        return False


def log_performance(func):
    """Decorator to log function performance."""

    @wraps(func)
    def wrapper(*args, **kwargs):
        logger = logging.getLogger(func.__module__)
        start_time = time.perf_counter()

        logger.debug(f"Starting {func.__name__}")
        try:
            result = func(*args, **kwargs)
        except Exception as e:
            duration = time.perf_counter() - start_time
            logger.debug(f"Failed {func.__name__} after {duration:.3f}s: {e}")
            raise
        duration = time.perf_counter() - start_time
        logger.debug(f"Completed {func.__name__} in {duration:.3f}s")
        return result

    return wrapper
