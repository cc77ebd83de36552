"""Structured logging utilities for meshverify."""

import logging
import sys
from typing import Any

import structlog
from rich.console import Console


def setup_logging(level: str = "INFO", format: str = "json", output: str = "stdout") -> None:
    """Configure structured logging for meshverify.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format: Log format (json or console)
        output: Output destination (stdout or stderr)
    """
    log_level = getattr(logging, level.upper(), logging.INFO)
    stream = sys.stdout if output == "stdout" else sys.stderr

    # Configure standard logging
    logging.basicConfig(
        format="%(message)s",
        stream=stream,
        level=log_level,
    )

    # Configure processors based on format
    if format == "json":
        processors = [
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = [
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Get a structured logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Structured logger instance
    """
    return structlog.get_logger(name)


def log_error(
    logger: structlog.BoundLogger,
    error: Exception,
    operation: str | None = None,
    **kwargs: Any,
) -> None:
    """Log an error with structured context.

    Args:
        logger: Logger instance
        error: Exception instance
        operation: Operation name (optional)
        **kwargs: Additional context fields
    """
    context = {
        "error_type": type(error).__name__,
        "error_message": str(error),
        **kwargs,
    }

    if operation:
        context["operation"] = operation

    logger.error("error_occurred", **context, exc_info=True)


class ProgressLogger:
    """Human-readable progress channel.

    Every line is printed to the console and recorded as a structured log
    event, independently of the errors returned to the caller.
    """

    def __init__(self, console: Console | None = None, name: str = "meshverify.progress"):
        """Initialize progress logger.

        Args:
            console: Rich console to print to (defaults to a new stdout console)
            name: Structured logger name
        """
        self.console = console or Console()
        self._logger = get_logger(name)

    def log_and_print(self, message: str) -> None:
        """Print a progress line and log it.

        Args:
            message: Line to emit
        """
        self.console.print(message, markup=False, highlight=False)
        self._logger.info("progress", message=message)
