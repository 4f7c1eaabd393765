"""
Centralized logging configuration for the promptgallery application.

This module sets up structlog once per process and exposes small helpers for
the event types the application emits: performance records, admin actions,
security events and errors.
"""

import logging
import os
import sys
from typing import Any

import structlog

LEVEL_COLORS = {
    "DEBUG": "\033[36m",
    "INFO": "\033[32m",
    "WARNING": "\033[33m",
    "ERROR": "\033[31m",
    "CRITICAL": "\033[35m",
}


class ColoredJSONRenderer:
    """JSON renderer that tints each line by level when writing to a terminal."""

    def __init__(self, colors: bool = False):
        self.colors = colors
        self.json_renderer = structlog.processors.JSONRenderer()

    def __call__(self, logger: Any, method_name: str, event_dict: dict[str, Any]) -> str:
        rendered = str(self.json_renderer(logger, method_name, event_dict))
        if not self.colors:
            return rendered

        color = LEVEL_COLORS.get(str(event_dict.get("level", "")).upper(), "")
        return f"{color}{rendered}\033[0m"


def get_log_level() -> int:
    """
    Resolve the log level from the LOG_LEVEL environment variable.

    Returns:
        int: Log level constant from the logging module, INFO when unset or unknown
    """
    level_name = os.getenv("LOG_LEVEL", "INFO").upper()
    level = logging.getLevelName(level_name)
    return level if isinstance(level, int) else logging.INFO


def is_development_environment() -> bool:
    """Check whether ENVIRONMENT names a development setup."""
    return os.getenv("ENVIRONMENT", "development").lower() in ["development", "dev", "local", "test"]


def configure_structured_logging() -> None:
    """
    Configure structlog for the whole application.

    Development renders to the console (coloured JSON when attached to a TTY),
    production renders plain JSON lines suitable for log collectors.
    """
    log_level = get_log_level()
    is_dev = is_development_environment()
    use_colors = is_dev and sys.stderr.isatty()

    logging.basicConfig(level=log_level, format="%(message)s", stream=sys.stderr)

    # The backend client libraries are chatty at INFO
    for noisy in ("httpx", "httpcore", "hpack", "supabase"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    processors: list[Any] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if is_dev:
        processors.append(ColoredJSONRenderer(colors=True) if use_colors else structlog.dev.ConsoleRenderer())
    else:
        processors.append(structlog.processors.JSONRenderer())

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.getLogger().setLevel(log_level)

    structlog.get_logger("promptgallery.logging").info(
        "logging_configured",
        log_level=logging.getLevelName(log_level),
        environment="development" if is_dev else "production",
        colors_enabled=use_colors,
    )


def get_logger(name: str | None = None) -> Any:
    """
    Get a structured logger instance.

    Args:
        name: Logger name, usually ``__name__`` of the calling module

    Returns:
        structlog.BoundLogger: Configured logger instance
    """
    return structlog.get_logger(name or "promptgallery")


def log_performance(operation: str, duration: float, **context: Any) -> None:
    """
    Log a performance measurement.

    Args:
        operation: Name of the measured operation
        duration: Duration in seconds
        **context: Additional context information
    """
    get_logger("promptgallery.performance").info(
        "performance_metric", operation=operation, duration_seconds=duration, **context
    )


def log_user_action(user_id: str | None, action: str, **context: Any) -> None:
    """
    Log an admin action for the audit trail.

    Args:
        user_id: Acting user identifier (None for anonymous)
        action: Action performed
        **context: Additional context information
    """
    get_logger("promptgallery.user_actions").info("user_action", user_id=user_id, action=action, **context)


def log_error(error: Exception, context: dict[str, Any] | None = None) -> None:
    """
    Log an error with structured context.

    Args:
        error: Exception that occurred
        context: Additional context information
    """
    error_context: dict[str, Any] = {
        "error_type": type(error).__name__,
        "error_message": str(error),
    }
    if context:
        error_context.update(context)

    get_logger("promptgallery.errors").error("error_occurred", **error_context)


def log_security_event(event_type: str, user_id: str | None = None, **context: Any) -> None:
    """
    Log a security-relevant event such as a refused mutation.

    Args:
        event_type: Type of security event
        user_id: User identifier (if applicable)
        **context: Additional context information
    """
    get_logger("promptgallery.security").warning("security_event", event_type=event_type, user_id=user_id, **context)


class LogContext:
    """Context manager binding structured context to a logger for one operation."""

    def __init__(self, logger: Any, **context: Any):
        self.logger = logger
        self.context = context
        self.bound_logger: Any = None

    def __enter__(self) -> Any:
        self.bound_logger = self.logger.bind(**self.context)
        return self.bound_logger

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if exc_type is not None and self.bound_logger is not None:
            self.bound_logger.warning(
                "operation_aborted", exception_type=exc_type.__name__, exception_message=str(exc_val)
            )


def log_context(name: str, **context: Any) -> LogContext:
    """
    Create a logging context manager for the named logger.

    Args:
        name: Logger name
        **context: Context variables added to every message inside the block

    Returns:
        LogContext: Context manager yielding the bound logger
    """
    return LogContext(get_logger(name), **context)
