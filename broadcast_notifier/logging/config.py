"""
Centralized logging configuration for the broadcast notifier.

This module provides standardized logging configuration using structlog
for all components. All logging throughout the system should use this
configuration to ensure consistent formatting and structured logging.
"""
import logging
import sys
from typing import Any, Optional

import structlog
from structlog.types import FilteringBoundLogger


def configure_logging(
    level: str = "INFO",
    format_json: bool = False,
    include_timestamp: bool = True
) -> None:
    """
    Configure structlog for the entire application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_json: If True, output JSON format; otherwise human-readable
        include_timestamp: Include timestamp in log output
    """
    log_level = getattr(logging, level.upper())

    logging.basicConfig(
        level=log_level,
        stream=sys.stdout,
        format="%(message)s"  # structlog will handle formatting
    )

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if include_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))

    if format_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> FilteringBoundLogger:
    """
    Get a configured structlog logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger instance
    """
    return structlog.get_logger(name)


def get_state_logger(name: str) -> FilteringBoundLogger:
    """
    Get a logger for broadcast lifecycle transitions.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Lazy structlog logger carrying the lifecycle subsystem fields
    """
    return structlog.get_logger(
        name,
        subsystem="lifecycle",
        audit_trail=True
    )


def get_schedule_logger(name: str) -> FilteringBoundLogger:
    """Get a logger bound to the next-event scheduling subsystem."""
    return structlog.get_logger(name, subsystem="schedule")


def log_status_transition(
    logger: FilteringBoundLogger,
    stream_id: str,
    from_status: str,
    to_status: str,
    notifications: list[str],
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log an observed lifecycle status change with standardized format.

    Args:
        logger: Structlog logger instance
        stream_id: ID of the broadcast that changed
        from_status: Previously stored status
        to_status: Newly observed status
        notifications: Notification categories the change fires
        context: Additional context data
    """
    bound_logger = logger.bind(
        stream_id=stream_id,
        from_status=from_status,
        to_status=to_status,
        notifications=notifications,
    )

    if context:
        bound_logger = bound_logger.bind(context=context)

    bound_logger.info("status_transition")
