"""
Centralized logging configuration for the build supervisor.

Every module logs through structlog with a module-level logger. Output is
one JSON object per line by default so a process manager can ship it as is;
PRETTY_LOGS=true switches to colored console output for local runs.
"""
import logging
import sys
from collections.abc import Mapping
from typing import Any

import structlog
from structlog.types import EventDict, FilteringBoundLogger, WrappedLogger

SERVICE_NAME = "build-supervisor"

# pino-style level names some deployments still pass in LOG_LEVEL
LEVEL_ALIASES = {
    "trace": "DEBUG",
    "fatal": "CRITICAL",
    "warn": "WARNING",
}


def _add_service(_logger: WrappedLogger, _method: str, event_dict: EventDict) -> EventDict:
    event_dict.setdefault("service", SERVICE_NAME)
    return event_dict


def _resolve_level(level: str) -> int:
    name = LEVEL_ALIASES.get(level.lower(), level.upper())
    resolved = logging.getLevelName(name)
    if not isinstance(resolved, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return resolved


def configure_logging(level: str = "info", pretty: bool = False) -> None:
    """
    Configure structlog for the supervisor process.

    Args:
        level: Minimum level name; pino names (trace, fatal, warn) are accepted
        pretty: Colored console output instead of JSON lines
    """
    log_level = _resolve_level(level)

    # Route through stdlib logging so boto3/httpx records share the stream
    logging.basicConfig(
        level=log_level,
        stream=sys.stdout,
        format="%(message)s",  # structlog renders the record
        force=True,
    )

    processors: list[Any] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        _add_service,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.format_exc_info,
    ]

    # Final renderer
    if pretty:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    else:
        processors.append(structlog.processors.JSONRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_logging_from_environment(environ: Mapping[str, str]) -> None:
    """Configure logging from LOG_LEVEL and PRETTY_LOGS."""
    configure_logging(
        level=environ.get("LOG_LEVEL") or "info",
        pretty=environ.get("PRETTY_LOGS") == "true",
    )


def get_logger(name: str) -> FilteringBoundLogger:
    """Get a configured structlog logger instance."""
    return structlog.get_logger(name)


def log_action_change(
    logger: FilteringBoundLogger,
    previous_action: str,
    planned_action: str
) -> None:
    """
    Log a change of the planned action.

    Args:
        logger: Structlog logger instance
        previous_action: Action planned in the preceding check cycle
        planned_action: Action planned in the current check cycle
    """
    logger.bind(
        previous_action=previous_action,
        planned_action=planned_action,
    ).info("Planned action has changed from %s to %s", previous_action, planned_action)
