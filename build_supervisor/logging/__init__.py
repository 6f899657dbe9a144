"""
Logging configuration and utilities for the build supervisor.
"""
from .config import (
    configure_logging, configure_logging_from_environment, get_logger, log_action_change
)

__all__ = [
    "configure_logging",
    "configure_logging_from_environment",
    "get_logger",
    "log_action_change",
]
