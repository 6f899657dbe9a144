"""Configuration failures raised before the supervisor starts."""

from typing import Any, Optional


class ConfigurationError(Exception):
    """Required setting is missing or a setting has an invalid value."""

    def __init__(self, message: str, field: Optional[str] = None,
                 errors: Optional[list[Any]] = None):
        super().__init__(message)
        self.field = field
        self.errors = errors or []
        self.recoverable = False
