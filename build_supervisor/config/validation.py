"""Configuration validation utilities."""

from dataclasses import dataclass
from typing import Any
from urllib.parse import urlparse


@dataclass(frozen=True)
class ValidationError:
    """Represents a configuration validation error."""
    field: str
    message: str
    value: Any


class ConfigValidator:
    """Validates merged configuration dictionaries."""

    @staticmethod
    def validate_timing(config: dict[str, Any]) -> list[ValidationError]:
        """Validate poll interval and stop grace period."""
        errors = []

        value = config.get("check_interval_seconds")
        if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
            errors.append(ValidationError(
                field="check_interval_seconds",
                message="Must be a positive integer",
                value=value
            ))

        value = config.get("stop_timeout_seconds")
        if not isinstance(value, int) or isinstance(value, bool) or value < 0:
            errors.append(ValidationError(
                field="stop_timeout_seconds",
                message="Must be a non-negative integer",
                value=value
            ))

        value = config.get("terminate_on_planning_error")
        if not isinstance(value, bool):
            errors.append(ValidationError(
                field="terminate_on_planning_error",
                message="Must be a boolean",
                value=value
            ))

        return errors

    @staticmethod
    def validate_queue(params: dict[str, Any]) -> list[ValidationError]:
        """Validate Drone queue parameters."""
        errors = []

        server = params.get("server")
        parsed = urlparse(server) if isinstance(server, str) else None
        if parsed is None or parsed.scheme not in ("http", "https") or not parsed.netloc:
            errors.append(ValidationError(
                field="queue.server",
                message="Must be an http(s) URL",
                value=server
            ))

        value = params.get("ignore_running_for_seconds")
        if not isinstance(value, int) or isinstance(value, bool) or value < 0:
            errors.append(ValidationError(
                field="queue.ignore_running_for_seconds",
                message="Must be a non-negative integer",
                value=value
            ))

        value = params.get("request_timeout_seconds")
        if not isinstance(value, (int, float)) or isinstance(value, bool) or value <= 0:
            errors.append(ValidationError(
                field="queue.request_timeout_seconds",
                message="Must be a positive number",
                value=value
            ))

        return errors

    @staticmethod
    def validate_instance(params: dict[str, Any]) -> list[ValidationError]:
        """Validate EC2 instance parameters."""
        errors = []

        if not isinstance(params.get("hibernation_enabled"), bool):
            errors.append(ValidationError(
                field="instance.hibernation_enabled",
                message="Must be a boolean",
                value=params.get("hibernation_enabled")
            ))

        return errors

    @staticmethod
    def validate_config(config: dict[str, Any]) -> list[ValidationError]:
        """Validate complete configuration."""
        errors = ConfigValidator.validate_timing(config)
        errors.extend(ConfigValidator.validate_queue(config.get("queue", {})))
        errors.extend(ConfigValidator.validate_instance(config.get("instance", {})))
        return errors
