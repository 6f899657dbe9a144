"""Configuration loader with 3-tier parameter precedence."""

import os
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Callable, Mapping, Optional

import yaml

from ..errors import ConfigurationError
from .defaults import InstanceSettings, QueueSettings, SupervisorConfig, get_default_config
from .validation import ConfigValidator

CONFIG_FILE_VARIABLE = "SUPERVISOR_CONFIG_FILE"


def _parse_int(raw: str) -> int:
    return int(raw.strip(), 10)


def _parse_flag(raw: str) -> bool:
    return raw.strip() == "true"


# (environment variable, config path, parser)
ENVIRONMENT_SETTINGS: list[tuple[str, tuple[str, ...], Callable[[str], Any]]] = [
    ("CHECK_INTERVAL_SECONDS", ("check_interval_seconds",), _parse_int),
    ("STOP_TIMEOUT_SECONDS", ("stop_timeout_seconds",), _parse_int),
    ("TERMINATE_ON_PLANNING_ERROR", ("terminate_on_planning_error",), _parse_flag),
    ("DRONE_SERVER", ("queue", "server"), str),
    ("DRONE_TOKEN", ("queue", "token"), str),
    ("IGNORE_RUNNING_FOR_SECONDS", ("queue", "ignore_running_for_seconds"), _parse_int),
    ("EC2_INSTANCE_ID", ("instance", "instance_id"), str),
    ("EC2_HIBERNATION_ENABLED", ("instance", "hibernation_enabled"), _parse_flag),
    ("EC2_REGION", ("instance", "region"), str),
]

REQUIRED_SETTINGS: list[tuple[tuple[str, ...], str]] = [
    (("queue", "token"),
     "Please specify a Drone API token using the `DRONE_TOKEN` environment variable."),
    (("queue", "server"),
     "Please specify the Drone API server using the `DRONE_SERVER` environment variable."),
    (("instance", "instance_id"),
     "Please specify the ID of the EC2 Instance to supervise using the "
     "`EC2_INSTANCE_ID` environment variable"),
]


@dataclass(frozen=True)
class ConfigLoader:
    """Manages configuration loading with 3-tier precedence."""

    environ: Mapping[str, str]
    config_file: Optional[Path]
    defaults: SupervisorConfig

    @classmethod
    def create(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        config_file: Optional[Path] = None
    ) -> "ConfigLoader":
        """Create a ConfigLoader instance."""
        if environ is None:
            environ = os.environ

        if config_file is None and environ.get(CONFIG_FILE_VARIABLE):
            config_file = Path(environ[CONFIG_FILE_VARIABLE])

        return cls(
            environ=environ,
            config_file=config_file,
            defaults=get_default_config(),
        )

    def load_file_config(self) -> dict[str, Any]:
        """Load overrides from the YAML configuration file, if any."""
        if self.config_file is None:
            return {}

        if not self.config_file.exists():
            raise ConfigurationError(
                f"Configuration file '{self.config_file}' does not exist",
                field=CONFIG_FILE_VARIABLE
            )

        with open(self.config_file) as f:
            try:
                file_config = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ConfigurationError(
                    f"Configuration file '{self.config_file}' is not valid YAML: {e}",
                    field=CONFIG_FILE_VARIABLE
                ) from e

        if file_config is None:
            return {}
        if not isinstance(file_config, dict):
            raise ConfigurationError(
                f"Configuration file '{self.config_file}' must contain a mapping",
                field=CONFIG_FILE_VARIABLE
            )
        return file_config

    def load_environment_config(self) -> dict[str, Any]:
        """Collect overrides from environment variables."""
        config: dict[str, Any] = {}

        for variable, path, parse in ENVIRONMENT_SETTINGS:
            raw = self.environ.get(variable)
            if raw is None or raw == "":
                continue

            try:
                value = parse(raw)
            except ValueError as e:
                raise ConfigurationError(
                    f"Environment variable `{variable}` has an invalid value: {raw!r}",
                    field=variable
                ) from e

            target = config
            for key in path[:-1]:
                target = target.setdefault(key, {})
            target[path[-1]] = value

        return config

    def merge_config(self) -> dict[str, Any]:
        """
        Merge configuration with 3-tier precedence.

        Priority order:
        1. Environment variables (highest priority)
        2. YAML configuration file
        3. Built-in defaults (lowest priority)
        """
        config = asdict(self.defaults)
        config = self._deep_merge(config, self.load_file_config())
        config = self._deep_merge(config, self.load_environment_config())
        return config

    def load(self) -> SupervisorConfig:
        """Load, check and freeze the supervisor configuration."""
        config = self.merge_config()

        for path, message in REQUIRED_SETTINGS:
            value: Any = config
            for key in path:
                value = value.get(key) if isinstance(value, dict) else None
            if not value:
                raise ConfigurationError(message, field=".".join(path))

        validation_errors = ConfigValidator.validate_config(config)
        if validation_errors:
            details = "; ".join(
                f"{err.field}: {err.message} (got: {err.value!r})" for err in validation_errors
            )
            raise ConfigurationError(
                f"Invalid configuration: {details}",
                errors=validation_errors
            )

        try:
            return SupervisorConfig(
                check_interval_seconds=config["check_interval_seconds"],
                stop_timeout_seconds=config["stop_timeout_seconds"],
                terminate_on_planning_error=config["terminate_on_planning_error"],
                queue=QueueSettings(**config["queue"]),
                instance=InstanceSettings(**config["instance"]),
            )
        except TypeError as e:
            raise ConfigurationError(f"Unknown configuration setting: {e}") from e

    def _deep_merge(self, base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """Deep merge two dictionaries."""
        result = base.copy()

        for key, value in override.items():
            if key in result and isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = self._deep_merge(result[key], value)
            else:
                result[key] = value

        return result


def load_config(environ: Optional[Mapping[str, str]] = None) -> SupervisorConfig:
    """Load the supervisor configuration from the process environment."""
    return ConfigLoader.create(environ).load()
