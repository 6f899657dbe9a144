"""Unit tests for configuration management."""

import pytest
from pathlib import Path

from build_supervisor.config.defaults import get_default_config
from build_supervisor.config.loader import ConfigLoader, load_config
from build_supervisor.config.validation import ConfigValidator
from build_supervisor.errors import ConfigurationError


REQUIRED_ENV = {
    "DRONE_SERVER": "http://test-server",
    "DRONE_TOKEN": "test-token",
    "EC2_INSTANCE_ID": "test-instance",
}


class TestDefaultConfig:
    """Test suite for default configuration."""

    def test_default_config_creation(self) -> None:
        config = get_default_config()
        assert config.check_interval_seconds == 15
        assert config.stop_timeout_seconds == 60
        assert config.queue.ignore_running_for_seconds == 3600
        assert config.instance.hibernation_enabled is False
        assert config.terminate_on_planning_error is True


class TestConfigLoader:
    """Test suite for configuration loader."""

    def test_load_from_environment(self) -> None:
        config = load_config(REQUIRED_ENV)

        assert config.queue.server == "http://test-server"
        assert config.queue.token == "test-token"
        assert config.instance.instance_id == "test-instance"
        assert config.check_interval_seconds == 15
        assert config.stop_timeout_seconds == 60

    def test_environment_overrides(self) -> None:
        env = dict(REQUIRED_ENV,
                   CHECK_INTERVAL_SECONDS="30",
                   STOP_TIMEOUT_SECONDS="120",
                   IGNORE_RUNNING_FOR_SECONDS="0",
                   EC2_HIBERNATION_ENABLED="true",
                   EC2_REGION="eu-west-1",
                   TERMINATE_ON_PLANNING_ERROR="false")

        config = load_config(env)

        assert config.check_interval_seconds == 30
        assert config.stop_timeout_seconds == 120
        assert config.queue.ignore_running_for_seconds == 0
        assert config.instance.hibernation_enabled is True
        assert config.instance.region == "eu-west-1"
        assert config.terminate_on_planning_error is False

    @pytest.mark.parametrize("value", ["yes", "True", "TRUE", "1"])
    def test_hibernation_requires_literal_true(self, value) -> None:
        config = load_config(dict(REQUIRED_ENV, EC2_HIBERNATION_ENABLED=value))
        assert config.instance.hibernation_enabled is False

    @pytest.mark.parametrize("missing,message", [
        ("DRONE_TOKEN", "DRONE_TOKEN"),
        ("DRONE_SERVER", "DRONE_SERVER"),
        ("EC2_INSTANCE_ID", "EC2_INSTANCE_ID"),
    ])
    def test_missing_required_setting(self, missing, message) -> None:
        env = {k: v for k, v in REQUIRED_ENV.items() if k != missing}

        with pytest.raises(ConfigurationError, match=message):
            load_config(env)

    def test_invalid_integer(self) -> None:
        with pytest.raises(ConfigurationError, match="CHECK_INTERVAL_SECONDS") as exc_info:
            load_config(dict(REQUIRED_ENV, CHECK_INTERVAL_SECONDS="often"))

        assert exc_info.value.field == "CHECK_INTERVAL_SECONDS"

    def test_validation_failure(self) -> None:
        with pytest.raises(ConfigurationError) as exc_info:
            load_config(dict(REQUIRED_ENV, CHECK_INTERVAL_SECONDS="0"))

        assert [e.field for e in exc_info.value.errors] == ["check_interval_seconds"]

    def test_yaml_file_overrides_defaults(self, tmp_path: Path) -> None:
        config_file = tmp_path / "supervisor.yaml"
        config_file.write_text(
            "stop_timeout_seconds: 300\n"
            "queue:\n"
            "  server: http://file-server\n"
            "  ignore_running_for_seconds: 600\n"
            "instance:\n"
            "  hibernation_enabled: true\n"
        )
        env = {"DRONE_TOKEN": "test-token", "EC2_INSTANCE_ID": "test-instance"}

        config = ConfigLoader.create(env, config_file=config_file).load()

        assert config.stop_timeout_seconds == 300
        assert config.queue.server == "http://file-server"
        assert config.queue.ignore_running_for_seconds == 600
        assert config.instance.hibernation_enabled is True

    def test_environment_overrides_yaml_file(self, tmp_path: Path) -> None:
        config_file = tmp_path / "supervisor.yaml"
        config_file.write_text("stop_timeout_seconds: 300\n")
        env = dict(REQUIRED_ENV, STOP_TIMEOUT_SECONDS="90",
                   SUPERVISOR_CONFIG_FILE=str(config_file))

        config = load_config(env)

        assert config.stop_timeout_seconds == 90

    def test_missing_yaml_file(self, tmp_path: Path) -> None:
        env = dict(REQUIRED_ENV, SUPERVISOR_CONFIG_FILE=str(tmp_path / "absent.yaml"))

        with pytest.raises(ConfigurationError, match="does not exist"):
            load_config(env)

    def test_yaml_file_must_be_mapping(self, tmp_path: Path) -> None:
        config_file = tmp_path / "supervisor.yaml"
        config_file.write_text("- 1\n- 2\n")

        with pytest.raises(ConfigurationError, match="mapping"):
            ConfigLoader.create(REQUIRED_ENV, config_file=config_file).load()

    def test_unknown_nested_setting(self, tmp_path: Path) -> None:
        config_file = tmp_path / "supervisor.yaml"
        config_file.write_text("queue:\n  colour: blue\n")

        with pytest.raises(ConfigurationError, match="Unknown configuration setting"):
            ConfigLoader.create(REQUIRED_ENV, config_file=config_file).load()

    def test_config_is_immutable(self) -> None:
        config = load_config(REQUIRED_ENV)

        with pytest.raises(AttributeError):
            config.check_interval_seconds = 1


class TestConfigValidator:
    """Test suite for configuration validation."""

    def valid_config(self):
        return {
            "check_interval_seconds": 15,
            "stop_timeout_seconds": 60,
            "terminate_on_planning_error": True,
            "queue": {
                "server": "https://drone.example.com",
                "token": "t",
                "ignore_running_for_seconds": 3600,
                "request_timeout_seconds": 10.0,
            },
            "instance": {"instance_id": "i-1", "hibernation_enabled": False, "region": None},
        }

    def test_valid_config(self) -> None:
        assert ConfigValidator.validate_config(self.valid_config()) == []

    def test_zero_stop_timeout_is_valid(self) -> None:
        config = self.valid_config()
        config["stop_timeout_seconds"] = 0
        assert ConfigValidator.validate_config(config) == []

    def test_invalid_check_interval(self) -> None:
        config = self.valid_config()
        config["check_interval_seconds"] = -5

        errors = ConfigValidator.validate_config(config)
        assert len(errors) == 1
        assert errors[0].field == "check_interval_seconds"
        assert "Must be a positive integer" in errors[0].message

    def test_invalid_server(self) -> None:
        config = self.valid_config()
        config["queue"]["server"] = "drone.example.com"

        errors = ConfigValidator.validate_config(config)
        assert [e.field for e in errors] == ["queue.server"]

    def test_invalid_staleness_window(self) -> None:
        config = self.valid_config()
        config["queue"]["ignore_running_for_seconds"] = -1

        errors = ConfigValidator.validate_config(config)
        assert [e.field for e in errors] == ["queue.ignore_running_for_seconds"]

    def test_invalid_hibernation_flag(self) -> None:
        config = self.valid_config()
        config["instance"]["hibernation_enabled"] = "true"

        errors = ConfigValidator.validate_config(config)
        assert [e.field for e in errors] == ["instance.hibernation_enabled"]
