"""Default configuration parameters for the build supervisor."""

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class QueueSettings:
    """Drone build queue parameters."""
    server: str = ""
    token: str = ""
    ignore_running_for_seconds: int = 3600           # 0 disables staleness filtering
    request_timeout_seconds: float = 10.0


@dataclass(frozen=True)
class InstanceSettings:
    """EC2 instance parameters."""
    instance_id: str = ""
    hibernation_enabled: bool = False
    region: Optional[str] = None                     # None uses the boto3 default chain


@dataclass(frozen=True)
class SupervisorConfig:
    """Complete supervisor configuration."""
    check_interval_seconds: int = 15
    stop_timeout_seconds: int = 60
    terminate_on_planning_error: bool = True
    queue: QueueSettings = field(default_factory=QueueSettings)
    instance: InstanceSettings = field(default_factory=InstanceSettings)


def get_default_config() -> SupervisorConfig:
    """Get the default configuration instance."""
    return SupervisorConfig(
        queue=QueueSettings(),
        instance=InstanceSettings(),
    )
