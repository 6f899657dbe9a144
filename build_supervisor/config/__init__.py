"""
Configuration module.

Supervisor settings with 3-tier precedence: built-in defaults, an optional
YAML file and environment variables. Settings are read once at start-up and
are immutable afterwards.
"""

from .defaults import InstanceSettings, QueueSettings, SupervisorConfig
from .loader import ConfigLoader, load_config

__all__ = [
    "InstanceSettings",
    "QueueSettings",
    "SupervisorConfig",
    "ConfigLoader",
    "load_config",
]
