"""Configuration loading for the player bot reset module."""

from bot_reset.config.config_source import (
    ConfigSource,
    ConfigValueError,
    MappingConfigSource,
    coerce_value,
)
from bot_reset.config.policy_config import (
    PolicyConfig,
    ConfigLoadResult,
    load_policy_config,
)

__all__ = [
    "ConfigSource",
    "ConfigValueError",
    "MappingConfigSource",
    "coerce_value",
    "PolicyConfig",
    "ConfigLoadResult",
    "load_policy_config",
]
