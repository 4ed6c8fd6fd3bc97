"""Configuration loading, schema, and defaults."""

from gitstate.config.loader import ConfigError, load_config
from gitstate.config.schema import GitStateConfig

__all__ = [
    "ConfigError",
    "GitStateConfig",
    "load_config",
]
