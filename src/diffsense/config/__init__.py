"""Configuration loading, schema, and defaults."""

from diffsense.config.loader import ConfigError, load_config
from diffsense.config.schema import DiffSenseConfig

__all__ = [
    "ConfigError",
    "DiffSenseConfig",
    "load_config",
]
