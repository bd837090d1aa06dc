"""Configuration loading (YAML + JSON schema) and environment credentials."""

from .loader import (
    DEFAULT_CONFIG_PATH,
    ConfigError,
    load_config,
    load_credentials,
    load_env_file,
)

__all__ = [
    "DEFAULT_CONFIG_PATH",
    "ConfigError",
    "load_config",
    "load_credentials",
    "load_env_file",
]
