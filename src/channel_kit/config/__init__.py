"""Configuration models, loaders and errors."""

from __future__ import annotations

from .exceptions import (
    ConfigError,
    ConfigLoadError,
    ConfigValidationError,
    EnvLoadError,
    handle_config_error,
)
from .loader import EnvLoader, YamlLoader, load_config, merge_configs
from .models import BaseConfig, ChannelKitConfig, ConnectorOptions, LoggingConfig

__all__ = [
    # Models
    "BaseConfig",
    "ChannelKitConfig",
    "ConnectorOptions",
    "LoggingConfig",
    # Loading
    "EnvLoader",
    "YamlLoader",
    "load_config",
    "merge_configs",
    # Exception classes
    "ConfigError",
    "ConfigLoadError",
    "ConfigValidationError",
    "EnvLoadError",
    "handle_config_error",
]
