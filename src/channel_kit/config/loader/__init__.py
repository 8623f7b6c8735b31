"""Configuration loader module for YAML and environment variable loading."""

from __future__ import annotations

from .config_loader import load_config, merge_configs
from .env_loader import EnvLoader
from .yaml_loader import YamlLoader

__all__ = [
    "EnvLoader",
    "YamlLoader",
    "load_config",
    "merge_configs",
]
