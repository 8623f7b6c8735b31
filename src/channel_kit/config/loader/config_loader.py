"""Configuration loading: YAML file, environment overrides, model validation."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import cast

from pydantic import ValidationError

from ..exceptions import ConfigValidationError
from ..models import ChannelKitConfig
from .env_loader import EnvLoader
from .yaml_loader import YamlLoader

logger = logging.getLogger(__name__)


def merge_configs(base: Mapping[str, object], override: Mapping[str, object]) -> dict[str, object]:
    """Recursively merge ``override`` into a copy of ``base``.

    Nested mappings are merged key by key; any other override value replaces
    the base value.
    """
    merged: dict[str, object] = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, Mapping) and isinstance(value, Mapping):
            merged[key] = merge_configs(cast(Mapping[str, object], current), cast(Mapping[str, object], value))
        else:
            merged[key] = value
    return merged


def load_config(
    path: Path | str | None = None,
    *,
    env_prefix: str = "CHANNEL_KIT_",
    environ: Mapping[str, str] | None = None,
) -> ChannelKitConfig:
    """Load and validate configuration.

    Environment variables take precedence over the YAML file.

    Args:
        path: Optional YAML file
        env_prefix: Prefix of the environment variables to overlay
        environ: Variables to read instead of ``os.environ``

    Returns:
        Validated configuration

    Raises:
        ConfigLoadError: If the YAML file cannot be loaded
        EnvLoadError: If an environment value cannot be converted
        ConfigValidationError: If the merged configuration is invalid
    """
    file_config: dict[str, object] = {}
    if path is not None:
        file_config = YamlLoader().load(Path(path))
        logger.debug("Loaded configuration file %s", path)

    env_config = EnvLoader(env_prefix, environ=environ).load()
    merged = merge_configs(file_config, env_config)

    try:
        return ChannelKitConfig.model_validate(merged)
    except ValidationError as e:
        raise ConfigValidationError(
            f"Invalid configuration ({e.error_count()} error(s))",
            pydantic_error=e,
            context={"file_path": str(path)} if path is not None else None,
        ) from e
