"""YAML configuration loader."""

from __future__ import annotations

from pathlib import Path

import yaml

from ..exceptions import ConfigLoadError


class YamlLoader:
    """Loader for YAML configuration files."""

    def load(self, path: Path) -> dict[str, object]:
        """Load configuration from a YAML file.

        Args:
            path: Path to the YAML configuration file

        Returns:
            Parsed configuration; empty for an empty document

        Raises:
            ConfigLoadError: If the file cannot be read, cannot be parsed or
                does not hold a mapping
        """
        try:
            with open(path, encoding="utf-8") as f:
                content: object = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            raise ConfigLoadError(f"Failed to load {path}: {e}", str(path)) from e

        if content is None:
            return {}
        if not isinstance(content, dict):
            raise ConfigLoadError(
                f"Expected a mapping at the top of {path}, got {type(content).__name__}",
                str(path),
            )
        return {str(key): value for key, value in content.items()}  # pyright: ignore[reportUnknownVariableType]
