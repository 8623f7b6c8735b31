"""Environment variable configuration loader."""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from typing import cast

from ..exceptions import EnvLoadError


class EnvLoader:
    """Environment variable loader with nesting and type conversion.

    ``CHANNEL_KIT_CONNECTOR__OPERATION_TIMEOUT=5`` becomes
    ``{"connector": {"operation_timeout": 5}}``: the prefix is stripped, the
    remainder is lowercased and ``__`` separates nesting levels.
    """

    def __init__(
        self,
        prefix: str = "CHANNEL_KIT_",
        *,
        convert_types: bool = True,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        """Initialize EnvLoader.

        Args:
            prefix: Prefix for environment variables to load
            convert_types: Whether to convert booleans, numbers and JSON
            environ: Variables to read; ``os.environ`` when None
        """
        self.prefix: str = prefix
        self.convert_types: bool = convert_types
        self._environ: Mapping[str, str] | None = environ

    def load(self) -> dict[str, object]:
        """Load configuration from environment variables.

        Returns:
            Nested dictionary of the prefixed variables

        Raises:
            EnvLoadError: If a JSON value cannot be parsed
        """
        environ = self._environ if self._environ is not None else os.environ
        config: dict[str, object] = {}

        for env_var, raw_value in environ.items():
            if not env_var.startswith(self.prefix):
                continue
            config_key = env_var[len(self.prefix) :]
            if not config_key:
                continue

            value: object = self._convert_value(raw_value, env_var) if self.convert_types else raw_value
            self._set_nested_value(config, config_key.lower().split("__"), value)

        return config

    def _convert_value(self, value: str, env_var: str) -> object:
        if not value:
            return value

        lower_value = value.strip().lower()
        if lower_value in ("true", "yes", "on"):
            return True
        if lower_value in ("false", "no", "off"):
            return False

        numeric_value = self._try_numeric_conversion(value)
        if numeric_value is not None:
            return numeric_value

        if value.startswith(("[", "{")):
            try:
                return cast(object, json.loads(value))
            except json.JSONDecodeError as e:
                raise EnvLoadError(f"Failed to parse JSON for {env_var}: {e}", env_var) from e

        return value

    def _try_numeric_conversion(self, value: str) -> int | float | None:
        try:
            if "." not in value and "e" not in value.lower():
                return int(value)
            return float(value)
        except ValueError:
            return None

    def _set_nested_value(self, config: dict[str, object], keys: list[str], value: object) -> None:
        current: dict[str, object] = config
        for key in keys[:-1]:
            child = current.get(key)
            if not isinstance(child, dict):
                child = {}
                current[key] = child
            current = cast(dict[str, object], child)
        current[keys[-1]] = value
