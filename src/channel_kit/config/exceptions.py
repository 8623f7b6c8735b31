"""Error types for the configuration system."""

from __future__ import annotations

import logging

from pydantic import ValidationError

logger = logging.getLogger(__name__)


def _with_detail(context: dict[str, object] | None, key: str, value: object) -> dict[str, object]:
    merged = dict(context or {})
    if value is not None:
        merged[key] = value
    return merged


def _summarize(error: ValidationError) -> list[dict[str, object]]:
    """Flatten pydantic errors into ``field``/``message``/``type`` entries."""
    return [
        {"field": ".".join(map(str, item["loc"])), "message": item["msg"], "type": item["type"]}
        for item in error.errors()
    ]


class ConfigError(Exception):
    """Base exception for all configuration-related errors."""

    def __init__(self, message: str, context: dict[str, object] | None = None) -> None:
        """Initialize ConfigError.

        Args:
            message: Error message
            context: Additional context information for debugging
        """
        super().__init__(message)
        self.context: dict[str, object] = context or {}


class ConfigLoadError(ConfigError):
    """Exception raised when a configuration file cannot be read or parsed."""

    def __init__(self, message: str, file_path: str | None = None, context: dict[str, object] | None = None) -> None:
        super().__init__(message, _with_detail(context, "file_path", file_path))
        self.file_path: str | None = file_path


class EnvLoadError(ConfigError):
    """Exception raised when an environment variable cannot be converted."""

    def __init__(self, message: str, env_var: str | None = None, context: dict[str, object] | None = None) -> None:
        super().__init__(message, _with_detail(context, "env_var", env_var))
        self.env_var: str | None = env_var


class ConfigValidationError(ConfigError):
    """Exception raised when merged configuration fails model validation."""

    def __init__(
        self,
        message: str,
        pydantic_error: ValidationError | None = None,
        context: dict[str, object] | None = None,
    ) -> None:
        """Initialize ConfigValidationError.

        Args:
            message: Error message
            pydantic_error: Original Pydantic ValidationError
            context: Additional context information
        """
        details = None if pydantic_error is None else _summarize(pydantic_error)
        super().__init__(message, _with_detail(context, "validation_errors", details))
        self.pydantic_error: ValidationError | None = pydantic_error


def handle_config_error(error: Exception, operation: str) -> ConfigError:
    """Wrap an exception raised while loading configuration.

    Args:
        error: Original exception
        operation: Description of the operation that failed

    Returns:
        The error itself when already a ConfigError, otherwise a wrapper
    """
    logger.debug("Configuration error during %s: %s", operation, error, exc_info=True)

    if isinstance(error, ConfigError):
        return error

    if isinstance(error, ValidationError):
        wrapped: ConfigError = ConfigValidationError(
            f"Configuration validation failed during {operation}",
            pydantic_error=error,
        )
    else:
        wrapped = ConfigError(
            f"Configuration error during {operation}: {error}",
            context={"operation": operation, "original_error_type": type(error).__name__},
        )
    wrapped.__cause__ = error
    return wrapped
