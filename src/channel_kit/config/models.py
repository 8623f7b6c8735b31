"""Configuration models."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from channel_kit.utils.logging import DEFAULT_LOG_FORMAT


class BaseConfig(BaseModel):
    """Base configuration model with common settings."""

    model_config: ConfigDict = ConfigDict(  # pyright: ignore[reportIncompatibleVariableOverride]
        extra="forbid",
        validate_assignment=True,
        str_strip_whitespace=True,
        validate_default=True,
        frozen=False,
    )


class ConnectorOptions(BaseConfig):
    """Runtime options applied by every channel connector."""

    operation_timeout: float | None = Field(
        default=None,
        gt=0.0,
        le=3600.0,
        description="Seconds allowed for each provider call; None disables the timeout",
    )
    redact_sensitive: bool = Field(
        default=True,
        description="Mask sensitive settings and message properties in log output",
    )


class LoggingConfig(BaseConfig):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Log level",
    )
    format: str = Field(
        default=DEFAULT_LOG_FORMAT,
        min_length=1,
        description="Format string for log records",
    )
    enable_console: bool = Field(
        default=True,
        description="Write log records to stdout",
    )


class ChannelKitConfig(BaseConfig):
    """Top-level configuration."""

    connector: ConnectorOptions = Field(
        default_factory=ConnectorOptions,
        description="Connector runtime options",
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig,
        description="Logging configuration",
    )
