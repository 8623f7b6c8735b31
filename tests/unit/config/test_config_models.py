"""Tests for configuration models and errors."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from channel_kit.config import (
    ChannelKitConfig,
    ConfigError,
    ConfigValidationError,
    ConnectorOptions,
    LoggingConfig,
    handle_config_error,
)


class TestConnectorOptions:
    """Test cases for ConnectorOptions."""

    def test_defaults(self) -> None:
        """Test default option values."""
        options = ConnectorOptions()
        assert options.operation_timeout is None
        assert options.redact_sensitive is True

    @pytest.mark.parametrize("timeout", [0, -1.0, 3601])
    def test_timeout_bounds(self, timeout: float) -> None:
        """Test that timeouts must be positive and at most an hour."""
        with pytest.raises(ValidationError):
            _ = ConnectorOptions(operation_timeout=timeout)

    def test_extra_fields_forbidden(self) -> None:
        """Test that unknown options are rejected."""
        with pytest.raises(ValidationError):
            _ = ConnectorOptions.model_validate({"retries": 3})

    def test_assignment_is_validated(self) -> None:
        """Test validation on assignment."""
        options = ConnectorOptions()
        with pytest.raises(ValidationError):
            options.operation_timeout = -5


class TestLoggingConfig:
    """Test cases for LoggingConfig."""

    def test_level_literal(self) -> None:
        """Test that only standard level names are accepted."""
        assert LoggingConfig(level="DEBUG").level == "DEBUG"
        with pytest.raises(ValidationError):
            _ = LoggingConfig.model_validate({"level": "VERBOSE"})

    def test_nested_defaults(self) -> None:
        """Test the top-level model defaults."""
        config = ChannelKitConfig()
        assert config.logging.enable_console
        assert "%(correlation_id)s" in config.logging.format


class TestHandleConfigError:
    """Test cases for error wrapping."""

    def test_config_error_passthrough(self) -> None:
        """Test that configuration errors are returned unchanged."""
        error = ConfigError("bad")
        assert handle_config_error(error, "loading") is error

    def test_validation_error_wrapped(self) -> None:
        """Test wrapping pydantic errors."""
        try:
            _ = ConnectorOptions.model_validate({"operation_timeout": "soon"})
        except ValidationError as exc:
            wrapped = handle_config_error(exc, "validation")
        else:
            pytest.fail("ValidationError not raised")
        assert isinstance(wrapped, ConfigValidationError)
        assert wrapped.__cause__ is not None

    def test_other_error_wrapped(self) -> None:
        """Test wrapping arbitrary exceptions."""
        wrapped = handle_config_error(RuntimeError("disk full"), "loading")
        assert type(wrapped) is ConfigError
        assert wrapped.context["original_error_type"] == "RuntimeError"
        assert "disk full" in str(wrapped)
