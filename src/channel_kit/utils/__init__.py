"""Shared utilities: logging setup and secret sanitization."""

from channel_kit.utils.logging import (
    CorrelationIDFilter,
    SecretRedactingFilter,
    clear_correlation_id,
    configure_logging,
    correlation_id_context,
    get_correlation_id,
    set_correlation_id,
)
from channel_kit.utils.sanitization import (
    REDACTED,
    is_sensitive_field,
    redact_message_properties,
    redact_settings,
    sanitize_exception,
    sanitize_url,
    sanitize_value,
)

__all__ = [
    # Logging
    "CorrelationIDFilter",
    "SecretRedactingFilter",
    "clear_correlation_id",
    "configure_logging",
    "correlation_id_context",
    "get_correlation_id",
    "set_correlation_id",
    # Sanitization
    "REDACTED",
    "is_sensitive_field",
    "redact_message_properties",
    "redact_settings",
    "sanitize_exception",
    "sanitize_url",
    "sanitize_value",
]
