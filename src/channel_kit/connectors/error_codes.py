"""Stable error codes reported by connector operations."""

from __future__ import annotations

from enum import StrEnum


class ConnectorErrorCode(StrEnum):
    """Codes carried by failed ``ConnectorResult`` values."""

    NOT_INITIALIZED = "NOT_INITIALIZED"
    ALREADY_INITIALIZED = "ALREADY_INITIALIZED"
    INITIALIZATION_ERROR = "INITIALIZATION_ERROR"
    NOT_SUPPORTED = "NOT_SUPPORTED"
    VALIDATION_FAILED = "VALIDATION_FAILED"
    PROVIDER_ERROR = "PROVIDER_ERROR"
    TIMEOUT = "TIMEOUT"
    CANCELLED = "CANCELLED"
