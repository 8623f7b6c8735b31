"""Validation engine for connection settings and messages.

Validators never raise for invalid data: they yield ``ValidationFailure``
values lazily, in a deterministic order.
"""

from channel_kit.validation.authentication import (
    AUTHENTICATION_REQUIREMENTS,
    AuthenticationRequirement,
    authentication_parameter_names,
    check_authentication,
    get_requirement,
)
from channel_kit.validation.failures import FailureCode, ValidationFailure, summarize_failures
from channel_kit.validation.message_validator import validate_message
from channel_kit.validation.settings_validator import validate_connection_settings
from channel_kit.validation.type_checks import is_allowed_value, is_type_compatible

__all__ = [
    "AUTHENTICATION_REQUIREMENTS",
    "AuthenticationRequirement",
    "FailureCode",
    "ValidationFailure",
    "authentication_parameter_names",
    "check_authentication",
    "get_requirement",
    "is_allowed_value",
    "is_type_compatible",
    "summarize_failures",
    "validate_connection_settings",
    "validate_message",
]
