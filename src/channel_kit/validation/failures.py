"""Validation failure values produced by the validation engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import override


class FailureCode(StrEnum):
    """Stable codes identifying the kind of validation failure."""

    REQUIRED = "REQUIRED"
    INVALID_TYPE = "INVALID_TYPE"
    NOT_ALLOWED = "NOT_ALLOWED"
    UNKNOWN = "UNKNOWN"
    AUTHENTICATION = "AUTHENTICATION"
    MISSING_ID = "MISSING_ID"
    ENDPOINT_NOT_SUPPORTED = "ENDPOINT_NOT_SUPPORTED"
    CONTENT_TYPE_NOT_SUPPORTED = "CONTENT_TYPE_NOT_SUPPORTED"
    INCOMPATIBLE_SCHEMA = "INCOMPATIBLE_SCHEMA"
    NOT_A_RESTRICTION = "NOT_A_RESTRICTION"


@dataclass(frozen=True, slots=True)
class ValidationFailure:
    """One problem found while validating settings, a message or a schema."""

    message: str
    member_names: tuple[str, ...] = ()
    code: FailureCode = FailureCode.INVALID_TYPE

    @override
    def __str__(self) -> str:
        """String representation of the failure."""
        if not self.member_names:
            return f"{self.message} ({self.code})"
        return f"{', '.join(self.member_names)}: {self.message} ({self.code})"


def summarize_failures(failures: tuple[ValidationFailure, ...] | list[ValidationFailure]) -> str:
    """Get a one-line summary of a collection of failures."""
    if not failures:
        return "No failures found"
    return f"Found {len(failures)} failure(s): " + "; ".join(str(failure) for failure in failures)
