"""Build-time contract violations raised while constructing schemas."""

from __future__ import annotations


class SchemaContractError(ValueError):
    """Raised when a schema is built with conflicting or invalid declarations.

    These errors describe programming mistakes in schema construction
    (duplicate names, conflicting endpoint rules, unknown aliases). They are
    never produced by validating runtime data.
    """

    def __init__(self, message: str, *, member: str | None = None) -> None:
        """Initialize SchemaContractError.

        Args:
            message: Error message
            member: Name of the descriptor or collection involved, if any
        """
        super().__init__(message)
        self.member: str | None = member


class DuplicateDeclarationError(SchemaContractError):
    """Raised when an ``add`` operation would overwrite an existing declaration."""


class EndpointConflictError(SchemaContractError):
    """Raised when a wildcard endpoint rule is mixed with specific rules."""


class UnknownEndpointTypeError(SchemaContractError):
    """Raised when an endpoint-type alias cannot be resolved."""

    def __init__(self, alias: object) -> None:
        """Initialize UnknownEndpointTypeError.

        Args:
            alias: The unrecognized alias value
        """
        super().__init__(f"Unknown endpoint type {alias!r}", member="endpoint_type")
        self.alias: object = alias


class DeclarationNotFoundError(SchemaContractError):
    """Raised when an ``update`` operation targets a missing declaration."""
