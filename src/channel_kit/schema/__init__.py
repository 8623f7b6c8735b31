"""Channel schema model, builder, derivation and connection settings."""

from channel_kit.schema.channel_schema import ChannelSchema
from channel_kit.schema.compatibility import is_compatible, logical_identity, validate_as_restriction_of
from channel_kit.schema.descriptors import (
    ChannelEndpoint,
    ChannelParameter,
    MessagePropertyRule,
    ValueDescriptor,
)
from channel_kit.schema.exceptions import (
    DeclarationNotFoundError,
    DuplicateDeclarationError,
    EndpointConflictError,
    SchemaContractError,
    UnknownEndpointTypeError,
)
from channel_kit.schema.settings import ConnectionSettings

__all__ = [
    # Schema
    "ChannelSchema",
    "ConnectionSettings",
    # Descriptors
    "ChannelEndpoint",
    "ChannelParameter",
    "MessagePropertyRule",
    "ValueDescriptor",
    # Compatibility
    "is_compatible",
    "logical_identity",
    "validate_as_restriction_of",
    # Exceptions
    "DeclarationNotFoundError",
    "DuplicateDeclarationError",
    "EndpointConflictError",
    "SchemaContractError",
    "UnknownEndpointTypeError",
]
