"""channel-kit: provider-agnostic schemas, validation and connectors for messaging channels."""

from channel_kit.connectors import (
    ChannelConnector,
    ConnectorErrorCode,
    ConnectorRegistry,
    ConnectorResult,
    channel_schema,
)
from channel_kit.messages import Endpoint, Message, MessageContent, MessageSource
from channel_kit.schema import (
    ChannelEndpoint,
    ChannelParameter,
    ChannelSchema,
    ConnectionSettings,
    MessagePropertyRule,
    SchemaContractError,
)
from channel_kit.types import (
    AuthenticationType,
    ChannelCapability,
    ConnectorState,
    EndpointType,
    MessageContentType,
    MessageStatus,
    ParameterType,
)
from channel_kit.validation import ValidationFailure, validate_connection_settings, validate_message

__version__ = "0.1.0"

__all__ = [
    "AuthenticationType",
    "ChannelCapability",
    "ChannelConnector",
    "ChannelEndpoint",
    "ChannelParameter",
    "ChannelSchema",
    "ConnectionSettings",
    "ConnectorErrorCode",
    "ConnectorRegistry",
    "ConnectorResult",
    "ConnectorState",
    "Endpoint",
    "EndpointType",
    "Message",
    "MessageContent",
    "MessageContentType",
    "MessagePropertyRule",
    "MessageSource",
    "MessageStatus",
    "ParameterType",
    "SchemaContractError",
    "ValidationFailure",
    "channel_schema",
    "validate_connection_settings",
    "validate_message",
]
