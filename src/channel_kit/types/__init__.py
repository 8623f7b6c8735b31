"""Type definitions for channel-kit.

This package provides:
- Closed enumerations (capabilities, endpoint types, parameter types, ...)
- Type aliases (PEP 695 syntax)
"""

from channel_kit.types.aliases import SettingsMapping
from channel_kit.types.enums import (
    AuthenticationType,
    ChannelCapability,
    ConnectorState,
    EndpointType,
    MessageContentType,
    MessageStatus,
    ParameterType,
)

__all__ = [
    # Enumerations
    "AuthenticationType",
    "ChannelCapability",
    "ConnectorState",
    "EndpointType",
    "MessageContentType",
    "MessageStatus",
    "ParameterType",
    # Type aliases
    "SettingsMapping",
]
