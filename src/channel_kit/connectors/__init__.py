"""Connector base class, lifecycle, results and registry."""

from channel_kit.connectors.base import ChannelConnector, ConnectorDisposedError
from channel_kit.connectors.error_codes import ConnectorErrorCode
from channel_kit.connectors.registry import (
    ConnectorDescriptor,
    ConnectorRegistry,
    RegistryError,
    channel_schema,
    get_declared_schema,
)
from channel_kit.connectors.results import (
    BatchSendResult,
    ConnectorError,
    ConnectorHealth,
    ConnectorResult,
    ReceiveResult,
    SendResult,
    StatusInfo,
    StatusUpdateResult,
    StatusUpdatesResult,
)
from channel_kit.connectors.state_machine import (
    CONNECTOR_TRANSITIONS,
    ConnectorStateMachine,
    StateChange,
    StateTransitionError,
)

__all__ = [
    # Base
    "ChannelConnector",
    "ConnectorDisposedError",
    # Results
    "BatchSendResult",
    "ConnectorError",
    "ConnectorErrorCode",
    "ConnectorHealth",
    "ConnectorResult",
    "ReceiveResult",
    "SendResult",
    "StatusInfo",
    "StatusUpdateResult",
    "StatusUpdatesResult",
    # State machine
    "CONNECTOR_TRANSITIONS",
    "ConnectorStateMachine",
    "StateChange",
    "StateTransitionError",
    # Registry
    "ConnectorDescriptor",
    "ConnectorRegistry",
    "RegistryError",
    "channel_schema",
    "get_declared_schema",
]
