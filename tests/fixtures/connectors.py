"""In-memory connectors and schemas for connector testing."""

from __future__ import annotations

import asyncio
from collections.abc import Mapping, Sequence
from typing import override

from channel_kit.config.models import ConnectorOptions
from channel_kit.connectors.base import ChannelConnector
from channel_kit.connectors.results import (
    BatchSendResult,
    ConnectorResult,
    ReceiveResult,
    SendResult,
    StatusUpdateResult,
    StatusUpdatesResult,
)
from channel_kit.messages.models import Message
from channel_kit.messages.source import MessageSource
from channel_kit.schema.channel_schema import ChannelSchema
from channel_kit.types.enums import (
    AuthenticationType,
    ChannelCapability,
    EndpointType,
    MessageContentType,
    MessageStatus,
    ParameterType,
)


def build_sms_schema() -> ChannelSchema:
    """Twilio-like SMS schema used across the test suite."""
    return (
        ChannelSchema("Twilio", "SMS", "1.0.0", display_name="Twilio SMS")
        .with_capabilities(
            ChannelCapability.SEND_MESSAGES
            | ChannelCapability.RECEIVE_MESSAGES
            | ChannelCapability.MESSAGE_STATUS_QUERY
            | ChannelCapability.HEALTH_CHECK
        )
        .add_required_parameter("AccountSid", ParameterType.STRING)
        .add_required_parameter("AuthToken", ParameterType.STRING, sensitive=True)
        .add_parameter("FromNumber", ParameterType.STRING)
        .add_parameter("MaxPrice", ParameterType.NUMBER)
        .add_parameter("Region", ParameterType.STRING, allowed_values=("us1", "ie1"), default="us1")
        .add_authentication_type(AuthenticationType.BASIC)
        .handles_message_endpoint(EndpointType.PHONE_NUMBER)
        .add_content_type(MessageContentType.PLAIN_TEXT)
        .add_message_property("ValidityPeriod", ParameterType.INTEGER)
        .add_message_property("StatusCallback", ParameterType.STRING)
    )


class RecordingConnector(ChannelConnector):
    """Connector recording every provider hook call.

    Behaviour is steered through public attributes: ``init_error`` and
    ``send_error`` are raised by the matching hooks, ``init_result`` is
    returned by the initialize hook and ``send_delay`` slows sends down.
    """

    def __init__(
        self,
        schema: ChannelSchema,
        settings: Mapping[str, object] | None = None,
        *,
        options: ConnectorOptions | None = None,
    ) -> None:
        super().__init__(schema, settings, options=options)
        self.calls: list[str] = []
        self.sent: list[Message] = []
        self.init_error: BaseException | None = None
        self.init_result: ConnectorResult[bool] | None = None
        self.send_error: BaseException | None = None
        self.send_delay: float = 0.0
        self.dispose_error: BaseException | None = None

    @override
    async def _initialize_core(self) -> ConnectorResult[bool] | None:
        self.calls.append("initialize")
        if self.init_error is not None:
            raise self.init_error
        return self.init_result

    @override
    async def _test_connection_core(self) -> bool:
        self.calls.append("test_connection")
        return True

    @override
    async def _send_message_core(self, message: Message) -> SendResult:
        self.calls.append("send_message")
        if self.send_delay:
            await asyncio.sleep(self.send_delay)
        if self.send_error is not None:
            raise self.send_error
        self.sent.append(message)
        return SendResult(message.id, f"remote-{message.id}", status=MessageStatus.QUEUED)

    @override
    async def _get_message_status_core(self, message_id: str) -> StatusUpdatesResult:
        self.calls.append("get_message_status")
        return StatusUpdatesResult(message_id, [StatusUpdateResult(MessageStatus.DELIVERED)])

    @override
    async def _receive_messages_core(self, source: MessageSource) -> ReceiveResult:
        self.calls.append("receive_messages")
        form = source.as_url_post_data()
        message = (
            Message(id=form["MessageSid"])
            .with_sender(EndpointType.PHONE_NUMBER, form["From"])
            .with_receiver(EndpointType.PHONE_NUMBER, form["To"])
            .with_text(form["Body"])
        )
        return ReceiveResult(batch_id=form["MessageSid"], messages=[message])

    @override
    async def _disconnect_core(self) -> None:
        self.calls.append("disconnect")

    @override
    async def _dispose_core(self) -> None:
        self.calls.append("dispose")
        if self.dispose_error is not None:
            raise self.dispose_error


class BatchingConnector(RecordingConnector):
    """Recording connector with a native batch hook."""

    def __init__(
        self,
        schema: ChannelSchema,
        settings: Mapping[str, object] | None = None,
        *,
        options: ConnectorOptions | None = None,
    ) -> None:
        super().__init__(schema, settings, options=options)
        self.batches: list[list[str]] = []

    @override
    async def _send_batch_core(self, messages: Sequence[Message], batch_id: str) -> BatchSendResult:
        self.calls.append("send_batch")
        self.batches.append([message.id for message in messages])
        batch = BatchSendResult(batch_id, remote_batch_id=f"remote-{batch_id}")
        for message in messages:
            batch.message_results[message.id] = ConnectorResult.success(SendResult(message.id, f"remote-{message.id}"))
        return batch
