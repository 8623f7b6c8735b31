"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import pytest

from channel_kit.messages.models import Message
from channel_kit.schema.channel_schema import ChannelSchema
from tests.fixtures.connectors import RecordingConnector, build_sms_schema


@pytest.fixture
def sms_schema() -> ChannelSchema:
    return build_sms_schema()


@pytest.fixture
def sms_settings() -> dict[str, object]:
    return {"AccountSid": "AC123", "AuthToken": "secret-token", "FromNumber": "+15550001111"}


@pytest.fixture
def sms_message() -> Message:
    return (
        Message(id="msg-1")
        .with_sender("phone", "+15550001111")
        .with_receiver("phone", "+15550002222")
        .with_text("Hello")
    )


@pytest.fixture
def connector(sms_schema: ChannelSchema, sms_settings: dict[str, object]) -> RecordingConnector:
    return RecordingConnector(sms_schema, sms_settings)
