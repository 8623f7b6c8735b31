"""Tests for message models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from channel_kit.messages.models import Endpoint, Message, MessageContent
from channel_kit.schema.exceptions import UnknownEndpointTypeError
from channel_kit.types.enums import EndpointType, MessageContentType


class TestEndpoint:
    """Test cases for Endpoint."""

    def test_factories(self) -> None:
        """Test the typed endpoint factories."""
        assert Endpoint.email("a@example.com").type is EndpointType.EMAIL_ADDRESS
        assert Endpoint.phone("+1555").type is EndpointType.PHONE_NUMBER
        assert Endpoint.url("https://example.com").type is EndpointType.URL

    def test_alias_parsing(self) -> None:
        """Test that string types accept aliases."""
        endpoint = Endpoint.model_validate({"type": "app-id", "address": "app-1"})
        assert endpoint.type is EndpointType.APPLICATION_ID
        assert str(endpoint) == "app-id:app-1"

    def test_unknown_alias(self) -> None:
        """Test that unknown aliases are rejected."""
        with pytest.raises(UnknownEndpointTypeError):
            _ = Endpoint.of("fax", "123")

    def test_empty_address_rejected(self) -> None:
        """Test that the address is mandatory."""
        with pytest.raises(ValidationError):
            _ = Endpoint.phone("")

    def test_frozen(self) -> None:
        """Test that endpoints are immutable."""
        endpoint = Endpoint.phone("+1555")
        with pytest.raises(ValidationError):
            endpoint.address = "+1666"  # pyright: ignore[reportAttributeAccessIssue]


class TestMessage:
    """Test cases for Message."""

    def test_builder(self) -> None:
        """Test the fluent builder methods."""
        message = (
            Message(id="m1")
            .with_sender("email", "from@example.com")
            .with_receiver(EndpointType.EMAIL_ADDRESS, "to@example.com")
            .with_content(MessageContentType.HTML, "<p>Hi</p>")
            .with_property("Subject", "Greetings")
            .with_property("ApiSignature", "abc", sensitive=True)
        )
        assert message.sender == Endpoint.email("from@example.com")
        assert message.content == MessageContent.html("<p>Hi</p>")
        assert message.property_values() == {"Subject": "Greetings", "ApiSignature": "abc"}
        assert message.properties["ApiSignature"].sensitive

    def test_defaults(self) -> None:
        """Test the default empty message."""
        message = Message()
        assert message.id == ""
        assert message.sender is None
        assert message.receiver is None
        assert message.content is None
        assert message.properties == {}

    def test_property_replaced(self) -> None:
        """Test that setting a property twice keeps the last value."""
        message = Message(id="m1").with_property("Ttl", 10).with_property("Ttl", 20)
        assert message.property_values() == {"Ttl": 20}

    def test_str(self) -> None:
        """Test the compact rendering."""
        message = Message(id="m1").with_receiver("phone", "+1555").with_text("hello")
        assert str(message) == "Message(id='m1', receiver='phone:+1555', content_type='PlainText')"

    def test_json_round_trip(self) -> None:
        """Test serialization through pydantic."""
        message = Message(id="m1").with_sender("phone", "+1").with_text("hello").with_property("Ttl", 5)
        restored = Message.model_validate_json(message.model_dump_json())
        assert restored == message
