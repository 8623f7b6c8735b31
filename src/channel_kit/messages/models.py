"""Message models consumed by schema validation and connectors."""

from __future__ import annotations

from typing import Self, override

from pydantic import BaseModel, ConfigDict, Field, field_validator

from channel_kit.types.enums import EndpointType, MessageContentType


class Endpoint(BaseModel):
    """Typed address a message is sent from or delivered to."""

    model_config = ConfigDict(frozen=True)

    type: EndpointType = Field(
        ...,
        description="Kind of address (phone number, email address, URL, ...)",
    )

    address: str = Field(
        ...,
        description="The address value in the provider's format",
        min_length=1,
    )

    @field_validator("type", mode="before")
    @classmethod
    def _parse_type(cls, value: object) -> object:
        if isinstance(value, str):
            return EndpointType.parse(value)
        return value

    @classmethod
    def of(cls, endpoint_type: EndpointType | str, address: str) -> Endpoint:
        """Create an endpoint from a type (or alias) and an address."""
        return cls(type=EndpointType.parse(endpoint_type), address=address)

    @classmethod
    def email(cls, address: str) -> Endpoint:
        return cls.of(EndpointType.EMAIL_ADDRESS, address)

    @classmethod
    def phone(cls, number: str) -> Endpoint:
        return cls.of(EndpointType.PHONE_NUMBER, number)

    @classmethod
    def url(cls, url: str) -> Endpoint:
        return cls.of(EndpointType.URL, url)

    @override
    def __str__(self) -> str:
        return f"{self.type.alias}:{self.address}"


class MessageContent(BaseModel):
    """Message body tagged with its content type.

    The body is carried as-is; nothing in this package interprets it.
    """

    model_config = ConfigDict(frozen=True)

    content_type: MessageContentType = Field(
        ...,
        description="Content-type tag of the body",
    )

    body: str | bytes | dict[str, object] | list[object] | None = Field(
        default=None,
        description="Opaque message body",
    )

    @classmethod
    def text(cls, body: str) -> MessageContent:
        return cls(content_type=MessageContentType.PLAIN_TEXT, body=body)

    @classmethod
    def html(cls, body: str) -> MessageContent:
        return cls(content_type=MessageContentType.HTML, body=body)


class MessageProperty(BaseModel):
    """Named value attached to a message."""

    name: str = Field(..., min_length=1)
    value: str | bool | int | float | None = None
    sensitive: bool = Field(
        default=False,
        description="Whether the value must be redacted in logs",
    )


class Message(BaseModel):
    """Outgoing or incoming message as seen by the validation layer."""

    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(
        default="",
        description="Message identifier; validation rejects an empty id",
    )

    sender: Endpoint | None = None
    receiver: Endpoint | None = None
    content: MessageContent | None = None

    properties: dict[str, MessageProperty] = Field(
        default_factory=dict,
        description="Message properties keyed by name",
    )

    def with_sender(self, endpoint_type: EndpointType | str, address: str) -> Self:
        """Set the sender endpoint and return the message."""
        self.sender = Endpoint.of(endpoint_type, address)
        return self

    def with_receiver(self, endpoint_type: EndpointType | str, address: str) -> Self:
        """Set the receiver endpoint and return the message."""
        self.receiver = Endpoint.of(endpoint_type, address)
        return self

    def with_content(self, content_type: MessageContentType, body: str | bytes | dict[str, object] | None) -> Self:
        """Set the content and return the message."""
        self.content = MessageContent(content_type=content_type, body=body)
        return self

    def with_text(self, body: str) -> Self:
        return self.with_content(MessageContentType.PLAIN_TEXT, body)

    def with_property(
        self,
        name: str,
        value: str | bool | int | float | None,
        *,
        sensitive: bool = False,
    ) -> Self:
        """Add or replace a property and return the message."""
        self.properties[name] = MessageProperty(name=name, value=value, sensitive=sensitive)
        return self

    def property_values(self) -> dict[str, object]:
        """Map property names to their raw values."""
        return {name: prop.value for name, prop in self.properties.items()}

    @override
    def __str__(self) -> str:
        content_type = self.content.content_type if self.content else None
        return f"Message(id='{self.id}', receiver='{self.receiver}', content_type='{content_type}')"
