"""Closed enumerations shared by schemas, validators and connectors.

Every enumeration here is a closed set: schemas, messages and connectors only
ever reference these members. String-valued enums render their canonical
display name through ``str()``, which is what validation messages show.
"""

from __future__ import annotations

from enum import Enum, Flag, StrEnum, auto
from typing import Final, override


class ChannelCapability(Flag):
    """Operation classes a channel can support, combined as bit flags."""

    NONE = 0
    SEND_MESSAGES = auto()
    RECEIVE_MESSAGES = auto()
    MESSAGE_STATUS_QUERY = auto()
    HANDLER_MESSAGE_STATE = auto()
    MEDIA_ATTACHMENTS = auto()
    TEMPLATES = auto()
    BULK_MESSAGING = auto()
    HEALTH_CHECK = auto()

    def includes(self, other: ChannelCapability) -> bool:
        """Return True if every flag of ``other`` is set on this value."""
        return (self & other) == other

    def is_subset_of(self, other: ChannelCapability) -> bool:
        """Return True if no flag of this value is missing from ``other``."""
        return (self & other) == self

    def describe(self) -> str:
        """Return the flag names joined with ``|`` (``NONE`` when empty)."""
        return "|".join(member.name or "" for member in self) or "NONE"


class ParameterType(StrEnum):
    """Primitive types a parameter or message property may declare."""

    BOOLEAN = "Boolean"
    INTEGER = "Integer"
    NUMBER = "Number"
    STRING = "String"


class AuthenticationType(StrEnum):
    """Authentication methods a schema may accept."""

    NONE = "None"
    API_KEY = "ApiKey"
    BASIC = "Basic"
    TOKEN = "Token"
    CLIENT_CREDENTIALS = "ClientCredentials"
    CERTIFICATE = "Certificate"
    CUSTOM = "Custom"


class MessageContentType(StrEnum):
    """Content-type tags carried by message content."""

    PLAIN_TEXT = "PlainText"
    HTML = "Html"
    MULTIPART = "Multipart"
    TEMPLATE = "Template"
    MEDIA = "Media"
    JSON = "Json"
    BINARY = "Binary"


class MessageStatus(StrEnum):
    """Delivery status of a message as reported by a provider."""

    UNKNOWN = "unknown"
    RECEIVED = "received"
    QUEUED = "queued"
    ROUTED = "routed"
    ROUTE_FAILED = "routeFailed"
    SENT = "sent"
    DELIVERED = "delivered"
    DELIVERY_FAILED = "deliveryFailed"
    READ = "read"
    DELETED = "deleted"


class ConnectorState(Enum):
    """Lifecycle states of a channel connector."""

    UNINITIALIZED = auto()
    INITIALIZING = auto()
    CONNECTED = auto()
    ERROR = auto()
    DISCONNECTED = auto()
    DISPOSED = auto()

    @override
    def __str__(self) -> str:
        return self.name


class EndpointType(StrEnum):
    """Address kinds a message endpoint may carry."""

    PHONE_NUMBER = "PhoneNumber"
    EMAIL_ADDRESS = "EmailAddress"
    URL = "Url"
    TOPIC = "Topic"
    ID = "Id"
    USER_ID = "UserId"
    APPLICATION_ID = "ApplicationId"
    DEVICE_ID = "DeviceId"
    LABEL = "Label"
    ANY = "Any"

    @property
    def is_wildcard(self) -> bool:
        """True for the wildcard type that matches every endpoint."""
        return self is EndpointType.ANY

    @property
    def alias(self) -> str:
        """Short wire alias of this endpoint type (``email``, ``phone``, ...)."""
        return _CANONICAL_ALIASES[self]

    @classmethod
    def parse(cls, value: EndpointType | str) -> EndpointType:
        """Resolve an endpoint type from a member or a case-insensitive alias.

        Accepted spellings are the short aliases (``email``, ``phone``,
        ``url``, ``user-id``, ``app-id``, ``endpoint-id``, ``device-id``,
        ``label``, ``topic``, ``*``), the canonical names (``EmailAddress``)
        and the member names (``EMAIL_ADDRESS``).

        Raises:
            UnknownEndpointTypeError: If the value is not a known alias.
        """
        if isinstance(value, EndpointType):
            return value
        resolved = _ENDPOINT_ALIASES.get(value.strip().casefold()) if isinstance(value, str) else None
        if resolved is None:
            # Imported lazily: the schema exceptions module depends on these enums.
            from channel_kit.schema.exceptions import UnknownEndpointTypeError

            raise UnknownEndpointTypeError(value)
        return resolved


_CANONICAL_ALIASES: Final[dict[EndpointType, str]] = {
    EndpointType.PHONE_NUMBER: "phone",
    EndpointType.EMAIL_ADDRESS: "email",
    EndpointType.URL: "url",
    EndpointType.TOPIC: "topic",
    EndpointType.ID: "endpoint-id",
    EndpointType.USER_ID: "user-id",
    EndpointType.APPLICATION_ID: "app-id",
    EndpointType.DEVICE_ID: "device-id",
    EndpointType.LABEL: "label",
    EndpointType.ANY: "*",
}


def _build_alias_table() -> dict[str, EndpointType]:
    table: dict[str, EndpointType] = {}
    for member in EndpointType:
        table[member.value.casefold()] = member
        table[member.name.casefold()] = member
        table[_CANONICAL_ALIASES[member]] = member
    table["any"] = EndpointType.ANY
    table["application"] = EndpointType.APPLICATION_ID
    return table


_ENDPOINT_ALIASES: Final[dict[str, EndpointType]] = _build_alias_table()
