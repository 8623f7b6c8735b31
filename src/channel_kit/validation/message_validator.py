"""Message validation against a channel schema."""

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING

from channel_kit.validation.failures import FailureCode, ValidationFailure
from channel_kit.validation.settings_validator import check_declared_value, fold_keys

if TYPE_CHECKING:
    from channel_kit.messages.models import Endpoint, Message
    from channel_kit.schema.channel_schema import ChannelSchema


def _check_endpoint(schema: ChannelSchema, endpoint: Endpoint, *, sending: bool) -> Iterator[ValidationFailure]:
    if any(rule.matches(endpoint.type) and rule.allows(sending=sending) for rule in schema.endpoints):
        return

    role, verb = ("sender", "send") if sending else ("receiver", "receive")
    supported = ", ".join(str(rule.endpoint_type) for rule in schema.endpoints if rule.allows(sending=sending))
    yield ValidationFailure(
        f"The {role} endpoint type '{endpoint.type}' is not supported or cannot {verb} "
        f"messages according to this schema. Supported {role} types: [{supported}]",
        (role,),
        FailureCode.ENDPOINT_NOT_SUPPORTED,
    )


def validate_message(schema: ChannelSchema, message: Message) -> Iterator[ValidationFailure]:
    """Validate a message against a schema.

    Every check runs regardless of earlier failures, in this order: message
    id, sender endpoint, receiver endpoint, content type, declared message
    properties and (strict schemas only) unknown properties.

    Args:
        schema: The schema declaring endpoints, content types and properties
        message: The message to validate

    Yields:
        Validation failures; nothing when the message is valid
    """
    if not message.id or not message.id.strip():
        yield ValidationFailure("Message id is required.", ("id",), FailureCode.MISSING_ID)

    if schema.endpoints:
        if message.sender is not None:
            yield from _check_endpoint(schema, message.sender, sending=True)
        if message.receiver is not None:
            yield from _check_endpoint(schema, message.receiver, sending=False)

    content_types = schema.content_types
    if content_types and message.content is not None and message.content.content_type not in content_types:
        yield ValidationFailure(
            f"Message content type '{message.content.content_type}' is not supported by this schema. "
            f"Supported content types: [{', '.join(str(item) for item in content_types)}]",
            ("content",),
            FailureCode.CONTENT_TYPE_NOT_SUPPORTED,
        )

    values = message.property_values()
    supplied = fold_keys(values)
    for rule in schema.message_properties:
        yield from check_declared_value(rule, supplied.get(rule.name.casefold()), kind="Message property")

    if not schema.is_strict:
        return

    known = {rule.name.casefold() for rule in schema.message_properties}
    for name in values:
        if name.casefold() not in known:
            yield ValidationFailure(
                f"Unknown message property '{name}' is not supported by this schema.",
                (name,),
                FailureCode.UNKNOWN,
            )
