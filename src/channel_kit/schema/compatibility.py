"""Identity compatibility and restriction checks between schemas."""

from __future__ import annotations

from collections.abc import Iterator
from typing import TYPE_CHECKING

from channel_kit.schema.descriptors import ChannelEndpoint, find_by_name
from channel_kit.validation.failures import FailureCode, ValidationFailure

if TYPE_CHECKING:
    from channel_kit.schema.channel_schema import ChannelSchema


def logical_identity(provider: str, channel_type: str, version: str) -> str:
    """Format the ``provider/type/version`` identity string."""
    return f"{provider}/{channel_type}/{version}"


def is_compatible(schema: ChannelSchema, other: ChannelSchema) -> bool:
    """Return True if both schemas share a logical identity (case-insensitive)."""
    return schema.logical_identity.casefold() == other.logical_identity.casefold()


def _covers(base_rules: tuple[ChannelEndpoint, ...], rule: ChannelEndpoint) -> bool:
    for base_rule in base_rules:
        if rule.is_wildcard and not base_rule.is_wildcard:
            continue
        if not base_rule.matches(rule.endpoint_type):
            continue
        if (rule.can_send and not base_rule.can_send) or (rule.can_receive and not base_rule.can_receive):
            continue
        return True
    return False


def validate_as_restriction_of(derived: ChannelSchema, base: ChannelSchema) -> Iterator[ValidationFailure]:
    """Check that ``derived`` only narrows what ``base`` declares.

    The check is advisory: it never raises and never mutates either schema.
    An identity mismatch yields a single failure and ends the check.

    Args:
        derived: The narrower schema
        base: The schema it should restrict

    Yields:
        One failure per capability set, parameter, endpoint rule, content
        type, message property or authentication type the base lacks
    """
    if not is_compatible(derived, base):
        yield ValidationFailure(
            f"Schema is not compatible. Expected: {base.logical_identity}, Actual: {derived.logical_identity}",
            (),
            FailureCode.INCOMPATIBLE_SCHEMA,
        )
        return

    if not derived.capabilities.is_subset_of(base.capabilities):
        yield ValidationFailure(
            f"Schema capabilities ({derived.capabilities.describe()}) are not a subset of "
            f"target capabilities ({base.capabilities.describe()})",
            ("capabilities",),
            FailureCode.NOT_A_RESTRICTION,
        )

    for parameter in derived.parameters:
        if find_by_name(base.parameters, parameter.name) is None:
            yield ValidationFailure(
                f"Parameter '{parameter.name}' is not defined in target schema",
                (parameter.name,),
                FailureCode.NOT_A_RESTRICTION,
            )

    for rule in derived.endpoints:
        if not _covers(base.endpoints, rule):
            yield ValidationFailure(
                f"Endpoint '{rule}' is not allowed by target schema",
                (str(rule.endpoint_type),),
                FailureCode.NOT_A_RESTRICTION,
            )

    for content_type in derived.content_types:
        if content_type not in base.content_types:
            yield ValidationFailure(
                f"Content type '{content_type}' is not supported by target schema",
                (str(content_type),),
                FailureCode.NOT_A_RESTRICTION,
            )

    for prop in derived.message_properties:
        if find_by_name(base.message_properties, prop.name) is None:
            yield ValidationFailure(
                f"Message property '{prop.name}' is not defined in target schema",
                (prop.name,),
                FailureCode.NOT_A_RESTRICTION,
            )

    for auth_type in derived.authentication_types:
        if auth_type not in base.authentication_types:
            yield ValidationFailure(
                f"Authentication type '{auth_type}' is not supported by target schema",
                (str(auth_type),),
                FailureCode.NOT_A_RESTRICTION,
            )
