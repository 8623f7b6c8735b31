"""Descriptors held by a channel schema.

Descriptors are immutable value objects; schemas replace them through
``dataclasses.replace`` when a builder method updates one.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import override

from channel_kit.schema.exceptions import SchemaContractError
from channel_kit.types.enums import EndpointType, ParameterType
from channel_kit.validation.type_checks import is_type_compatible


@dataclass(frozen=True, slots=True)
class ValueDescriptor:
    """Typed, optionally constrained named value declared by a schema."""

    name: str
    data_type: ParameterType
    required: bool = False
    default: object = None
    sensitive: bool = False
    allowed_values: tuple[object, ...] | None = None
    description: str | None = None
    display_name: str | None = None

    def __post_init__(self) -> None:
        """Check the declaration and normalize the allowed-value set.

        Raises:
            SchemaContractError: If the name is blank or the default value
                does not match the declared type
        """
        if not self.name or not self.name.strip():
            msg = f"{type(self).__name__} name cannot be empty"
            raise SchemaContractError(msg, member="name")

        object.__setattr__(self, "data_type", ParameterType(self.data_type))
        if self.allowed_values is not None:
            object.__setattr__(self, "allowed_values", tuple(self.allowed_values))

        if self.default is not None and not is_type_compatible(self.data_type, self.default):
            msg = (
                f"Default value {self.default!r} of '{self.name}' does not match "
                f"declared type {self.data_type}"
            )
            raise SchemaContractError(msg, member=self.name)

    def matches_name(self, name: str) -> bool:
        """Return True if ``name`` refers to this descriptor (case-insensitive)."""
        return self.name.casefold() == name.casefold()

    @property
    def label(self) -> str:
        """Human readable label (display name, falling back to the name)."""
        return self.display_name or self.name


@dataclass(frozen=True, slots=True)
class ChannelParameter(ValueDescriptor):
    """Connection parameter a channel accepts in its settings."""


@dataclass(frozen=True, slots=True)
class MessagePropertyRule(ValueDescriptor):
    """Rule for a named property carried by outgoing messages."""


@dataclass(frozen=True, slots=True)
class ChannelEndpoint:
    """Endpoint rule: which address kind a channel sends from or delivers to."""

    endpoint_type: EndpointType
    can_send: bool = True
    can_receive: bool = True
    required: bool = False
    description: str | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "endpoint_type", EndpointType.parse(self.endpoint_type))

    @property
    def is_wildcard(self) -> bool:
        """True when this rule matches every endpoint type."""
        return self.endpoint_type.is_wildcard

    def matches(self, endpoint_type: EndpointType | str) -> bool:
        """Return True if the rule covers the given endpoint type.

        Args:
            endpoint_type: Endpoint type or alias to test

        Returns:
            True if the types are equal or this rule is the wildcard
        """
        return self.is_wildcard or self.endpoint_type is EndpointType.parse(endpoint_type)

    def allows(self, *, sending: bool) -> bool:
        """Return True if the rule enables the given direction."""
        return self.can_send if sending else self.can_receive

    @override
    def __str__(self) -> str:
        directions = [name for name, enabled in (("send", self.can_send), ("receive", self.can_receive)) if enabled]
        return f"{self.endpoint_type}[{'/'.join(directions) or 'disabled'}]"


def find_by_name[D: ValueDescriptor](descriptors: Iterable[D], name: str) -> D | None:
    """Find a descriptor by case-insensitive name.

    Args:
        descriptors: Descriptors to search
        name: Name to look up

    Returns:
        The first matching descriptor or None
    """
    folded = name.casefold()
    for descriptor in descriptors:
        if descriptor.name.casefold() == folded:
            return descriptor
    return None
