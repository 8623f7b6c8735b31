"""Channel schema: the declaration of what a provider/channel pair supports."""

from __future__ import annotations

import copy
import dataclasses
import logging
from collections.abc import Iterable, Iterator, Mapping
from typing import TYPE_CHECKING, Self, override

from channel_kit.schema.compatibility import is_compatible, logical_identity, validate_as_restriction_of
from channel_kit.schema.descriptors import ChannelEndpoint, ChannelParameter, MessagePropertyRule, find_by_name
from channel_kit.schema.exceptions import (
    DeclarationNotFoundError,
    DuplicateDeclarationError,
    EndpointConflictError,
    SchemaContractError,
)
from channel_kit.types.enums import (
    AuthenticationType,
    ChannelCapability,
    EndpointType,
    MessageContentType,
    ParameterType,
)
from channel_kit.validation.message_validator import validate_message
from channel_kit.validation.settings_validator import validate_connection_settings

if TYPE_CHECKING:
    from channel_kit.messages.models import Message
    from channel_kit.types.aliases import SettingsMapping
    from channel_kit.validation.failures import ValidationFailure

logger = logging.getLogger(__name__)


def _require_text(value: str, member: str) -> str:
    if not value or not value.strip():
        msg = f"Schema {member} cannot be empty"
        raise SchemaContractError(msg, member=member)
    return value


class ChannelSchema:
    """Declaration of the parameters, endpoints, content types, properties and
    authentication methods supported by a provider/channel pair.

    Builder methods mutate the schema and return it so calls can be chained.
    The logical identity (provider, channel type, version) is fixed at
    construction.

    Example:
        >>> schema = (
        ...     ChannelSchema("twilio", "sms", "1.0.0")
        ...     .add_required_parameter("AccountSid", ParameterType.STRING)
        ...     .handles_message_endpoint("phone")
        ...     .add_content_type(MessageContentType.PLAIN_TEXT)
        ... )
    """

    def __init__(
        self,
        provider: str,
        channel_type: str,
        version: str,
        *,
        display_name: str | None = None,
        strict: bool = True,
        capabilities: ChannelCapability = ChannelCapability.SEND_MESSAGES,
    ) -> None:
        """Initialize an empty schema.

        Args:
            provider: Provider name (e.g. ``twilio``)
            channel_type: Channel type (e.g. ``sms``)
            version: Schema version
            display_name: Optional human readable name
            strict: Reject undeclared settings keys and message properties
            capabilities: Supported capabilities

        Raises:
            SchemaContractError: If an identity component is blank
        """
        self._provider: str = _require_text(provider, "provider")
        self._channel_type: str = _require_text(channel_type, "channel_type")
        self._version: str = _require_text(version, "version")
        self._display_name: str | None = display_name
        self._strict: bool = strict
        self._capabilities: ChannelCapability = capabilities
        self._parameters: list[ChannelParameter] = []
        self._endpoints: list[ChannelEndpoint] = []
        self._content_types: list[MessageContentType] = []
        self._message_properties: list[MessagePropertyRule] = []
        self._authentication_types: list[AuthenticationType] = []

    # Identity and read-only views

    @property
    def provider(self) -> str:
        return self._provider

    @property
    def channel_type(self) -> str:
        return self._channel_type

    @property
    def version(self) -> str:
        return self._version

    @property
    def display_name(self) -> str | None:
        return self._display_name

    @property
    def is_strict(self) -> bool:
        return self._strict

    @property
    def capabilities(self) -> ChannelCapability:
        return self._capabilities

    @property
    def parameters(self) -> tuple[ChannelParameter, ...]:
        return tuple(self._parameters)

    @property
    def endpoints(self) -> tuple[ChannelEndpoint, ...]:
        return tuple(self._endpoints)

    @property
    def content_types(self) -> tuple[MessageContentType, ...]:
        return tuple(self._content_types)

    @property
    def message_properties(self) -> tuple[MessagePropertyRule, ...]:
        return tuple(self._message_properties)

    @property
    def authentication_types(self) -> tuple[AuthenticationType, ...]:
        return tuple(self._authentication_types)

    @property
    def logical_identity(self) -> str:
        """Identity string ``provider/type/version``."""
        return logical_identity(self._provider, self._channel_type, self._version)

    def get_logical_identity(self) -> str:
        return self.logical_identity

    def is_compatible_with(self, other: ChannelSchema) -> bool:
        """Return True if ``other`` has the same logical identity."""
        return is_compatible(self, other)

    # Schema-level settings

    def with_display_name(self, display_name: str | None) -> Self:
        self._display_name = display_name
        return self

    def with_strict_mode(self, strict: bool = True) -> Self:
        self._strict = strict
        return self

    def with_flexible_mode(self) -> Self:
        return self.with_strict_mode(False)

    def with_capabilities(self, capabilities: ChannelCapability) -> Self:
        """Replace the capability set."""
        self._capabilities = capabilities
        return self

    def with_capability(self, capability: ChannelCapability) -> Self:
        """Add capabilities to the current set."""
        self._capabilities |= capability
        return self

    def remove_capability(self, capability: ChannelCapability) -> Self:
        self._capabilities &= ~capability
        return self

    def restrict_capabilities(self, allowed: ChannelCapability) -> Self:
        """Keep only the capabilities also present in ``allowed``."""
        self._capabilities &= allowed
        return self

    # Parameters

    def add_parameter(
        self,
        parameter: ChannelParameter | str,
        data_type: ParameterType | None = None,
        **options: object,
    ) -> Self:
        """Declare a connection parameter.

        Args:
            parameter: A parameter descriptor, or the name of a new parameter
            data_type: Declared type when ``parameter`` is a name
            **options: Extra ``ChannelParameter`` fields when ``parameter`` is a name

        Raises:
            DuplicateDeclarationError: If a parameter with the same name exists
        """
        descriptor = self._coerce_descriptor(ChannelParameter, parameter, data_type, options)
        if find_by_name(self._parameters, descriptor.name) is not None:
            msg = f"A parameter named '{descriptor.name}' is already declared"
            raise DuplicateDeclarationError(msg, member=descriptor.name)
        self._parameters.append(descriptor)
        return self

    def add_required_parameter(
        self,
        name: str,
        data_type: ParameterType,
        *,
        sensitive: bool = False,
        **options: object,
    ) -> Self:
        return self.add_parameter(name, data_type, required=True, sensitive=sensitive, **options)

    def get_parameter(self, name: str) -> ChannelParameter | None:
        return find_by_name(self._parameters, name)

    def has_parameter(self, name: str) -> bool:
        return self.get_parameter(name) is not None

    def remove_parameter(self, name: str) -> Self:
        """Remove a parameter; removing an undeclared name does nothing."""
        self._parameters = [item for item in self._parameters if not item.matches_name(name)]
        return self

    def update_parameter(self, name: str, **changes: object) -> Self:
        """Replace fields of a declared parameter.

        Raises:
            DeclarationNotFoundError: If no parameter has this name
            DuplicateDeclarationError: If a rename collides with another parameter
        """
        self._parameters = self._replace_descriptor(self._parameters, name, changes, "parameter")
        return self

    # Message properties

    def add_message_property(
        self,
        prop: MessagePropertyRule | str,
        data_type: ParameterType | None = None,
        **options: object,
    ) -> Self:
        """Declare a message property rule.

        Raises:
            DuplicateDeclarationError: If a rule with the same name exists
        """
        descriptor = self._coerce_descriptor(MessagePropertyRule, prop, data_type, options)
        if find_by_name(self._message_properties, descriptor.name) is not None:
            msg = f"A message property named '{descriptor.name}' is already declared"
            raise DuplicateDeclarationError(msg, member=descriptor.name)
        self._message_properties.append(descriptor)
        return self

    def get_message_property(self, name: str) -> MessagePropertyRule | None:
        return find_by_name(self._message_properties, name)

    def remove_message_property(self, name: str) -> Self:
        self._message_properties = [item for item in self._message_properties if not item.matches_name(name)]
        return self

    def update_message_property(self, name: str, **changes: object) -> Self:
        self._message_properties = self._replace_descriptor(
            self._message_properties, name, changes, "message property"
        )
        return self

    # Content types

    def add_content_type(self, content_type: MessageContentType) -> Self:
        """Declare a supported content type.

        Raises:
            DuplicateDeclarationError: If the content type is already declared
        """
        content_type = MessageContentType(content_type)
        if content_type in self._content_types:
            msg = f"Content type '{content_type}' is already declared"
            raise DuplicateDeclarationError(msg, member="content_types")
        self._content_types.append(content_type)
        return self

    def remove_content_type(self, content_type: MessageContentType) -> Self:
        if content_type in self._content_types:
            self._content_types.remove(content_type)
        return self

    def update_content_type(self, current: MessageContentType, replacement: MessageContentType) -> Self:
        """Swap a declared content type for another, keeping its position."""
        self._content_types = self._replace_member(self._content_types, current, replacement, "Content type")
        return self

    def restrict_content_types(self, allowed: Iterable[MessageContentType]) -> Self:
        """Keep only the declared content types also present in ``allowed``."""
        keep = set(allowed)
        self._content_types = [item for item in self._content_types if item in keep]
        return self

    # Authentication types

    def add_authentication_type(self, auth_type: AuthenticationType) -> Self:
        """Declare a supported authentication type.

        Raises:
            DuplicateDeclarationError: If the type is already declared
        """
        auth_type = AuthenticationType(auth_type)
        if auth_type in self._authentication_types:
            msg = f"Authentication type '{auth_type}' is already declared"
            raise DuplicateDeclarationError(msg, member="authentication_types")
        self._authentication_types.append(auth_type)
        return self

    def remove_authentication_type(self, auth_type: AuthenticationType) -> Self:
        if auth_type in self._authentication_types:
            self._authentication_types.remove(auth_type)
        return self

    def update_authentication_type(self, current: AuthenticationType, replacement: AuthenticationType) -> Self:
        self._authentication_types = self._replace_member(
            self._authentication_types, current, replacement, "Authentication type"
        )
        return self

    def restrict_authentication_types(self, allowed: Iterable[AuthenticationType]) -> Self:
        keep = set(allowed)
        self._authentication_types = [item for item in self._authentication_types if item in keep]
        return self

    # Endpoints

    def handles_message_endpoint(
        self,
        endpoint: ChannelEndpoint | EndpointType | str,
        *,
        can_send: bool = True,
        can_receive: bool = True,
        required: bool = False,
        description: str | None = None,
    ) -> Self:
        """Declare an endpoint rule.

        Args:
            endpoint: A rule, an endpoint type or an alias (``email``, ``phone``, ``*``, ...)
            can_send: Whether messages may be sent from this endpoint type
            can_receive: Whether messages may be delivered to this endpoint type
            required: Whether messages must carry this endpoint type
            description: Optional description

        Raises:
            UnknownEndpointTypeError: If the alias is not recognized
            DuplicateDeclarationError: If a rule for the type exists
            EndpointConflictError: If the wildcard is mixed with specific rules
        """
        if not isinstance(endpoint, ChannelEndpoint):
            endpoint = ChannelEndpoint(
                EndpointType.parse(endpoint),
                can_send=can_send,
                can_receive=can_receive,
                required=required,
                description=description,
            )
        self._check_endpoint_conflicts(self._endpoints, endpoint)
        self._endpoints.append(endpoint)
        return self

    def allows_any_message_endpoint(self, *, can_send: bool = True, can_receive: bool = True) -> Self:
        """Declare the wildcard rule that matches every endpoint type."""
        return self.handles_message_endpoint(EndpointType.ANY, can_send=can_send, can_receive=can_receive)

    def get_endpoint(self, endpoint_type: EndpointType | str) -> ChannelEndpoint | None:
        """Get the rule declared for exactly this endpoint type."""
        resolved = EndpointType.parse(endpoint_type)
        return next((rule for rule in self._endpoints if rule.endpoint_type is resolved), None)

    def remove_endpoint(self, endpoint_type: EndpointType | str) -> Self:
        resolved = EndpointType.parse(endpoint_type)
        self._endpoints = [rule for rule in self._endpoints if rule.endpoint_type is not resolved]
        return self

    def update_endpoint(self, endpoint_type: EndpointType | str, **changes: object) -> Self:
        """Replace fields of a declared endpoint rule.

        Raises:
            DeclarationNotFoundError: If no rule exists for the type
        """
        current = self.get_endpoint(endpoint_type)
        if current is None:
            msg = f"No endpoint rule is declared for '{EndpointType.parse(endpoint_type)}'"
            raise DeclarationNotFoundError(msg, member="endpoints")
        updated = dataclasses.replace(current, **changes)  # pyright: ignore[reportArgumentType]
        others = [rule for rule in self._endpoints if rule is not current]
        self._check_endpoint_conflicts(others, updated)
        self._endpoints = [updated if rule is current else rule for rule in self._endpoints]
        return self

    # Queries

    def supports_capability(self, capability: ChannelCapability) -> bool:
        return self._capabilities.includes(capability)

    def supports_content_type(self, content_type: MessageContentType) -> bool:
        """Return True if the type is declared or no content type is declared."""
        return not self._content_types or content_type in self._content_types

    def supports_authentication(self, auth_type: AuthenticationType) -> bool:
        return auth_type in self._authentication_types

    def supports_endpoint(self, endpoint_type: EndpointType | str, *, sending: bool) -> bool:
        """Return True if some rule covers the type in the given direction."""
        return any(rule.matches(endpoint_type) and rule.allows(sending=sending) for rule in self._endpoints)

    # Derivation and validation

    def derive(self, display_name: str | None = None) -> ChannelSchema:
        """Create an independent copy sharing this schema's logical identity.

        Args:
            display_name: Display name of the copy; defaults to
                ``"<display name> (Copy)"``

        Returns:
            A new schema whose collections do not alias this one
        """
        base_name = self._display_name or self.logical_identity
        derived = ChannelSchema(
            self._provider,
            self._channel_type,
            self._version,
            display_name=display_name if display_name is not None else f"{base_name} (Copy)",
            strict=self._strict,
            capabilities=self._capabilities,
        )
        derived._parameters = copy.deepcopy(self._parameters)
        derived._endpoints = copy.deepcopy(self._endpoints)
        derived._content_types = list(self._content_types)
        derived._message_properties = copy.deepcopy(self._message_properties)
        derived._authentication_types = list(self._authentication_types)
        logger.debug("Derived schema %s as '%s'", self.logical_identity, derived.display_name)
        return derived

    def validate_connection_settings(self, settings: SettingsMapping) -> Iterator[ValidationFailure]:
        return validate_connection_settings(self, settings)

    def validate_message(self, message: Message) -> Iterator[ValidationFailure]:
        return validate_message(self, message)

    def validate_as_restriction_of(self, base: ChannelSchema) -> Iterator[ValidationFailure]:
        return validate_as_restriction_of(self, base)

    # Internal helpers

    @staticmethod
    def _coerce_descriptor[D: (ChannelParameter, MessagePropertyRule)](
        kind: type[D],
        value: D | str,
        data_type: ParameterType | None,
        options: Mapping[str, object],
    ) -> D:
        if isinstance(value, kind):
            return value
        if not isinstance(value, str):
            msg = f"Expected a {kind.__name__} or a name, got {type(value).__name__}"
            raise TypeError(msg)
        if data_type is None:
            msg = f"A data type is required to declare '{value}'"
            raise SchemaContractError(msg, member=value)
        return kind(value, data_type, **options)  # pyright: ignore[reportArgumentType]

    @staticmethod
    def _replace_descriptor[D: (ChannelParameter, MessagePropertyRule)](
        items: list[D],
        name: str,
        changes: Mapping[str, object],
        noun: str,
    ) -> list[D]:
        current = find_by_name(items, name)
        if current is None:
            msg = f"No {noun} named '{name}' is declared"
            raise DeclarationNotFoundError(msg, member=name)
        updated = dataclasses.replace(current, **changes)  # pyright: ignore[reportArgumentType]
        clash = find_by_name((item for item in items if item is not current), updated.name)
        if clash is not None:
            msg = f"A {noun} named '{updated.name}' is already declared"
            raise DuplicateDeclarationError(msg, member=updated.name)
        return [updated if item is current else item for item in items]

    @staticmethod
    def _replace_member[E: (MessageContentType, AuthenticationType)](
        items: list[E],
        current: E,
        replacement: E,
        noun: str,
    ) -> list[E]:
        if current not in items:
            msg = f"{noun} '{current}' is not declared"
            raise DeclarationNotFoundError(msg, member=str(current))
        if replacement != current and replacement in items:
            msg = f"{noun} '{replacement}' is already declared"
            raise DuplicateDeclarationError(msg, member=str(replacement))
        return [replacement if item == current else item for item in items]

    @staticmethod
    def _check_endpoint_conflicts(existing: list[ChannelEndpoint], candidate: ChannelEndpoint) -> None:
        for rule in existing:
            if rule.endpoint_type is candidate.endpoint_type:
                msg = f"An endpoint rule for '{candidate.endpoint_type}' is already declared"
                raise DuplicateDeclarationError(msg, member="endpoints")
            if rule.is_wildcard or candidate.is_wildcard:
                msg = (
                    f"Cannot declare '{candidate.endpoint_type}' together with '{rule.endpoint_type}': "
                    "the wildcard endpoint excludes specific endpoint rules"
                )
                raise EndpointConflictError(msg, member="endpoints")

    @override
    def __repr__(self) -> str:
        return (
            f"ChannelSchema(identity='{self.logical_identity}', display_name={self._display_name!r}, "
            f"strict={self._strict}, capabilities={self._capabilities.describe()})"
        )
