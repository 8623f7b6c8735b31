"""Registry of connector classes and their master schemas."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

from channel_kit.connectors.results import ConnectorResult
from channel_kit.schema.channel_schema import ChannelSchema
from channel_kit.validation.failures import ValidationFailure, summarize_failures

if TYPE_CHECKING:
    from channel_kit.config.models import ConnectorOptions
    from channel_kit.connectors.base import ChannelConnector
    from channel_kit.types.aliases import SettingsMapping

logger = logging.getLogger(__name__)

SCHEMA_ATTRIBUTE: Final[str] = "__channel_schema__"

type SchemaFactory = Callable[[], ChannelSchema]


class RegistryError(Exception):
    """Exception raised when the connector registry is misused."""


def channel_schema[C: type[ChannelConnector]](schema: ChannelSchema | SchemaFactory) -> Callable[[C], C]:
    """Class decorator declaring the master schema of a connector class.

    Args:
        schema: The schema, or a zero-argument factory building it

    Example:
        >>> @channel_schema(lambda: ChannelSchema("twilio", "sms", "1.0.0"))
        ... class TwilioSmsConnector(ChannelConnector): ...
    """

    def decorator(cls: C) -> C:
        setattr(cls, SCHEMA_ATTRIBUTE, schema)
        return cls

    return decorator


def get_declared_schema(connector_class: type[ChannelConnector]) -> ChannelSchema | None:
    """Build the schema declared with ``@channel_schema``, if any."""
    declared: object = getattr(connector_class, SCHEMA_ATTRIBUTE, None)
    if declared is None:
        return None
    if isinstance(declared, ChannelSchema):
        return declared
    if callable(declared):
        built: object = declared()
        if isinstance(built, ChannelSchema):
            return built
    msg = f"{connector_class.__name__} declares an invalid channel schema"
    raise RegistryError(msg)


@dataclass(slots=True, frozen=True)
class ConnectorDescriptor:
    """Registered connector class and its master schema."""

    connector_class: type[ChannelConnector]
    schema: ChannelSchema

    @property
    def key(self) -> tuple[str, str]:
        return _key(self.schema.provider, self.schema.channel_type)


def _key(provider: str, channel_type: str) -> tuple[str, str]:
    return provider.casefold(), channel_type.casefold()


class ConnectorRegistry:
    """Registry for connector classes keyed by provider and channel type."""

    def __init__(self) -> None:
        self._descriptors: dict[tuple[str, str], ConnectorDescriptor] = {}

    def register(
        self,
        connector_class: type[ChannelConnector],
        schema: ChannelSchema | None = None,
        *,
        force: bool = False,
    ) -> ConnectorDescriptor:
        """Register a connector class.

        Args:
            connector_class: The connector class
            schema: Master schema; taken from ``@channel_schema`` when None
            force: Replace an existing registration for the same provider/type

        Returns:
            The registered descriptor

        Raises:
            RegistryError: If no schema is available or the provider/type is
                already registered and ``force`` is False
        """
        master = schema if schema is not None else get_declared_schema(connector_class)
        if master is None:
            msg = f"{connector_class.__name__} has no channel schema; use @channel_schema or pass one"
            raise RegistryError(msg)

        descriptor = ConnectorDescriptor(connector_class, master)
        if descriptor.key in self._descriptors and not force:
            msg = f"A connector for '{master.provider}/{master.channel_type}' is already registered"
            raise RegistryError(msg)

        self._descriptors[descriptor.key] = descriptor
        logger.info("Registered connector %s for %s", connector_class.__name__, master.logical_identity)
        return descriptor

    def unregister(self, provider: str, channel_type: str) -> None:
        """Remove a registration.

        Raises:
            RegistryError: If nothing is registered for the provider/type
        """
        try:
            descriptor = self._descriptors.pop(_key(provider, channel_type))
        except KeyError:
            msg = f"No connector is registered for '{provider}/{channel_type}'"
            raise RegistryError(msg) from None
        logger.info("Unregistered connector %s", descriptor.connector_class.__name__)

    def get(self, provider: str, channel_type: str) -> ConnectorDescriptor | None:
        return self._descriptors.get(_key(provider, channel_type))

    def get_schema(self, provider: str, channel_type: str) -> ChannelSchema | None:
        descriptor = self.get(provider, channel_type)
        return descriptor.schema if descriptor is not None else None

    def get_connector_class(self, provider: str, channel_type: str) -> type[ChannelConnector] | None:
        descriptor = self.get(provider, channel_type)
        return descriptor.connector_class if descriptor is not None else None

    def is_registered(self, provider: str, channel_type: str) -> bool:
        return _key(provider, channel_type) in self._descriptors

    def list_registered(self) -> list[str]:
        """List the logical identities of every registered master schema."""
        return [descriptor.schema.logical_identity for descriptor in self._descriptors.values()]

    def find_by_provider(self, provider: str) -> list[ConnectorDescriptor]:
        folded = provider.casefold()
        return [descriptor for key, descriptor in self._descriptors.items() if key[0] == folded]

    def validate_schema(self, schema: ChannelSchema) -> list[ValidationFailure]:
        """Check a runtime schema against the registered master schema.

        Raises:
            RegistryError: If no connector is registered for the schema
        """
        descriptor = self._require(schema.provider, schema.channel_type)
        return list(schema.validate_as_restriction_of(descriptor.schema))

    async def create_connector(
        self,
        provider: str,
        channel_type: str,
        settings: SettingsMapping | None = None,
        *,
        schema: ChannelSchema | None = None,
        options: ConnectorOptions | None = None,
        initialize: bool = True,
    ) -> ConnectorResult[ChannelConnector]:
        """Create (and by default initialize) a connector instance.

        Args:
            provider: Provider name
            channel_type: Channel type
            settings: Connection settings, validated against the schema
            schema: Runtime schema restricting the master schema
            options: Connector runtime options
            initialize: Whether to initialize the connector before returning

        Returns:
            The connector, ``CONNECTED`` when ``initialize`` is True. A
            ``VALIDATION_FAILED`` result carries the settings failures; a
            failed initialize returns its error after disposing the connector.

        Raises:
            RegistryError: If nothing is registered or ``schema`` does not
                restrict the master schema
        """
        descriptor = self._require(provider, channel_type)
        effective = descriptor.schema
        if schema is not None:
            failures = list(schema.validate_as_restriction_of(descriptor.schema))
            if failures:
                msg = f"Schema is not a restriction of {descriptor.schema.logical_identity}: " + summarize_failures(
                    failures
                )
                raise RegistryError(msg)
            effective = schema

        settings_failures = list(effective.validate_connection_settings(settings or {}))
        if settings_failures:
            logger.warning(
                "Rejected settings for %s: %s", effective.logical_identity, summarize_failures(settings_failures)
            )
            return ConnectorResult.validation_failed(
                settings_failures,
                operation="create_connector",
                message=f"Invalid connection settings for {effective.logical_identity}",
            )

        connector = descriptor.connector_class(effective, settings, options=options)
        logger.debug("Created %s for %s", descriptor.connector_class.__name__, effective.logical_identity)
        if not initialize:
            return ConnectorResult.success(connector)

        result = await connector.initialize()
        if result.error is not None:
            await connector.dispose()
            logger.warning("Connector for %s failed to initialize: %s", effective.logical_identity, result.error)
            return ConnectorResult.from_error(result.error)
        return ConnectorResult.success(connector)

    def _require(self, provider: str, channel_type: str) -> ConnectorDescriptor:
        descriptor = self.get(provider, channel_type)
        if descriptor is None:
            msg = f"No connector is registered for '{provider}/{channel_type}'"
            raise RegistryError(msg)
        return descriptor
