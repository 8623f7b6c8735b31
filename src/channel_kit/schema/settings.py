"""Connection settings: the parameter values a connector is configured with."""

from __future__ import annotations

import copy
from collections.abc import Iterator, MutableMapping
from typing import TYPE_CHECKING, override

from channel_kit.utils.sanitization import redact_settings

if TYPE_CHECKING:
    from channel_kit.schema.channel_schema import ChannelSchema
    from channel_kit.types.aliases import SettingsMapping
    from channel_kit.validation.failures import ValidationFailure


class ConnectionSettings(MutableMapping[str, object]):
    """Case-insensitive mapping of parameter names to values.

    When bound to a schema, lookups of unset parameters fall back to the
    declared default. Assigning a value never validates it; call
    ``validate()`` (or the schema's validator) to obtain failures.

    Example:
        >>> settings = ConnectionSettings({"AccountSid": "AC1"}, schema=schema)
        >>> settings["accountsid"]
        'AC1'
    """

    def __init__(
        self,
        values: SettingsMapping | None = None,
        *,
        schema: ChannelSchema | None = None,
    ) -> None:
        """Initialize ConnectionSettings.

        Args:
            values: Initial values; another ``ConnectionSettings`` is deep-copied
                together with its bound schema unless ``schema`` is given
            schema: Schema supplying defaults and validation rules
        """
        self._values: dict[str, tuple[str, object]] = {}
        self._schema: ChannelSchema | None = schema
        if isinstance(values, ConnectionSettings):
            if schema is None:
                self._schema = values.schema
            self._values = copy.deepcopy(values._values)
        elif values is not None:
            for key, value in values.items():
                self[key] = copy.deepcopy(value)

    @property
    def schema(self) -> ChannelSchema | None:
        return self._schema

    @override
    def __getitem__(self, key: str) -> object:
        entry = self._values.get(key.casefold())
        if entry is not None:
            return entry[1]
        if self._schema is not None:
            parameter = self._schema.get_parameter(key)
            if parameter is not None and parameter.default is not None:
                return parameter.default
        raise KeyError(key)

    @override
    def __setitem__(self, key: str, value: object) -> None:
        if not isinstance(key, str) or not key.strip():  # pyright: ignore[reportUnnecessaryIsInstance]
            msg = "Setting names must be non-empty strings"
            raise ValueError(msg)
        folded = key.casefold()
        existing = self._values.get(folded)
        self._values[folded] = (existing[0] if existing is not None else key, value)

    @override
    def __delitem__(self, key: str) -> None:
        try:
            del self._values[key.casefold()]
        except KeyError:
            raise KeyError(key) from None

    @override
    def __iter__(self) -> Iterator[str]:
        return (original for original, _ in self._values.values())

    @override
    def __len__(self) -> int:
        return len(self._values)

    @override
    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.casefold() in self._values

    def get_parameter(self, key: str) -> object:
        """Return the value (or declared default) of a parameter, None if unset."""
        try:
            return self[key]
        except KeyError:
            return None

    def set_parameter(self, key: str, value: object) -> ConnectionSettings:
        """Set a parameter value and return the settings for chaining."""
        self[key] = value
        return self

    def get_as[T](self, key: str, kind: type[T]) -> T:
        """Get a parameter value checked against a Python type.

        Raises:
            KeyError: If the parameter is unset and has no default
            TypeError: If the value is not an instance of ``kind``
        """
        value = self[key]
        if isinstance(value, bool) and kind is not bool:
            msg = f"The value for '{key}' is a bool, not {kind.__name__}"
            raise TypeError(msg)
        if not isinstance(value, kind):
            msg = f"The value for '{key}' cannot be used as {kind.__name__}"
            raise TypeError(msg)
        return value

    def bind(self, schema: ChannelSchema) -> ConnectionSettings:
        """Return a deep copy bound to ``schema``."""
        return ConnectionSettings(self, schema=schema)

    def validate(self, schema: ChannelSchema | None = None) -> list[ValidationFailure]:
        """Validate against ``schema`` (or the bound schema).

        Raises:
            ValueError: If no schema is given or bound
        """
        target = schema if schema is not None else self._schema
        if target is None:
            msg = "No schema to validate connection settings against"
            raise ValueError(msg)
        return list(target.validate_connection_settings(self))

    def to_dict(self) -> dict[str, object]:
        """Explicitly set values keyed by their original names."""
        return {original: value for original, value in self._values.values()}

    @override
    def __repr__(self) -> str:
        return f"ConnectionSettings({redact_settings(self.to_dict(), self._schema)!r})"
