"""Connection-settings validation against a channel schema."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from typing import TYPE_CHECKING

from channel_kit.validation.authentication import (
    authentication_parameter_names,
    check_authentication,
)
from channel_kit.validation.failures import FailureCode, ValidationFailure
from channel_kit.validation.type_checks import describe_type, is_allowed_value, is_type_compatible

if TYPE_CHECKING:
    from channel_kit.schema.channel_schema import ChannelSchema
    from channel_kit.schema.descriptors import ValueDescriptor
    from channel_kit.types.aliases import SettingsMapping


def fold_keys(values: Mapping[str, object]) -> dict[str, object]:
    """Index a mapping by casefolded key."""
    return {str(key).casefold(): value for key, value in values.items()}


def check_declared_value(
    descriptor: ValueDescriptor,
    value: object,
    *,
    kind: str = "Parameter",
) -> Iterator[ValidationFailure]:
    """Yield required, type and allowed-value failures for one declared value.

    Args:
        descriptor: The parameter or message-property declaration
        value: The supplied value (None when absent)
        kind: Noun used in failure messages

    Yields:
        Failures in the order required, type, allowed values
    """
    members = (descriptor.name,)
    if value is None:
        if descriptor.required and descriptor.default is None:
            yield ValidationFailure(
                f"Required {kind.lower()} '{descriptor.name}' is missing.",
                members,
                FailureCode.REQUIRED,
            )
        return

    if not is_type_compatible(descriptor.data_type, value):
        yield ValidationFailure(
            f"{kind} '{descriptor.name}' has an incompatible type. "
            f"Expected: {descriptor.data_type}, Actual: {describe_type(value)}.",
            members,
            FailureCode.INVALID_TYPE,
        )

    if descriptor.allowed_values and not is_allowed_value(value, descriptor.allowed_values):
        allowed = ", ".join("null" if item is None else str(item) for item in descriptor.allowed_values)
        yield ValidationFailure(
            f"{kind} '{descriptor.name}' has an invalid value '{value}'. Allowed values: [{allowed}].",
            members,
            FailureCode.NOT_ALLOWED,
        )


def validate_connection_settings(
    schema: ChannelSchema,
    settings: SettingsMapping,
) -> Iterator[ValidationFailure]:
    """Validate connection settings against a schema.

    Declared parameters are checked in declaration order, then the
    authentication requirements, then (strict schemas only) unknown keys.
    A declared default value counts as present.

    Args:
        schema: The schema declaring parameters and authentication types
        settings: Settings to validate; keys are matched case-insensitively

    Yields:
        Validation failures; nothing when the settings are valid
    """
    supplied = fold_keys(settings)

    def resolve(name: str) -> object:
        value = supplied.get(name.casefold())
        if value is None:
            parameter = schema.get_parameter(name)
            if parameter is not None:
                return parameter.default
        return value

    for parameter in schema.parameters:
        yield from check_declared_value(parameter, supplied.get(parameter.name.casefold()))

    auth_failure = check_authentication(schema.authentication_types, resolve)
    if auth_failure is not None:
        yield auth_failure

    if not schema.is_strict:
        return

    known = {parameter.name.casefold() for parameter in schema.parameters}
    known.update(authentication_parameter_names(schema.authentication_types))
    for key in settings:
        if str(key).casefold() not in known:
            yield ValidationFailure(
                f"Unknown parameter '{key}' is not supported by this schema.",
                (str(key),),
                FailureCode.UNKNOWN,
            )
