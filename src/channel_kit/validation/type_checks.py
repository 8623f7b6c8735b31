"""Declared-type compatibility and allowed-value membership checks."""

from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal

from channel_kit.types.enums import ParameterType


def is_type_compatible(declared: ParameterType, value: object) -> bool:
    """Check whether a value can be held by a parameter of the declared type.

    Integers and numbers widen into each other: an integer parameter accepts
    integral floats and a number parameter accepts integers. Booleans are
    never treated as numbers even though ``bool`` subclasses ``int``.

    Args:
        declared: The declared parameter type
        value: The candidate value (never None)

    Returns:
        True if the value is compatible with the declared type
    """
    match declared:
        case ParameterType.BOOLEAN:
            return isinstance(value, bool)
        case ParameterType.STRING:
            return isinstance(value, str)
        case ParameterType.INTEGER:
            if isinstance(value, bool):
                return False
            if isinstance(value, int):
                return True
            if isinstance(value, Decimal):
                return value.is_finite() and value == value.to_integral_value()
            if isinstance(value, float):
                return value.is_integer()
            return False
        case ParameterType.NUMBER:
            return isinstance(value, (int, float, Decimal)) and not isinstance(value, bool)


def values_equal(left: object, right: object) -> bool:
    """Compare two values without letting booleans equal integers."""
    if isinstance(left, bool) != isinstance(right, bool):
        return False
    # Signaling NaNs raise on comparison
    if any(isinstance(item, Decimal) and item.is_snan() for item in (left, right)):
        return False
    return left == right


def is_allowed_value(value: object, allowed_values: Iterable[object]) -> bool:
    """Return True if ``value`` equals one of ``allowed_values``."""
    return any(values_equal(value, allowed) for allowed in allowed_values)


def describe_type(value: object) -> str:
    """Return the runtime type name of a value for failure messages."""
    return type(value).__name__
