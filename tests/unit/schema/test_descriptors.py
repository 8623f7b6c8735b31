"""Tests for schema descriptors."""

from __future__ import annotations

import dataclasses

import pytest

from channel_kit.schema.descriptors import ChannelEndpoint, ChannelParameter, MessagePropertyRule, find_by_name
from channel_kit.schema.exceptions import SchemaContractError, UnknownEndpointTypeError
from channel_kit.types.enums import EndpointType, ParameterType


class TestChannelParameter:
    """Test cases for parameter descriptors."""

    def test_defaults(self) -> None:
        """Test default field values."""
        parameter = ChannelParameter("Region", ParameterType.STRING)
        assert parameter.required is False
        assert parameter.default is None
        assert parameter.sensitive is False
        assert parameter.allowed_values is None
        assert parameter.label == "Region"

    def test_blank_name_rejected(self) -> None:
        """Test that blank names are contract violations."""
        with pytest.raises(SchemaContractError):
            _ = ChannelParameter("  ", ParameterType.STRING)

    def test_default_must_match_type(self) -> None:
        """Test that a default of the wrong type is rejected."""
        with pytest.raises(SchemaContractError, match="does not match"):
            _ = ChannelParameter("Port", ParameterType.INTEGER, default="25")

    def test_allowed_values_normalized_to_tuple(self) -> None:
        """Test that allowed values are stored as a tuple."""
        parameter = ChannelParameter("Region", ParameterType.STRING, allowed_values=["us1", "ie1"])  # pyright: ignore[reportArgumentType]
        assert parameter.allowed_values == ("us1", "ie1")

    def test_data_type_coerced_from_string(self) -> None:
        """Test that the data type accepts its canonical string."""
        parameter = ChannelParameter("Port", "Integer")  # pyright: ignore[reportArgumentType]
        assert parameter.data_type is ParameterType.INTEGER

    def test_immutable(self) -> None:
        """Test that descriptors cannot be mutated in place."""
        parameter = ChannelParameter("Region", ParameterType.STRING)
        with pytest.raises(dataclasses.FrozenInstanceError):
            parameter.required = True  # pyright: ignore[reportAttributeAccessIssue]

    def test_label_prefers_display_name(self) -> None:
        """Test label rendering."""
        parameter = ChannelParameter("FromNumber", ParameterType.STRING, display_name="Sender number")
        assert parameter.label == "Sender number"

    def test_find_by_name_is_case_insensitive(self) -> None:
        """Test descriptor lookup by name."""
        rules = [
            MessagePropertyRule("Priority", ParameterType.STRING),
            MessagePropertyRule("Ttl", ParameterType.INTEGER),
        ]
        assert find_by_name(rules, "ttl") is rules[1]
        assert find_by_name(rules, "missing") is None


class TestChannelEndpoint:
    """Test cases for endpoint rules."""

    def test_alias_is_parsed(self) -> None:
        """Test that the endpoint type accepts aliases."""
        rule = ChannelEndpoint("email")  # pyright: ignore[reportArgumentType]
        assert rule.endpoint_type is EndpointType.EMAIL_ADDRESS

    def test_unknown_alias_rejected(self) -> None:
        """Test that unknown aliases fail at construction."""
        with pytest.raises(UnknownEndpointTypeError):
            _ = ChannelEndpoint("fax")  # pyright: ignore[reportArgumentType]

    def test_wildcard_matches_everything(self) -> None:
        """Test wildcard matching."""
        rule = ChannelEndpoint(EndpointType.ANY)
        assert rule.is_wildcard
        assert rule.matches(EndpointType.URL)
        assert rule.matches("phone")

    def test_specific_rule_matches_own_type(self) -> None:
        """Test exact matching of a specific rule."""
        rule = ChannelEndpoint(EndpointType.PHONE_NUMBER)
        assert rule.matches("phone")
        assert not rule.matches(EndpointType.URL)

    def test_direction(self) -> None:
        """Test send and receive direction flags."""
        rule = ChannelEndpoint(EndpointType.URL, can_send=False)
        assert not rule.allows(sending=True)
        assert rule.allows(sending=False)
        assert str(rule) == "Url[receive]"

    def test_description_ignored_in_equality(self) -> None:
        """Test that descriptions do not affect equality."""
        assert ChannelEndpoint(EndpointType.URL, description="a") == ChannelEndpoint(EndpointType.URL)
