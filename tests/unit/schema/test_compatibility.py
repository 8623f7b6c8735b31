"""Tests for schema restriction checks."""

from __future__ import annotations

from channel_kit.schema.channel_schema import ChannelSchema
from channel_kit.types.enums import (
    AuthenticationType,
    ChannelCapability,
    EndpointType,
    MessageContentType,
    ParameterType,
)
from channel_kit.validation.failures import FailureCode


class TestValidateAsRestrictionOf:
    """Test cases for restriction validation between schemas."""

    def test_identical_copy_is_a_restriction(self, sms_schema: ChannelSchema) -> None:
        """Test that an unmodified derivation passes."""
        assert list(sms_schema.derive().validate_as_restriction_of(sms_schema)) == []

    def test_narrowed_copy_is_a_restriction(self, sms_schema: ChannelSchema) -> None:
        """Test that removing declarations keeps a valid restriction."""
        derived = (
            sms_schema.derive()
            .remove_parameter("MaxPrice")
            .remove_message_property("StatusCallback")
            .restrict_capabilities(ChannelCapability.SEND_MESSAGES)
            .update_endpoint("phone", can_receive=False)
        )
        assert list(derived.validate_as_restriction_of(sms_schema)) == []

    def test_incompatible_identity_stops_early(self, sms_schema: ChannelSchema) -> None:
        """Test that an identity mismatch yields exactly one failure."""
        other = ChannelSchema("Twilio", "SMS", "2.0.0").add_parameter("Extra", ParameterType.STRING)
        failures = list(other.validate_as_restriction_of(sms_schema))
        assert len(failures) == 1
        assert failures[0].code is FailureCode.INCOMPATIBLE_SCHEMA
        assert "Twilio/SMS/1.0.0" in failures[0].message

    def test_added_declarations_are_reported(self, sms_schema: ChannelSchema) -> None:
        """Test one failure per declaration the base lacks."""
        derived = (
            sms_schema.derive()
            .with_capability(ChannelCapability.TEMPLATES)
            .add_parameter("Webhook", ParameterType.STRING)
            .add_content_type(MessageContentType.HTML)
            .add_message_property("Tag", ParameterType.STRING)
            .add_authentication_type(AuthenticationType.API_KEY)
            .handles_message_endpoint(EndpointType.URL)
        )
        failures = list(derived.validate_as_restriction_of(sms_schema))
        assert [failure.member_names for failure in failures] == [
            ("capabilities",),
            ("Webhook",),
            ("Url",),
            ("Html",),
            ("Tag",),
            ("ApiKey",),
        ]
        assert all(failure.code is FailureCode.NOT_A_RESTRICTION for failure in failures)

    def test_widened_direction_is_reported(self) -> None:
        """Test that enabling a direction the base forbids is reported."""
        base = ChannelSchema("Acme", "Push", "1").handles_message_endpoint("device-id", can_send=False)
        derived = base.derive().update_endpoint("device-id", can_send=True)
        failures = list(derived.validate_as_restriction_of(base))
        assert len(failures) == 1
        assert "DeviceId" in failures[0].message

    def test_base_wildcard_covers_specific_rules(self) -> None:
        """Test that a wildcard base accepts specific endpoint rules."""
        base = ChannelSchema("Acme", "Webhook", "1").allows_any_message_endpoint()
        derived = base.derive().remove_endpoint(EndpointType.ANY).handles_message_endpoint("url")
        assert list(derived.validate_as_restriction_of(base)) == []

    def test_wildcard_is_not_covered_by_specific_rules(self) -> None:
        """Test that a wildcard restriction needs a wildcard base."""
        base = ChannelSchema("Acme", "Webhook", "1").handles_message_endpoint("url")
        derived = base.derive().remove_endpoint("url").allows_any_message_endpoint()
        failures = list(derived.validate_as_restriction_of(base))
        assert len(failures) == 1

    def test_check_does_not_mutate(self, sms_schema: ChannelSchema) -> None:
        """Test that validation leaves both schemas untouched."""
        derived = sms_schema.derive().add_parameter("Extra", ParameterType.STRING)
        before = (derived.parameters, sms_schema.parameters)
        _ = list(derived.validate_as_restriction_of(sms_schema))
        assert (derived.parameters, sms_schema.parameters) == before


class TestDerivationChains:
    """Test cases for schemas derived over several generations."""

    def build_chain(self, grandparent: ChannelSchema) -> tuple[ChannelSchema, ChannelSchema]:
        parent = (
            grandparent.derive("Outbound SMS")
            .remove_parameter("MaxPrice")
            .restrict_capabilities(ChannelCapability.SEND_MESSAGES | ChannelCapability.MESSAGE_STATUS_QUERY)
        )
        child = parent.derive("Outbound SMS, no callbacks").remove_message_property("StatusCallback")
        return parent, child

    def test_every_generation_is_a_restriction(self, sms_schema: ChannelSchema) -> None:
        """Test checking each level against each of its ancestors."""
        parent, child = self.build_chain(sms_schema)
        assert child.logical_identity == sms_schema.logical_identity
        assert list(parent.validate_as_restriction_of(sms_schema)) == []
        assert list(child.validate_as_restriction_of(parent)) == []
        assert list(child.validate_as_restriction_of(sms_schema)) == []

    def test_child_widening_is_reported_against_both_ancestors(self, sms_schema: ChannelSchema) -> None:
        """Test that a declaration neither ancestor has fails against both."""
        parent, child = self.build_chain(sms_schema)
        _ = child.add_parameter("Webhook", ParameterType.STRING).with_capability(ChannelCapability.TEMPLATES)
        for ancestor in (parent, sms_schema):
            failures = list(child.validate_as_restriction_of(ancestor))
            assert [failure.member_names for failure in failures] == [("capabilities",), ("Webhook",)]
            assert {failure.code for failure in failures} == {FailureCode.NOT_A_RESTRICTION}

    def test_readding_a_removed_declaration(self, sms_schema: ChannelSchema) -> None:
        """Test that restoring what the parent removed only fails against the parent."""
        parent, child = self.build_chain(sms_schema)
        _ = child.add_parameter("MaxPrice", ParameterType.NUMBER)
        assert [failure.member_names for failure in child.validate_as_restriction_of(parent)] == [("MaxPrice",)]
        assert list(child.validate_as_restriction_of(sms_schema)) == []
