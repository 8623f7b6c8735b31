"""Tests for authentication requirement checks."""

from __future__ import annotations

from collections.abc import Callable, Mapping

import pytest

from channel_kit.types.enums import AuthenticationType
from channel_kit.validation.authentication import (
    AUTHENTICATION_MEMBER,
    AUTHENTICATION_REQUIREMENTS,
    authentication_parameter_names,
    check_authentication,
    get_requirement,
)
from channel_kit.validation.failures import FailureCode


def resolver(values: Mapping[str, object]) -> Callable[[str], object]:
    folded = {key.casefold(): value for key, value in values.items()}
    return lambda name: folded.get(name.casefold())


class TestAuthenticationRequirement:
    """Test cases for requirement groups."""

    def test_every_type_but_none_has_a_requirement(self) -> None:
        """Test the requirement table coverage."""
        assert get_requirement(AuthenticationType.NONE) is None
        assert set(AUTHENTICATION_REQUIREMENTS) == set(AuthenticationType) - {AuthenticationType.NONE}

    def test_first_satisfied_group_wins(self) -> None:
        """Test group resolution order."""
        basic = AUTHENTICATION_REQUIREMENTS[AuthenticationType.BASIC]
        resolve = resolver({"User": "u", "Pass": "p", "Username": "u"})
        assert basic.satisfying_group(resolve) == ("User", "Pass")

    def test_partial_group_not_satisfied(self) -> None:
        """Test that every name of a group is needed."""
        client = AUTHENTICATION_REQUIREMENTS[AuthenticationType.CLIENT_CREDENTIALS]
        assert not client.is_satisfied_by(resolver({"ClientId": "id"}))

    def test_describe_pattern(self) -> None:
        """Test the rendering of accepted groups."""
        api_key = AUTHENTICATION_REQUIREMENTS[AuthenticationType.API_KEY]
        assert api_key.describe_pattern() == "ApiKey | Key | AccessKey"
        client = AUTHENTICATION_REQUIREMENTS[AuthenticationType.CLIENT_CREDENTIALS]
        assert client.describe_pattern() == "(ClientId, ClientSecret)"

    def test_certificate_optional_names_are_known(self) -> None:
        """Test that companion certificate names are consumed."""
        names = authentication_parameter_names([AuthenticationType.CERTIFICATE])
        assert "certificatepassword" in names
        assert "pfxpassword" in names
        assert "pfxfile" in names


class TestCheckAuthentication:
    """Test cases for the satisfaction algorithm."""

    def test_nothing_declared(self) -> None:
        """Test that no declared type means no check."""
        assert check_authentication([], resolver({})) is None
        assert check_authentication([AuthenticationType.NONE], resolver({})) is None

    def test_any_satisfied_type_passes(self) -> None:
        """Test that one satisfied type is enough."""
        resolve = resolver({"Username": "u", "Password": "p"})
        assert check_authentication([AuthenticationType.BASIC, AuthenticationType.API_KEY], resolve) is None

    def test_none_alongside_other_types(self) -> None:
        """Test that declaring NONE makes authentication optional."""
        declared = [AuthenticationType.NONE, AuthenticationType.API_KEY]
        assert check_authentication(declared, resolver({})) is None

    def test_single_aggregate_failure(self) -> None:
        """Test that unsatisfied types yield one combined failure."""
        failure = check_authentication(
            [AuthenticationType.BASIC, AuthenticationType.API_KEY],
            resolver({"Foo": "bar"}),
        )
        assert failure is not None
        assert failure.code is FailureCode.AUTHENTICATION
        assert failure.member_names == (AUTHENTICATION_MEMBER,)
        assert "Supported types: Basic, ApiKey" in failure.message
        assert "(Username, Password)" in failure.message

    @pytest.mark.parametrize(
        ("auth_type", "values"),
        [
            (AuthenticationType.API_KEY, {"AccessKey": "k"}),
            (AuthenticationType.TOKEN, {"BearerToken": "t"}),
            (AuthenticationType.CLIENT_CREDENTIALS, {"clientid": "id", "CLIENTSECRET": "s"}),
            (AuthenticationType.CERTIFICATE, {"CertificateThumbprint": "ab12"}),
            (AuthenticationType.CUSTOM, {"Signature": "sig"}),
        ],
    )
    def test_each_type_has_a_satisfying_group(self, auth_type: AuthenticationType, values: dict[str, object]) -> None:
        """Test a satisfying group for every authentication type."""
        assert check_authentication([auth_type], resolver(values)) is None

    def test_none_values_do_not_count(self) -> None:
        """Test that a name mapped to None is absent."""
        failure = check_authentication([AuthenticationType.TOKEN], resolver({"Token": None}))
        assert failure is not None
