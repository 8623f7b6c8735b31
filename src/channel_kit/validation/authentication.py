"""Authentication requirements and the satisfaction algorithm.

Each authentication type is satisfied by one of a fixed list of parameter
name groups. A group is satisfied when every name in it resolves to a
non-None value; the first satisfied group wins.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Final

from channel_kit.types.enums import AuthenticationType
from channel_kit.validation.failures import FailureCode, ValidationFailure

type ValueResolver = Callable[[str], object]

AUTHENTICATION_MEMBER: Final[str] = "authentication"


@dataclass(frozen=True, slots=True)
class AuthenticationRequirement:
    """Parameter-name groups that satisfy one authentication type."""

    auth_type: AuthenticationType
    groups: tuple[tuple[str, ...], ...]
    optional: tuple[str, ...] = ()
    description: str = ""

    def known_names(self) -> frozenset[str]:
        """Casefolded names of every parameter this requirement may consume."""
        names = {name.casefold() for group in self.groups for name in group}
        names.update(name.casefold() for name in self.optional)
        return frozenset(names)

    def satisfying_group(self, resolve: ValueResolver) -> tuple[str, ...] | None:
        """Return the first fully present group, or None."""
        for group in self.groups:
            if all(resolve(name) is not None for name in group):
                return group
        return None

    def is_satisfied_by(self, resolve: ValueResolver) -> bool:
        """Return True if any group resolves completely."""
        return self.satisfying_group(resolve) is not None

    def describe_pattern(self) -> str:
        """Render the accepted groups, e.g. ``(Username, Password) | (User, Pass)``."""
        rendered = [group[0] if len(group) == 1 else f"({', '.join(group)})" for group in self.groups]
        return " | ".join(rendered)


AUTHENTICATION_REQUIREMENTS: Final[dict[AuthenticationType, AuthenticationRequirement]] = {
    AuthenticationType.BASIC: AuthenticationRequirement(
        AuthenticationType.BASIC,
        groups=(
            ("Username", "Password"),
            ("AccountSid", "AuthToken"),
            ("User", "Pass"),
            ("ClientId", "ClientSecret"),
        ),
        description="one of the parameter pairs",
    ),
    AuthenticationType.API_KEY: AuthenticationRequirement(
        AuthenticationType.API_KEY,
        groups=(("ApiKey",), ("Key",), ("AccessKey",)),
        description="one of the parameters",
    ),
    AuthenticationType.TOKEN: AuthenticationRequirement(
        AuthenticationType.TOKEN,
        groups=(("Token",), ("AccessToken",), ("BearerToken",), ("AuthToken",)),
        description="one of the parameters",
    ),
    AuthenticationType.CLIENT_CREDENTIALS: AuthenticationRequirement(
        AuthenticationType.CLIENT_CREDENTIALS,
        groups=(("ClientId", "ClientSecret"),),
        description="both parameters",
    ),
    AuthenticationType.CERTIFICATE: AuthenticationRequirement(
        AuthenticationType.CERTIFICATE,
        groups=(("Certificate",), ("CertificatePath",), ("CertificateThumbprint",), ("PfxFile",)),
        optional=("CertificatePassword", "PfxPassword"),
        description="one of the parameters",
    ),
    AuthenticationType.CUSTOM: AuthenticationRequirement(
        AuthenticationType.CUSTOM,
        groups=(
            ("CustomAuth",),
            ("AuthenticationData",),
            ("Credentials",),
            ("AuthConfig",),
            ("SecretKey",),
            ("PrivateKey",),
            ("Signature",),
            ("Hash",),
        ),
        description="at least one of the parameters",
    ),
}


def get_requirement(auth_type: AuthenticationType) -> AuthenticationRequirement | None:
    """Get the requirement for an authentication type (None for ``NONE``)."""
    return AUTHENTICATION_REQUIREMENTS.get(auth_type)


def authentication_parameter_names(auth_types: Iterable[AuthenticationType]) -> frozenset[str]:
    """Casefolded parameter names consumed by the given authentication types.

    Args:
        auth_types: Declared authentication types

    Returns:
        Union of the known names of every declared type
    """
    names: set[str] = set()
    for auth_type in auth_types:
        requirement = get_requirement(auth_type)
        if requirement is not None:
            names.update(requirement.known_names())
    return frozenset(names)


def check_authentication(
    auth_types: Iterable[AuthenticationType],
    resolve: ValueResolver,
) -> ValidationFailure | None:
    """Evaluate the declared authentication types against resolved values.

    The check is skipped when no type, or only ``NONE``, is declared. Each
    remaining type is evaluated independently; satisfying any one of them is
    enough. When ``NONE`` is among the declared types an unsatisfied check
    produces no failure.

    Args:
        auth_types: Authentication types declared by the schema
        resolve: Callable returning the value of a setting (None when absent)

    Returns:
        A single aggregate failure, or None when authentication is satisfied
    """
    declared = list(auth_types)
    effective = [auth_type for auth_type in declared if auth_type is not AuthenticationType.NONE]
    if not effective:
        return None

    explanations: list[str] = []
    for auth_type in effective:
        requirement = get_requirement(auth_type)
        if requirement is None:
            continue
        if requirement.is_satisfied_by(resolve):
            return None
        explanations.append(f"{auth_type} requires {requirement.description}: {requirement.describe_pattern()}")

    if AuthenticationType.NONE in declared:
        return None

    message = (
        "Connection settings do not satisfy any of the supported authentication types. "
        f"Supported types: {', '.join(str(auth_type) for auth_type in declared)}. "
        f"Requirements: {'; '.join(explanations)}"
    )
    return ValidationFailure(message, (AUTHENTICATION_MEMBER,), FailureCode.AUTHENTICATION)
