"""
Identity and role resolution.

A principal (auth provider user) owns at most one profile: a Customer or a
Restaurant row keyed by the principal id. Tables are checked in
ROLE_RESOLUTION_ORDER, so a principal that somehow has both resolves as a
customer.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

from sqlalchemy.orm import Session

from latebites_shared.config.constants import ROLE_RESOLUTION_ORDER, Roles
from latebites_shared.config.logging import auth_logger as logger
from latebites_api.models import Customer, Restaurant
from latebites_api.repositories import CustomerRepository, RestaurantRepository

if TYPE_CHECKING:
    from latebites_shared.security import Principal
    from latebites_api.services.auth import AuthProviderClient


class ProfileNotFound(Exception):
    """No profile of the requested role exists for the principal."""

    def __init__(self, role: str, principal_id: str | None = None):
        self.role = role
        self.principal_id = principal_id
        super().__init__(f"No {role} profile for principal {principal_id}")


@dataclass(frozen=True)
class ResolvedProfile:
    """The role a principal resolved to, with its profile row."""

    role: str | None = None
    customer: Customer | None = None
    restaurant: Restaurant | None = None

    @property
    def profile(self) -> Customer | Restaurant | None:
        return self.customer if self.customer is not None else self.restaurant


class ProfileResolver:
    """Looks up the profile rows of a principal."""

    def __init__(self, db: Session):
        self._finders: dict[str, Callable[[str], Customer | Restaurant | None]] = {
            Roles.CUSTOMER: CustomerRepository(db).find_by_id,
            Roles.RESTAURANT: RestaurantRepository(db).find_by_id,
        }

    def resolve(self, principal_id: str) -> ResolvedProfile:
        """First profile found in resolution order, or role=None when there is none."""
        for role in ROLE_RESOLUTION_ORDER:
            profile = self._finders[role](principal_id)
            if profile is not None:
                return ResolvedProfile(role=role, **{role: profile})
        return ResolvedProfile()

    def require(self, principal_id: str, role: str) -> Customer | Restaurant:
        """
        The principal's profile for a specific role.

        Raises:
            ProfileNotFound: No row in that role's table.
        """
        if role not in self._finders:
            raise ValueError(f"Unknown role: {role}")
        profile = self._finders[role](principal_id)
        if profile is None:
            raise ProfileNotFound(role, principal_id)
        return profile


class AuthSession:
    """
    The signed-in principal and the profile it resolved to.

    Built once per request from the verified access token; call refresh()
    after anything that creates or edits a profile.

    Usage:
        session = AuthSession.establish(ProfileResolver(db), principal)
        if session.role == "customer":
            ...
    """

    def __init__(self, resolver: ProfileResolver, principal: "Principal | None" = None):
        self._resolver = resolver
        self.principal = principal
        self._resolved = ResolvedProfile()

    @classmethod
    def establish(cls, resolver: ProfileResolver, principal: "Principal | None") -> "AuthSession":
        session = cls(resolver, principal)
        session.refresh()
        return session

    @property
    def is_authenticated(self) -> bool:
        return self.principal is not None

    @property
    def role(self) -> str | None:
        return self._resolved.role

    @property
    def customer(self) -> Customer | None:
        return self._resolved.customer

    @property
    def restaurant(self) -> Restaurant | None:
        return self._resolved.restaurant

    @property
    def profile(self) -> Customer | Restaurant | None:
        return self._resolved.profile

    def refresh(self) -> ResolvedProfile:
        if self.principal is None:
            self._resolved = ResolvedProfile()
        else:
            self._resolved = self._resolver.resolve(self.principal.id)
        return self._resolved

    def require(self, role: str) -> Customer | Restaurant:
        """
        Profile for the role the user selected at sign-in.

        Raises:
            ProfileNotFound: No such profile (also when unauthenticated).
        """
        if self.principal is None:
            raise ProfileNotFound(role)
        return self._resolver.require(self.principal.id, role)

    def sign_out(self, provider: "AuthProviderClient | None" = None) -> None:
        """
        End the session locally and, when given, at the auth provider.

        Provider errors are logged; the local state is cleared regardless.
        """
        if provider is not None and self.principal is not None:
            provider.sign_out(self.principal.access_token)
        if self.principal is not None:
            logger.info("Session signed out", principal_id=self.principal.id)
        self.principal = None
        self._resolved = ResolvedProfile()
