"""
FastAPI dependencies resolving the session and the caller's profile.
"""

from fastapi import Depends
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from latebites_shared.config.constants import Roles
from latebites_shared.config.logging import catalog_logger
from latebites_shared.infrastructure.db import get_db
from latebites_shared.security import Principal, browsing_principal, optional_principal
from latebites_shared.utils.exceptions import AuthenticationError, InsufficientRoleError
from latebites_shared.utils.schemas import (
    CustomerOutput,
    RestaurantProfileOutput,
    SessionOutput,
)
from latebites_api.models import Customer
from latebites_api.services.domain import AuthSession, ProfileResolver


def get_profile_resolver(db: Session = Depends(get_db)) -> ProfileResolver:
    return ProfileResolver(db)


def get_auth_session(
    principal: Principal | None = Depends(optional_principal),
    resolver: ProfileResolver = Depends(get_profile_resolver),
) -> AuthSession:
    """
    The per-request session. Anonymous requests get an unauthenticated one;
    an invalid token still fails with 401.
    """
    return AuthSession.establish(resolver, principal)


def get_browsing_session(
    principal: Principal | None = Depends(browsing_principal),
    resolver: ProfileResolver = Depends(get_profile_resolver),
    db: Session = Depends(get_db),
) -> AuthSession:
    """
    Session for public pages. A stale cookie browses anonymously, and a
    failed profile lookup leaves the session without a profile so the page
    can still report its own availability.
    """
    try:
        return AuthSession.establish(resolver, principal)
    except SQLAlchemyError as e:
        db.rollback()
        catalog_logger.error(
            "Profile lookup failed, browsing without a profile",
            principal_id=principal.id if principal else None,
            error=str(e),
        )
        return AuthSession(resolver, principal)


def require_customer(session: AuthSession = Depends(get_auth_session)) -> Customer:
    """
    The caller's customer profile.

    Raises:
        AuthenticationError: No credentials.
        InsufficientRoleError: The principal does not resolve to a customer.
    """
    if not session.is_authenticated:
        raise AuthenticationError()
    if session.role != Roles.CUSTOMER or session.customer is None:
        raise InsufficientRoleError(Roles.CUSTOMER, principal_id=session.principal.id)
    return session.customer


def session_output(session: AuthSession) -> SessionOutput:
    """Serialize a session for /api/auth responses."""
    return SessionOutput(
        principal_id=session.principal.id,
        email=session.principal.email,
        role=session.role,
        customer=CustomerOutput.model_validate(session.customer) if session.customer else None,
        restaurant=(
            RestaurantProfileOutput.model_validate(session.restaurant)
            if session.restaurant
            else None
        ),
    )
