"""
Session endpoints: role-selected sign-in check, current identity, sign-out.
"""

from fastapi import APIRouter, Depends, Response

from latebites_shared.config.logging import auth_logger as logger
from latebites_shared.config.settings import settings
from latebites_shared.utils.exceptions import AuthenticationError, ProfileNotFoundHTTPError
from latebites_shared.utils.schemas import SessionOutput, SessionRequest
from latebites_api.routers._common import get_auth_session, session_output
from latebites_api.services.auth import AuthProviderClient, get_auth_provider
from latebites_api.services.domain import AuthSession, ProfileNotFound


router = APIRouter(prefix="/api/auth", tags=["auth"])


def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(key=settings.session_cookie_name, path="/")


def expired_session_cookie() -> dict[str, str]:
    """Set-Cookie header that drops the session cookie, for error responses."""
    response = Response()
    clear_session_cookie(response)
    return {"set-cookie": response.headers["set-cookie"]}


@router.post("/session", response_model=SessionOutput)
def establish_session(
    body: SessionRequest,
    session: AuthSession = Depends(get_auth_session),
    provider: AuthProviderClient = Depends(get_auth_provider),
) -> SessionOutput:
    """
    Confirm the principal has a profile for the role chosen at sign-in.

    Without one the principal is signed out at the provider and gets a 404
    that also expires the session cookie, so a customer cannot land in the
    restaurant dashboard or vice versa.
    """
    if not session.is_authenticated:
        raise AuthenticationError()

    principal_id = session.principal.id
    try:
        session.require(body.role)
    except ProfileNotFound:
        session.sign_out(provider)
        raise ProfileNotFoundHTTPError(
            body.role, headers=expired_session_cookie(), principal_id=principal_id
        )

    logger.info("Session established", principal_id=principal_id, role=session.role)
    return session_output(session)


@router.get("/me", response_model=SessionOutput)
def me(session: AuthSession = Depends(get_auth_session)) -> SessionOutput:
    """Resolved role and profile of the caller; role is null before onboarding."""
    if not session.is_authenticated:
        raise AuthenticationError()
    return session_output(session)


@router.post("/logout")
def logout(
    response: Response,
    session: AuthSession = Depends(get_auth_session),
    provider: AuthProviderClient = Depends(get_auth_provider),
) -> dict:
    """Revoke the provider session and drop the session cookie."""
    session.sign_out(provider)
    clear_session_cookie(response)
    return {"success": True}
