"""
OAuth callback.

The provider redirects here with an authorization code after a social
sign-in. The code is exchanged for a session, a customer profile is created
on first sign-in, and the browser is sent back into the web app with the
access token in an HttpOnly cookie.
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import RedirectResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from latebites_shared.config.constants import Roles
from latebites_shared.config.logging import auth_logger as logger
from latebites_shared.config.settings import settings
from latebites_shared.infrastructure.db import get_db
from latebites_shared.utils.validators import safe_redirect_path
from latebites_api.services.auth import AuthProviderClient, AuthProviderError, get_auth_provider
from latebites_api.services.domain import CustomerService


router = APIRouter(tags=["auth"])

AUTH_ERROR_PATH = "/auth/auth-code-error"


def _app_redirect(path: str) -> RedirectResponse:
    return RedirectResponse(f"{settings.app_url.rstrip('/')}{path}", status_code=303)


@router.get("/auth/callback")
def oauth_callback(
    request: Request,
    code: str | None = None,
    redirect: str | None = None,
    role: str = Roles.CUSTOMER,
    db: Session = Depends(get_db),
    provider: AuthProviderClient = Depends(get_auth_provider),
) -> RedirectResponse:
    if not code:
        return _app_redirect(AUTH_ERROR_PATH)

    verifier = request.cookies.get(settings.auth_code_verifier_cookie)
    try:
        provider_session = provider.exchange_code_for_session(code, verifier)
    except AuthProviderError:
        return _app_redirect(AUTH_ERROR_PATH)

    if role == Roles.CUSTOMER:
        try:
            CustomerService(db).ensure_oauth_customer(
                provider_session.user_id,
                provider_session.email,
                provider_session.full_name,
            )
        except SQLAlchemyError as e:
            logger.error("Failed to create customer profile on OAuth sign-in", error=str(e))
            return _app_redirect(AUTH_ERROR_PATH)

    response = _app_redirect(safe_redirect_path(redirect))
    response.set_cookie(
        key=settings.session_cookie_name,
        value=provider_session.access_token,
        httponly=True,
        secure=settings.cookie_secure,
        samesite=settings.cookie_samesite,
        max_age=provider_session.expires_in or settings.session_cookie_max_age,
        path="/",
    )
    response.delete_cookie(settings.auth_code_verifier_cookie, path="/")
    logger.info("OAuth sign-in completed", principal_id=provider_session.user_id, role=role)
    return response
