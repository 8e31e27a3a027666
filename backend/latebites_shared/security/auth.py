"""
Authentication utilities.

Sign-in itself happens at the auth provider; this module only verifies the
provider's HS256 access tokens and exposes the authenticated principal to
FastAPI routes. The token may arrive as a Bearer header or in the session
cookie set by the OAuth callback.
"""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass
from typing import Any

import jwt
from fastapi import Cookie, Header, HTTPException, status

from latebites_shared.config.settings import settings
from latebites_shared.config.logging import get_logger

logger = get_logger(__name__)

JWT_ALGORITHM = "HS256"


@dataclass(frozen=True)
class Principal:
    """An authenticated identity issued by the auth provider."""

    id: str
    email: str | None
    access_token: str


def sign_access_token(
    principal_id: str,
    email: str | None = None,
    ttl_seconds: int = 3600,
    **claims: Any,
) -> str:
    """
    Sign an access token in the provider's format.

    Used for local development and tests; production tokens are minted by
    the auth provider with the same secret.
    """
    now = int(time.time())
    payload = {
        **claims,
        "sub": principal_id,
        "email": email,
        "aud": settings.auth_jwt_audience,
        "role": "authenticated",
        "iat": now,
        "exp": now + ttl_seconds,
        "session_id": str(uuid.uuid4()),
    }
    return jwt.encode(payload, settings.auth_jwt_secret, algorithm=JWT_ALGORITHM)


def verify_access_token(token: str) -> dict[str, Any]:
    """
    Verify and decode an access token.

    Raises:
        HTTPException: 401 if the token is invalid, expired or has no subject.
    """
    try:
        payload = jwt.decode(
            token,
            settings.auth_jwt_secret,
            algorithms=[JWT_ALGORITHM],
            audience=settings.auth_jwt_audience,
        )
    except jwt.ExpiredSignatureError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has expired",
        )
    except jwt.InvalidTokenError as e:
        # Log the actual error, return a generic message
        logger.warning("Access token validation failed", error=str(e))
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token",
        )

    if not payload.get("sub"):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token: missing subject claim",
        )
    return payload


def get_bearer_token(authorization: str | None) -> str | None:
    """
    Extract the bearer token from an Authorization header.

    Returns None when the header is absent.

    Raises:
        HTTPException: If the header is present but malformed.
    """
    if not authorization:
        return None
    if not authorization.startswith("Bearer "):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid Authorization header format. Expected: Bearer <token>",
        )
    return authorization.split(" ", 1)[1].strip()


def _principal_from_token(token: str) -> Principal:
    payload = verify_access_token(token)
    return Principal(id=str(payload["sub"]), email=payload.get("email"), access_token=token)


def optional_principal(
    authorization: str | None = Header(default=None, alias="Authorization"),
    session_cookie: str | None = Cookie(default=None, alias=settings.session_cookie_name),
) -> Principal | None:
    """
    FastAPI dependency returning the authenticated principal, or None when
    the request carries no credentials.

    Usage:
        @router.get("/catalog")
        def catalog(principal: Principal | None = Depends(optional_principal)):
            ...

    Raises:
        HTTPException: 401 if a token is present but invalid.
    """
    token = get_bearer_token(authorization) or session_cookie
    if not token:
        return None
    return _principal_from_token(token)


def browsing_principal(
    authorization: str | None = Header(default=None, alias="Authorization"),
    session_cookie: str | None = Cookie(default=None, alias=settings.session_cookie_name),
) -> Principal | None:
    """
    Like optional_principal, for public pages.

    A session cookie that no longer verifies (expired, or signed with a
    rotated secret) is ignored and the request is served anonymously.
    An explicit bearer token is still verified strictly.
    """
    bearer = get_bearer_token(authorization)
    if bearer:
        return _principal_from_token(bearer)
    if not session_cookie:
        return None
    try:
        return _principal_from_token(session_cookie)
    except HTTPException as e:
        logger.info("Ignoring stale session cookie", reason=e.detail)
        return None
