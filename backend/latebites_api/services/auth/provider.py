"""
Client for the hosted auth provider (GoTrue-compatible REST API).

Sign-up, passwords and OAuth consent all live at the provider. The backend
only exchanges OAuth authorization codes for sessions and revokes sessions
on sign-out.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx

from latebites_shared.config.logging import auth_logger as logger
from latebites_shared.config.settings import settings


class AuthProviderError(Exception):
    """The auth provider rejected a request or could not be reached."""


@dataclass(frozen=True)
class ProviderSession:
    """A session issued by the auth provider."""

    access_token: str
    user_id: str
    email: str | None = None
    full_name: str | None = None
    refresh_token: str | None = None
    expires_in: int | None = None

    @classmethod
    def from_response(cls, body: dict[str, Any]) -> "ProviderSession":
        user = body.get("user") or {}
        metadata = user.get("user_metadata") or {}
        if not body.get("access_token") or not user.get("id"):
            raise AuthProviderError("Provider session is missing access token or user")
        return cls(
            access_token=body["access_token"],
            user_id=str(user["id"]),
            email=user.get("email"),
            full_name=metadata.get("full_name") or metadata.get("name"),
            refresh_token=body.get("refresh_token"),
            expires_in=body.get("expires_in"),
        )


class AuthProviderClient:
    """
    Thin synchronous client for the provider's REST endpoints.

    Args:
        base_url: Provider base URL, e.g. https://<project>.supabase.co
        anon_key: Public API key sent as the `apikey` header.
        client: Optional httpx client (tests pass one with a mock transport).
    """

    def __init__(
        self,
        base_url: str | None = None,
        anon_key: str | None = None,
        timeout: float | None = None,
        client: httpx.Client | None = None,
    ):
        self._base_url = (base_url or settings.auth_provider_url).rstrip("/")
        self._anon_key = settings.auth_provider_anon_key if anon_key is None else anon_key
        self._timeout = timeout or settings.auth_provider_timeout
        self._client = client

    def _post(self, path: str, **kwargs: Any) -> httpx.Response:
        headers = {"apikey": self._anon_key, **kwargs.pop("headers", {})}
        url = f"{self._base_url}{path}"
        if self._client is not None:
            return self._client.post(url, headers=headers, **kwargs)
        with httpx.Client(timeout=self._timeout) as client:
            return client.post(url, headers=headers, **kwargs)

    def exchange_code_for_session(self, code: str, code_verifier: str | None) -> ProviderSession:
        """
        Exchange an OAuth authorization code (PKCE flow) for a session.

        Raises:
            AuthProviderError: Code rejected, provider unreachable or
                malformed response.
        """
        try:
            response = self._post(
                "/auth/v1/token",
                params={"grant_type": "pkce"},
                json={"auth_code": code, "code_verifier": code_verifier},
            )
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPStatusError as e:
            logger.warning("Code exchange rejected", status_code=e.response.status_code)
            raise AuthProviderError("Authorization code was rejected") from e
        except (httpx.HTTPError, ValueError) as e:
            logger.error("Code exchange failed", error=str(e))
            raise AuthProviderError("Auth provider unavailable") from e

        return ProviderSession.from_response(body)

    def sign_out(self, access_token: str) -> bool:
        """Revoke a session at the provider. Failures are logged, not raised."""
        try:
            response = self._post(
                "/auth/v1/logout",
                headers={"Authorization": f"Bearer {access_token}"},
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.warning("Provider sign-out failed", error=str(e))
            return False
        return True


def get_auth_provider() -> AuthProviderClient:
    """FastAPI dependency for the auth provider client."""
    return AuthProviderClient()
