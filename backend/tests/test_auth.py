"""
Tests for access tokens, session endpoints and the OAuth callback.
"""

import pytest
from fastapi import HTTPException

from latebites_api.models import Customer
from latebites_api.services.auth import ProviderSession
from latebites_shared.config.settings import settings
from latebites_shared.security import get_bearer_token, sign_access_token, verify_access_token
from tests.conftest import auth_headers_for, make_customer, make_restaurant


class TestAccessTokens:
    """Token signing and verification."""

    def test_sign_and_verify(self):
        token = sign_access_token("principal-1", email="p1@example.com")

        payload = verify_access_token(token)

        assert payload["sub"] == "principal-1"
        assert payload["email"] == "p1@example.com"
        assert payload["aud"] == "authenticated"

    def test_expired_token_rejected(self):
        token = sign_access_token("principal-1", ttl_seconds=-60)

        with pytest.raises(HTTPException) as exc_info:
            verify_access_token(token)

        assert exc_info.value.status_code == 401
        assert exc_info.value.detail == "Token has expired"

    def test_tampered_token_rejected(self):
        token = sign_access_token("principal-1") + "x"

        with pytest.raises(HTTPException) as exc_info:
            verify_access_token(token)

        assert exc_info.value.detail == "Invalid token"

    def test_bearer_header_parsing(self):
        assert get_bearer_token(None) is None
        assert get_bearer_token("Bearer abc") == "abc"
        with pytest.raises(HTTPException):
            get_bearer_token("Basic abc")


class TestSessionEndpoint:
    """POST /api/auth/session"""

    def test_anonymous_is_401(self, client):
        response = client.post("/api/auth/session", json={"role": "customer"})
        assert response.status_code == 401

    def test_customer_selecting_customer_role(self, client, customer_headers, fake_provider):
        response = client.post("/api/auth/session", json={"role": "customer"}, headers=customer_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["role"] == "customer"
        assert data["customer"]["id"] == "customer-1"
        assert data["restaurant"] is None
        assert fake_provider.signed_out == []

    def test_wrong_role_signs_out(self, client, customer_headers, fake_provider):
        response = client.post("/api/auth/session", json={"role": "restaurant"}, headers=customer_headers)

        assert response.status_code == 404
        assert "No restaurant account found" in response.json()["detail"]
        assert len(fake_provider.signed_out) == 1

    def test_wrong_role_clears_session_cookie(self, client, seed_customer, fake_provider):
        fake_provider.session = ProviderSession(
            access_token=sign_access_token(seed_customer.id),
            user_id=seed_customer.id,
            email=seed_customer.email,
            full_name=seed_customer.name,
            expires_in=3600,
        )
        client.get("/auth/callback", params={"code": "good-code"}, follow_redirects=False)
        assert client.get("/api/auth/me").status_code == 200

        response = client.post("/api/auth/session", json={"role": "restaurant"})

        assert response.status_code == 404
        assert settings.session_cookie_name in response.headers["set-cookie"]
        assert len(fake_provider.signed_out) == 1
        # The browser would drop the cookie, so the same client is anonymous now
        assert client.get("/api/auth/me").status_code == 401

    def test_restaurant_selecting_restaurant_role(self, client, db_session):
        make_restaurant(db_session, "Owner Kitchen", restaurant_id="owner-1")

        response = client.post(
            "/api/auth/session", json={"role": "restaurant"}, headers=auth_headers_for("owner-1")
        )

        assert response.status_code == 200
        assert response.json()["restaurant"]["name"] == "Owner Kitchen"

    def test_unknown_role_is_422(self, client, customer_headers):
        response = client.post("/api/auth/session", json={"role": "admin"}, headers=customer_headers)
        assert response.status_code == 422


class TestMeEndpoint:
    """GET /api/auth/me"""

    def test_me_requires_authentication(self, client):
        assert client.get("/api/auth/me").status_code == 401

    def test_me_before_onboarding_has_no_role(self, client, db_session):
        response = client.get("/api/auth/me", headers=auth_headers_for("just-signed-up"))

        assert response.status_code == 200
        assert response.json()["role"] is None

    def test_me_with_session_cookie(self, client, db_session):
        make_customer(db_session, "cookie-user")
        client.cookies.set(settings.session_cookie_name, sign_access_token("cookie-user"))

        response = client.get("/api/auth/me")

        assert response.status_code == 200
        assert response.json()["role"] == "customer"

    def test_customer_takes_precedence_over_restaurant(self, client, db_session):
        make_customer(db_session, "both-1")
        make_restaurant(db_session, "Dual", restaurant_id="both-1")

        data = client.get("/api/auth/me", headers=auth_headers_for("both-1")).json()

        assert data["role"] == "customer"


class TestLogout:
    """POST /api/auth/logout"""

    def test_logout_revokes_and_clears_cookie(self, client, customer_headers, fake_provider):
        response = client.post("/api/auth/logout", headers=customer_headers)

        assert response.status_code == 200
        assert response.json() == {"success": True}
        assert len(fake_provider.signed_out) == 1
        assert settings.session_cookie_name in response.headers["set-cookie"]

    def test_anonymous_logout_is_harmless(self, client, fake_provider):
        response = client.post("/api/auth/logout")

        assert response.status_code == 200
        assert fake_provider.signed_out == []


class TestOAuthCallback:
    """GET /auth/callback"""

    def test_callback_creates_customer_and_sets_cookie(self, client, db_session, fake_provider):
        client.cookies.set(settings.auth_code_verifier_cookie, "verifier-123")

        response = client.get(
            "/auth/callback",
            params={"code": "good-code", "redirect": "/bags/42"},
            follow_redirects=False,
        )

        assert response.status_code == 303
        assert response.headers["location"] == "http://localhost:3000/bags/42"
        assert fake_provider.exchanged == [("good-code", "verifier-123")]
        assert response.cookies.get(settings.session_cookie_name) == "provider-access-token"

        customer = db_session.get(Customer, "oauth-user-1")
        assert customer.name == "Meera K"
        assert customer.email == "meera@example.com"
        assert customer.phone == ""

    def test_callback_keeps_existing_customer(self, client, db_session):
        make_customer(db_session, "oauth-user-1", name="Meera")

        client.get("/auth/callback", params={"code": "good-code"}, follow_redirects=False)

        db_session.expire_all()
        assert db_session.get(Customer, "oauth-user-1").name == "Meera"

    def test_unsafe_redirect_falls_back_to_browse(self, client):
        response = client.get(
            "/auth/callback",
            params={"code": "good-code", "redirect": "//evil.example/phish"},
            follow_redirects=False,
        )

        assert response.headers["location"] == "http://localhost:3000/browse"

    def test_rejected_code_redirects_to_error_page(self, client, db_session):
        response = client.get("/auth/callback", params={"code": "bad-code"}, follow_redirects=False)

        assert response.status_code == 303
        assert response.headers["location"] == "http://localhost:3000/auth/auth-code-error"
        assert db_session.get(Customer, "oauth-user-1") is None

    def test_missing_code_redirects_to_error_page(self, client, fake_provider):
        response = client.get("/auth/callback", follow_redirects=False)

        assert response.headers["location"].endswith("/auth/auth-code-error")
        assert fake_provider.exchanged == []

    def test_restaurant_callback_creates_no_customer(self, client, db_session):
        client.get(
            "/auth/callback", params={"code": "good-code", "role": "restaurant"}, follow_redirects=False
        )

        assert db_session.get(Customer, "oauth-user-1") is None
