"""
Tests for the auth provider client and the verification e-mail sender.
"""

import json

import httpx
import pytest

from latebites_api.services.auth import AuthProviderClient, AuthProviderError, ProviderSession
from latebites_api.services.email import (
    VerificationEmailSender,
    render_verification_email,
    verification_url,
)


def provider_with(handler, anon_key="anon-key"):
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return AuthProviderClient(base_url="https://auth.test/", anon_key=anon_key, client=client)


SESSION_BODY = {
    "access_token": "access-abc",
    "refresh_token": "refresh-abc",
    "expires_in": 3600,
    "user": {"id": "user-9", "email": "u9@example.com", "user_metadata": {"full_name": "Ravi S"}},
}


class TestAuthProviderClient:
    """Code exchange and sign-out against a mocked provider."""

    def test_exchange_code_for_session(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json=SESSION_BODY)

        session = provider_with(handler).exchange_code_for_session("code-1", "verifier-1")

        assert session == ProviderSession(
            access_token="access-abc",
            user_id="user-9",
            email="u9@example.com",
            full_name="Ravi S",
            refresh_token="refresh-abc",
            expires_in=3600,
        )
        request = seen[0]
        assert request.url.path == "/auth/v1/token"
        assert request.url.params["grant_type"] == "pkce"
        assert request.headers["apikey"] == "anon-key"
        assert json.loads(request.content) == {"auth_code": "code-1", "code_verifier": "verifier-1"}

    def test_rejected_code(self):
        provider = provider_with(lambda request: httpx.Response(400, json={"error": "invalid_grant"}))

        with pytest.raises(AuthProviderError):
            provider.exchange_code_for_session("bad", None)

    def test_unreachable_provider(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(AuthProviderError):
            provider_with(handler).exchange_code_for_session("code-1", None)

    def test_incomplete_session_body(self):
        provider = provider_with(lambda request: httpx.Response(200, json={"access_token": "x"}))

        with pytest.raises(AuthProviderError):
            provider.exchange_code_for_session("code-1", None)

    def test_sign_out(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(204)

        assert provider_with(handler).sign_out("access-abc") is True
        assert seen[0].url.path == "/auth/v1/logout"
        assert seen[0].headers["Authorization"] == "Bearer access-abc"

    def test_sign_out_failure_is_not_raised(self):
        assert provider_with(lambda request: httpx.Response(500)).sign_out("access-abc") is False


class TestVerificationEmail:
    """Resend e-mail sending."""

    def test_verification_url(self):
        assert verification_url("tok") == "http://localhost:3000/verify?token=tok"

    def test_rendered_email_escapes_names(self):
        html = render_verification_email("<b>Cafe</b>", "Anu & Co", "http://localhost:3000/verify?token=t")

        assert "&lt;b&gt;Cafe&lt;/b&gt;" in html
        assert "Anu &amp; Co" in html

    def test_send(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, json={"id": "email-1"})

        sender = VerificationEmailSender(api_key="re_test", client=httpx.Client(transport=httpx.MockTransport(handler)))

        assert sender.send("owner@example.com", "Cafe", "Anu", "tok") is True
        body = json.loads(seen[0].content)
        assert body["to"] == "owner@example.com"
        assert "verify?token=tok" in body["html"]
        assert seen[0].headers["Authorization"] == "Bearer re_test"

    def test_missing_api_key_skips_send(self):
        def handler(request):
            raise AssertionError("no request expected")

        sender = VerificationEmailSender(api_key="", client=httpx.Client(transport=httpx.MockTransport(handler)))

        assert sender.enabled is False
        assert sender.send("owner@example.com", "Cafe", "Anu", "tok") is False

    def test_delivery_failure_returns_false(self):
        client = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(422)))

        assert VerificationEmailSender(api_key="re_test", client=client).send("o@example.com", "C", "A", "t") is False
