"""
Restaurant onboarding verification e-mails, sent through the Resend HTTP API.

Sending never raises: a missing API key skips the send with a warning and a
delivery failure is logged. The onboarding submission is already stored
either way and can be verified manually.
"""

from __future__ import annotations

from html import escape

import httpx

from latebites_shared.config.logging import mask_email, onboarding_logger as logger
from latebites_shared.config.settings import settings

VERIFICATION_SUBJECT = "Verify Your Email - Latebites Restaurant Onboarding"


def verification_url(token: str) -> str:
    return f"{settings.app_url.rstrip('/')}/verify?token={token}"


def render_verification_email(restaurant_name: str, contact_person: str, url: str) -> str:
    """HTML body of the verification e-mail."""
    restaurant_name = escape(restaurant_name)
    contact_person = escape(contact_person)
    url = escape(url, quote=True)
    return f"""<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>Verify Your Email - Latebites</title>
</head>
<body style="margin: 0; padding: 0; font-family: Arial, sans-serif; background-color: #F5F0E8;">
  <table role="presentation" style="width: 100%; border-collapse: collapse;">
    <tr>
      <td align="center" style="padding: 40px 20px;">
        <table role="presentation" style="max-width: 600px; width: 100%; background-color: #ffffff; border-radius: 8px;">
          <tr>
            <td style="padding: 40px 40px 30px; text-align: center; background-color: #2D4A3E;">
              <h1 style="margin: 0; font-family: Georgia, serif; font-size: 32px; font-weight: 300; color: #F5F0E8;">Latebites</h1>
              <p style="margin: 8px 0 0; font-size: 11px; text-transform: uppercase; letter-spacing: 0.3em; color: #F5F0E8;">Food Rescue Initiative</p>
            </td>
          </tr>
          <tr>
            <td style="padding: 40px;">
              <h2 style="margin: 0 0 20px; font-family: Georgia, serif; font-size: 28px; font-weight: 300; color: #1a1a1a;">Welcome, {contact_person}!</h2>
              <p style="margin: 0 0 20px; font-size: 16px; line-height: 1.6; color: #4a4a4a;">
                Thank you for your interest in joining <strong>Latebites</strong> and our food rescue mission.
                We're excited to have <strong>{restaurant_name}</strong> on board!
              </p>
              <p style="margin: 0 0 30px; font-size: 16px; line-height: 1.6; color: #4a4a4a;">
                To complete your onboarding request, please verify your email address by clicking the button below:
              </p>
              <p style="text-align: center; margin: 0 0 30px;">
                <a href="{url}" style="display: inline-block; padding: 16px 48px; background-color: #2D4A3E; color: #F5F0E8; text-decoration: none; font-size: 14px; text-transform: uppercase; letter-spacing: 0.1em;">Verify Email Address</a>
              </p>
              <p style="margin: 0; font-size: 14px; line-height: 1.6; color: #6a6a6a;">
                Or copy and paste this link into your browser:<br>
                <a href="{url}" style="color: #2D4A3E; word-break: break-all;">{url}</a>
              </p>
            </td>
          </tr>
        </table>
      </td>
    </tr>
  </table>
</body>
</html>
"""


class VerificationEmailSender:
    """
    Sends verification e-mails through Resend.

    Args:
        api_key: Resend API key; empty disables sending.
        client: Optional preconfigured httpx client (tests pass one with a
            mock transport).
    """

    def __init__(self, api_key: str | None = None, client: httpx.Client | None = None):
        self._api_key = settings.resend_api_key if api_key is None else api_key
        self._client = client

    @property
    def enabled(self) -> bool:
        return bool(self._api_key)

    def send(self, to: str, restaurant_name: str, contact_person: str, token: str) -> bool:
        """Send the verification e-mail. Returns True when Resend accepted it."""
        if not self.enabled:
            logger.warning("RESEND_API_KEY not configured, skipping verification e-mail", to=mask_email(to))
            return False

        payload = {
            "from": settings.email_from,
            "to": to,
            "subject": VERIFICATION_SUBJECT,
            "html": render_verification_email(restaurant_name, contact_person, verification_url(token)),
        }
        headers = {"Authorization": f"Bearer {self._api_key}"}

        try:
            if self._client is not None:
                response = self._client.post(settings.resend_api_url, json=payload, headers=headers)
            else:
                with httpx.Client(timeout=settings.email_timeout) as client:
                    response = client.post(settings.resend_api_url, json=payload, headers=headers)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logger.error("Verification e-mail send failed", to=mask_email(to), error=str(e))
            return False

        logger.info("Verification e-mail sent", to=mask_email(to))
        return True


def get_email_sender() -> VerificationEmailSender:
    """FastAPI dependency for the verification e-mail sender."""
    return VerificationEmailSender()
