"""
Outgoing e-mail.
"""

from .verification import (
    VerificationEmailSender,
    get_email_sender,
    render_verification_email,
    verification_url,
)

__all__ = [
    "VerificationEmailSender",
    "get_email_sender",
    "render_verification_email",
    "verification_url",
]
