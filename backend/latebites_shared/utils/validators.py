"""
Shared validators for input sanitization.
"""

import re

from latebites_shared.config.constants import Limits


def sanitize_search_term(term: str | None, max_length: int = Limits.MAX_SEARCH_TERM_LENGTH) -> str:
    """
    Sanitize a free-text search term.

    Args:
        term: The search term to sanitize
        max_length: Maximum allowed length

    Returns:
        Sanitized search term ("" for None)
    """
    if not term:
        return ""

    term = term.strip()

    if len(term) > max_length:
        term = term[:max_length]

    # Remove null bytes and other control characters
    term = re.sub(r"[\x00-\x1f\x7f-\x9f]", "", term)

    return term


def normalize_phone(phone: str) -> str:
    """
    Prefix bare phone numbers with the default country code.

    "9876543210" -> "+919876543210"; numbers starting with "+" are kept.
    """
    phone = re.sub(r"[\s\-()]", "", phone or "")
    if not phone:
        raise ValueError("Phone number is required")
    if phone.startswith("+"):
        digits = phone[1:]
    else:
        digits = phone
        phone = f"{Limits.DEFAULT_PHONE_PREFIX}{phone}"
    if not digits.isdigit():
        raise ValueError("Phone number may only contain digits")
    if len(phone) > Limits.MAX_PHONE_LENGTH:
        raise ValueError("Phone number is too long")
    return phone


def safe_redirect_path(path: str | None, default: str = "/browse") -> str:
    """
    Return a same-site relative path for post-login redirects.

    Absolute URLs and protocol-relative paths ("//evil.example") fall back
    to the default to avoid open redirects.
    """
    if not path or not path.startswith("/") or path.startswith("//") or "\\" in path:
        return default
    return path
