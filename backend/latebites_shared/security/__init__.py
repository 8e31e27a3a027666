"""
Security module: access token verification, principals, rate limiting.
"""

from latebites_shared.security.auth import (
    Principal,
    sign_access_token,
    verify_access_token,
    get_bearer_token,
    optional_principal,
    browsing_principal,
)
from latebites_shared.security.rate_limit import limiter, rate_limit_exceeded_handler

__all__ = [
    "Principal",
    "sign_access_token",
    "verify_access_token",
    "get_bearer_token",
    "optional_principal",
    "browsing_principal",
    "limiter",
    "rate_limit_exceeded_handler",
]
