"""
Auth provider integration.
"""

from .provider import AuthProviderClient, AuthProviderError, ProviderSession, get_auth_provider

__all__ = [
    "AuthProviderClient",
    "AuthProviderError",
    "ProviderSession",
    "get_auth_provider",
]
