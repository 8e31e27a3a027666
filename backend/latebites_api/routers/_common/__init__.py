"""
Shared router dependencies.
"""

from .dependencies import (
    get_auth_session,
    get_browsing_session,
    get_profile_resolver,
    require_customer,
    session_output,
)

__all__ = [
    "get_auth_session",
    "get_browsing_session",
    "get_profile_resolver",
    "require_customer",
    "session_output",
]
