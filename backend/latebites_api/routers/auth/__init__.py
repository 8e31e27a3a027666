"""
Authentication routers - /api/auth/* and the OAuth callback.
"""

from .callback import router as callback_router
from .session import router as session_router

__all__ = ["callback_router", "session_router"]
