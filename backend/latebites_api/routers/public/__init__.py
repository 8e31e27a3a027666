"""
Public routers - no authentication required.
"""

from .health import router as health_router
from .catalog import router as catalog_router
from .onboarding import router as onboarding_router

__all__ = ["health_router", "catalog_router", "onboarding_router"]
