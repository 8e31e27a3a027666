"""
Customer routers - require a signed-in customer.
"""

from .reservations import router as reservations_router
from .orders import router as orders_router
from .profile import router as profile_router

__all__ = ["reservations_router", "orders_router", "profile_router"]
