"""
Configuration module.

Contains:
- settings: Application settings from environment
- constants: Roles, statuses and catalog constants
- logging: Structured logging configuration
"""

from .settings import settings, get_settings, Settings, DATABASE_URL
from .constants import (
    Roles,
    ROLE_RESOLUTION_ORDER,
    OrderStatus,
    PaymentMethod,
    PaymentStatus,
    BagSize,
    CATALOG_RADIUS_KM,
)

__all__ = [
    "settings",
    "get_settings",
    "Settings",
    "DATABASE_URL",
    "Roles",
    "ROLE_RESOLUTION_ORDER",
    "OrderStatus",
    "PaymentMethod",
    "PaymentStatus",
    "BagSize",
    "CATALOG_RADIUS_KM",
]
