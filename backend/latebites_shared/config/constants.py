"""
Centralized constants for the backend application.

Usage:
    from latebites_shared.config.constants import Roles, OrderStatus, CATALOG_RADIUS_KM

    if status == OrderStatus.PENDING:
        ...
"""

from typing import Final


# =============================================================================
# Account Roles
# =============================================================================


class Roles:
    """Account role constants. A principal resolves to at most one role."""

    CUSTOMER: Final[str] = "customer"
    RESTAURANT: Final[str] = "restaurant"

    ALL: Final[list[str]] = [CUSTOMER, RESTAURANT]


# Profile tables are checked in this order; the first match wins.
ROLE_RESOLUTION_ORDER: Final[tuple[str, ...]] = (Roles.CUSTOMER, Roles.RESTAURANT)


# =============================================================================
# Entity Status Constants
# =============================================================================


class OrderStatus:
    """Order status constants."""

    PENDING: Final[str] = "pending"
    CONFIRMED: Final[str] = "confirmed"
    READY: Final[str] = "ready"
    COMPLETED: Final[str] = "completed"
    CANCELLED: Final[str] = "cancelled"

    ALL: Final[list[str]] = [PENDING, CONFIRMED, READY, COMPLETED, CANCELLED]
    # Orders in these states hold a unit of their bag
    HOLDING: Final[list[str]] = [PENDING, CONFIRMED, READY, COMPLETED]


class PaymentMethod:
    """Payment method constants."""

    PAY_AT_PICKUP: Final[str] = "pay_at_pickup"
    ONLINE: Final[str] = "online"

    ALL: Final[list[str]] = [PAY_AT_PICKUP, ONLINE]


class PaymentStatus:
    """Payment status constants."""

    PENDING: Final[str] = "pending"
    PAID: Final[str] = "paid"
    REFUNDED: Final[str] = "refunded"

    ALL: Final[list[str]] = [PENDING, PAID, REFUNDED]


class BagSize:
    """Rescue bag size constants."""

    SMALL: Final[str] = "small"
    MEDIUM: Final[str] = "medium"
    LARGE: Final[str] = "large"

    ALL: Final[list[str]] = [SMALL, MEDIUM, LARGE]


# =============================================================================
# Catalog
# =============================================================================

# Restaurants farther than this from the customer are not listed (inclusive).
CATALOG_RADIUS_KM: Final[float] = 7.0

# Distance band thresholds (km) used for display hints
NEAR_DISTANCE_KM: Final[float] = 2.0
MEDIUM_DISTANCE_KM: Final[float] = 5.0


# =============================================================================
# Validation Limits
# =============================================================================


class Limits:
    """Input validation limits."""

    MAX_PHONE_LENGTH: Final[int] = 20
    MAX_SEARCH_TERM_LENGTH: Final[int] = 100

    # Default country code applied to bare phone numbers
    DEFAULT_PHONE_PREFIX: Final[str] = "+91"
