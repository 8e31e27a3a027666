"""
Domain Services.

Services hold the business rules and raise plain domain exceptions; routers
translate those into HTTP errors.

Structure:
    Router (thin controller)
        ↓
    Service (business logic)
        ↓
    Repository (data access)
        ↓
    Model (entity)

Usage:
    from latebites_api.services.domain import ReservationService

    result = ReservationService(db).reserve(customer_id, bag_id)
"""

from .reservation_service import (
    BagNotFoundError,
    ReconcileReport,
    ReservationFailed,
    ReservationPartiallyFailed,
    ReservationResult,
    ReservationService,
    SoldOut,
)
from .profile_service import AuthSession, ProfileNotFound, ProfileResolver, ResolvedProfile
from .onboarding_service import (
    DuplicateProfileError,
    InvalidOnboardingInput,
    OnboardingError,
    OnboardingOutcome,
    OnboardingService,
    OnboardingStorageError,
    VerificationOutcome,
    VerificationTokenNotFound,
)
from .customer_service import CustomerService, OrderNotFoundError

__all__ = [
    # Reservations
    "ReservationService",
    "ReservationResult",
    "ReconcileReport",
    "BagNotFoundError",
    "SoldOut",
    "ReservationFailed",
    "ReservationPartiallyFailed",
    # Identity
    "ProfileResolver",
    "ResolvedProfile",
    "ProfileNotFound",
    "AuthSession",
    # Onboarding
    "OnboardingService",
    "OnboardingOutcome",
    "VerificationOutcome",
    "OnboardingError",
    "InvalidOnboardingInput",
    "DuplicateProfileError",
    "OnboardingStorageError",
    "VerificationTokenNotFound",
    # Customer account
    "CustomerService",
    "OrderNotFoundError",
]
