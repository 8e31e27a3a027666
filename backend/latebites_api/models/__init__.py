"""
SQLAlchemy ORM Models Package.

All models are organized into domain-specific modules:
- base: Base class and TimestampMixin
- customer: Customer
- restaurant: Restaurant, RescueBag
- order: Order
- onboarding: OnboardingSubmission
"""

from .base import Base, TimestampMixin, new_id
from .customer import Customer
from .restaurant import Restaurant, RescueBag
from .order import Order
from .onboarding import OnboardingSubmission

__all__ = [
    "Base",
    "TimestampMixin",
    "new_id",
    "Customer",
    "Restaurant",
    "RescueBag",
    "Order",
    "OnboardingSubmission",
]
