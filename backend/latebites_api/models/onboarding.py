"""
Onboarding Submission Model.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import Boolean, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin, new_id


class OnboardingSubmission(TimestampMixin, Base):
    """
    A restaurant's pending onboarding request.

    The contact e-mail is confirmed through a one-time token mailed to it;
    listing the restaurant (Restaurant.verified) stays an operator decision.
    """

    __tablename__ = "onboarding_submissions"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    restaurant_id: Mapped[Optional[str]] = mapped_column(
        String(64), ForeignKey("restaurants.id"), index=True
    )
    restaurant_name: Mapped[str] = mapped_column(Text, nullable=False)
    contact_person: Mapped[str] = mapped_column(Text, nullable=False)
    email: Mapped[str] = mapped_column(String(320), nullable=False, unique=True)
    phone: Mapped[str] = mapped_column(String(20), nullable=False)
    city: Mapped[Optional[str]] = mapped_column(Text)
    verified: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    verification_token: Mapped[str] = mapped_column(String(128), nullable=False, unique=True)

    def __repr__(self) -> str:
        return f"<OnboardingSubmission(id={self.id}, email='{self.email}', verified={self.verified})>"
