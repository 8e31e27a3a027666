"""
Customer Model.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Optional

from sqlalchemy import DateTime, Float, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from latebites_shared.utils.geo import Coordinates
from .base import Base, TimestampMixin

if TYPE_CHECKING:
    from .order import Order


class Customer(TimestampMixin, Base):
    """
    A customer profile. The id is the auth provider's principal id.

    The location fields hold the last device position the customer shared;
    they are overwritten on every successful location request.
    """

    __tablename__ = "customers"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    phone: Mapped[str] = mapped_column(String(20), nullable=False)
    email: Mapped[Optional[str]] = mapped_column(Text, index=True)
    profile_image_url: Mapped[Optional[str]] = mapped_column(Text)

    latitude: Mapped[Optional[float]] = mapped_column(Float)
    longitude: Mapped[Optional[float]] = mapped_column(Float)
    location_updated_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))

    orders: Mapped[list["Order"]] = relationship(back_populates="customer")

    @property
    def location(self) -> Coordinates | None:
        if self.latitude is None or self.longitude is None:
            return None
        return Coordinates(self.latitude, self.longitude)

    def __repr__(self) -> str:
        return f"<Customer(id={self.id}, name='{self.name}')>"
