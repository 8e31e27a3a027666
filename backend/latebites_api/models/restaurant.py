"""
Restaurant and RescueBag Models.
"""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING, Optional

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Date,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from latebites_shared.utils.geo import Coordinates
from .base import Base, TimestampMixin, new_id

if TYPE_CHECKING:
    from .order import Order


class Restaurant(TimestampMixin, Base):
    """
    A restaurant listing rescue bags.

    Only restaurants that are both verified and active appear in the catalog.
    Onboarded restaurants start unverified and without coordinates until an
    operator completes their listing.
    """

    __tablename__ = "restaurants"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    owner_name: Mapped[str] = mapped_column(Text, nullable=False)
    email: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    phone: Mapped[str] = mapped_column(String(20), nullable=False)

    address_line1: Mapped[Optional[str]] = mapped_column(Text)
    address_line2: Mapped[Optional[str]] = mapped_column(Text)
    city: Mapped[Optional[str]] = mapped_column(Text)
    state: Mapped[Optional[str]] = mapped_column(Text)
    pincode: Mapped[Optional[str]] = mapped_column(String(12))
    latitude: Mapped[Optional[float]] = mapped_column(Float)
    longitude: Mapped[Optional[float]] = mapped_column(Float)

    cuisine_types: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    profile_image_url: Mapped[Optional[str]] = mapped_column(Text)
    cover_image_url: Mapped[Optional[str]] = mapped_column(Text)

    verified: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    rescue_bags: Mapped[list["RescueBag"]] = relationship(
        back_populates="restaurant",
        order_by="RescueBag.created_at",
    )

    __table_args__ = (
        Index("ix_restaurants_visible", "verified", "is_active"),
    )

    @property
    def coordinates(self) -> Coordinates | None:
        if self.latitude is None or self.longitude is None:
            return None
        return Coordinates(self.latitude, self.longitude)

    def __repr__(self) -> str:
        return f"<Restaurant(id={self.id}, name='{self.name}', verified={self.verified})>"


class RescueBag(TimestampMixin, Base):
    """
    A surplus-food listing sold at a discount within a pickup window.

    quantity_available is the only contended counter in the system; it is
    only ever decremented through a guarded UPDATE (see BagRepository).
    """

    __tablename__ = "rescue_bags"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    restaurant_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("restaurants.id"), nullable=False, index=True
    )
    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)
    size: Mapped[str] = mapped_column(String(10), nullable=False)  # small, medium, large
    original_price_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    discounted_price_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    quantity_available: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    pickup_start_time: Mapped[str] = mapped_column(String(5), nullable=False)  # "HH:MM"
    pickup_end_time: Mapped[str] = mapped_column(String(5), nullable=False)
    available_date: Mapped[Optional[date]] = mapped_column(Date)
    image_url: Mapped[Optional[str]] = mapped_column(Text)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    restaurant: Mapped["Restaurant"] = relationship(back_populates="rescue_bags")
    orders: Mapped[list["Order"]] = relationship(back_populates="bag")

    __table_args__ = (
        CheckConstraint("quantity_available >= 0", name="chk_rescue_bag_quantity_non_negative"),
        CheckConstraint(
            "discounted_price_cents <= original_price_cents",
            name="chk_rescue_bag_discount_not_above_original",
        ),
        CheckConstraint("discounted_price_cents >= 0", name="chk_rescue_bag_price_non_negative"),
        CheckConstraint("size IN ('small', 'medium', 'large')", name="chk_rescue_bag_size"),
    )

    @property
    def is_available(self) -> bool:
        return self.is_active and self.quantity_available > 0

    def __repr__(self) -> str:
        return f"<RescueBag(id={self.id}, title='{self.title}', quantity_available={self.quantity_available})>"
