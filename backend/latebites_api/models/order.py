"""
Order Model.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from sqlalchemy import Boolean, CheckConstraint, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from latebites_shared.config.constants import OrderStatus, PaymentMethod, PaymentStatus
from .base import Base, TimestampMixin, new_id

if TYPE_CHECKING:
    from .customer import Customer
    from .restaurant import Restaurant, RescueBag


class Order(TimestampMixin, Base):
    """
    A customer's reservation of a rescue bag.

    Created in status "pending" by the reservation flow; later status
    changes belong to fulfilment. inventory_adjusted is False when the bag's
    quantity could not be decremented after the order was written, which
    leaves the order waiting for reconciliation.
    """

    __tablename__ = "orders"

    id: Mapped[str] = mapped_column(String(64), primary_key=True, default=new_id)
    customer_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("customers.id"), nullable=False, index=True
    )
    rescue_bag_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("rescue_bags.id"), nullable=False, index=True
    )
    restaurant_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("restaurants.id"), nullable=False, index=True
    )
    quantity: Mapped[int] = mapped_column(Integer, default=1, nullable=False)
    total_price_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[str] = mapped_column(
        String(20), default=OrderStatus.PENDING, nullable=False, index=True
    )
    pickup_time: Mapped[Optional[str]] = mapped_column(Text)
    payment_method: Mapped[str] = mapped_column(
        String(20), default=PaymentMethod.PAY_AT_PICKUP, nullable=False
    )
    payment_status: Mapped[str] = mapped_column(
        String(20), default=PaymentStatus.PENDING, nullable=False
    )
    qr_code: Mapped[Optional[str]] = mapped_column(Text)
    cancellation_reason: Mapped[Optional[str]] = mapped_column(Text)
    inventory_adjusted: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)

    customer: Mapped["Customer"] = relationship(back_populates="orders")
    bag: Mapped["RescueBag"] = relationship(back_populates="orders")
    restaurant: Mapped["Restaurant"] = relationship()

    __table_args__ = (
        CheckConstraint("quantity > 0", name="chk_order_quantity_positive"),
        CheckConstraint("total_price_cents >= 0", name="chk_order_total_non_negative"),
        Index("ix_orders_customer_created", "customer_id", "created_at"),
        Index("ix_orders_inventory_adjusted", "inventory_adjusted"),
    )

    def __repr__(self) -> str:
        return f"<Order(id={self.id}, bag_id={self.rescue_bag_id}, status='{self.status}')>"
