"""
Order Repository - Data access for orders.
"""

from typing import Sequence

from sqlalchemy import Select, func, select
from sqlalchemy.orm import joinedload

from latebites_api.models import Order
from .base import BaseRepository


class OrderRepository(BaseRepository[Order]):
    """
    Repository for Order entities.

    Guarantees eager loading of bag and restaurant.
    """

    @property
    def model(self) -> type[Order]:
        return Order

    def _base_query(self) -> Select:
        return select(Order).options(
            joinedload(Order.bag),
            joinedload(Order.restaurant),
        )

    def find_for_customer(self, customer_id: str) -> Sequence[Order]:
        """A customer's orders, newest first."""
        query = (
            self._base_query()
            .where(Order.customer_id == customer_id)
            .order_by(Order.created_at.desc(), Order.id)
        )
        return self._db.execute(query).scalars().unique().all()

    def find_customer_order(self, order_id: str, customer_id: str) -> Order | None:
        """One order, only if it belongs to the customer."""
        return self._db.scalar(
            self._base_query().where(
                Order.id == order_id,
                Order.customer_id == customer_id,
            )
        )

    def find_unadjusted(self) -> Sequence[Order]:
        """Orders whose bag inventory was never decremented."""
        query = (
            self._base_query()
            .where(Order.inventory_adjusted.is_(False))
            .order_by(Order.created_at)
        )
        return self._db.execute(query).scalars().unique().all()

    def count_for_bag(self, bag_id: str, statuses: list[str]) -> int:
        """Sum of quantities of a bag's orders in the given statuses."""
        return self._db.scalar(
            select(func.coalesce(func.sum(Order.quantity), 0)).where(
                Order.rescue_bag_id == bag_id,
                Order.status.in_(statuses),
            )
        ) or 0