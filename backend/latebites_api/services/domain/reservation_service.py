"""
Reservation Domain Service.

Reserving a rescue bag writes an Order and takes one unit of the bag in a
single transaction. The unit is taken with a guarded UPDATE whose affected
row count decides who got the last unit, so concurrent reservations can
never oversell a bag regardless of what each of them read beforehand.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from latebites_shared.config.constants import OrderStatus, PaymentMethod, PaymentStatus
from latebites_shared.config.logging import reservation_logger as logger
from latebites_shared.infrastructure.db import safe_commit
from latebites_api.models import Order, RescueBag
from latebites_api.repositories import BagRepository, OrderRepository


class BagNotFoundError(Exception):
    """Bag does not exist or is no longer listed."""

    def __init__(self, bag_id: str):
        self.bag_id = bag_id
        super().__init__(f"Rescue bag {bag_id} not found")


class SoldOut(Exception):
    """No units of the bag were left."""

    def __init__(self, bag_id: str):
        self.bag_id = bag_id
        super().__init__(f"Rescue bag {bag_id} is sold out")


class ReservationFailed(Exception):
    """The order could not be written. Nothing was changed; safe to retry."""

    def __init__(self, bag_id: str):
        self.bag_id = bag_id
        super().__init__(f"Failed to reserve rescue bag {bag_id}")


class ReservationPartiallyFailed(Exception):
    """
    The order was written but the bag's inventory was not decremented.

    The order exists with inventory_adjusted=False and needs reconciliation.
    """

    def __init__(self, order_id: str, bag_id: str):
        self.order_id = order_id
        self.bag_id = bag_id
        super().__init__(f"Order {order_id} created but inventory for bag {bag_id} not updated")


@dataclass
class ReservationResult:
    order: Order
    quantity_remaining: int | None = None


@dataclass
class ReconcileReport:
    """Outcome of retrying inventory decrements for partial reservations."""

    adjusted: list[str] = field(default_factory=list)
    stranded: list[str] = field(default_factory=list)


class ReservationService:
    """
    Domain service for reservations.

    Usage:
        result = ReservationService(db).reserve(customer_id, bag_id)
    """

    def __init__(self, db: Session):
        self._db = db
        self._bags = BagRepository(db)
        self._orders = OrderRepository(db)

    def _read_bag(self, bag_id: str) -> RescueBag | None:
        return self._bags.find_for_reservation(bag_id)

    def reserve(self, customer_id: str, bag_id: str) -> ReservationResult:
        """
        Reserve one unit of a bag for a customer.

        Raises:
            BagNotFoundError: Bag missing or inactive.
            SoldOut: No unit left, either at read time or when decrementing.
            ReservationFailed: The order could not be written.
            ReservationPartiallyFailed: The order was written but the
                decrement failed; carries the order id.
        """
        try:
            bag = self._read_bag(bag_id)
        except SQLAlchemyError as e:
            self._db.rollback()
            logger.error("Failed to read bag for reservation", bag_id=bag_id, error=str(e))
            raise ReservationFailed(bag_id) from e

        if bag is None or not bag.is_active:
            self._db.rollback()
            raise BagNotFoundError(bag_id)

        if bag.quantity_available <= 0:
            self._db.rollback()
            logger.info("Reservation rejected, bag sold out", bag_id=bag_id, customer_id=customer_id)
            raise SoldOut(bag_id)

        order = Order(
            customer_id=customer_id,
            rescue_bag_id=bag_id,
            restaurant_id=bag.restaurant_id,
            quantity=1,
            total_price_cents=bag.discounted_price_cents,
            status=OrderStatus.PENDING,
            payment_method=PaymentMethod.PAY_AT_PICKUP,
            payment_status=PaymentStatus.PENDING,
        )
        try:
            self._orders.add(order)
        except SQLAlchemyError as e:
            self._db.rollback()
            logger.error("Failed to create order", bag_id=bag_id, customer_id=customer_id, error=str(e))
            raise ReservationFailed(bag_id) from e

        order_id = order.id

        try:
            with self._db.begin_nested():
                taken = self._bags.decrement_if_available(bag_id)
        except SQLAlchemyError as e:
            # Savepoint is rolled back; keep the order and flag it
            order.inventory_adjusted = False
            try:
                safe_commit(self._db)
            except SQLAlchemyError as commit_error:
                logger.error("Failed to save order after inventory error", bag_id=bag_id, error=str(commit_error))
                raise ReservationFailed(bag_id) from commit_error
            logger.error(
                "Order created but inventory not decremented",
                order_id=order_id,
                bag_id=bag_id,
                customer_id=customer_id,
                error=str(e),
            )
            raise ReservationPartiallyFailed(order_id, bag_id) from e

        if not taken:
            # Another reservation took the last unit after our read
            self._db.rollback()
            logger.info("Reservation lost race for last unit", bag_id=bag_id, customer_id=customer_id)
            raise SoldOut(bag_id)

        try:
            safe_commit(self._db)
        except SQLAlchemyError as e:
            logger.error("Failed to commit reservation", bag_id=bag_id, error=str(e))
            raise ReservationFailed(bag_id) from e

        remaining = self._bags.current_quantity(bag_id)
        logger.info(
            "Bag reserved",
            order_id=order_id,
            bag_id=bag_id,
            customer_id=customer_id,
            quantity_remaining=remaining,
        )
        return ReservationResult(order=order, quantity_remaining=remaining)

    def reconcile_partial_reservations(self) -> ReconcileReport:
        """
        Retry the inventory decrement for orders flagged inventory_adjusted=False.

        Orders whose bag has no units left are reported as stranded and left
        untouched; cancelled orders hold no unit and are skipped.
        """
        report = ReconcileReport()
        for order in self._orders.find_unadjusted():
            if order.status not in OrderStatus.HOLDING:
                continue
            if self._bags.decrement_if_available(order.rescue_bag_id, order.quantity):
                order.inventory_adjusted = True
                report.adjusted.append(order.id)
            else:
                report.stranded.append(order.id)
                logger.warning(
                    "Cannot reconcile order, bag has no units left",
                    order_id=order.id,
                    bag_id=order.rescue_bag_id,
                )
        safe_commit(self._db)
        return report
