"""
Reservation endpoint.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from latebites_shared.config.logging import reservation_logger as logger
from latebites_shared.infrastructure.db import get_db
from latebites_shared.utils.exceptions import (
    NotFoundError,
    ReservationUnavailableError,
    SoldOutError,
)
from latebites_shared.utils.schemas import ReservationResponse
from latebites_api.models import Customer
from latebites_api.repositories import OrderRepository
from latebites_api.routers._common import require_customer
from latebites_api.services.domain import (
    BagNotFoundError,
    ReservationFailed,
    ReservationPartiallyFailed,
    ReservationService,
    SoldOut,
)


router = APIRouter(prefix="/api", tags=["reservations"])

PARTIAL_RESERVATION_WARNING = (
    "Your order was placed, but the bag's availability could not be updated. "
    "The restaurant will confirm your order."
)


@router.post(
    "/bags/{bag_id}/reserve",
    response_model=ReservationResponse,
    status_code=status.HTTP_201_CREATED,
)
def reserve_bag(
    bag_id: str,
    customer: Customer = Depends(require_customer),
    db: Session = Depends(get_db),
) -> ReservationResponse:
    """
    Reserve one unit of a rescue bag, paid at pickup.

    409 when the bag is sold out, 503 when the order could not be written.
    If the order was written but the inventory update failed the order
    still stands: 201 with inventory_adjusted=false and a warning.
    """
    customer_id = customer.id

    try:
        result = ReservationService(db).reserve(customer_id, bag_id)
    except BagNotFoundError:
        raise NotFoundError("Rescue bag", bag_id)
    except SoldOut:
        raise SoldOutError(bag_id, customer_id=customer_id)
    except ReservationFailed:
        raise ReservationUnavailableError(bag_id, customer_id=customer_id)
    except ReservationPartiallyFailed as e:
        logger.error(
            "Partial reservation needs reconciliation",
            order_id=e.order_id,
            bag_id=bag_id,
            customer_id=customer_id,
        )
        order = OrderRepository(db).find_by_id(e.order_id)
        return ReservationResponse(
            order_id=e.order_id,
            status=order.status,
            total_price_cents=order.total_price_cents,
            inventory_adjusted=False,
            warning=PARTIAL_RESERVATION_WARNING,
        )

    order = result.order
    return ReservationResponse(
        order_id=order.id,
        status=order.status,
        total_price_cents=order.total_price_cents,
        inventory_adjusted=True,
        quantity_remaining=result.quantity_remaining,
    )
