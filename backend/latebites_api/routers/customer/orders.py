"""
Customer order history.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from latebites_shared.infrastructure.db import get_db
from latebites_shared.utils.exceptions import NotFoundError
from latebites_shared.utils.schemas import OrderOutput
from latebites_api.models import Customer
from latebites_api.routers._common import require_customer
from latebites_api.services.domain import CustomerService, OrderNotFoundError


router = APIRouter(prefix="/api/orders", tags=["orders"])


@router.get("", response_model=list[OrderOutput])
def list_orders(
    customer: Customer = Depends(require_customer),
    db: Session = Depends(get_db),
) -> list[OrderOutput]:
    """The customer's orders, newest first."""
    orders = CustomerService(db).list_orders(customer.id)
    return [OrderOutput.model_validate(order) for order in orders]


@router.get("/{order_id}", response_model=OrderOutput)
def get_order(
    order_id: str,
    customer: Customer = Depends(require_customer),
    db: Session = Depends(get_db),
) -> OrderOutput:
    try:
        order = CustomerService(db).get_order(customer.id, order_id)
    except OrderNotFoundError:
        raise NotFoundError("Order", order_id)
    return OrderOutput.model_validate(order)
