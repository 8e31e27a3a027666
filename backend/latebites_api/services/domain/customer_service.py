"""
Customer account service: order history, profile edits and the profile
bootstrap for customers signing in through OAuth.
"""

from typing import Sequence

from sqlalchemy.orm import Session

from latebites_shared.config.logging import get_logger
from latebites_shared.infrastructure.db import safe_commit
from latebites_shared.utils.schemas import CustomerProfileUpdateRequest
from latebites_api.models import Customer, Order
from latebites_api.repositories import CustomerRepository, OrderRepository

logger = get_logger(__name__)


class OrderNotFoundError(Exception):
    """Order does not exist or belongs to another customer."""

    def __init__(self, order_id: str):
        self.order_id = order_id
        super().__init__(f"Order {order_id} not found")


class CustomerService:
    """Domain service for a customer's own data."""

    def __init__(self, db: Session):
        self._db = db
        self._customers = CustomerRepository(db)
        self._orders = OrderRepository(db)

    def list_orders(self, customer_id: str) -> Sequence[Order]:
        return self._orders.find_for_customer(customer_id)

    def get_order(self, customer_id: str, order_id: str) -> Order:
        order = self._orders.find_customer_order(order_id, customer_id)
        if order is None:
            raise OrderNotFoundError(order_id)
        return order

    def update_profile(self, customer: Customer, body: CustomerProfileUpdateRequest) -> Customer:
        """Apply the fields present in the request."""
        changes = body.model_dump(exclude_unset=True, exclude_none=True)
        if "name" in changes:
            changes["name"] = changes["name"].strip() or customer.name
        for field, value in changes.items():
            setattr(customer, field, value)
        safe_commit(self._db)
        self._db.refresh(customer)
        logger.info("Customer profile updated", customer_id=customer.id, fields=sorted(changes))
        return customer

    def ensure_oauth_customer(
        self,
        principal_id: str,
        email: str | None,
        full_name: str | None,
    ) -> tuple[Customer, bool]:
        """
        Return the customer profile of an OAuth principal, creating it if missing.

        The name falls back to the local part of the e-mail address. OAuth
        providers share no phone number, so it starts empty.
        """
        existing = self._customers.find_by_id(principal_id)
        if existing is not None:
            return existing, False

        name = (full_name or "").strip() or (email or "").split("@")[0] or "User"
        customer = Customer(id=principal_id, name=name, phone="", email=email)
        self._db.add(customer)
        safe_commit(self._db)
        logger.info("Customer profile created from OAuth sign-in", customer_id=principal_id)
        return customer, True
