"""
Customer Repository - Data access for customer profiles.
"""

from datetime import datetime

from sqlalchemy import update

from latebites_api.models import Customer
from latebites_shared.utils.geo import Coordinates
from .base import BaseRepository


class CustomerRepository(BaseRepository[Customer]):
    """Repository for Customer entities."""

    @property
    def model(self) -> type[Customer]:
        return Customer

    def update_location(self, customer_id: str, coords: Coordinates, at: datetime) -> bool:
        """Store the customer's last known position. Returns False if no such customer."""
        result = self._db.execute(
            update(Customer)
            .where(Customer.id == customer_id)
            .values(
                latitude=coords.latitude,
                longitude=coords.longitude,
                location_updated_at=at,
            )
            .execution_options(synchronize_session="fetch")
        )
        return result.rowcount == 1