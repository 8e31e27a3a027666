"""
Restaurant Repository - Data access for restaurants and their bags.
Eager loading of rescue bags prevents N+1 queries in the catalog.
"""

from typing import Sequence

from sqlalchemy import Select, select
from sqlalchemy.orm import selectinload

from latebites_api.models import Restaurant
from .base import BaseRepository


class RestaurantRepository(BaseRepository[Restaurant]):
    """
    Repository for Restaurant entities.

    Guarantees eager loading of rescue_bags.
    """

    @property
    def model(self) -> type[Restaurant]:
        return Restaurant

    def _base_query(self) -> Select:
        return select(Restaurant).options(selectinload(Restaurant.rescue_bags))

    def find_visible_with_bags(self) -> Sequence[Restaurant]:
        """
        All verified and active restaurants with every one of their bags.

        Bags are not filtered by availability here; callers decide what
        to show.
        """
        query = (
            self._base_query()
            .where(
                Restaurant.verified.is_(True),
                Restaurant.is_active.is_(True),
            )
            .order_by(Restaurant.created_at, Restaurant.id)
        )
        return self._db.execute(query).scalars().unique().all()