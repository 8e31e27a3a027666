"""
Rescue Bag Repository - Data access and the guarded inventory counter.
"""

from sqlalchemy import Select, select, update
from sqlalchemy.orm import joinedload

from latebites_api.models import RescueBag
from .base import BaseRepository


class BagRepository(BaseRepository[RescueBag]):
    """Repository for RescueBag entities."""

    @property
    def model(self) -> type[RescueBag]:
        return RescueBag

    def _base_query(self) -> Select:
        return select(RescueBag).options(joinedload(RescueBag.restaurant))

    def find_for_reservation(self, bag_id: str) -> RescueBag | None:
        """
        Read a bag inside the reservation transaction.

        Takes a row lock where the database supports it (FOR UPDATE is a
        no-op on SQLite); the guarded decrement stays authoritative either way.
        """
        return self._db.scalar(
            select(RescueBag)
            .where(RescueBag.id == bag_id)
            .with_for_update()
        )

    def decrement_if_available(self, bag_id: str, amount: int = 1) -> bool:
        """
        Atomically take `amount` units from a bag.

        Issues UPDATE ... WHERE quantity_available >= amount and reports
        whether a row was affected. False means the bag no longer had enough
        units, whatever the caller read before.
        """
        result = self._db.execute(
            update(RescueBag)
            .where(
                RescueBag.id == bag_id,
                RescueBag.quantity_available >= amount,
            )
            .values(quantity_available=RescueBag.quantity_available - amount)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    def current_quantity(self, bag_id: str) -> int | None:
        """Read quantity_available straight from the database."""
        return self._db.scalar(
            select(RescueBag.quantity_available).where(RescueBag.id == bag_id)
        )