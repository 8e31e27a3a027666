"""
Live location requests.

Asks a provider for a fresh fix, bounded by a timeout, then records it in the
device cache and on the customer's profile. Both writes are best-effort: a
position that was obtained is always returned.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from latebites_shared.config.logging import location_logger as logger
from latebites_shared.config.settings import settings
from latebites_shared.infrastructure.db import get_db_context, safe_commit
from latebites_shared.utils.geo import Coordinates
from latebites_api.repositories import CustomerRepository
from .cache import LocationCache
from .errors import LocationError, LocationErrorCode
from .providers import PositionProvider


class LocationService:
    """
    Obtain and record the device position.

    Args:
        cache: Device-local cache to update, or None to skip caching
            (the API runs server-side and has no device cache).
        db: Session used to persist the customer's location. When omitted a
            short-lived session is opened per write.
        timeout: Seconds to wait for the provider.
    """

    def __init__(
        self,
        cache: LocationCache | None = None,
        db: Session | None = None,
        timeout: float | None = None,
    ):
        self._cache = cache
        self._db = db
        self._timeout = timeout if timeout is not None else settings.geolocation_timeout
        self.last_fix_at: datetime | None = None

    async def request_live_location(
        self,
        provider: PositionProvider | None,
        customer_id: str | None = None,
    ) -> Coordinates:
        """
        Request one position fix.

        Raises:
            LocationError: UNSUPPORTED without a provider, TIMEOUT when the
                provider does not answer in time, or the provider's own error.
        """
        if provider is None:
            raise LocationError(LocationErrorCode.UNSUPPORTED)

        try:
            coords = await asyncio.wait_for(provider.current_position(), timeout=self._timeout)
        except asyncio.TimeoutError:
            logger.warning("Location request timed out", timeout=self._timeout)
            raise LocationError(LocationErrorCode.TIMEOUT)
        except LocationError as e:
            logger.warning("Location request failed", code=e.code.value)
            raise
        except Exception as e:
            logger.error("Unexpected location provider error", error=str(e), exc_info=True)
            raise LocationError(LocationErrorCode.UNKNOWN) from e

        self.last_fix_at = datetime.now(timezone.utc)

        if self._cache is not None:
            try:
                self._cache.save(coords)
            except OSError as e:
                logger.warning("Could not write location cache", path=str(self._cache.path), error=str(e))

        if customer_id:
            await asyncio.to_thread(self._persist, customer_id, coords, self.last_fix_at)

        return coords

    def _persist(self, customer_id: str, coords: Coordinates, at: datetime) -> None:
        try:
            if self._db is not None:
                self._store(self._db, customer_id, coords, at)
            else:
                with get_db_context() as db:
                    self._store(db, customer_id, coords, at)
        except SQLAlchemyError as e:
            logger.error(
                "Failed to save customer location",
                customer_id=customer_id,
                error=str(e),
            )

    @staticmethod
    def _store(db: Session, customer_id: str, coords: Coordinates, at: datetime) -> None:
        updated = CustomerRepository(db).update_location(customer_id, coords, at)
        safe_commit(db)
        if not updated:
            logger.warning("No customer profile to store location on", customer_id=customer_id)
