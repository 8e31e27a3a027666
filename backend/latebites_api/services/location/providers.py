"""
Position providers.

A provider yields one position fix per call and raises LocationError when the
position cannot be determined.
"""

from __future__ import annotations

from typing import Protocol

import httpx

from latebites_shared.config.logging import location_logger as logger
from latebites_shared.config.settings import settings
from latebites_shared.utils.geo import Coordinates
from .errors import LocationError, LocationErrorCode


class PositionProvider(Protocol):
    """Single-shot source of the device position."""

    async def current_position(self) -> Coordinates: ...


class FixedPositionProvider:
    """A position the client has already obtained (browser fix, --lat/--lng)."""

    def __init__(self, coords: Coordinates):
        self._coords = coords

    async def current_position(self) -> Coordinates:
        return self._coords


class IpGeolocationProvider:
    """
    Approximate position from the public IP address.

    Expects a JSON body with `latitude` and `longitude` fields (ipapi.co
    format). Used by the CLI, where no device fix is available.
    """

    def __init__(
        self,
        url: str | None = None,
        timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ):
        self._url = url or settings.geolocation_url
        self._timeout = timeout or settings.geolocation_timeout
        self._client = client

    async def current_position(self) -> Coordinates:
        try:
            if self._client is not None:
                response = await self._client.get(self._url, timeout=self._timeout)
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    response = await client.get(self._url)
            response.raise_for_status()
            body = response.json()
        except httpx.TimeoutException:
            raise LocationError(LocationErrorCode.TIMEOUT)
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("IP geolocation lookup failed", url=self._url, error=str(e))
            raise LocationError(LocationErrorCode.POSITION_UNAVAILABLE)

        try:
            return Coordinates(float(body["latitude"]), float(body["longitude"]))
        except (KeyError, TypeError, ValueError):
            logger.warning("IP geolocation response has no coordinates", url=self._url)
            raise LocationError(LocationErrorCode.POSITION_UNAVAILABLE)
