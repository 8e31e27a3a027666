"""
Device location: cache, providers and live location requests.
"""

from .cache import LocationCache
from .errors import LOCATION_ERROR_MESSAGES, LocationError, LocationErrorCode
from .geolocation import LocationService
from .providers import FixedPositionProvider, IpGeolocationProvider, PositionProvider

__all__ = [
    "LocationCache",
    "LocationError",
    "LocationErrorCode",
    "LOCATION_ERROR_MESSAGES",
    "LocationService",
    "PositionProvider",
    "FixedPositionProvider",
    "IpGeolocationProvider",
]
