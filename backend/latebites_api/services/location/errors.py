"""
Location failure categories.
"""

from __future__ import annotations

from enum import Enum


class LocationErrorCode(str, Enum):
    """Stable failure categories of a location request."""

    PERMISSION_DENIED = "permission_denied"
    POSITION_UNAVAILABLE = "position_unavailable"
    TIMEOUT = "timeout"
    UNSUPPORTED = "unsupported"
    UNKNOWN = "unknown"


LOCATION_ERROR_MESSAGES: dict[LocationErrorCode, str] = {
    LocationErrorCode.PERMISSION_DENIED: (
        "Location permission denied. Please enable location access in your settings."
    ),
    LocationErrorCode.POSITION_UNAVAILABLE: (
        "Location unavailable. Please check your device settings."
    ),
    LocationErrorCode.TIMEOUT: "Location request timed out. Please try again.",
    LocationErrorCode.UNSUPPORTED: "Geolocation is not supported on this device.",
    LocationErrorCode.UNKNOWN: "An unknown error occurred while getting your location.",
}

# Numeric codes reported by the browser Geolocation API
_GEOLOCATION_API_CODES = {
    1: LocationErrorCode.PERMISSION_DENIED,
    2: LocationErrorCode.POSITION_UNAVAILABLE,
    3: LocationErrorCode.TIMEOUT,
}


class LocationError(Exception):
    """A location request failed; `message` is safe to show to the user."""

    def __init__(self, code: LocationErrorCode, message: str | None = None):
        self.code = code
        self.message = message or LOCATION_ERROR_MESSAGES[code]
        super().__init__(self.message)

    @classmethod
    def from_geolocation_code(cls, code: int) -> "LocationError":
        return cls(_GEOLOCATION_API_CODES.get(code, LocationErrorCode.UNKNOWN))
