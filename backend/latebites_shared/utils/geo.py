"""
Geo utilities: great-circle distance, radius checks and display helpers.

All distances are in kilometres and rounded to one decimal place, so
radius checks compare the same value that is shown to the customer.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from latebites_shared.config.constants import MEDIUM_DISTANCE_KM, NEAR_DISTANCE_KM

EARTH_RADIUS_KM = 6371.0


@dataclass(frozen=True)
class Coordinates:
    """A WGS84 position."""

    latitude: float
    longitude: float

    def to_dict(self) -> dict[str, float]:
        return {"latitude": self.latitude, "longitude": self.longitude}


def distance_km(a: Coordinates, b: Coordinates) -> float:
    """Haversine distance between two points, rounded to 0.1 km."""
    d_lat = math.radians(b.latitude - a.latitude)
    d_lon = math.radians(b.longitude - a.longitude)

    h = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(a.latitude))
        * math.cos(math.radians(b.latitude))
        * math.sin(d_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))
    return round(EARTH_RADIUS_KM * c, 1)


def is_within_radius(a: Coordinates, b: Coordinates, radius_km: float) -> bool:
    """True when the rounded distance is at most radius_km (boundary included)."""
    return distance_km(a, b) <= radius_km


def format_distance(km: float) -> str:
    """
    Human-readable distance.

    >>> format_distance(0.85)
    '850 m'
    >>> format_distance(7.0)
    '7.0 km'
    """
    if km < 1:
        return f"{round(km * 1000)} m"
    return f"{km:.1f} km"


def distance_band(km: float) -> str:
    """Coarse proximity bucket used by clients for colouring: near, medium or far."""
    if km < NEAR_DISTANCE_KM:
        return "near"
    if km < MEDIUM_DISTANCE_KM:
        return "medium"
    return "far"
