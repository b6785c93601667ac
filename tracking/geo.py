"""
Purpose: Geographic primitives for shipment tracking.
What it does:
- Defines GeoPoint, the labelled (lat, lon) value every tracking module passes around.
- Great-circle distance in miles (haversine).

Rule: Pure math. No I/O, no store calls.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple
import math

# mean Earth radius in statute miles
EARTH_RADIUS_MILES = 3958.8

LatLon = Tuple[float, float]


@dataclass(frozen=True)
class GeoPoint:
    """
    A labelled coordinate in decimal degrees.

    latitude in [-90, 90] and longitude in [-180, 180] is a caller contract,
    nothing here validates it.
    """
    latitude: float
    longitude: float
    label: str = ""

    @property
    def coordinates(self) -> LatLon:
        return (self.latitude, self.longitude)


def haversine_miles(a: GeoPoint, b: GeoPoint, radius: float = EARTH_RADIUS_MILES) -> float:
    """
    Great-circle distance between two points in miles.

    Total over floats: NaN or infinite coordinates give NaN back instead of raising.
    """
    if not all(math.isfinite(v) for v in (a.latitude, a.longitude, b.latitude, b.longitude)):
        return math.nan

    lat1 = math.radians(a.latitude)
    lat2 = math.radians(b.latitude)
    d_lat = math.radians(b.latitude - a.latitude)
    d_lon = math.radians(b.longitude - a.longitude)

    h = (
        math.sin(d_lat / 2) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin(d_lon / 2) ** 2
    )
    # float noise can push h a hair past 1 for antipodal points
    h = min(h, 1.0)
    return 2 * radius * math.atan2(math.sqrt(h), math.sqrt(1 - h))
