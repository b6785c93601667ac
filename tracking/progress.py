"""
Purpose: Shipment progress & ETA estimation.
What it does:
- Takes one RouteSnapshot (origin, destination, current position, delivered flag)
- Computes percent complete, miles traveled / remaining and a human ETA label
- Everything is recomputed from scratch per call, no state is kept between calls

Distances and the percentage both come from the haversine distance, so the
numbers shown on the tracking page agree with each other.

Rule: No store calls, no rendering. Callers fetch the snapshot and display the result.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional
import math

from .geo import GeoPoint, haversine_miles
from .policy import TrackingPolicy, default_tracking_policy

DELIVERED_LABEL = "Delivered"
UNKNOWN_ETA_LABEL = "ETA unavailable"


@dataclass(frozen=True)
class RouteSnapshot:
    """
    One point-in-time reading of where a shipment is.
    """
    origin: GeoPoint
    destination: GeoPoint
    current: GeoPoint
    delivered: bool = False


@dataclass(frozen=True)
class ProgressResult:
    """
    Output of compute_progress. Raw floats are kept for the animation,
    the *_display properties give the rounded values shown to customers.
    """
    percent_complete: float
    traveled_miles: float
    remaining_miles: float
    eta_label: str

    @property
    def percent_display(self) -> Optional[int]:
        return _round_or_none(self.percent_complete)

    @property
    def traveled_miles_display(self) -> Optional[int]:
        return _round_or_none(self.traveled_miles)

    @property
    def remaining_miles_display(self) -> Optional[int]:
        return _round_or_none(self.remaining_miles)


def _round_or_none(value: float) -> Optional[int]:
    # round() raises on NaN / inf
    if not math.isfinite(value):
        return None
    return int(round(value))


def format_eta_label(remaining_miles: float, delivered: bool = False, average_speed_mph: float = 50.0) -> str:
    """
    "Delivered", "{d}d {h}h remaining" or "{h}h remaining" at a flat average speed.
    """
    if delivered:
        return DELIVERED_LABEL

    hours_remaining = remaining_miles / average_speed_mph
    if not math.isfinite(hours_remaining):
        return UNKNOWN_ETA_LABEL

    days = math.floor(hours_remaining / 24)
    if days > 0:
        hours = math.floor(hours_remaining % 24)
        return f"{days}d {hours}h remaining"

    return f"{math.floor(hours_remaining)}h remaining"


def compute_progress(route: RouteSnapshot, policy: Optional[TrackingPolicy] = None) -> ProgressResult:
    """
    Convert a route snapshot into percent complete, distances and an ETA label.

    Args:
        route: origin / destination / current points plus the delivered flag
        policy: tunables (earth radius, average speed). Defaults if omitted,
            a supplied policy is validated (ValueError when out of range).

    Returns:
        ProgressResult. Never raises for out-of-range or NaN coordinates,
        whatever the formula yields is passed through.
    """
    if policy is None:
        policy = default_tracking_policy()
    else:
        policy.validate()
    radius = policy.earth_radius_miles

    total_miles = haversine_miles(route.origin, route.destination, radius)
    traveled_miles = haversine_miles(route.origin, route.current, radius)
    remaining_miles = total_miles - traveled_miles
    # written as a comparison so NaN flows through instead of becoming 0
    if remaining_miles < 0:
        remaining_miles = 0.0

    if route.delivered:
        # stale coordinates on a delivered package still read as complete
        percent = 100.0
    elif total_miles == 0:
        percent = 0.0
    else:
        percent = (traveled_miles / total_miles) * 100
        # overshoot past the destination is not detected geometrically
        if percent > 100:
            percent = 100.0

    return ProgressResult(
        percent_complete=percent,
        traveled_miles=traveled_miles,
        remaining_miles=remaining_miles,
        eta_label=format_eta_label(remaining_miles, route.delivered, policy.average_speed_mph),
    )
