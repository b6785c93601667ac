#Marks tracking as a package.
#Re-exports the shipment progress estimator so callers import from tracking
#without knowing internal file names.
#No business logic.

from .geo import GeoPoint, haversine_miles, EARTH_RADIUS_MILES
from .progress import RouteSnapshot, ProgressResult, compute_progress, format_eta_label
from .animation import AnimationState, advance, restart
from .policy import TrackingPolicy, default_tracking_policy
from .static_map import build_static_map_url

__all__ = [
    "GeoPoint",
    "haversine_miles",
    "EARTH_RADIUS_MILES",
    "RouteSnapshot",
    "ProgressResult",
    "compute_progress",
    "format_eta_label",
    "AnimationState",
    "advance",
    "restart",
    "TrackingPolicy",
    "default_tracking_policy",
    "build_static_map_url",
]
