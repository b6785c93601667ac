"""
Purpose: Central configuration for progress / ETA estimation.
What it does:

Stores the tunable constants the estimator and the animation use:

EARTH_RADIUS_MILES = 3958.8
AVERAGE_SPEED_MPH = 50
ANIMATION_DURATION_MS = 3000

Rule: No logic here, just parameters so you can tune without rewriting code.
"""

from __future__ import annotations

from dataclasses import dataclass

from .geo import EARTH_RADIUS_MILES


@dataclass(frozen=True)
class TrackingPolicy:
    """
    Central configuration for shipment progress estimation.
    """

    # --- Geometry ---
    earth_radius_miles: float = EARTH_RADIUS_MILES

    # --- ETA ---
    # Flat average road speed. Good enough for "arrives in X" on long-haul
    # routes, no traffic or hub dwell time modelled.
    average_speed_mph: float = 50.0

    # --- Progress indicator animation ---
    # How long the dot takes to slide from its start value to the target.
    animation_duration_ms: float = 3000.0
    # Frame interval used by callers that drive advance() on a timer.
    animation_frame_ms: float = 16.0

    def validate(self) -> None:
        """
        Basic sanity checks.
        """
        if self.earth_radius_miles <= 0:
            raise ValueError("earth_radius_miles must be > 0")

        if self.average_speed_mph <= 0:
            raise ValueError("average_speed_mph must be > 0")

        if self.animation_duration_ms <= 0:
            raise ValueError("animation_duration_ms must be > 0")

        if self.animation_frame_ms <= 0:
            raise ValueError("animation_frame_ms must be > 0")


def default_tracking_policy() -> TrackingPolicy:
    """
    Convenience factory for the default policy.
    """
    p = TrackingPolicy()
    p.validate()
    return p
