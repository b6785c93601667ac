import argparse
import time

from tracking.animation import AnimationState, advance, restart
from tracking.geo import GeoPoint
from tracking.policy import default_tracking_policy
from tracking.progress import RouteSnapshot, compute_progress

DALLAS = GeoPoint(32.9481, -96.7591, "Dallas, TX")
DENVER = GeoPoint(39.7392, -104.9903, "Denver, CO")
AMARILLO = GeoPoint(36.1699, -101.3864, "Amarillo, TX")


def render_bar(percent, width=40):
    filled = int(round(width * percent / 100))
    return "[" + "#" * filled + "-" * (width - filled) + f"] {percent:5.1f}%"


def run_animation(route, state, frame_ms, duration_ms):
    """
    Drives advance() once per frame until the dot reaches its target.
    The loop always ends: elapsed grows every frame and the last frame lands on the target.
    """
    progress = compute_progress(route)
    print(f"{route.origin.label} -> {route.destination.label}, now at {route.current.label}")
    print(f"{progress.traveled_miles_display} mi traveled, "
          f"{progress.remaining_miles_display} mi to go, {progress.eta_label}")

    elapsed = 0.0
    while True:
        state = advance(state, progress.percent_complete, elapsed, duration_ms, delivered=route.delivered)
        print("\r" + render_bar(state.displayed_percent), end="", flush=True)
        if elapsed >= duration_ms or route.delivered:
            break
        time.sleep(frame_ms / 1000)
        elapsed += frame_ms
    print()
    return state


def main():
    parser = argparse.ArgumentParser(description="Animate the tracking progress bar in the terminal.")
    parser.add_argument("--carry-forward", action="store_true",
                        help="start the refresh from the last displayed value instead of 0")
    args = parser.parse_args()

    policy = default_tracking_policy()

    in_transit = RouteSnapshot(origin=DALLAS, destination=DENVER, current=AMARILLO)
    state = run_animation(in_transit, AnimationState(), policy.animation_frame_ms, policy.animation_duration_ms)

    # a later refresh: package has moved on to Denver and been delivered
    delivered = RouteSnapshot(origin=DALLAS, destination=DENVER, current=DENVER, delivered=True)
    next_state = restart(state) if args.carry_forward else AnimationState()
    run_animation(delivered, next_state, policy.animation_frame_ms, policy.animation_duration_ms)


if __name__ == "__main__":
    main()
