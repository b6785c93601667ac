"""
Purpose: Progress-indicator animation stepping.
What it does:
- advance(): one pure frame step that slides the displayed percent toward a target
  over a fixed duration instead of snapping to it
- restart(): begin a new run from wherever the dot currently is (carry-forward)

The caller owns the timer / frame loop and stores the returned state.
Cancelling that loop when the view goes away is the caller's job too.
"""

from __future__ import annotations

from dataclasses import dataclass, replace

DEFAULT_DURATION_MS = 3000.0


@dataclass(frozen=True)
class AnimationState:
    """
    Where the progress dot is drawn right now.

    start_percent is the value the current run interpolates from. A fresh
    AnimationState() starts from 0 on every mount; restart() carries the last
    displayed value forward so a refresh does not rewind the dot.
    """
    displayed_percent: float = 0.0
    elapsed_ms: float = 0.0
    start_percent: float = 0.0


def advance(
    state: AnimationState,
    target_percent: float,
    elapsed_ms: float,
    duration_ms: float = DEFAULT_DURATION_MS,
    *,
    delivered: bool = False,
) -> AnimationState:
    """
    Interpolate linearly from state.start_percent to target_percent.

    - delivered short-circuits to 100 regardless of elapsed time
    - elapsed_ms >= duration_ms lands exactly on target_percent
    - in between, the value never passes the target
    """
    if delivered:
        return replace(state, displayed_percent=100.0, elapsed_ms=elapsed_ms)

    if elapsed_ms >= duration_ms:
        return replace(state, displayed_percent=target_percent, elapsed_ms=elapsed_ms)

    start = state.start_percent
    fraction = elapsed_ms / duration_ms
    displayed = start + (target_percent - start) * fraction

    # clamp toward the target from whichever side we started on
    if start <= target_percent:
        displayed = min(target_percent, displayed)
    else:
        displayed = max(target_percent, displayed)

    return replace(state, displayed_percent=displayed, elapsed_ms=elapsed_ms)


def restart(state: AnimationState) -> AnimationState:
    """
    New animation run that starts from the currently displayed value.
    """
    return AnimationState(
        displayed_percent=state.displayed_percent,
        elapsed_ms=0.0,
        start_percent=state.displayed_percent,
    )
