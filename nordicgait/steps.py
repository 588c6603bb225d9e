"""Step counting from the horizontal spread of the ankles.

The inter-ankle distance rises as the legs open into a stride and
falls as they pass each other. A peak detector with a height-scaled
noise floor counts one step per rising-then-falling excursion, i.e.
one per stride rather than one per foot strike. Cadence consumers must
double the count themselves if they want foot strikes.

Functions
---------
ankle_distance
    Horizontal ankle spread in pixels.
step_threshold
    Minimum spread for a real step, in pixels.
update_steps
    Advance the step state machine by one frame.
"""

import logging
from dataclasses import dataclass, replace
from enum import IntEnum
from typing import Optional

from .constants import STEP_THRESHOLD_RATIO, VISIBILITY_THRESHOLD, Joint

logger = logging.getLogger(__name__)


class StepTrend(IntEnum):
    FALLING = -1
    UNKNOWN = 0
    RISING = 1


@dataclass(frozen=True)
class StepState:
    trend: StepTrend = StepTrend.UNKNOWN
    last_ankle_dist: Optional[float] = None
    count: int = 0


def ankle_distance(frame, frame_width: float,
                   threshold: float = VISIBILITY_THRESHOLD) -> Optional[float]:
    """``|left_ankle.x - right_ankle.x| * frame_width`` or None if gated."""
    if not frame.visible(Joint.LEFT_ANKLE, Joint.RIGHT_ANKLE, threshold=threshold):
        return None
    return abs(frame[Joint.LEFT_ANKLE].x - frame[Joint.RIGHT_ANKLE].x) * frame_width


def step_threshold(user_height_cm: float, cm_per_px: float,
                   ratio: float = STEP_THRESHOLD_RATIO) -> float:
    return (user_height_cm * ratio) / cm_per_px


def update_steps(state: StepState, ankle_dist: float, dist_threshold: float) -> StepState:
    """Advance the detector with one frame's ankle distance.

    The first observation only seeds the previous distance. A fall
    directly after a rise marks a peak; it counts as a step when the
    current distance still exceeds *dist_threshold*.
    """
    last = state.last_ankle_dist
    if last is None:
        return replace(state, last_ankle_dist=ankle_dist)

    trend = state.trend
    count = state.count
    if ankle_dist > last:
        trend = StepTrend.RISING
    elif ankle_dist < last and trend == StepTrend.RISING:
        if ankle_dist > dist_threshold:
            count += 1
            logger.debug(f"Step {count} at ankle distance {ankle_dist:.1f}px")
        trend = StepTrend.FALLING

    return StepState(trend=trend, last_ankle_dist=ankle_dist, count=count)
