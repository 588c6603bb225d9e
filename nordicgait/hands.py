"""Hand posture classification (open hand vs. fist).

In Nordic walking the pole hand should open on the back swing and
close around the grip on the forward swing. Posture is inferred from
how far the fingertips sit from the wrist relative to the forearm
length, which makes the measure independent of subject distance.
"""

import logging
from enum import Enum
from typing import Optional

import numpy as np

from .constants import FINGERTIP_PARTS, HAND_OPEN_RATIO, VISIBILITY_THRESHOLD, Side, joint_for
from .geometry import distance

logger = logging.getLogger(__name__)


class HandState(str, Enum):
    OPEN = "open"
    FIST = "fist"
    UNKNOWN = "unknown"


def hand_ratio(frame, side, threshold: float = VISIBILITY_THRESHOLD) -> Optional[float]:
    """Mean fingertip-to-wrist distance divided by forearm length.

    Returns None when the wrist, elbow or any fingertip of *side* fails
    the visibility gate, or when the forearm has zero length.
    """
    side = Side(side)
    wrist_j = joint_for(side, "wrist")
    elbow_j = joint_for(side, "elbow")
    tip_js = [joint_for(side, part) for part in FINGERTIP_PARTS]

    if not frame.visible(wrist_j, elbow_j, *tip_js, threshold=threshold):
        return None

    wrist = frame[wrist_j]
    forearm = distance(wrist, frame[elbow_j])
    if forearm <= 0.0:
        logger.debug(f"Degenerate forearm on {side.value} side")
        return None

    finger_dist = np.mean([distance(wrist, frame[j]) for j in tip_js])
    return float(finger_dist / forearm)


def classify_hand(
    frame,
    side,
    open_ratio: float = HAND_OPEN_RATIO,
    threshold: float = VISIBILITY_THRESHOLD,
) -> HandState:
    """Classify the hand of *side* as open, fist or unknown.

    Parameters
    ----------
    frame : LandmarkFrame
        Pose landmarks for one frame.
    side : Side or {"left", "right"}
        Which hand to classify.
    open_ratio : float
        Ratio strictly above which the hand counts as open
        (default 0.25). Scene and camera dependent.
    threshold : float
        Visibility gate for the landmarks involved.

    Returns
    -------
    HandState
    """
    ratio = hand_ratio(frame, side, threshold=threshold)
    if ratio is None:
        return HandState.UNKNOWN
    return HandState.OPEN if ratio > open_ratio else HandState.FIST
