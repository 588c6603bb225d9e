"""Per-frame gait metrics for Nordic-walking technique.

Combines the geometry, hand and scale helpers into one immutable
:class:`GaitSnapshot` per frame:

    - torso lean: shoulder-midpoint to hip-midpoint axis vs. vertical
      (0 = upright, positive either way)
    - arm angle: included angle at each shoulder between hip and elbow
    - swing direction: side of the elbow relative to the shoulder, sign
      corrected for the camera view so "forward" is the walking direction
    - hand state: open / fist / unknown
    - step length: inter-ankle horizontal distance in cm
    - centre of mass: hip midpoint moved 20% toward the shoulder midpoint

Angles are measured on normalized image coordinates. Each measurement
gates independently on landmark visibility; a gated measurement is None
and the rest of the frame is still computed.
"""

import logging
from dataclasses import asdict, dataclass
from enum import Enum
from typing import Optional

from .calibration import CalibrationContext, cm_per_pixel
from .constants import COM_RATIO, HAND_OPEN_RATIO, VISIBILITY_THRESHOLD, Joint, Side, joint_for
from .geometry import included_angle, midpoint, vertical_angle
from .hands import HandState, classify_hand
from .steps import ankle_distance

logger = logging.getLogger(__name__)


class ViewMode(str, Enum):
    SIDE_LEFT = "side_left"
    SIDE_RIGHT = "side_right"
    FRONT = "front"
    BACK = "back"


class SwingDirection(str, Enum):
    FORWARD = "forward"
    BACKWARD = "backward"


@dataclass(frozen=True)
class GaitSnapshot:
    """Derived metrics for one frame. None = not computable this frame."""

    frame_idx: int = 0
    torso_lean: Optional[float] = None
    arm_angle_left: Optional[float] = None
    arm_angle_right: Optional[float] = None
    swing_left: Optional[SwingDirection] = None
    swing_right: Optional[SwingDirection] = None
    hand_left: HandState = HandState.UNKNOWN
    hand_right: HandState = HandState.UNKNOWN
    step_length: Optional[float] = None
    ankle_distance: Optional[float] = None
    cm_per_pixel: Optional[float] = None
    com_x: Optional[float] = None
    com_y: Optional[float] = None

    def to_dict(self) -> dict:
        d = asdict(self)
        for key in ("swing_left", "swing_right", "hand_left", "hand_right"):
            if d[key] is not None:
                d[key] = d[key].value
        return d


def swing_sign(view_mode) -> int:
    """+1 when image x grows in the walking direction, -1 otherwise."""
    return -1 if ViewMode(view_mode) == ViewMode.SIDE_LEFT else 1


def _torso(frame, threshold):
    if not frame.visible(Joint.LEFT_SHOULDER, Joint.RIGHT_SHOULDER,
                         Joint.LEFT_HIP, Joint.RIGHT_HIP, threshold=threshold):
        return None, None
    sh = midpoint(frame[Joint.LEFT_SHOULDER], frame[Joint.RIGHT_SHOULDER])
    hip = midpoint(frame[Joint.LEFT_HIP], frame[Joint.RIGHT_HIP])
    return sh, hip


def _arm(frame, side, sign, threshold):
    """Return (arm angle, swing direction) for one side."""
    shoulder_j = joint_for(side, "shoulder")
    elbow_j = joint_for(side, "elbow")
    hip_j = joint_for(side, "hip")

    swing = None
    if frame.visible(shoulder_j, elbow_j, threshold=threshold):
        direction = (frame[elbow_j].x - frame[shoulder_j].x) * sign
        swing = SwingDirection.FORWARD if direction > 0 else SwingDirection.BACKWARD

    angle = None
    if swing is not None and frame[hip_j].is_visible(threshold):
        angle = included_angle(frame[hip_j], frame[shoulder_j], frame[elbow_j])
    return angle, swing


def extract_metrics(
    frame,
    context: CalibrationContext,
    view_mode="side_left",
    frame_idx: int = 0,
    scale: Optional[float] = None,
    open_ratio: float = HAND_OPEN_RATIO,
    com_ratio: float = COM_RATIO,
    threshold: float = VISIBILITY_THRESHOLD,
) -> GaitSnapshot:
    """Compute the gait snapshot for one frame.

    Parameters
    ----------
    frame : LandmarkFrame
        Pose landmarks.
    context : CalibrationContext
        User height and frame size.
    view_mode : ViewMode or str
        Camera view; ``side_left`` flips the swing sign.
    frame_idx : int
        Index stored on the snapshot.
    scale : float, optional
        Pre-computed cm per pixel (e.g. smoothed). When omitted the raw
        per-frame scale is used.
    open_ratio : float
        Hand-open ratio threshold.
    com_ratio : float
        Fraction of the hip-to-shoulder axis added to the hip midpoint
        for the centre of mass.
    threshold : float
        Landmark visibility gate.

    Returns
    -------
    GaitSnapshot
    """
    sign = swing_sign(view_mode)

    torso_lean = com_x = com_y = None
    sh, hip = _torso(frame, threshold)
    if sh is not None:
        torso_lean = vertical_angle(sh, hip)
        com_x = hip.x
        com_y = hip.y - (hip.y - sh.y) * com_ratio

    arm_l, swing_l = _arm(frame, Side.LEFT, sign, threshold)
    arm_r, swing_r = _arm(frame, Side.RIGHT, sign, threshold)

    hand_l = classify_hand(frame, Side.LEFT, open_ratio=open_ratio, threshold=threshold)
    hand_r = classify_hand(frame, Side.RIGHT, open_ratio=open_ratio, threshold=threshold)

    if scale is None:
        scale = cm_per_pixel(frame, context, threshold=threshold)
    ankle_dist = ankle_distance(frame, context.frame_width, threshold=threshold)
    step_len = None
    if ankle_dist is not None and scale is not None:
        step_len = ankle_dist * scale

    if torso_lean is None:
        logger.debug(f"Frame {frame_idx}: torso landmarks below visibility gate")

    return GaitSnapshot(
        frame_idx=frame_idx,
        torso_lean=torso_lean,
        arm_angle_left=arm_l,
        arm_angle_right=arm_r,
        swing_left=swing_l,
        swing_right=swing_r,
        hand_left=hand_l,
        hand_right=hand_r,
        step_length=step_len,
        ankle_distance=ankle_dist,
        cm_per_pixel=scale,
        com_x=com_x,
        com_y=com_y,
    )
