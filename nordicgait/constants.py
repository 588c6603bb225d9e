"""Landmark definitions and tunable defaults for Nordic-walking analysis.

Landmarks follow the MediaPipe Pose topology (33 points). Code never
indexes a frame positionally: joints are addressed through the
:class:`Joint` enumeration and paired left/right joints are resolved
through :func:`joint_for`.
"""

from enum import Enum, IntEnum


# MediaPipe Pose landmarks (33 total)
MP_LANDMARK_NAMES = [
    'NOSE', 'LEFT_EYE_INNER', 'LEFT_EYE', 'LEFT_EYE_OUTER',
    'RIGHT_EYE_INNER', 'RIGHT_EYE', 'RIGHT_EYE_OUTER',
    'LEFT_EAR', 'RIGHT_EAR', 'MOUTH_LEFT', 'MOUTH_RIGHT',
    'LEFT_SHOULDER', 'RIGHT_SHOULDER', 'LEFT_ELBOW', 'RIGHT_ELBOW',
    'LEFT_WRIST', 'RIGHT_WRIST', 'LEFT_PINKY', 'RIGHT_PINKY',
    'LEFT_INDEX', 'RIGHT_INDEX', 'LEFT_THUMB', 'RIGHT_THUMB',
    'LEFT_HIP', 'RIGHT_HIP', 'LEFT_KNEE', 'RIGHT_KNEE',
    'LEFT_ANKLE', 'RIGHT_ANKLE', 'LEFT_HEEL', 'RIGHT_HEEL',
    'LEFT_FOOT_INDEX', 'RIGHT_FOOT_INDEX'
]

N_LANDMARKS = len(MP_LANDMARK_NAMES)


class Joint(IntEnum):
    """Anatomical landmark identifiers (value = MediaPipe index)."""

    NOSE = 0
    LEFT_EYE_INNER = 1
    LEFT_EYE = 2
    LEFT_EYE_OUTER = 3
    RIGHT_EYE_INNER = 4
    RIGHT_EYE = 5
    RIGHT_EYE_OUTER = 6
    LEFT_EAR = 7
    RIGHT_EAR = 8
    MOUTH_LEFT = 9
    MOUTH_RIGHT = 10
    LEFT_SHOULDER = 11
    RIGHT_SHOULDER = 12
    LEFT_ELBOW = 13
    RIGHT_ELBOW = 14
    LEFT_WRIST = 15
    RIGHT_WRIST = 16
    LEFT_PINKY = 17
    RIGHT_PINKY = 18
    LEFT_INDEX = 19
    RIGHT_INDEX = 20
    LEFT_THUMB = 21
    RIGHT_THUMB = 22
    LEFT_HIP = 23
    RIGHT_HIP = 24
    LEFT_KNEE = 25
    RIGHT_KNEE = 26
    LEFT_ANKLE = 27
    RIGHT_ANKLE = 28
    LEFT_HEEL = 29
    RIGHT_HEEL = 30
    LEFT_FOOT_INDEX = 31
    RIGHT_FOOT_INDEX = 32


class Side(str, Enum):
    LEFT = "left"
    RIGHT = "right"


def joint_for(side, part: str) -> Joint:
    """Resolve a paired joint, e.g. ``joint_for(Side.LEFT, "wrist")``.

    Raises
    ------
    KeyError
        If *part* is not a paired body part.
    """
    side = Side(side)
    return Joint[f"{side.name}_{part.upper()}"]


# Fingertips used by the hand-state classifier (per side)
FINGERTIP_PARTS = ("pinky", "index", "thumb")

# Scale reference: head-region and foot-region landmarks
HEAD_REFERENCE = Joint.LEFT_EYE
FOOT_REFERENCE = Joint.RIGHT_HEEL

# ── Tunable defaults ────────────────────────────────────────────────

# Landmarks with visibility below this are not usable for the frame.
VISIBILITY_THRESHOLD = 0.5

# Mean fingertip-to-wrist distance over forearm length above which a
# hand is "open". 0.25 keeps a receding rear hand (back swing) open.
HAND_OPEN_RATIO = 0.25

# Minimum inter-ankle spread for a step, as a fraction of body height.
STEP_THRESHOLD_RATIO = 0.2

# Centre of mass: hip midpoint shifted this far toward the shoulders.
COM_RATIO = 0.2

# Summary emission cadence, in processed frames.
SUMMARY_EVERY = 10

# Initial value of the running minimum torso lean (no lean observed yet).
MIN_TORSO_SENTINEL = 90.0

# Denominator guard for angle computations.
EPSILON = 1e-4

VIEW_MODES = ("side_left", "side_right", "front", "back")
