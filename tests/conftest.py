"""Shared test fixtures for the nordicgait test suite.

Provides synthetic landmark builders. Frames are sized 1000x1000 px and
the subject spans eye (y=0.10) to heel (y=0.95), i.e. 850 px, so a
170 cm subject gives exactly 0.2 cm per pixel.
"""

import numpy as np
import pytest

from nordicgait.config import AnalysisSettings
from nordicgait.constants import MP_LANDMARK_NAMES
from nordicgait.schema import LandmarkFrame, create_empty

FRAME_SIZE = 1000
USER_HEIGHT_CM = 170.0


def standing_landmarks():
    """Name-keyed landmarks of an upright subject, all fully visible."""
    lm = {name: {"x": 0.5, "y": 0.5, "z": 0.0, "visibility": 1.0} for name in MP_LANDMARK_NAMES}
    lm.update({
        "NOSE":             {"x": 0.50, "y": 0.10, "visibility": 1.0},
        "LEFT_EYE":         {"x": 0.49, "y": 0.10, "visibility": 1.0},
        "RIGHT_EYE":        {"x": 0.51, "y": 0.10, "visibility": 1.0},
        "LEFT_SHOULDER":    {"x": 0.48, "y": 0.25, "visibility": 1.0},
        "RIGHT_SHOULDER":   {"x": 0.52, "y": 0.25, "visibility": 1.0},
        "LEFT_ELBOW":       {"x": 0.48, "y": 0.37, "visibility": 1.0},
        "RIGHT_ELBOW":      {"x": 0.52, "y": 0.37, "visibility": 1.0},
        "LEFT_WRIST":       {"x": 0.48, "y": 0.48, "visibility": 1.0},
        "RIGHT_WRIST":      {"x": 0.52, "y": 0.48, "visibility": 1.0},
        "LEFT_HIP":         {"x": 0.48, "y": 0.50, "visibility": 1.0},
        "RIGHT_HIP":        {"x": 0.52, "y": 0.50, "visibility": 1.0},
        "LEFT_KNEE":        {"x": 0.48, "y": 0.70, "visibility": 1.0},
        "RIGHT_KNEE":       {"x": 0.52, "y": 0.70, "visibility": 1.0},
        "LEFT_ANKLE":       {"x": 0.48, "y": 0.90, "visibility": 1.0},
        "RIGHT_ANKLE":      {"x": 0.52, "y": 0.90, "visibility": 1.0},
        "LEFT_HEEL":        {"x": 0.49, "y": 0.95, "visibility": 1.0},
        "RIGHT_HEEL":       {"x": 0.53, "y": 0.95, "visibility": 1.0},
        "LEFT_FOOT_INDEX":  {"x": 0.46, "y": 0.95, "visibility": 1.0},
        "RIGHT_FOOT_INDEX": {"x": 0.50, "y": 0.95, "visibility": 1.0},
    })
    return lm


def set_hand(lm, side, ratio, forearm=0.5, wrist=(0.5, 0.5)):
    """Place elbow and fingertips of *side* so that the hand ratio is *ratio*.

    The elbow sits straight above the wrist at *forearm*; pinky, index
    and thumb tips sit at ``ratio * forearm`` from the wrist.
    """
    s = side.upper()
    wx, wy = wrist
    d = ratio * forearm
    lm[f"{s}_WRIST"] = {"x": wx, "y": wy, "visibility": 1.0}
    lm[f"{s}_ELBOW"] = {"x": wx, "y": wy - forearm, "visibility": 1.0}
    lm[f"{s}_PINKY"] = {"x": wx - d, "y": wy, "visibility": 1.0}
    lm[f"{s}_INDEX"] = {"x": wx, "y": wy + d, "visibility": 1.0}
    lm[f"{s}_THUMB"] = {"x": wx + d, "y": wy, "visibility": 1.0}
    return lm


def set_ankle_spread(lm, spread, center=0.5):
    """Spread the ankles horizontally by *spread* (normalized)."""
    lm["LEFT_ANKLE"] = {"x": center - spread / 2, "y": 0.90, "visibility": 1.0}
    lm["RIGHT_ANKLE"] = {"x": center + spread / 2, "y": 0.90, "visibility": 1.0}
    return lm


def make_frame(lm=None):
    return LandmarkFrame.from_dict(lm if lm is not None else standing_landmarks())


def stride_spreads(n_frames=30, low=0.05, high=0.20):
    """Ankle spread ramping low -> high -> low over *n_frames* frames."""
    n_up = n_frames // 2 + 1
    up = np.linspace(low, high, n_up)
    down = np.linspace(high, low, n_frames - n_up + 1)[1:]
    return np.concatenate([up, down])


def make_stride_frames(n_frames=30):
    """One idealized stride: left hand open, right hand fist throughout.

    Hands are kept at the subject's sides (elbows under the shoulders)
    so only the ankles move.
    """
    frames = []
    for spread in stride_spreads(n_frames):
        lm = standing_landmarks()
        set_hand(lm, "left", 0.4, forearm=0.11, wrist=(0.48, 0.48))
        set_hand(lm, "right", 0.1, forearm=0.11, wrist=(0.52, 0.48))
        set_ankle_spread(lm, float(spread))
        frames.append(LandmarkFrame.from_dict(lm))
    return frames


def make_pivot_data(frames, fps=30.0):
    """Wrap LandmarkFrames in a pivot JSON dict."""
    data = create_empty("walk.mp4", fps=fps, width=FRAME_SIZE, height=FRAME_SIZE,
                        n_frames=len(frames))
    data["frames"] = [
        {"frame_idx": i, "time_s": round(i / fps, 4), "landmarks": f.to_dict()}
        for i, f in enumerate(frames)
    ]
    return data


@pytest.fixture
def settings():
    return AnalysisSettings(
        user_height_cm=USER_HEIGHT_CM,
        view_mode="side_left",
        frame_width=FRAME_SIZE,
        frame_height=FRAME_SIZE,
    )
