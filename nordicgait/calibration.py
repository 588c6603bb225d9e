"""Pixel-to-centimetre scale from the subject's declared height.

The apparent body height in pixels is re-measured on every frame
(eye to heel), so the scale follows the subject as they move toward
or away from the camera. Pose changes (a slight crouch) also shift the
scale; :class:`SmoothedCalibrator` damps that with an exponential
moving average, but the raw per-frame scale stays the default.

Functions
---------
pixel_height
    Vertical eye-to-heel span in pixels.
cm_per_pixel
    Per-frame scale factor, or None when unavailable.
"""

import logging
from dataclasses import dataclass, replace
from typing import Optional

from .constants import FOOT_REFERENCE, HEAD_REFERENCE, VISIBILITY_THRESHOLD

logger = logging.getLogger(__name__)

# Pixel heights below this are treated as 1 px.
_MIN_PIXEL_HEIGHT = 1e-6


@dataclass(frozen=True)
class CalibrationContext:
    """User-declared height and the frame size in pixels."""

    user_height_cm: float
    frame_width: int
    frame_height: int


def pixel_height(frame, frame_height: float,
                 threshold: float = VISIBILITY_THRESHOLD) -> Optional[float]:
    """Vertical span between the head and foot references, in pixels."""
    if not frame.visible(HEAD_REFERENCE, FOOT_REFERENCE, threshold=threshold):
        return None
    return abs(frame[FOOT_REFERENCE].y - frame[HEAD_REFERENCE].y) * frame_height


def cm_per_pixel(frame, context: CalibrationContext,
                 threshold: float = VISIBILITY_THRESHOLD) -> Optional[float]:
    """Centimetres per pixel for this frame.

    Returns None ("no valid scale this frame") when the user height is
    not positive or the reference landmarks are not visible. A zero
    pixel height falls back to 1 px, giving a degenerate but finite
    scale.
    """
    if context.user_height_cm is None or context.user_height_cm <= 0:
        logger.debug("No valid scale: user height is not positive")
        return None
    px = pixel_height(frame, context.frame_height, threshold=threshold)
    if px is None:
        return None
    if px < _MIN_PIXEL_HEIGHT:
        px = 1.0
    return context.user_height_cm / px


@dataclass(frozen=True)
class SmoothedCalibrator:
    """Exponentially averaged scale.

    ``update`` returns a new calibrator and the smoothed scale. A frame
    without a valid raw scale gets no scale (None) and leaves the average
    unchanged for later frames.
    """

    alpha: float = 0.2
    value: Optional[float] = None

    def __post_init__(self):
        if not 0.0 < self.alpha <= 1.0:
            raise ValueError(f"alpha must be in (0, 1], got {self.alpha}")

    def update(self, raw: Optional[float]):
        if raw is None:
            return self, None
        if self.value is None:
            smoothed = raw
        else:
            smoothed = self.alpha * raw + (1 - self.alpha) * self.value
        return replace(self, value=smoothed), smoothed
