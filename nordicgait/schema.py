"""Landmark value objects and the pivot JSON format.

A pose-estimation tool produces one :class:`LandmarkFrame` per video
frame. On disk, frames travel in the pivot JSON layout::

    {
      "meta": {"fps": 30.0, "width": 1920, "height": 1080, ...},
      "frames": [
        {"frame_idx": 0, "landmarks": {"LEFT_WRIST": {"x": .., "y": .., "visibility": ..}, ...}},
        ...
      ]
    }

Functions
---------
create_empty
    Create an empty pivot JSON structure.
frames_from_pivot
    Convert pivot JSON frames to ``LandmarkFrame`` objects.
save_json
    Save pivot JSON to file with numpy type conversion.
load_json
    Load and validate a pivot JSON file.
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterator, List, Sequence, Tuple, Union

import numpy as np

from .constants import MP_LANDMARK_NAMES, N_LANDMARKS, VISIBILITY_THRESHOLD, Joint


@dataclass(frozen=True)
class Landmark:
    """One tracked point: normalized position, depth and confidence."""

    x: float
    y: float
    z: float = 0.0
    visibility: float = 0.0

    def is_visible(self, threshold: float = VISIBILITY_THRESHOLD) -> bool:
        return self.visibility >= threshold


_MISSING = Landmark(0.0, 0.0, 0.0, 0.0)


class LandmarkFrame:
    """Immutable set of 33 landmarks for one video frame.

    Index with a :class:`~nordicgait.constants.Joint`::

        frame[Joint.LEFT_WRIST].x
    """

    __slots__ = ("_landmarks",)

    def __init__(self, landmarks: Sequence[Landmark]):
        landmarks = tuple(landmarks)
        if len(landmarks) != N_LANDMARKS:
            raise ValueError(
                f"LandmarkFrame needs {N_LANDMARKS} landmarks, got {len(landmarks)}"
            )
        object.__setattr__(self, "_landmarks", landmarks)

    def __setattr__(self, name, value):
        raise AttributeError("LandmarkFrame is immutable")

    def __getitem__(self, joint: Joint) -> Landmark:
        return self._landmarks[Joint(joint)]

    def __iter__(self) -> Iterator[Landmark]:
        return iter(self._landmarks)

    def __len__(self) -> int:
        return N_LANDMARKS

    def __eq__(self, other):
        if not isinstance(other, LandmarkFrame):
            return NotImplemented
        return self._landmarks == other._landmarks

    def __hash__(self):
        return hash(self._landmarks)

    def __repr__(self):
        visible = sum(1 for lm in self._landmarks if lm.is_visible())
        return f"LandmarkFrame(visible={visible}/{N_LANDMARKS})"

    def visible(self, *joints: Joint, threshold: float = VISIBILITY_THRESHOLD) -> bool:
        """True when every joint in *joints* passes the visibility gate."""
        return all(self[j].is_visible(threshold) for j in joints)

    @classmethod
    def from_sequence(cls, points: Sequence[Any]) -> "LandmarkFrame":
        """Build from 33 objects exposing ``x``, ``y``, ``z``, ``visibility``.

        MediaPipe ``results.pose_landmarks.landmark`` works as-is.
        """
        return cls([
            Landmark(
                float(p.x),
                float(p.y),
                float(getattr(p, "z", 0.0) or 0.0),
                float(getattr(p, "visibility", 0.0) or 0.0),
            )
            for p in points
        ])

    @classmethod
    def from_dict(cls, landmarks: dict) -> "LandmarkFrame":
        """Build from a name-keyed dict (pivot JSON per-frame layout).

        Names absent from *landmarks*, or with NaN coordinates, become
        zero-visibility landmarks.
        """
        points = []
        for name in MP_LANDMARK_NAMES:
            lm = landmarks.get(name)
            if lm is None or lm.get("x") is None or lm.get("y") is None:
                points.append(_MISSING)
                continue
            x, y = float(lm["x"]), float(lm["y"])
            if np.isnan(x) or np.isnan(y):
                points.append(_MISSING)
                continue
            vis = lm.get("visibility")
            points.append(Landmark(
                x, y,
                float(lm.get("z") or 0.0),
                float(vis) if vis is not None else 0.0,
            ))
        return cls(points)

    def to_dict(self) -> dict:
        return {
            name: {"x": lm.x, "y": lm.y, "z": lm.z, "visibility": lm.visibility}
            for name, lm in zip(MP_LANDMARK_NAMES, self._landmarks)
        }


def _convert_numpy(obj: Any) -> Any:
    """Recursively convert numpy types to Python types for JSON serialization."""
    if isinstance(obj, (np.integer,)):
        return int(obj)
    if isinstance(obj, (np.floating,)):
        return float(obj)
    if isinstance(obj, np.ndarray):
        return obj.tolist()
    if isinstance(obj, dict):
        return {k: _convert_numpy(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_convert_numpy(v) for v in obj]
    if isinstance(obj, np.bool_):
        return bool(obj)
    return obj


def create_empty(
    video_path: str = "",
    fps: float = 30.0,
    width: int = 0,
    height: int = 0,
    n_frames: int = 0,
) -> dict:
    """Create an empty pivot JSON structure.

    Parameters
    ----------
    video_path : str
        Source video path.
    fps : float
        Frame rate in Hz (default 30.0).
    width : int
        Video width in pixels.
    height : int
        Video height in pixels.
    n_frames : int
        Total number of frames.

    Returns
    -------
    dict
        Empty pivot dictionary ready to be populated.
    """
    from . import __version__
    return {
        "nordicgait_version": __version__,
        "meta": {
            "video_path": str(video_path),
            "fps": fps,
            "width": width,
            "height": height,
            "n_frames": n_frames,
        },
        "frames": [],
    }


def frames_from_pivot(data: dict) -> List[Tuple[int, LandmarkFrame]]:
    """Convert pivot JSON frames to ``(frame_idx, LandmarkFrame)`` pairs.

    Frames are returned sorted by ``frame_idx`` so that downstream
    order-dependent state (step detection, extrema) sees them in
    playback order.
    """
    out = []
    for i, f in enumerate(data.get("frames", [])):
        idx = f.get("frame_idx", i)
        out.append((int(idx), LandmarkFrame.from_dict(f.get("landmarks") or {})))
    out.sort(key=lambda pair: pair[0])
    return out


def save_json(data: dict, path: Union[str, Path], indent: int = 2) -> None:
    """Save pivot JSON to file.

    Automatically converts numpy types to Python builtins before
    serialization.

    Parameters
    ----------
    data : dict
        Pivot dictionary.
    path : str or Path
        Output file path. Parent directories are created if needed.
    indent : int, optional
        JSON indentation level (default 2).
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    converted = _convert_numpy(data)
    with open(path, "w") as f:
        json.dump(converted, f, indent=indent, ensure_ascii=False)


def load_json(path: Union[str, Path]) -> dict:
    """Load and validate a pivot JSON file.

    Parameters
    ----------
    path : str or Path
        Path to JSON file.

    Returns
    -------
    dict
        Pivot dictionary.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    ValueError
        If the JSON content is not a valid pivot format.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")

    with open(path) as f:
        data = json.load(f)

    if not isinstance(data, dict):
        raise ValueError("JSON root must be a dict")

    if "meta" not in data:
        raise ValueError("Missing 'meta' key in JSON")
    if "frames" not in data:
        raise ValueError("Missing 'frames' key in JSON")

    return data
