"""Analysis configuration management.

Supports JSON and YAML config files for reproducible sessions.
Configuration is merged against ``DEFAULT_CONFIG`` so partial
overrides work seamlessly, then validated into an immutable
:class:`AnalysisSettings` before any frame is processed.

Functions
---------
load_config
    Load analysis config from a JSON or YAML file.
save_config
    Save analysis config to a JSON or YAML file.

Attributes
----------
DEFAULT_CONFIG : dict
    Default configuration values.
"""

import copy
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from .constants import (
    COM_RATIO,
    HAND_OPEN_RATIO,
    STEP_THRESHOLD_RATIO,
    SUMMARY_EVERY,
    VIEW_MODES,
    VISIBILITY_THRESHOLD,
)

logger = logging.getLogger(__name__)


DEFAULT_CONFIG = {
    "analysis": {
        "view_mode": "side_left",
        "user_height_cm": 170.0,
        "visibility_threshold": VISIBILITY_THRESHOLD,
        "hand_open_ratio": HAND_OPEN_RATIO,
        "step_threshold_ratio": STEP_THRESHOLD_RATIO,
        "com_ratio": COM_RATIO,
        "summary_every": SUMMARY_EVERY,
    },
    "calibration": {
        "smoothing_alpha": None,
    },
    "video": {
        "width": 1920,
        "height": 1080,
    },
}


@dataclass(frozen=True)
class AnalysisSettings:
    """Validated analysis parameters.

    Raises
    ------
    ValueError
        On a non-positive height or frame size, an unknown view mode,
        a non-positive summary cadence or an out-of-range ratio.
    """

    user_height_cm: float = 170.0
    view_mode: str = "side_left"
    frame_width: int = 1920
    frame_height: int = 1080
    visibility_threshold: float = VISIBILITY_THRESHOLD
    hand_open_ratio: float = HAND_OPEN_RATIO
    step_threshold_ratio: float = STEP_THRESHOLD_RATIO
    com_ratio: float = COM_RATIO
    summary_every: int = SUMMARY_EVERY
    smoothing_alpha: Optional[float] = None

    def __post_init__(self):
        if self.user_height_cm is None or self.user_height_cm <= 0:
            raise ValueError(f"user_height_cm must be positive, got {self.user_height_cm}")
        if self.view_mode not in VIEW_MODES:
            raise ValueError(f"view_mode must be one of {VIEW_MODES}, got {self.view_mode!r}")
        if self.frame_width <= 0 or self.frame_height <= 0:
            raise ValueError(
                f"Frame size must be positive, got {self.frame_width}x{self.frame_height}"
            )
        if not 0.0 <= self.visibility_threshold <= 1.0:
            raise ValueError(f"visibility_threshold must be in [0, 1], got {self.visibility_threshold}")
        if self.hand_open_ratio <= 0:
            raise ValueError(f"hand_open_ratio must be positive, got {self.hand_open_ratio}")
        if self.step_threshold_ratio < 0:
            raise ValueError(f"step_threshold_ratio must be >= 0, got {self.step_threshold_ratio}")
        if not 0.0 <= self.com_ratio <= 1.0:
            raise ValueError(f"com_ratio must be in [0, 1], got {self.com_ratio}")
        if int(self.summary_every) != self.summary_every or self.summary_every < 1:
            raise ValueError(f"summary_every must be a positive integer, got {self.summary_every}")
        if self.smoothing_alpha is not None and not 0.0 < self.smoothing_alpha <= 1.0:
            raise ValueError(f"smoothing_alpha must be in (0, 1], got {self.smoothing_alpha}")

    @classmethod
    def from_config(cls, config: Optional[dict] = None, **overrides) -> "AnalysisSettings":
        """Build settings from a (partial) config dict plus keyword overrides.

        ``None`` overrides are ignored so CLI flags left unset fall back
        to the config file.
        """
        cfg = _deep_merge(copy.deepcopy(DEFAULT_CONFIG), config or {})
        analysis = cfg["analysis"]
        video = cfg["video"]
        params = {
            "user_height_cm": analysis["user_height_cm"],
            "view_mode": analysis["view_mode"],
            "frame_width": video["width"],
            "frame_height": video["height"],
            "visibility_threshold": analysis["visibility_threshold"],
            "hand_open_ratio": analysis["hand_open_ratio"],
            "step_threshold_ratio": analysis["step_threshold_ratio"],
            "com_ratio": analysis["com_ratio"],
            "summary_every": analysis["summary_every"],
            "smoothing_alpha": cfg["calibration"]["smoothing_alpha"],
        }
        params.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**params)


def load_config(path: Union[str, Path]) -> dict:
    """Load analysis config from a JSON or YAML file.

    The loaded configuration is merged against ``DEFAULT_CONFIG``
    so partial overrides work correctly.

    Parameters
    ----------
    path : str or Path
        Path to config file (``.json`` or ``.yaml``/``.yml``).

    Returns
    -------
    dict
        Merged configuration dictionary.

    Raises
    ------
    FileNotFoundError
        If the config file does not exist.
    ImportError
        If YAML is requested but ``pyyaml`` is not installed.
    ValueError
        If the file content is not a dict.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    suffix = path.suffix.lower()

    if suffix in (".yaml", ".yml"):
        try:
            import yaml
        except ImportError:
            raise ImportError("PyYAML required for YAML configs: pip install pyyaml")
        with open(path) as f:
            cfg = yaml.safe_load(f)
    else:
        with open(path) as f:
            cfg = json.load(f)

    if not isinstance(cfg, dict):
        raise ValueError("Config must be a dict")

    merged = _deep_merge(copy.deepcopy(DEFAULT_CONFIG), cfg)
    logger.info(f"Loaded config from {path}")
    return merged


def save_config(config: dict, path: Union[str, Path]) -> str:
    """Save analysis config to a JSON or YAML file.

    Parameters
    ----------
    config : dict
        Configuration dictionary.
    path : str or Path
        Output file path (``.json`` or ``.yaml``/``.yml``).

    Returns
    -------
    str
        Path to the saved file.

    Raises
    ------
    ImportError
        If YAML is requested but ``pyyaml`` is not installed.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    suffix = path.suffix.lower()

    if suffix in (".yaml", ".yml"):
        try:
            import yaml
        except ImportError:
            raise ImportError("PyYAML required for YAML configs: pip install pyyaml")
        with open(path, "w") as f:
            yaml.dump(config, f, default_flow_style=False, sort_keys=False)
    else:
        with open(path, "w") as f:
            json.dump(config, f, indent=2, ensure_ascii=False)

    logger.info(f"Saved config to {path}")
    return str(path)


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge override into base."""
    result = base.copy()
    for k, v in override.items():
        if k in result and isinstance(result[k], dict) and isinstance(v, dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result
