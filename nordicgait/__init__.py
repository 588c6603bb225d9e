"""nordicgait -- Nordic-walking technique analysis from pose landmarks.

Quick start::

    from nordicgait import AnalysisSettings, LandmarkFrame, GaitSession
    session = GaitSession(AnalysisSettings(user_height_cm=172, view_mode="side_left"))
    for landmarks in pose_stream:                      # 33 MediaPipe landmarks
        result = session.push(LandmarkFrame.from_sequence(landmarks))
        draw_overlay(result.snapshot)
        if result.summary is not None:                 # every 10 frames
            update_dashboard(result.summary)

Offline replay of a pivot JSON::

    from nordicgait import load_json, analyze_pivot, export_csv
    result = analyze_pivot(load_json("walk.json"))
    print(result.summary.steps, result.summary.hand_fist_ratio)
    export_csv(result, "./output")
"""

__version__ = "0.1.0"

from .constants import Joint, Side, joint_for
from .schema import Landmark, LandmarkFrame, create_empty, frames_from_pivot, load_json, save_json
from .geometry import distance, included_angle, midpoint, vertical_angle
from .hands import HandState, classify_hand, hand_ratio
from .calibration import CalibrationContext, SmoothedCalibrator, cm_per_pixel, pixel_height
from .steps import StepState, StepTrend, ankle_distance, step_threshold, update_steps
from .metrics import GaitSnapshot, SwingDirection, ViewMode, extract_metrics
from .aggregate import SessionStats, StatsSummary, should_emit, summarize, update_stats
from .config import AnalysisSettings, DEFAULT_CONFIG, load_config, save_config
from .pipeline import (
    FrameResult,
    GaitSession,
    PipelineState,
    SessionResult,
    analyze_frames,
    analyze_pivot,
    initial_state,
    process_frame,
)
from .export import export_csv, export_summary_json, snapshots_to_dataframe, summaries_to_dataframe

__all__ = [
    # Landmarks
    "Joint",
    "Side",
    "joint_for",
    "Landmark",
    "LandmarkFrame",
    # Geometry
    "distance",
    "vertical_angle",
    "included_angle",
    "midpoint",
    # Per-frame metrics
    "HandState",
    "classify_hand",
    "hand_ratio",
    "CalibrationContext",
    "SmoothedCalibrator",
    "cm_per_pixel",
    "pixel_height",
    "StepState",
    "StepTrend",
    "ankle_distance",
    "step_threshold",
    "update_steps",
    "GaitSnapshot",
    "SwingDirection",
    "ViewMode",
    "extract_metrics",
    # Session statistics
    "SessionStats",
    "StatsSummary",
    "update_stats",
    "summarize",
    "should_emit",
    # Pipeline
    "FrameResult",
    "GaitSession",
    "PipelineState",
    "SessionResult",
    "analyze_frames",
    "analyze_pivot",
    "initial_state",
    "process_frame",
    # Config
    "AnalysisSettings",
    "DEFAULT_CONFIG",
    "load_config",
    "save_config",
    # I/O
    "create_empty",
    "frames_from_pivot",
    "load_json",
    "save_json",
    "export_csv",
    "export_summary_json",
    "snapshots_to_dataframe",
    "summaries_to_dataframe",
    # Meta
    "__version__",
]
