"""Sequential frame pipeline.

Each frame flows one way through the stages::

    LandmarkFrame -> scale -> GaitSnapshot -> step detector -> SessionStats -> StatsSummary

:func:`process_frame` is a pure function from ``(frame, state)`` to
``(new state, snapshot, optional summary)``; nothing is held between
calls except what the caller passes back in. Frames must be fed in
playback order because the step detector and the running extrema are
order dependent.

For hosts that deliver frames one at a time, :class:`GaitSession`
holds the current state, serializes updates and swaps in a fresh
state on reset.

Functions
---------
process_frame
    Run one frame through the pipeline.
analyze_frames
    Replay an ordered sequence of frames.
analyze_pivot
    Replay the frames of a pivot JSON dict.
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import Iterable, List, Optional

from .aggregate import SessionStats, StatsSummary, should_emit, summarize, update_stats
from .calibration import CalibrationContext, SmoothedCalibrator, cm_per_pixel
from .config import AnalysisSettings
from .metrics import GaitSnapshot, extract_metrics
from .schema import frames_from_pivot
from .steps import step_threshold, update_steps

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PipelineState:
    """Everything carried from one frame to the next."""

    stats: SessionStats = field(default_factory=SessionStats)
    calibrator: Optional[SmoothedCalibrator] = None


@dataclass(frozen=True)
class FrameResult:
    state: PipelineState
    snapshot: GaitSnapshot
    summary: Optional[StatsSummary] = None


@dataclass
class SessionResult:
    """Outcome of replaying a sequence of frames."""

    stats: SessionStats
    snapshots: List[GaitSnapshot]
    summaries: List[StatsSummary]

    @property
    def summary(self) -> StatsSummary:
        """Summary of the final state, regardless of emission cadence."""
        return summarize(self.stats)


def initial_state(settings: AnalysisSettings) -> PipelineState:
    calibrator = None
    if settings.smoothing_alpha is not None:
        calibrator = SmoothedCalibrator(alpha=settings.smoothing_alpha)
    return PipelineState(stats=SessionStats(), calibrator=calibrator)


def _context(settings: AnalysisSettings) -> CalibrationContext:
    return CalibrationContext(
        user_height_cm=settings.user_height_cm,
        frame_width=settings.frame_width,
        frame_height=settings.frame_height,
    )


def process_frame(
    frame,
    state: PipelineState,
    settings: AnalysisSettings,
    frame_idx: Optional[int] = None,
) -> FrameResult:
    """Run one frame through the pipeline.

    Parameters
    ----------
    frame : LandmarkFrame
        Pose landmarks of the frame.
    state : PipelineState
        State returned for the previous frame (``initial_state`` for the
        first one).
    settings : AnalysisSettings
        Validated analysis parameters.
    frame_idx : int, optional
        Index stored on the snapshot; defaults to the number of frames
        already processed.

    Returns
    -------
    FrameResult
        New state, the frame's snapshot, and a summary when one is due.
    """
    stats = state.stats
    if frame_idx is None:
        frame_idx = stats.frames
    context = _context(settings)
    threshold = settings.visibility_threshold

    scale = cm_per_pixel(frame, context, threshold=threshold)
    calibrator = state.calibrator
    if calibrator is not None:
        calibrator, scale = calibrator.update(scale)

    snapshot = extract_metrics(
        frame,
        context,
        view_mode=settings.view_mode,
        frame_idx=frame_idx,
        scale=scale,
        open_ratio=settings.hand_open_ratio,
        com_ratio=settings.com_ratio,
        threshold=threshold,
    )

    # No ankle distance or no valid scale: the detector skips this frame.
    steps = stats.step_state
    if snapshot.ankle_distance is not None and snapshot.cm_per_pixel is not None:
        dist_threshold = step_threshold(
            settings.user_height_cm, snapshot.cm_per_pixel, settings.step_threshold_ratio
        )
        steps = update_steps(steps, snapshot.ankle_distance, dist_threshold)

    stats = update_stats(stats, snapshot, steps)
    summary = summarize(stats) if should_emit(stats, settings.summary_every) else None

    return FrameResult(
        state=PipelineState(stats=stats, calibrator=calibrator),
        snapshot=snapshot,
        summary=summary,
    )


def analyze_frames(frames: Iterable, settings: Optional[AnalysisSettings] = None) -> SessionResult:
    """Replay *frames* in order and collect snapshots and summaries.

    *frames* may yield ``LandmarkFrame`` objects or
    ``(frame_idx, LandmarkFrame)`` pairs.
    """
    settings = settings or AnalysisSettings()
    state = initial_state(settings)
    snapshots, summaries = [], []
    for item in frames:
        if isinstance(item, tuple):
            idx, frame = item
        else:
            idx, frame = None, item
        result = process_frame(frame, state, settings, frame_idx=idx)
        state = result.state
        snapshots.append(result.snapshot)
        if result.summary is not None:
            summaries.append(result.summary)

    logger.info(
        f"Processed {state.stats.frames} frames: "
        f"{state.stats.step_count} steps, {len(summaries)} summaries"
    )
    return SessionResult(stats=state.stats, snapshots=snapshots, summaries=summaries)


def analyze_pivot(data: dict, settings: Optional[AnalysisSettings] = None) -> SessionResult:
    """Replay the frames of a pivot JSON dict (see :mod:`nordicgait.schema`)."""
    return analyze_frames(frames_from_pivot(data), settings)


class GaitSession:
    """Frame-by-frame session holder for live hosts.

    ``push`` runs the whole pipeline for one frame under a lock, so two
    frames never interleave. ``reset`` replaces the state in a single
    assignment. ``stats`` returns the current immutable accumulator.
    """

    def __init__(self, settings: Optional[AnalysisSettings] = None):
        self.settings = settings or AnalysisSettings()
        self._lock = threading.Lock()
        self._state = initial_state(self.settings)
        self.last_snapshot: Optional[GaitSnapshot] = None
        self.last_summary: Optional[StatsSummary] = None

    @property
    def stats(self) -> SessionStats:
        return self._state.stats

    def push(self, frame, frame_idx: Optional[int] = None) -> FrameResult:
        with self._lock:
            result = process_frame(frame, self._state, self.settings, frame_idx=frame_idx)
            self._state = result.state
            self.last_snapshot = result.snapshot
            if result.summary is not None:
                self.last_summary = result.summary
        return result

    def reset(self, settings: Optional[AnalysisSettings] = None) -> None:
        """Start a new session, optionally with new settings."""
        with self._lock:
            if settings is not None:
                self.settings = settings
            self._state = initial_state(self.settings)
            self.last_snapshot = None
            self.last_summary = None
        logger.debug("Session reset")
