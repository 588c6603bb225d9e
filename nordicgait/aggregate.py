"""Running session statistics.

:class:`SessionStats` is an immutable accumulator: :func:`update_stats`
folds one :class:`~nordicgait.metrics.GaitSnapshot` into a *new*
instance, so a reader holding a reference never observes a partial
update, and a reset is simply ``SessionStats()``.

Measurements that were gated out for a frame (None / UNKNOWN) are
skipped; they never contribute a zero or a stale value.

Functions
---------
update_stats
    Fold one snapshot into the session accumulator.
summarize
    Build the display-ready summary.
should_emit
    Whether the summary is due on the current frame.
"""

import logging
from dataclasses import dataclass, replace
from typing import Optional

from .constants import MIN_TORSO_SENTINEL, SUMMARY_EVERY
from .hands import HandState
from .metrics import GaitSnapshot, SwingDirection
from .steps import StepState, StepTrend

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionStats:
    max_torso: float = 0.0
    min_torso: float = MIN_TORSO_SENTINEL
    sum_torso: float = 0.0
    count_torso: int = 0
    max_arm_forward: float = 0.0
    max_arm_backward: float = 0.0
    sum_arm: float = 0.0
    count_arm: int = 0
    max_step: float = 0.0
    sum_step: float = 0.0
    count_step: int = 0
    fist_count: int = 0
    open_count: int = 0
    hand_frames: int = 0
    step_count: int = 0
    step_trend: StepTrend = StepTrend.UNKNOWN
    last_ankle_dist: Optional[float] = None
    frames: int = 0

    @property
    def step_state(self) -> StepState:
        return StepState(trend=self.step_trend,
                         last_ankle_dist=self.last_ankle_dist,
                         count=self.step_count)


@dataclass(frozen=True)
class StatsSummary:
    """Display-ready statistics. Angles in degrees, lengths in cm."""

    avg_torso: float = 0.0
    max_torso: float = 0.0
    min_torso: float = MIN_TORSO_SENTINEL
    avg_arm: float = 0.0
    max_arm_forward: float = 0.0
    max_arm_backward: float = 0.0
    avg_step: float = 0.0
    max_step: float = 0.0
    steps: int = 0
    hand_fist_ratio: float = 0.0
    frames: int = 0


def update_stats(
    stats: SessionStats,
    snapshot: GaitSnapshot,
    steps: Optional[StepState] = None,
) -> SessionStats:
    """Return *stats* with *snapshot* folded in.

    Parameters
    ----------
    stats : SessionStats
        Accumulator before this frame.
    snapshot : GaitSnapshot
        Metrics of the frame.
    steps : StepState, optional
        Step detector state after this frame. When omitted the step
        fields are carried over unchanged.

    Returns
    -------
    SessionStats
    """
    changes = {"frames": stats.frames + 1}

    lean = snapshot.torso_lean
    if lean is not None:
        changes.update(
            sum_torso=stats.sum_torso + lean,
            count_torso=stats.count_torso + 1,
            max_torso=max(stats.max_torso, lean),
            min_torso=min(stats.min_torso, lean),
        )

    max_fwd, max_back = stats.max_arm_forward, stats.max_arm_backward
    arms = []
    for angle, swing in ((snapshot.arm_angle_left, snapshot.swing_left),
                         (snapshot.arm_angle_right, snapshot.swing_right)):
        if angle is None:
            continue
        arms.append(angle)
        if swing == SwingDirection.FORWARD:
            max_fwd = max(max_fwd, angle)
        else:
            max_back = max(max_back, angle)
    if arms:
        changes.update(
            sum_arm=stats.sum_arm + sum(arms) / len(arms),
            count_arm=stats.count_arm + 1,
            max_arm_forward=max_fwd,
            max_arm_backward=max_back,
        )

    step_len = snapshot.step_length
    if step_len is not None:
        changes.update(
            sum_step=stats.sum_step + step_len,
            count_step=stats.count_step + 1,
            max_step=max(stats.max_step, step_len),
        )

    hands = (snapshot.hand_left, snapshot.hand_right)
    fist = sum(1 for h in hands if h == HandState.FIST)
    opened = sum(1 for h in hands if h == HandState.OPEN)
    if fist or opened:
        changes.update(
            fist_count=stats.fist_count + fist,
            open_count=stats.open_count + opened,
            hand_frames=stats.hand_frames + 1,
        )

    if steps is not None:
        changes.update(
            step_count=steps.count,
            step_trend=steps.trend,
            last_ankle_dist=steps.last_ankle_dist,
        )

    return replace(stats, **changes)


def _mean(total: float, count: int) -> float:
    return total / count if count else 0.0


def summarize(stats: SessionStats) -> StatsSummary:
    hand_total = stats.fist_count + stats.open_count
    return StatsSummary(
        avg_torso=_mean(stats.sum_torso, stats.count_torso),
        max_torso=stats.max_torso,
        min_torso=stats.min_torso,
        avg_arm=_mean(stats.sum_arm, stats.count_arm),
        max_arm_forward=stats.max_arm_forward,
        max_arm_backward=stats.max_arm_backward,
        avg_step=_mean(stats.sum_step, stats.count_step),
        max_step=stats.max_step,
        steps=stats.step_count,
        hand_fist_ratio=stats.fist_count / (hand_total or 1) * 100,
        frames=stats.frames,
    )


def should_emit(stats: SessionStats, every: int = SUMMARY_EVERY) -> bool:
    return stats.frames > 0 and stats.frames % every == 0
