"""
Progress, expected progress and pace classification.

Progress is always a fraction in [0, 1]. Pace compares it to the share of
the period that has elapsed:

    ratio >= 1.10  ahead
    ratio >= 0.90  on_track
    ratio >= 0.75  at_risk
    otherwise      off_track
"""
import logging
from datetime import datetime
from typing import Iterable, Optional, Union

from northstar.schemas.okr import KrConfig, KrType, KrDirection
from northstar.schemas.progress import PaceStatus, TimeWindow
from northstar.services.time_windows import clamp01, days_between

logger = logging.getLogger(__name__)

AHEAD_THRESHOLD = 1.10
ON_TRACK_THRESHOLD = 0.90
AT_RISK_THRESHOLD = 0.75

# Below this expected progress the period has barely started
EARLY_PERIOD_EXPECTED = 0.01
EARLY_PERIOD_RATIO_WITH_PROGRESS = 1.5

# Task-derived milestone progress never reaches 100% on its own
MILESTONE_TASK_PROGRESS_CAP = 0.95

PACE_SEVERITY = {
    PaceStatus.AHEAD: 0,
    PaceStatus.ON_TRACK: 1,
    PaceStatus.AT_RISK: 2,
    PaceStatus.OFF_TRACK: 3,
}


class InvalidKeyResultError(ValueError):
    """A key result carries a kr_type or direction the engine does not know."""
    pass


def coerce_kr_type(value: Union[KrType, str]) -> KrType:
    try:
        return KrType(value)
    except ValueError:
        raise InvalidKeyResultError(f"Unknown kr_type: {value!r}")


def coerce_direction(value: Union[KrDirection, str]) -> KrDirection:
    try:
        return KrDirection(value)
    except ValueError:
        raise InvalidKeyResultError(f"Unknown direction: {value!r}")


def compute_progress(
    kr_type: Union[KrType, str],
    direction: Union[KrDirection, str],
    current_value: float,
    baseline: float,
    target: float,
    config: Optional[KrConfig] = None,
) -> float:
    """Progress (0-1) of a value from baseline toward target."""
    kr_type = coerce_kr_type(kr_type)
    direction = coerce_direction(direction)

    # Milestones are binary with optional manual partial credit; direction is ignored
    if kr_type == KrType.MILESTONE:
        return _milestone_progress(current_value)

    if direction == KrDirection.DECREASE:
        return _decrease_progress(current_value, baseline, target)
    if direction == KrDirection.MAINTAIN:
        tolerance = config.tolerance_band if config else None
        return _maintain_progress(current_value, target, tolerance)
    return _increase_progress(current_value, baseline, target)


def _increase_progress(current: float, baseline: float, target: float) -> float:
    span = target - baseline
    if span == 0:
        return 1.0 if current >= target else 0.0
    return clamp01((current - baseline) / span)


def _decrease_progress(current: float, baseline: float, target: float) -> float:
    span = baseline - target
    if span == 0:
        return 1.0 if current <= target else 0.0
    return clamp01((baseline - current) / span)


def default_tolerance(target: float) -> float:
    """5% of the target, never tighter than 0.5."""
    return max(abs(target) * 0.05, 0.5)


def _maintain_progress(current: float, target: float, tolerance_band: Optional[float] = None) -> float:
    tolerance = tolerance_band if tolerance_band is not None else default_tolerance(target)
    deviation = abs(current - target)
    return clamp01(1 - deviation / tolerance)


def _milestone_progress(current_value: float) -> float:
    if current_value >= 1:
        return 1.0
    if 0 < current_value < 1:
        return current_value
    return 0.0


def compute_milestone_progress_with_tasks(
    current_value: float,
    completed_tasks: int,
    total_tasks: int,
    is_explicitly_complete: bool,
) -> float:
    """
    Milestone progress when linked tasks act as a proxy.

    Only an explicit completion signal yields 1.0; finishing every task
    tops out at MILESTONE_TASK_PROGRESS_CAP.
    """
    if is_explicitly_complete or current_value >= 1:
        return 1.0

    if total_tasks > 0:
        return min(MILESTONE_TASK_PROGRESS_CAP, completed_tasks / total_tasks)

    if 0 < current_value < 1:
        return current_value

    return 0.0


def compute_expected_progress(as_of: datetime, window: TimeWindow) -> float:
    """Share of the window elapsed at as_of, assuming linear progress."""
    total_days = days_between(window.start, window.end)
    if total_days <= 0:
        return 1.0
    elapsed_days = days_between(window.start, as_of)
    return clamp01(elapsed_days / total_days)


def compute_expected_value(
    expected_progress: float,
    baseline: float,
    target: float,
    direction: Union[KrDirection, str],
) -> float:
    if coerce_direction(direction) == KrDirection.MAINTAIN:
        return target
    return baseline + (target - baseline) * expected_progress


def compute_pace_ratio(progress: float, expected_progress: float) -> float:
    """Actual over expected progress, guarded at the very start of a period."""
    if expected_progress < EARLY_PERIOD_EXPECTED:
        return EARLY_PERIOD_RATIO_WITH_PROGRESS if progress > 0 else 1.0
    return progress / expected_progress


def classify_pace_status(pace_ratio: float) -> PaceStatus:
    if pace_ratio >= AHEAD_THRESHOLD:
        return PaceStatus.AHEAD
    if pace_ratio >= ON_TRACK_THRESHOLD:
        return PaceStatus.ON_TRACK
    if pace_ratio >= AT_RISK_THRESHOLD:
        return PaceStatus.AT_RISK
    return PaceStatus.OFF_TRACK


def compute_delta(current_value: float, target: float, direction: Union[KrDirection, str]) -> float:
    """Signed distance from target; positive is good in every direction."""
    if coerce_direction(direction) == KrDirection.DECREASE:
        return target - current_value
    return current_value - target


def is_pace_worse(a: Union[PaceStatus, str], b: Union[PaceStatus, str]) -> bool:
    """True when a is further from "ahead" than b."""
    return PACE_SEVERITY[PaceStatus(a)] > PACE_SEVERITY[PaceStatus(b)]


def worst_pace_status(statuses: Iterable[Union[PaceStatus, str]]) -> PaceStatus:
    """Worst status in the collection; off_track when it is empty."""
    worst = None
    for status in statuses:
        if worst is None or is_pace_worse(status, worst):
            worst = PaceStatus(status)
    return worst if worst is not None else PaceStatus.OFF_TRACK
