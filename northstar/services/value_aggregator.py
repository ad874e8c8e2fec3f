"""
Reduce check-ins and tasks inside a window to a single current value.

Each KR type has its own reduction:

    metric, rate  -> most recent check-in value
    count         -> sum of check-in values (or completed-task count)
    average       -> mean of check-in values
    milestone     -> most recent check-in value, 1 meaning done

Empty windows fall back to the KR's start value rather than raising.
"""
import logging
from typing import List, Optional, Sequence

from northstar.schemas.okr import (
    AnnualKr, CheckIn, Task, KrConfig, KrType, KrDirection,
    QualifierConfig, TaskStatus, TrackingSource,
)
from northstar.schemas.progress import TimeWindow
from northstar.services.time_windows import parse_datetime, in_window
from northstar.services.progress_calculator import coerce_kr_type, coerce_direction

logger = logging.getLogger(__name__)


def filter_check_ins_in_window(
    check_ins: Sequence[CheckIn],
    window: TimeWindow,
) -> List[CheckIn]:
    """Check-ins recorded inside the window, both ends inclusive."""
    return [ci for ci in check_ins if in_window(parse_datetime(ci.recorded_at), window)]


def filter_completed_tasks_in_window(
    tasks: Sequence[Task],
    window: TimeWindow,
) -> List[Task]:
    """Completed tasks whose completion time falls inside the window."""
    return [
        task for task in tasks
        if task.status == TaskStatus.COMPLETED
        and in_window(parse_datetime(task.completed_at), window)
    ]


def check_qualifier(check_in: CheckIn, qualifier: QualifierConfig) -> bool:
    """Whether a check-in satisfies a qualifier condition."""
    # TODO: evaluate qualifier.field against check-in evidence metadata once
    # check-ins carry an evidence_meta column; every check-in passes until then.
    return True


def sort_by_recorded_at(check_ins: Sequence[CheckIn], newest_first: bool = False) -> List[CheckIn]:
    """Chronological order; check-ins without a parseable timestamp are dropped."""
    dated = [ci for ci in check_ins if parse_datetime(ci.recorded_at) is not None]
    return sorted(dated, key=lambda ci: parse_datetime(ci.recorded_at), reverse=newest_first)


def latest_check_in(check_ins: Sequence[CheckIn]) -> Optional[CheckIn]:
    # Ties on recorded_at go to the check-in that comes last in the input.
    ordered = sort_by_recorded_at(check_ins)
    return ordered[-1] if ordered else None


def compute_current_value(
    kr: AnnualKr,
    check_ins: Sequence[CheckIn],
    tasks: Sequence[Task],
    window: TimeWindow,
    config: Optional[KrConfig] = None,
) -> float:
    """Current value of a KR as observed inside the window."""
    in_range = filter_check_ins_in_window(check_ins, window)
    completed = filter_completed_tasks_in_window(tasks, window)

    if config and config.qualifier:
        in_range = [ci for ci in in_range if check_qualifier(ci, config.qualifier)]

    tracking_source = config.tracking_source if config else TrackingSource.CHECK_INS
    kr_type = coerce_kr_type(kr.kr_type)

    if kr_type == KrType.MILESTONE:
        return _milestone_value(in_range, completed, tracking_source)
    if kr_type == KrType.COUNT:
        return _count_value(kr, in_range, completed, tracking_source)
    if kr_type == KrType.AVERAGE:
        return _average_value(kr, in_range)
    # metric and rate both report the latest observation
    return _latest_value(kr, in_range)


def _latest_value(kr: AnnualKr, check_ins: Sequence[CheckIn]) -> float:
    latest = latest_check_in(check_ins)
    if latest is None:
        return kr.start_value
    return latest.value


def _count_value(
    kr: AnnualKr,
    check_ins: Sequence[CheckIn],
    completed_tasks: Sequence[Task],
    tracking_source: TrackingSource,
) -> float:
    if tracking_source == TrackingSource.TASKS:
        return float(len(completed_tasks))

    check_in_sum = sum(ci.value for ci in check_ins)
    if tracking_source == TrackingSource.MIXED:
        return check_in_sum + len(completed_tasks)

    if not check_ins:
        return kr.start_value
    return check_in_sum


def _average_value(kr: AnnualKr, check_ins: Sequence[CheckIn]) -> float:
    if not check_ins:
        return kr.start_value
    return sum(ci.value for ci in check_ins) / len(check_ins)


def _milestone_value(
    check_ins: Sequence[CheckIn],
    completed_tasks: Sequence[Task],
    tracking_source: TrackingSource,
) -> float:
    # The latest check-in wins, so a later 0 re-opens a completed milestone.
    latest = latest_check_in(check_ins)
    if latest is not None:
        return latest.value

    if tracking_source != TrackingSource.CHECK_INS and completed_tasks:
        # Raw completed-task count; the progress step maps it to a ratio.
        return float(len(completed_tasks))

    return 0.0


def compute_baseline(kr: AnnualKr) -> float:
    """
    Starting point progress is measured from.

    An explicit start value always wins, and decrease KRs use their start
    value even when it is zero. Otherwise increase KRs start at 0 and
    maintain KRs start at their target.
    """
    direction = coerce_direction(kr.direction)
    if kr.start_value != 0 or direction == KrDirection.DECREASE:
        return kr.start_value
    if direction == KrDirection.INCREASE:
        return 0.0
    return kr.target_value
