"""
Progress Engine - per key result computation.

Runs the full pipeline for one annual KR or one quarter target:

    window -> current value -> baseline -> progress -> expected progress
           -> pace -> delta -> forecast

and packages the outcome into a ProgressResult. Every function here is pure:
inputs are already-fetched, already-authorized records and nothing is cached
between calls, so results can be computed concurrently without locking.

Example:
    result = compute_kr_progress(kr, check_ins, tasks, plan_year=2026,
                                 as_of=date(2026, 4, 15))
    result.progress      # 0.3
    result.pace_status   # PaceStatus.ON_TRACK
"""
import logging
from datetime import datetime
from typing import Optional, Sequence

from northstar.schemas.okr import (
    AnnualKr, QuarterTarget, CheckIn, Task, KrConfig,
    KrAggregation, KrType, TaskStatus, TrackingSource,
)
from northstar.schemas.progress import ProgressResult, TimeWindow
from northstar.services.time_windows import (
    DateLike, resolve_as_of, parse_datetime, days_between,
    get_year_dates, get_annual_kr_window,
    get_quarter_target_window, get_full_quarter_target_window,
)
from northstar.services.value_aggregator import (
    filter_check_ins_in_window, filter_completed_tasks_in_window,
    compute_current_value, compute_baseline, latest_check_in,
)
from northstar.services.progress_calculator import (
    coerce_kr_type, compute_progress, compute_milestone_progress_with_tasks,
    compute_expected_progress, compute_expected_value,
    compute_pace_ratio, classify_pace_status, compute_delta,
)
from northstar.services.forecast import compute_forecast, compute_milestone_forecast_date

logger = logging.getLogger(__name__)


def is_task_tracked_milestone(kr: AnnualKr, config: Optional[KrConfig]) -> bool:
    return (
        coerce_kr_type(kr.kr_type) == KrType.MILESTONE
        and config is not None
        and config.tracking_source != TrackingSource.CHECK_INS
    )


def count_trackable_tasks(tasks: Sequence[Task]) -> int:
    """Linked tasks that still count toward a milestone (cancelled ones do not)."""
    return sum(1 for task in tasks if task.status != TaskStatus.CANCELLED)


def last_check_in_date(check_ins: Sequence[CheckIn]) -> Optional[datetime]:
    dates = [parse_datetime(ci.recorded_at) for ci in check_ins]
    dates = [d for d in dates if d is not None]
    return max(dates) if dates else None


def compute_kr_progress(
    kr: AnnualKr,
    check_ins: Sequence[CheckIn],
    tasks: Sequence[Task],
    plan_year: int,
    as_of: DateLike = None,
    config: Optional[KrConfig] = None,
) -> ProgressResult:
    """
    Compute the complete progress result for an annual KR.

    Values are observed over Jan 1 .. as_of, while expected progress,
    forecast and day counts use the whole plan year, so the pace ratio has
    the same denominator however far into the year as_of is.
    """
    moment = resolve_as_of(as_of)
    window = get_annual_kr_window(kr, plan_year, moment)
    period = get_year_dates(plan_year)

    return _build_result(
        kr=kr,
        target=kr.target_value,
        baseline=compute_baseline(kr),
        check_ins=check_ins,
        tasks=tasks,
        window=window,
        period=period,
        moment=moment,
        config=config,
    )


def compute_quarter_target_progress(
    quarter_target: QuarterTarget,
    kr: AnnualKr,
    check_ins: Sequence[CheckIn],
    tasks: Sequence[Task],
    plan_year: int,
    as_of: DateLike = None,
    config: Optional[KrConfig] = None,
) -> ProgressResult:
    """
    Compute the progress result for a single quarter target.

    Only check-ins and tasks tagged with the quarter target's id count.
    Cumulative KRs measure from the KR's start value over Jan 1 .. quarter
    end; reset-quarterly KRs measure from zero over the quarter alone.
    """
    moment = resolve_as_of(as_of)
    window = get_quarter_target_window(quarter_target, kr, plan_year, moment)
    period = get_full_quarter_target_window(quarter_target, kr, plan_year)

    qt_check_ins = [ci for ci in check_ins if ci.quarter_target_id == quarter_target.id]
    qt_tasks = [task for task in tasks if task.quarter_target_id == quarter_target.id]

    baseline = kr.start_value if kr.aggregation == KrAggregation.CUMULATIVE else 0.0

    return _build_result(
        kr=kr,
        target=quarter_target.target_value,
        baseline=baseline,
        check_ins=qt_check_ins,
        tasks=qt_tasks,
        window=window,
        period=period,
        moment=moment,
        config=config,
    )


def _build_result(
    kr: AnnualKr,
    target: float,
    baseline: float,
    check_ins: Sequence[CheckIn],
    tasks: Sequence[Task],
    window: TimeWindow,
    period: TimeWindow,
    moment: datetime,
    config: Optional[KrConfig],
) -> ProgressResult:
    in_range = filter_check_ins_in_window(check_ins, window)
    completed = filter_completed_tasks_in_window(tasks, window)

    current_value = compute_current_value(kr, check_ins, tasks, window, config)

    task_tracked = is_task_tracked_milestone(kr, config)
    total_tasks = count_trackable_tasks(tasks)
    if task_tracked:
        # Completion must come from a check-in; a task count never marks it done
        latest = latest_check_in(in_range)
        check_in_value = latest.value if latest is not None else 0.0
        progress = compute_milestone_progress_with_tasks(
            check_in_value, len(completed), total_tasks, check_in_value >= 1,
        )
    else:
        progress = compute_progress(kr.kr_type, kr.direction, current_value, baseline, target, config)

    expected_progress = compute_expected_progress(moment, period)
    expected_value = compute_expected_value(expected_progress, baseline, target, kr.direction)

    pace_ratio = compute_pace_ratio(progress, expected_progress)
    pace_status = classify_pace_status(pace_ratio)

    delta = compute_delta(current_value, target, kr.direction)

    forecast = compute_forecast(kr.kr_type, baseline, current_value, period, moment)
    forecast_date = forecast.date
    if task_tracked:
        forecast_date = compute_milestone_forecast_date(len(completed), total_tasks, period, moment)

    logger.debug(
        f"KR {kr.id}: value={current_value} progress={progress:.3f} "
        f"expected={expected_progress:.3f} pace={pace_status.value}"
    )

    return ProgressResult(
        current_value=current_value,
        baseline=baseline,
        target=target,
        progress=progress,
        expected_progress=expected_progress,
        expected_value=expected_value,
        pace_ratio=pace_ratio,
        pace_status=pace_status,
        delta=delta,
        forecast_value=forecast.value,
        forecast_date=forecast_date,
        days_remaining=max(0, days_between(moment, period.end)),
        days_elapsed=max(0, days_between(period.start, moment)),
        last_check_in_date=last_check_in_date(in_range),
    )

