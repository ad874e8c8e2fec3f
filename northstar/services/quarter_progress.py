"""
Quarter-by-quarter progress for a key result.

Each quarter target is judged on its own, with its position in time
deciding what is expected of it:

- past quarters are expected to be complete; an incomplete one is off_track
- future quarters are expected to be at zero and always read on_track
- the current quarter is expected to follow the elapsed share of its window

How the quarter's value is measured depends on the KR's aggregation:

- cumulative: the year-to-date value against the quarter's cumulative target
- reset_quarterly metric/rate: the gain since the quarter opened, taking the
  last check-in before the quarter (or the start value) as the zero point,
  so an absolute figure such as a follower count is re-zeroed every quarter.
  Targets for these quarters are signed changes (e.g. -5 for a decrease).
- reset_quarterly count/average/milestone: check-ins inside the quarter only
"""
import logging
from datetime import datetime
from typing import List, Optional, Sequence, Tuple

from northstar.schemas.okr import (
    AnnualKr, QuarterTarget, CheckIn, KrAggregation, KrDirection, KrType,
)
from northstar.schemas.progress import (
    PaceStatus, TimeWindow, QuarterProgressResult, QuarterProgressSummary,
)
from northstar.services.time_windows import (
    DateLike, resolve_as_of, parse_datetime, days_between,
    get_quarter_dates, get_current_quarter,
)
from northstar.services.value_aggregator import (
    filter_check_ins_in_window, compute_current_value, compute_baseline, latest_check_in,
)
from northstar.services.progress_calculator import (
    coerce_kr_type, coerce_direction, compute_progress,
    compute_expected_progress, compute_pace_ratio, classify_pace_status,
)
from northstar.services.progress_engine import last_check_in_date

logger = logging.getLogger(__name__)


def value_before(check_ins: Sequence[CheckIn], moment: datetime, default: float) -> float:
    """Value of the latest check-in recorded strictly before moment."""
    earlier = []
    for ci in check_ins:
        recorded = parse_datetime(ci.recorded_at)
        if recorded is not None and recorded < moment:
            earlier.append(ci)
    latest = latest_check_in(earlier)
    return latest.value if latest is not None else default


def _reset_quarter_value(
    kr: AnnualKr,
    check_ins: Sequence[CheckIn],
    window: TimeWindow,
    quarter_start: datetime,
) -> Tuple[float, float]:
    """(current value, baseline) of a reset-quarterly KR inside one quarter."""
    kr_type = coerce_kr_type(kr.kr_type)
    direction = coerce_direction(kr.direction)
    in_quarter = filter_check_ins_in_window(check_ins, window)

    if kr_type in (KrType.METRIC, KrType.RATE):
        opening = value_before(check_ins, quarter_start, kr.start_value)
        latest = latest_check_in(in_quarter)
        closing = latest.value if latest is not None else opening
        if direction == KrDirection.MAINTAIN:
            return closing, kr.target_value
        return closing - opening, 0.0

    if kr_type == KrType.COUNT:
        return sum(ci.value for ci in in_quarter), 0.0

    if kr_type == KrType.AVERAGE:
        return compute_current_value(kr, in_quarter, [], window), compute_baseline(kr)

    latest = latest_check_in(in_quarter)
    return (latest.value if latest is not None else 0.0), 0.0


def compute_quarter_progress(
    quarter_target: QuarterTarget,
    kr: AnnualKr,
    check_ins: Sequence[CheckIn],
    plan_year: int,
    as_of: DateLike = None,
) -> QuarterProgressResult:
    """Progress of one quarter target, with its past/current/future flags."""
    moment = resolve_as_of(as_of)
    quarter = get_quarter_dates(plan_year, quarter_target.quarter)

    is_past = moment > quarter.end
    is_future = moment < quarter.start
    is_current = not is_past and not is_future

    if kr.aggregation == KrAggregation.CUMULATIVE:
        period = TimeWindow(start=datetime(plan_year, 1, 1), end=quarter.end)
        window = TimeWindow(start=period.start, end=min(moment, quarter.end))
        current_value = compute_current_value(kr, check_ins, [], window)
        baseline = compute_baseline(kr)
    else:
        period = quarter
        window = TimeWindow(start=quarter.start, end=min(moment, quarter.end))
        current_value, baseline = _reset_quarter_value(kr, check_ins, window, quarter.start)

    progress = compute_progress(
        kr.kr_type, kr.direction, current_value, baseline, quarter_target.target_value,
    )
    is_complete = progress >= 1

    if is_past:
        expected_progress = 1.0
        days_elapsed = days_between(quarter.start, quarter.end)
        days_remaining = 0
    elif is_future:
        expected_progress = 0.0
        days_elapsed = 0
        days_remaining = days_between(moment, quarter.start)
    else:
        expected_progress = compute_expected_progress(moment, period)
        days_elapsed = days_between(quarter.start, moment)
        days_remaining = days_between(moment, quarter.end)

    if is_future:
        pace_ratio = 1.0
        pace_status = PaceStatus.ON_TRACK
    else:
        pace_ratio = compute_pace_ratio(progress, expected_progress)
        pace_status = classify_pace_status(pace_ratio)
        if is_past and not is_complete:
            pace_status = PaceStatus.OFF_TRACK

    return QuarterProgressResult(
        quarter=quarter_target.quarter,
        quarter_target_id=quarter_target.id,
        current_value=current_value,
        baseline=baseline,
        target=quarter_target.target_value,
        progress=progress,
        expected_progress=expected_progress,
        pace_ratio=pace_ratio,
        pace_status=pace_status,
        days_elapsed=days_elapsed,
        days_remaining=days_remaining,
        last_check_in_date=last_check_in_date(filter_check_ins_in_window(check_ins, window)),
        is_current=is_current,
        is_past=is_past,
        is_future=is_future,
        is_complete=is_complete,
    )


def compute_all_quarters_progress(
    quarter_targets: Sequence[QuarterTarget],
    kr: AnnualKr,
    check_ins: Sequence[CheckIn],
    plan_year: int,
    as_of: DateLike = None,
) -> List[QuarterProgressResult]:
    """Quarter progress for every target, ordered Q1 to Q4."""
    moment = resolve_as_of(as_of)
    ordered = sorted(quarter_targets, key=lambda qt: qt.quarter)
    return [compute_quarter_progress(qt, kr, check_ins, plan_year, moment) for qt in ordered]


def get_quarter_progress_summary(
    quarter_targets: Sequence[QuarterTarget],
    kr: AnnualKr,
    check_ins: Sequence[CheckIn],
    plan_year: int,
    as_of: DateLike = None,
) -> QuarterProgressSummary:
    """
    Year-level view over the quarters.

    The KR is on track for the year when every past quarter was completed
    and the current quarter (if the plan year is under way) is ahead or on
    track.
    """
    moment = resolve_as_of(as_of)
    quarters = compute_all_quarters_progress(quarter_targets, kr, check_ins, plan_year, moment)

    current: Optional[QuarterProgressResult] = next((q for q in quarters if q.is_current), None)
    past_complete = all(q.is_complete for q in quarters if q.is_past)
    current_on_pace = current is None or current.pace_status in (PaceStatus.AHEAD, PaceStatus.ON_TRACK)

    return QuarterProgressSummary(
        quarters=quarters,
        total_quarters=len(quarters),
        completed_quarters=sum(1 for q in quarters if q.is_complete),
        current_quarter=get_current_quarter(moment) if moment.year == plan_year else None,
        current_quarter_progress=current,
        is_on_track_for_year=bool(quarters) and past_complete and current_on_pace,
    )
