"""Day-by-day and week-by-week progress series for charting a key result."""
import logging
from collections import defaultdict
from datetime import date, timedelta
from typing import Dict, List, Sequence

from northstar.schemas.okr import AnnualKr, CheckIn, KrType
from northstar.schemas.progress import DailyDataPoint, TimeWindow
from northstar.services.time_windows import parse_datetime, start_of_day
from northstar.services.value_aggregator import (
    filter_check_ins_in_window, sort_by_recorded_at, compute_baseline,
)
from northstar.services.progress_calculator import (
    coerce_kr_type, compute_progress, compute_expected_progress,
    compute_pace_ratio, classify_pace_status,
)

logger = logging.getLogger(__name__)

# A leap year, both ends included
MAX_SERIES_DAYS = 366


class SeriesWindowError(ValueError):
    """A series window spans more than MAX_SERIES_DAYS days."""
    pass


def series_length(window: TimeWindow) -> int:
    """Number of calendar days a series over the window holds."""
    return (window.end.date() - window.start.date()).days + 1


class _RunningValue:
    """Replays check-ins one day at a time, reducing them the way the KR type does."""

    def __init__(self, kr: AnnualKr):
        self.kr_type = coerce_kr_type(kr.kr_type)
        self.value = 0.0 if self.kr_type == KrType.MILESTONE else kr.start_value
        self._total = 0.0
        self._count = 0

    def apply(self, day_check_ins: Sequence[CheckIn]) -> None:
        if not day_check_ins:
            return

        if self.kr_type in (KrType.METRIC, KrType.RATE, KrType.MILESTONE):
            self.value = day_check_ins[-1].value
            return

        for ci in day_check_ins:
            self._total += ci.value
            self._count += 1

        if self.kr_type == KrType.COUNT:
            self.value = self._total
        else:
            self.value = self._total / self._count


def build_daily_series(
    kr: AnnualKr,
    check_ins: Sequence[CheckIn],
    window: TimeWindow,
) -> List[DailyDataPoint]:
    """
    One point per calendar day of the window, both ends included.

    Each point reflects every check-in recorded up to the end of that day,
    so a day without check-ins repeats the previous day's value.
    """
    length = series_length(window)
    if length > MAX_SERIES_DAYS:
        raise SeriesWindowError(f"Series window spans {length} days, at most {MAX_SERIES_DAYS} allowed")

    in_range = sort_by_recorded_at(filter_check_ins_in_window(check_ins, window))

    by_day: Dict[date, List[CheckIn]] = defaultdict(list)
    for ci in in_range:
        by_day[parse_datetime(ci.recorded_at).date()].append(ci)

    baseline = compute_baseline(kr)
    running = _RunningValue(kr)

    series = []
    day = window.start.date()
    last_day = window.end.date()
    while day <= last_day:
        day_check_ins = by_day.get(day, [])
        running.apply(day_check_ins)

        progress = compute_progress(kr.kr_type, kr.direction, running.value, baseline, kr.target_value)
        expected_progress = compute_expected_progress(start_of_day(day), window)
        pace_ratio = compute_pace_ratio(progress, expected_progress)

        series.append(DailyDataPoint(
            date=day,
            current_value=running.value,
            progress=progress,
            expected_progress=expected_progress,
            pace_ratio=pace_ratio,
            pace_status=classify_pace_status(pace_ratio),
            check_in_count=len(day_check_ins),
        ))
        day += timedelta(days=1)

    logger.debug(f"Built daily series for KR {kr.id}: {len(series)} days, {len(in_range)} check-ins")
    return series


def start_of_week(day: date) -> date:
    """Sunday on or before the given day."""
    return day - timedelta(days=(day.weekday() + 1) % 7)


def build_weekly_series(daily_series: Sequence[DailyDataPoint]) -> List[DailyDataPoint]:
    """
    Collapse a daily series into Sunday-start weeks.

    A week is represented by its last day's values, dated on the week's
    Sunday, with the check-in counts of all its days summed.
    """
    weeks: List[List[DailyDataPoint]] = []
    for point in daily_series:
        if weeks and start_of_week(weeks[-1][0].date) == start_of_week(point.date):
            weeks[-1].append(point)
        else:
            weeks.append([point])

    weekly = []
    for points in weeks:
        last = points[-1]
        weekly.append(DailyDataPoint(
            date=start_of_week(points[0].date),
            current_value=last.current_value,
            progress=last.progress,
            expected_progress=last.expected_progress,
            pace_ratio=last.pace_ratio,
            pace_status=last.pace_status,
            check_in_count=sum(p.check_in_count for p in points),
        ))
    return weekly
