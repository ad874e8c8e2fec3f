"""
Calendar windows for key results and quarter targets.

All datetimes handled by the engine are naive UTC. Window ends are
inclusive and sit at the last microsecond of their day, so a check-in
recorded any time on Dec 31 still belongs to the year.
"""
import calendar
import logging
from datetime import date, datetime, time, timedelta, timezone
from typing import Optional, Union

from northstar.schemas.okr import AnnualKr, QuarterTarget, KrAggregation
from northstar.schemas.progress import TimeWindow

logger = logging.getLogger(__name__)

DateLike = Union[datetime, date, str, None]


def clamp01(value: float) -> float:
    """Clamp a value between 0 and 1. NaN clamps to 0."""
    if value != value:
        return 0.0
    return min(1.0, max(0.0, value))


def clamp(value: float, minimum: float, maximum: float) -> float:
    return min(maximum, max(minimum, value))


def _to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def parse_datetime(value: DateLike) -> Optional[datetime]:
    """
    Parse a timestamp into a naive UTC datetime.

    Accepts datetimes, dates (midnight) and ISO-8601 strings, including a
    trailing "Z". Returns None for empty or unparseable input instead of
    raising, so one bad record cannot abort a computation.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return _to_naive_utc(value)
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    if isinstance(value, str):
        raw = value.strip()
        if raw.endswith("Z"):
            raw = raw[:-1] + "+00:00"
        try:
            return _to_naive_utc(datetime.fromisoformat(raw))
        except ValueError:
            logger.debug(f"Could not parse timestamp: {value!r}")
            return None
    return None


def resolve_as_of(as_of: DateLike = None) -> datetime:
    """
    Normalize an "as of" argument.

    None means now. A bare date (or "YYYY-MM-DD" string) means the end of
    that day, so everything recorded on it is observed.
    """
    if as_of is None:
        return datetime.now(timezone.utc).replace(tzinfo=None)
    if isinstance(as_of, date) and not isinstance(as_of, datetime):
        return end_of_day(as_of)
    if isinstance(as_of, str) and len(as_of.strip()) == 10:
        try:
            return end_of_day(date.fromisoformat(as_of.strip()))
        except ValueError:
            raise ValueError(f"Invalid as-of date: {as_of!r}")
    parsed = parse_datetime(as_of)
    if parsed is None:
        raise ValueError(f"Invalid as-of date: {as_of!r}")
    return parsed


def start_of_day(value: Union[datetime, date]) -> datetime:
    if isinstance(value, datetime):
        value = value.date()
    return datetime.combine(value, time.min)


def end_of_day(value: Union[datetime, date]) -> datetime:
    if isinstance(value, datetime):
        value = value.date()
    return datetime.combine(value, time.max)


def days_between(start: datetime, end: datetime) -> int:
    """Signed number of calendar days from start to end."""
    return (end.date() - start.date()).days


def get_year_dates(year: int) -> TimeWindow:
    return TimeWindow(
        start=datetime(year, 1, 1),
        end=end_of_day(date(year, 12, 31)),
    )


def get_quarter_dates(year: int, quarter: int) -> TimeWindow:
    if quarter not in (1, 2, 3, 4):
        raise ValueError(f"Quarter must be 1-4, got {quarter!r}")
    first_month = (quarter - 1) * 3 + 1
    last_month = first_month + 2
    last_day = calendar.monthrange(year, last_month)[1]
    return TimeWindow(
        start=datetime(year, first_month, 1),
        end=end_of_day(date(year, last_month, last_day)),
    )


def get_current_quarter(as_of: DateLike = None) -> int:
    moment = resolve_as_of(as_of)
    return (moment.month - 1) // 3 + 1


def get_annual_kr_window(
    kr: AnnualKr,
    plan_year: int,
    as_of: DateLike = None,
) -> TimeWindow:
    """Jan 1 of the plan year through the as-of date, capped at Dec 31."""
    moment = resolve_as_of(as_of)
    year = get_year_dates(plan_year)
    return TimeWindow(start=year.start, end=min(moment, year.end))


def get_quarter_target_window(
    quarter_target: QuarterTarget,
    kr: AnnualKr,
    plan_year: int,
    as_of: DateLike = None,
) -> TimeWindow:
    """
    Window a quarter target is measured over.

    Cumulative KRs measure the total to date, so their quarter windows open
    on Jan 1 rather than on the first day of the quarter.
    """
    moment = resolve_as_of(as_of)
    quarter = get_quarter_dates(plan_year, quarter_target.quarter)
    start = quarter.start
    if kr.aggregation == KrAggregation.CUMULATIVE:
        start = datetime(plan_year, 1, 1)
    return TimeWindow(start=start, end=min(moment, quarter.end))


def get_full_quarter_target_window(
    quarter_target: QuarterTarget,
    kr: AnnualKr,
    plan_year: int,
) -> TimeWindow:
    """Same as get_quarter_target_window without the as-of clipping."""
    quarter = get_quarter_dates(plan_year, quarter_target.quarter)
    if kr.aggregation == KrAggregation.CUMULATIVE:
        return TimeWindow(start=datetime(plan_year, 1, 1), end=quarter.end)
    return quarter


def in_window(moment: Optional[datetime], window: TimeWindow) -> bool:
    if moment is None:
        return False
    return window.start <= moment <= window.end


def add_days(moment: datetime, days: int) -> datetime:
    return moment + timedelta(days=days)
