"""Trend forecasts: end-of-period value and milestone completion date."""
import logging
import math
from datetime import datetime
from typing import NamedTuple, Optional, Union

from northstar.schemas.okr import KrType
from northstar.schemas.progress import TimeWindow
from northstar.services.time_windows import add_days, days_between
from northstar.services.progress_calculator import coerce_kr_type

logger = logging.getLogger(__name__)


class Forecast(NamedTuple):
    value: Optional[float]
    date: Optional[datetime]


def compute_forecast(
    kr_type: Union[KrType, str],
    baseline: float,
    current_value: float,
    window: TimeWindow,
    as_of: datetime,
) -> Forecast:
    """
    Extrapolate the average daily change since the window start to its end.

    Milestones have no meaningful numeric trajectory and get no value.
    """
    if coerce_kr_type(kr_type) == KrType.MILESTONE:
        return Forecast(value=None, date=None)

    elapsed_days = max(1, days_between(window.start, as_of))
    remaining_days = max(0, days_between(as_of, window.end))

    rate_per_day = (current_value - baseline) / elapsed_days
    return Forecast(value=current_value + rate_per_day * remaining_days, date=None)


def compute_milestone_forecast_date(
    completed_tasks: int,
    total_tasks: int,
    window: TimeWindow,
    as_of: datetime,
) -> Optional[datetime]:
    """Projected completion date from task velocity so far."""
    if total_tasks <= 0:
        return None

    if completed_tasks >= total_tasks:
        return as_of

    if completed_tasks == 0:
        return None

    elapsed_days = max(1, days_between(window.start, as_of))
    tasks_per_day = completed_tasks / elapsed_days
    if tasks_per_day <= 0:
        return None

    days_needed = math.ceil((total_tasks - completed_tasks) / tasks_per_day)
    logger.debug(f"Milestone forecast: {tasks_per_day:.3f} tasks/day, {days_needed} days to go")
    return add_days(as_of, days_needed)
