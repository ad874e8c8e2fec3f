"""Result records produced by the progress engine."""
from pydantic import BaseModel
from typing import Optional, List
import datetime as dt
import enum


class PaceStatus(str, enum.Enum):
    """Pace classification, best to worst."""
    AHEAD = "ahead"
    ON_TRACK = "on_track"
    AT_RISK = "at_risk"
    OFF_TRACK = "off_track"


class TimeWindow(BaseModel):
    """Inclusive [start, end] range of naive UTC datetimes."""
    start: dt.datetime
    end: dt.datetime

    class Config:
        frozen = True


class ProgressResult(BaseModel):
    current_value: float
    baseline: float
    target: float
    progress: float  # 0-1
    expected_progress: float  # 0-1
    expected_value: float
    pace_ratio: float
    pace_status: PaceStatus
    # current - target, or target - current for decrease; positive is good
    delta: float
    forecast_value: Optional[float] = None
    forecast_date: Optional[dt.datetime] = None
    days_remaining: int
    days_elapsed: int
    last_check_in_date: Optional[dt.datetime] = None

    class Config:
        frozen = True


class QuarterProgressResult(BaseModel):
    quarter: int
    quarter_target_id: Optional[str] = None
    current_value: float
    baseline: float
    target: float
    progress: float
    expected_progress: float
    pace_ratio: float
    pace_status: PaceStatus
    days_elapsed: int
    # For future quarters: days until the quarter starts
    days_remaining: int
    last_check_in_date: Optional[dt.datetime] = None
    is_current: bool
    is_past: bool
    is_future: bool
    is_complete: bool

    class Config:
        frozen = True


class QuarterProgressSummary(BaseModel):
    quarters: List[QuarterProgressResult] = []
    total_quarters: int
    completed_quarters: int
    current_quarter: Optional[int] = None
    current_quarter_progress: Optional[QuarterProgressResult] = None
    is_on_track_for_year: bool

    class Config:
        frozen = True


class DailyDataPoint(BaseModel):
    date: dt.date
    current_value: float
    progress: float
    expected_progress: float
    pace_ratio: float
    pace_status: PaceStatus
    check_in_count: int

    class Config:
        frozen = True


class KrProgressEntry(BaseModel):
    kr_id: str
    progress: float
    pace_status: PaceStatus

    class Config:
        frozen = True


class ObjectiveProgress(BaseModel):
    objective_id: str
    progress: float
    expected_progress: float
    pace_status: PaceStatus
    kr_count: int
    kr_progresses: List[KrProgressEntry] = []

    class Config:
        frozen = True


class PlanProgress(BaseModel):
    plan_id: str
    progress: float
    expected_progress: float
    pace_status: PaceStatus
    objective_count: int
    objective_progresses: List[ObjectiveProgress] = []

    class Config:
        frozen = True


class ProgressSummaryStats(BaseModel):
    """Dashboard counters over a set of key results."""
    total_krs: int
    ahead_count: int
    on_track_count: int
    at_risk_count: int
    off_track_count: int
    average_progress: float
    average_expected_progress: float
    overall_pace_status: PaceStatus

    class Config:
        frozen = True
