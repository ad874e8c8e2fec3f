from northstar.schemas.okr import (
    KrType, KrDirection, KrAggregation, TaskStatus, TrackingSource,
    AnnualKr, QuarterTarget, CheckIn, Task, Objective, Plan,
    QualifierConfig, KrConfig,
)
from northstar.schemas.progress import (
    PaceStatus, TimeWindow, ProgressResult,
    QuarterProgressResult, QuarterProgressSummary,
    DailyDataPoint, KrProgressEntry, ObjectiveProgress, PlanProgress, ProgressSummaryStats,
)
from northstar.schemas.analytics import (
    KrProgressRequest, QuarterTargetProgressRequest, QuarterProgressRequest,
    ObjectiveProgressRequest, PlanProgressRequest, SeriesRequest,
)

__all__ = [
    "KrType", "KrDirection", "KrAggregation", "TaskStatus", "TrackingSource",
    "AnnualKr", "QuarterTarget", "CheckIn", "Task", "Objective", "Plan",
    "QualifierConfig", "KrConfig",
    "PaceStatus", "TimeWindow", "ProgressResult",
    "QuarterProgressResult", "QuarterProgressSummary",
    "DailyDataPoint", "KrProgressEntry", "ObjectiveProgress", "PlanProgress", "ProgressSummaryStats",
    "KrProgressRequest", "QuarterTargetProgressRequest", "QuarterProgressRequest",
    "ObjectiveProgressRequest", "PlanProgressRequest", "SeriesRequest",
]
