"""
Progress engine: pure functions from OKR records to progress results.
"""

from northstar.services.progress_calculator import InvalidKeyResultError
from northstar.services.progress_engine import compute_kr_progress, compute_quarter_target_progress
from northstar.services.quarter_progress import (
    compute_quarter_progress,
    compute_all_quarters_progress,
    get_quarter_progress_summary,
)
from northstar.services.rollup import (
    compute_objective_progress,
    compute_plan_progress,
    compute_progress_summary_stats,
)
from northstar.services.series_builder import SeriesWindowError, build_daily_series, build_weekly_series
from northstar.services.snapshot import (
    PlanYearMissingError,
    compute_objective_snapshot,
    compute_plan_snapshot,
)

__all__ = [
    "InvalidKeyResultError",
    "PlanYearMissingError",
    "SeriesWindowError",
    "compute_kr_progress",
    "compute_quarter_target_progress",
    "compute_quarter_progress",
    "compute_all_quarters_progress",
    "get_quarter_progress_summary",
    "compute_objective_progress",
    "compute_plan_progress",
    "compute_progress_summary_stats",
    "build_daily_series",
    "build_weekly_series",
    "compute_objective_snapshot",
    "compute_plan_snapshot",
]
