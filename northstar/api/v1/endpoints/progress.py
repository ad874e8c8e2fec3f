import logging
from typing import List, Optional

from fastapi import APIRouter, HTTPException, status

from northstar.core.config import settings
from northstar.schemas.okr import KrConfig
from northstar.schemas.progress import (
    ProgressResult, QuarterProgressSummary, TimeWindow, ObjectiveProgress, PlanProgress, DailyDataPoint,
)
from northstar.schemas.analytics import (
    KrProgressRequest, QuarterTargetProgressRequest, QuarterProgressRequest,
    ObjectiveProgressRequest, PlanProgressRequest, SeriesRequest,
)
from northstar.services import (
    compute_kr_progress, compute_quarter_target_progress, get_quarter_progress_summary,
    compute_objective_snapshot, compute_plan_snapshot,
    build_daily_series, build_weekly_series,
)
from northstar.services.time_windows import resolve_as_of, start_of_day, end_of_day
from northstar.services.series_builder import MAX_SERIES_DAYS, series_length

logger = logging.getLogger(__name__)

router = APIRouter()


def _effective_config(config: Optional[KrConfig]) -> KrConfig:
    if config is not None:
        return config
    return KrConfig(tracking_source=settings.DEFAULT_TRACKING_SOURCE)


def _unprocessable(e: ValueError) -> HTTPException:
    logger.warning(f"Rejected progress request: {e}")
    return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))


@router.post("/key-results", response_model=ProgressResult)
async def key_result_progress(request: KrProgressRequest):
    try:
        return compute_kr_progress(
            request.kr,
            request.check_ins,
            request.tasks,
            request.plan_year,
            resolve_as_of(request.as_of),
            _effective_config(request.config),
        )
    except ValueError as e:
        raise _unprocessable(e)


@router.post("/quarter-targets", response_model=ProgressResult)
async def quarter_target_progress(request: QuarterTargetProgressRequest):
    if request.quarter_target.annual_kr_id != request.kr.id:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Quarter target does not belong to this key result",
        )
    try:
        return compute_quarter_target_progress(
            request.quarter_target,
            request.kr,
            request.check_ins,
            request.tasks,
            request.plan_year,
            resolve_as_of(request.as_of),
            _effective_config(request.config),
        )
    except ValueError as e:
        raise _unprocessable(e)


@router.post("/quarters", response_model=QuarterProgressSummary)
async def quarters_progress(request: QuarterProgressRequest):
    try:
        return get_quarter_progress_summary(
            request.kr.quarter_targets,
            request.kr,
            request.check_ins,
            request.plan_year,
            resolve_as_of(request.as_of),
        )
    except ValueError as e:
        raise _unprocessable(e)


@router.post("/objectives", response_model=ObjectiveProgress)
async def objective_progress(request: ObjectiveProgressRequest):
    try:
        return compute_objective_snapshot(
            request.objective,
            request.check_ins,
            request.tasks,
            request.plan_year,
            resolve_as_of(request.as_of),
            _effective_config(request.config),
        )
    except ValueError as e:
        raise _unprocessable(e)


@router.post("/plans", response_model=PlanProgress)
async def plan_progress(request: PlanProgressRequest):
    try:
        return compute_plan_snapshot(
            request.plan,
            request.check_ins,
            request.tasks,
            resolve_as_of(request.as_of),
            _effective_config(request.config),
        )
    except ValueError as e:
        raise _unprocessable(e)


def _series_window(request: SeriesRequest) -> TimeWindow:
    if request.end < request.start:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Series end must not be before its start",
        )
    window = TimeWindow(start=start_of_day(request.start), end=end_of_day(request.end))
    if series_length(window) > MAX_SERIES_DAYS:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"Series windows are limited to {MAX_SERIES_DAYS} days",
        )
    return window


@router.post("/series/daily", response_model=List[DailyDataPoint])
async def daily_series(request: SeriesRequest):
    window = _series_window(request)
    try:
        return build_daily_series(request.kr, request.check_ins, window)
    except ValueError as e:
        raise _unprocessable(e)


@router.post("/series/weekly", response_model=List[DailyDataPoint])
async def weekly_series(request: SeriesRequest):
    window = _series_window(request)
    try:
        return build_weekly_series(build_daily_series(request.kr, request.check_ins, window))
    except ValueError as e:
        raise _unprocessable(e)
