"""
Objective and plan rollups.

Progress and expected progress are plain means of the children; the pace
status is the worst child's, so one off-track KR marks its objective (and
plan) off track however well the others are doing. An empty collection
reads as "nothing started": progress 0, off_track.
"""
from collections import Counter
from typing import Sequence, Tuple

from northstar.schemas.okr import AnnualKr, Objective
from northstar.schemas.progress import (
    PaceStatus, ProgressResult, KrProgressEntry, ObjectiveProgress, PlanProgress, ProgressSummaryStats,
)
from northstar.services.progress_calculator import worst_pace_status


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def compute_objective_progress(
    objective: Objective,
    kr_progresses: Sequence[Tuple[AnnualKr, ProgressResult]],
) -> ObjectiveProgress:
    if not kr_progresses:
        return ObjectiveProgress(
            objective_id=objective.id,
            progress=0.0,
            expected_progress=0.0,
            pace_status=PaceStatus.OFF_TRACK,
            kr_count=0,
            kr_progresses=[],
        )

    entries = [
        KrProgressEntry(kr_id=kr.id, progress=result.progress, pace_status=result.pace_status)
        for kr, result in kr_progresses
    ]

    return ObjectiveProgress(
        objective_id=objective.id,
        progress=_mean([result.progress for _, result in kr_progresses]),
        expected_progress=_mean([result.expected_progress for _, result in kr_progresses]),
        pace_status=worst_pace_status(result.pace_status for _, result in kr_progresses),
        kr_count=len(kr_progresses),
        kr_progresses=entries,
    )


def compute_plan_progress(
    plan_id: str,
    objective_progresses: Sequence[Tuple[Objective, ObjectiveProgress]],
) -> PlanProgress:
    if not objective_progresses:
        return PlanProgress(
            plan_id=plan_id,
            progress=0.0,
            expected_progress=0.0,
            pace_status=PaceStatus.OFF_TRACK,
            objective_count=0,
            objective_progresses=[],
        )

    results = [result for _, result in objective_progresses]

    return PlanProgress(
        plan_id=plan_id,
        progress=_mean([r.progress for r in results]),
        expected_progress=_mean([r.expected_progress for r in results]),
        pace_status=worst_pace_status(r.pace_status for r in results),
        objective_count=len(results),
        objective_progresses=results,
    )


def compute_progress_summary_stats(
    kr_progresses: Sequence[Tuple[AnnualKr, ProgressResult]],
) -> ProgressSummaryStats:
    """Pace counts, mean progress and the worst pace over a set of key results."""
    results = [result for _, result in kr_progresses]
    counts = Counter(PaceStatus(r.pace_status) for r in results)

    return ProgressSummaryStats(
        total_krs=len(results),
        ahead_count=counts[PaceStatus.AHEAD],
        on_track_count=counts[PaceStatus.ON_TRACK],
        at_risk_count=counts[PaceStatus.AT_RISK],
        off_track_count=counts[PaceStatus.OFF_TRACK],
        average_progress=_mean([r.progress for r in results]),
        average_expected_progress=_mean([r.expected_progress for r in results]),
        overall_pace_status=worst_pace_status(r.pace_status for r in results),
    )
