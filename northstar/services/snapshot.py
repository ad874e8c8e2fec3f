"""
Objective and plan snapshots from raw records.

Callers hand over every check-in and task for the objective or plan in one
batch; each key result only sees the records tagged with its own id.
"""
import logging
from collections import defaultdict
from typing import Dict, List, Optional, Sequence

from northstar.core.config import settings
from northstar.schemas.okr import CheckIn, Task, Objective, Plan, KrConfig
from northstar.schemas.progress import ObjectiveProgress, PlanProgress
from northstar.services.time_windows import DateLike, resolve_as_of
from northstar.services.progress_engine import compute_kr_progress
from northstar.services.rollup import compute_objective_progress, compute_plan_progress

logger = logging.getLogger(__name__)


class PlanYearMissingError(ValueError):
    """A plan has no year and no DEFAULT_PLAN_YEAR is configured."""
    pass


def group_by_kr(records: Sequence) -> Dict[str, List]:
    grouped = defaultdict(list)
    for record in records:
        grouped[record.annual_kr_id].append(record)
    return grouped


def compute_objective_snapshot(
    objective: Objective,
    check_ins: Sequence[CheckIn],
    tasks: Sequence[Task],
    plan_year: int,
    as_of: DateLike = None,
    config: Optional[KrConfig] = None,
) -> ObjectiveProgress:
    moment = resolve_as_of(as_of)
    check_ins_by_kr = group_by_kr(check_ins)
    tasks_by_kr = group_by_kr(tasks)

    kr_progresses = [
        (kr, compute_kr_progress(
            kr, check_ins_by_kr.get(kr.id, []), tasks_by_kr.get(kr.id, []),
            plan_year, moment, config,
        ))
        for kr in objective.key_results
    ]
    return compute_objective_progress(objective, kr_progresses)


def compute_plan_snapshot(
    plan: Plan,
    check_ins: Sequence[CheckIn],
    tasks: Sequence[Task],
    as_of: DateLike = None,
    config: Optional[KrConfig] = None,
) -> PlanProgress:
    """
    Roll every objective of a plan up into one PlanProgress.

    The plan's own year is used, falling back to settings.DEFAULT_PLAN_YEAR.
    """
    plan_year = plan.year if plan.year is not None else settings.DEFAULT_PLAN_YEAR
    if plan_year is None:
        raise PlanYearMissingError(f"Plan {plan.id} has no year and no default plan year is set")

    moment = resolve_as_of(as_of)
    objective_progresses = [
        (objective, compute_objective_snapshot(objective, check_ins, tasks, plan_year, moment, config))
        for objective in plan.objectives
    ]

    logger.info(f"Plan {plan.id} snapshot: {len(objective_progresses)} objectives for {plan_year}")
    return compute_plan_progress(plan.id, objective_progresses)
