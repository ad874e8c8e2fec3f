from pydantic import BaseModel
from typing import Optional, List
from datetime import date

from northstar.schemas.okr import AnnualKr, QuarterTarget, CheckIn, Task, Objective, Plan, KrConfig


# as_of is an ISO date or datetime string; a bare date means the end of that day
class KrProgressRequest(BaseModel):
    kr: AnnualKr
    check_ins: List[CheckIn] = []
    tasks: List[Task] = []
    plan_year: int
    as_of: Optional[str] = None
    config: Optional[KrConfig] = None


class QuarterTargetProgressRequest(KrProgressRequest):
    quarter_target: QuarterTarget


class QuarterProgressRequest(BaseModel):
    kr: AnnualKr
    check_ins: List[CheckIn] = []
    plan_year: int
    as_of: Optional[str] = None


class ObjectiveProgressRequest(BaseModel):
    objective: Objective
    check_ins: List[CheckIn] = []
    tasks: List[Task] = []
    plan_year: int
    as_of: Optional[str] = None
    config: Optional[KrConfig] = None


class PlanProgressRequest(BaseModel):
    plan: Plan
    check_ins: List[CheckIn] = []
    tasks: List[Task] = []
    as_of: Optional[str] = None
    config: Optional[KrConfig] = None


class SeriesRequest(BaseModel):
    kr: AnnualKr
    check_ins: List[CheckIn] = []
    start: date
    end: date
