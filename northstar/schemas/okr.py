"""
Input records for the progress engine.

These mirror the rows the persistence layer hands over (plans, objectives,
annual key results, quarter targets, check-ins and tasks). They are frozen:
the engine reads them and never writes back.
"""
from pydantic import BaseModel, Field
from typing import Optional, List, Union, Literal
from datetime import datetime
import enum


class KrType(str, enum.Enum):
    """How check-ins reduce to a current value."""
    METRIC = "metric"
    COUNT = "count"
    RATE = "rate"
    AVERAGE = "average"
    MILESTONE = "milestone"


class KrDirection(str, enum.Enum):
    """Which way is good."""
    INCREASE = "increase"
    DECREASE = "decrease"
    MAINTAIN = "maintain"


class KrAggregation(str, enum.Enum):
    """Whether quarter targets build on each other or restart each quarter."""
    CUMULATIVE = "cumulative"
    RESET_QUARTERLY = "reset_quarterly"


class TaskStatus(str, enum.Enum):
    """Task status."""
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class TrackingSource(str, enum.Enum):
    """Where count and milestone KRs take their evidence from."""
    CHECK_INS = "check_ins"
    TASKS = "tasks"
    MIXED = "mixed"


# Timestamps are kept as given when they do not parse; the engine drops
# such records from every window instead of rejecting the whole payload.
Timestamp = Union[datetime, str]


class QuarterTarget(BaseModel):
    id: str
    annual_kr_id: str
    quarter: Literal[1, 2, 3, 4]
    target_value: float
    current_value: float = 0.0

    class Config:
        frozen = True
        from_attributes = True


class AnnualKr(BaseModel):
    id: str
    objective_id: Optional[str] = None
    name: str = ""
    kr_type: KrType = KrType.METRIC
    direction: KrDirection = KrDirection.INCREASE
    aggregation: KrAggregation = KrAggregation.CUMULATIVE
    unit: Optional[str] = None
    start_value: float = 0.0
    target_value: float
    current_value: float = 0.0  # cached snapshot, not used for computation
    quarter_targets: List[QuarterTarget] = []

    class Config:
        frozen = True
        from_attributes = True


class CheckIn(BaseModel):
    id: str
    annual_kr_id: str
    quarter_target_id: Optional[str] = None
    value: float
    recorded_at: Optional[Timestamp] = None
    note: Optional[str] = None

    class Config:
        frozen = True
        from_attributes = True


class Task(BaseModel):
    id: str
    title: str = ""
    annual_kr_id: Optional[str] = None
    objective_id: Optional[str] = None
    quarter_target_id: Optional[str] = None
    status: TaskStatus = TaskStatus.PENDING
    completed_at: Optional[Timestamp] = None

    class Config:
        frozen = True
        from_attributes = True


class Objective(BaseModel):
    id: str
    plan_id: Optional[str] = None
    title: str = ""
    key_results: List[AnnualKr] = []

    class Config:
        frozen = True
        from_attributes = True


class Plan(BaseModel):
    id: str
    name: str = ""
    year: Optional[int] = None
    objectives: List[Objective] = []

    class Config:
        frozen = True
        from_attributes = True


class QualifierConfig(BaseModel):
    """Field/operator/value condition a check-in must satisfy to be counted."""
    field: str
    op: Literal[">=", ">", "<=", "<", "==", "!="]
    value: Union[float, str, bool]

    class Config:
        frozen = True


class KrConfig(BaseModel):
    qualifier: Optional[QualifierConfig] = None
    tracking_source: TrackingSource = TrackingSource.CHECK_INS
    tolerance_band: Optional[float] = Field(default=None, gt=0)

    class Config:
        frozen = True
