"""Display helpers for progress figures."""
import math
from typing import Optional, Union

from northstar.schemas.okr import KrType, KrDirection
from northstar.schemas.progress import PaceStatus

PACE_STATUS_LABELS = {
    PaceStatus.AHEAD: "Ahead",
    PaceStatus.ON_TRACK: "On Track",
    PaceStatus.AT_RISK: "At Risk",
    PaceStatus.OFF_TRACK: "Off Track",
}

PACE_STATUS_VARIANTS = {
    PaceStatus.AHEAD: "success",
    PaceStatus.ON_TRACK: "info",
    PaceStatus.AT_RISK: "warning",
    PaceStatus.OFF_TRACK: "danger",
}

NO_FORECAST = "—"


def format_progress(progress: float) -> str:
    """0.456 -> "46%". Halves round up."""
    return f"{math.floor(progress * 100 + 0.5)}%"


def format_pace_status(status: Union[PaceStatus, str]) -> str:
    return PACE_STATUS_LABELS[PaceStatus(status)]


def get_pace_status_variant(status: Union[PaceStatus, str]) -> str:
    """Badge variant: success, info, warning or danger."""
    return PACE_STATUS_VARIANTS[PaceStatus(status)]


def _format_number(value: float) -> str:
    if float(value).is_integer():
        return f"{int(value):,}"
    return f"{value:.1f}"


def format_value_with_unit(value: float, unit: Optional[str], kr_type: Union[KrType, str]) -> str:
    # Rates always carry one decimal and default to a percent sign
    if kr_type == KrType.RATE:
        return f"{value:.1f}{unit or '%'}"
    formatted = _format_number(value)
    return f"{formatted} {unit}" if unit else formatted


def format_delta(delta: float, unit: Optional[str], direction: Union[KrDirection, str, None] = None) -> str:
    prefix = "+" if delta > 0 else ""
    suffix = f" {unit}" if unit else ""
    return f"{prefix}{_format_number(delta)}{suffix}"


def format_forecast(
    forecast_value: Optional[float],
    target: float,
    unit: Optional[str],
    kr_type: Union[KrType, str],
) -> str:
    """Forecast with its comparison to target, e.g. "1,200 users (≥ 1,000 users)"."""
    if forecast_value is None:
        return NO_FORECAST

    comparison = "≥" if forecast_value >= target else "<"
    return (
        f"{format_value_with_unit(forecast_value, unit, kr_type)} "
        f"({comparison} {format_value_with_unit(target, unit, kr_type)})"
    )
