from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from ..common.validators import parse_int
from ..core.constants import DEFAULT_LATE_THRESHOLD_MINUTES, DEFAULT_WORK_END_TIME, DEFAULT_WORK_START_TIME
from ..outlets.model import Outlet, Shift


@dataclass(frozen=True)
class WorkSchedule:
    """The work window an attendance event is judged against."""

    start_time: str = DEFAULT_WORK_START_TIME
    end_time: str = DEFAULT_WORK_END_TIME
    late_threshold: int = DEFAULT_LATE_THRESHOLD_MINUTES
    source: str = "fallback"


def resolve_schedule(
    *,
    shift: Optional[Shift],
    outlet: Optional[Outlet],
    settings: Optional[Mapping[str, Any]] = None,
) -> WorkSchedule:
    """Schedule precedence: employee shift > outlet hours > settings > fallback.

    The late threshold never comes from a shift or outlet, only from settings.
    """
    settings = settings or {}
    threshold = parse_int(settings.get("lateThreshold"), "lateThreshold", default=DEFAULT_LATE_THRESHOLD_MINUTES)

    if shift is not None:
        return WorkSchedule(shift.start_time, shift.end_time, threshold, source="shift")
    if outlet is not None:
        return WorkSchedule(outlet.work_start_time, outlet.work_end_time, threshold, source="outlet")

    start = settings.get("workStartTime") or DEFAULT_WORK_START_TIME
    end = settings.get("workEndTime") or DEFAULT_WORK_END_TIME
    source = "settings" if settings.get("workStartTime") or settings.get("workEndTime") else "fallback"
    return WorkSchedule(start, end, threshold, source=source)
