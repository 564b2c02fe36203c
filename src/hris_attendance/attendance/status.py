"""Late / early-leave status resolution against a work schedule."""

from __future__ import annotations

from datetime import datetime, time
from typing import Optional

from ..common.datetime_utils import minutes_of_day
from ..core.enums import AttendanceStatus
from .factory import AttendanceStrategyFactory
from .strategies.base import StatusDecision

_default_factory = AttendanceStrategyFactory()


def decide_clock_in(
    schedule_start: str,
    late_threshold: int,
    now: datetime | time,
    *,
    factory: Optional[AttendanceStrategyFactory] = None,
) -> StatusDecision:
    factory = factory or _default_factory
    now_minutes = minutes_of_day(now)
    start_minutes = minutes_of_day(schedule_start)
    strategy = factory.for_checkin(now_minutes=now_minutes, start_minutes=start_minutes, late_threshold=int(late_threshold))
    return strategy.decide_checkin(late_minutes=max(now_minutes - start_minutes, 0))


def decide_clock_out(
    schedule_end: str,
    now: datetime | time,
    previous: AttendanceStatus,
    *,
    factory: Optional[AttendanceStrategyFactory] = None,
) -> StatusDecision:
    factory = factory or _default_factory
    strategy = factory.for_checkout(now_minutes=minutes_of_day(now), end_minutes=minutes_of_day(schedule_end))
    return strategy.decide_checkout(current=previous)


def resolve_clock_in_status(schedule_start: str, late_threshold: int, now: datetime | time) -> AttendanceStatus:
    """LATE iff now > start + threshold (minute granularity), else PRESENT."""
    return decide_clock_in(schedule_start, late_threshold, now).status


def resolve_clock_out_status(schedule_end: str, now: datetime | time, previous: AttendanceStatus) -> AttendanceStatus:
    """EARLY_LEAVE iff now < end - 15 minutes, else the clock-in status is kept."""
    return decide_clock_out(schedule_end, now, previous).status
