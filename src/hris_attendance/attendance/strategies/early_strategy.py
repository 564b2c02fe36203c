from __future__ import annotations

from ...core.enums import AttendanceStatus
from .base import AttendanceStrategy, StatusDecision


class EarlyLeaveStrategy(AttendanceStrategy):
    """Clock-out before the end of the schedule minus the grace window."""

    def decide_checkin(self, *, late_minutes: int) -> StatusDecision:
        raise TypeError("EarlyLeaveStrategy only applies to clock-out")

    def decide_checkout(self, *, current: AttendanceStatus) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.EARLY_LEAVE)
