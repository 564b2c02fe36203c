from __future__ import annotations

from ...core.enums import AttendanceStatus
from .base import AttendanceStrategy, StatusDecision


class LateStrategy(AttendanceStrategy):
    """Late clock-in."""

    def decide_checkin(self, *, late_minutes: int) -> StatusDecision:
        return StatusDecision(status=AttendanceStatus.LATE, note=f"Late {late_minutes} min")

    def decide_checkout(self, *, current: AttendanceStatus) -> StatusDecision:
        return StatusDecision(status=current)
