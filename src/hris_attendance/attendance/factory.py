from __future__ import annotations

from dataclasses import dataclass

from ..core.constants import EARLY_LEAVE_GRACE_MINUTES
from .strategies.base import AttendanceStrategy
from .strategies.early_strategy import EarlyLeaveStrategy
from .strategies.late_strategy import LateStrategy
from .strategies.normal_strategy import NormalStrategy


@dataclass
class AttendanceStrategyFactory:
    """Factory Pattern: choose appropriate strategy based on rules.

    All comparisons are in minutes of the local day.
    """

    early_leave_grace: int = EARLY_LEAVE_GRACE_MINUTES

    def for_checkin(self, *, now_minutes: int, start_minutes: int, late_threshold: int) -> AttendanceStrategy:
        if now_minutes > start_minutes + late_threshold:
            return LateStrategy()
        return NormalStrategy()

    def for_checkout(self, *, now_minutes: int, end_minutes: int) -> AttendanceStrategy:
        if now_minutes < end_minutes - self.early_leave_grace:
            return EarlyLeaveStrategy()
        return NormalStrategy()
