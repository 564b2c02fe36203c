from __future__ import annotations

from typing import Iterable

from ...attendance.model import AttendanceRecord
from ...core.enums import WORKED_STATUSES
from .base import PayrollCalculator


class DailyRatePayrollCalculator(PayrollCalculator):
    """Standard rule: every PRESENT / LATE / EARLY_LEAVE day pays the outlet's daily rate."""

    def present_days(self, records: Iterable[AttendanceRecord]) -> int:
        return sum(1 for r in records if r.status in WORKED_STATUSES)

    def basic_salary(self, *, present_days: int, daily_rate: float) -> float:
        return present_days * float(daily_rate or 0)
