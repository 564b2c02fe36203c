from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable

from ...attendance.model import AttendanceRecord


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def present_days(self, records: Iterable[AttendanceRecord]) -> int:
        raise NotImplementedError

    @abstractmethod
    def basic_salary(self, *, present_days: int, daily_rate: float) -> float:
        raise NotImplementedError
