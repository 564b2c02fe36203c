from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord, AttendanceView


class AttendanceRepository(Protocol):
    def get_for_employee_and_date(self, employee_id: int, work_date: str) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def create_clock_in(
        self,
        *,
        employee_id: int,
        work_date: str,
        clock_in: str,
        status: AttendanceStatus,
        outlet_id: Optional[int] = None,
        location: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> AttendanceRecord:
        """Insert the day's row; raises DuplicateRecordError if it already exists."""

        raise NotImplementedError

    def fill_clock_in(
        self,
        *,
        attendance_id: int,
        clock_in: str,
        status: AttendanceStatus,
        outlet_id: Optional[int] = None,
        location: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> bool:
        """Set clock-in on an existing row that has none (e.g. pre-marked ABSENT)."""

        raise NotImplementedError

    def update_clock_out(
        self,
        *,
        attendance_id: int,
        clock_out: str,
        status: AttendanceStatus,
        location: Optional[str] = None,
    ) -> bool:
        """Set clock-out only if it is still empty; False when someone else won."""

        raise NotImplementedError

    def list_views(
        self,
        *,
        work_date: Optional[str] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        employee_id: Optional[int] = None,
        department_id: Optional[int] = None,
        outlet_id: Optional[int] = None,
        limit: Optional[int] = None,
    ) -> Sequence[AttendanceView]:
        raise NotImplementedError

    def list_for_range(self, *, start_date: str, end_date: str, employee_ids: Sequence[int]) -> Sequence[AttendanceRecord]:
        raise NotImplementedError
