from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one attendance row per (employee, work date)."""

    attendance_id: int
    employee_id: int
    work_date: str
    status: AttendanceStatus
    outlet_id: Optional[int] = None
    clock_in: Optional[str] = None
    clock_out: Optional[str] = None
    clock_in_location: Optional[str] = None
    clock_out_location: Optional[str] = None
    notes: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.attendance_id,
            "employeeId": self.employee_id,
            "outletId": self.outlet_id,
            "date": self.work_date,
            "clockIn": self.clock_in,
            "clockOut": self.clock_out,
            "clockInLocation": self.clock_in_location,
            "clockOutLocation": self.clock_out_location,
            "status": self.status.value,
            "notes": self.notes,
        }


@dataclass(frozen=True)
class AttendanceView:
    """Read-model: attendance row joined with employee, department and outlet."""

    record: AttendanceRecord
    employee_code: str
    employee_name: str
    department_name: Optional[str] = None
    outlet_name: Optional[str] = None

    def to_dict(self) -> dict:
        data = self.record.to_dict()
        data["employee"] = {
            "id": self.record.employee_id,
            "employeeId": self.employee_code,
            "name": self.employee_name,
            "department": self.department_name,
        }
        data["outlet"] = self.outlet_name
        return data
