from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import LeaveType, RequestStatus


@dataclass(frozen=True)
class LeaveRequest:
    request_id: int
    employee_id: int
    type: LeaveType
    start_date: str
    end_date: str
    reason: str
    status: RequestStatus = RequestStatus.PENDING
    evidence: Optional[str] = None
    evidence_name: Optional[str] = None
    admin_notes: Optional[str] = None
    employee_code: Optional[str] = None
    employee_name: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.request_id,
            "employeeId": self.employee_id,
            "employee": {"employeeId": self.employee_code, "name": self.employee_name},
            "type": self.type.value,
            "startDate": self.start_date,
            "endDate": self.end_date,
            "reason": self.reason,
            "evidence": self.evidence,
            "evidenceName": self.evidence_name,
            "status": self.status.value,
            "adminNotes": self.admin_notes,
        }


@dataclass(frozen=True)
class NewLeaveRequest:
    employee_id: int
    type: LeaveType
    start_date: str
    end_date: str
    reason: str
    evidence: Optional[str] = None
    evidence_name: Optional[str] = None
