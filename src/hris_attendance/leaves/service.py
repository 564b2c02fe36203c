from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Sequence

from ..common.datetime_utils import parse_iso_date
from ..common.validators import optional_text, parse_enum, parse_int, require_fields
from ..core.enums import LeaveType, RequestStatus
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from .model import LeaveRequest, NewLeaveRequest
from .repository import LeaveRepository

logger = logging.getLogger(__name__)


class LeaveService:
    def __init__(self, leaves: LeaveRepository, employees: EmployeeRepository):
        self._leaves = leaves
        self._employees = employees

    def create_leave(self, data: Mapping[str, Any]) -> LeaveRequest:
        require_fields(data, ("employeeId", "type", "startDate", "endDate", "reason"))
        leave_type = parse_enum(LeaveType, data.get("type"), "type")

        start = parse_iso_date(str(data["startDate"]))
        end = parse_iso_date(str(data["endDate"]))
        if end < start:
            raise ValidationError("endDate must be on or after startDate")

        employee = self._employees.get_by_id(parse_int(data["employeeId"], "employeeId"))
        if not employee:
            raise NotFoundError("Employee not found", code="EmployeeNotFound")

        request_id = self._leaves.create(
            NewLeaveRequest(
                employee_id=employee.id,
                type=leave_type,
                start_date=start.isoformat(),
                end_date=end.isoformat(),
                reason=str(data["reason"]).strip(),
                evidence=optional_text(data.get("evidence")),
                evidence_name=optional_text(data.get("evidenceName")),
            )
        )
        logger.info("Leave request %s (%s) created for employee %s", request_id, leave_type.value, employee.employee_code)
        return self.get_leave(request_id)

    def get_leave(self, request_id: int) -> LeaveRequest:
        leave = self._leaves.get_by_id(int(request_id))
        if not leave:
            raise NotFoundError("Leave request not found", code="LeaveRequestNotFound")
        return leave

    def list_leaves(self, *, status: Optional[str] = None, employee_id: Optional[int] = None) -> Sequence[LeaveRequest]:
        status_enum = parse_enum(RequestStatus, status, "status") if status else None
        return self._leaves.list_requests(status=status_enum, employee_id=employee_id)

    def decide_leave(self, request_id: int, *, status: Any, admin_notes: Optional[str] = None) -> LeaveRequest:
        decision = parse_enum(RequestStatus, status, "status")
        if decision == RequestStatus.PENDING:
            raise ValidationError("Invalid status. Must be one of APPROVED, REJECTED")

        leave = self.get_leave(request_id)
        if leave.status != RequestStatus.PENDING:
            raise ConflictError(f"Leave request already {leave.status.value}", code="AlreadyDecided")

        if not self._leaves.decide(request_id=leave.request_id, status=decision, admin_notes=optional_text(admin_notes)):
            raise ConflictError("Leave request was decided concurrently", code="AlreadyDecided")

        logger.info("Leave request %s %s", leave.request_id, decision.value)
        return self.get_leave(leave.request_id)

    def delete_leave(self, request_id: int) -> None:
        if not self._leaves.delete_by_id(int(request_id)):
            raise NotFoundError("Leave request not found", code="LeaveRequestNotFound")
