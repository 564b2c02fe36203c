from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Sequence

from ..common.validators import optional_text, parse_int, require_fields, require_non_empty
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..database.mysql_base import DuplicateRecordError
from ..faces.descriptor import DescriptorDecodeError, descriptor_to_json, normalize_descriptor
from ..outlets.repository import OutletRepository, ShiftRepository
from .model import Department, Employee
from .repository import DepartmentRepository, EmployeeRepository

logger = logging.getLogger(__name__)


class EmployeeService:
    def __init__(
        self,
        employees: EmployeeRepository,
        departments: DepartmentRepository,
        outlets: OutletRepository,
        shifts: ShiftRepository,
    ):
        self._employees = employees
        self._departments = departments
        self._outlets = outlets
        self._shifts = shifts

    def list_employees(self, *, active_only: bool = False, outlet_id: Optional[int] = None) -> Sequence[Employee]:
        return self._employees.list_all(active_only=active_only, outlet_id=outlet_id)

    def list_departments(self) -> Sequence[Department]:
        return self._departments.list_all()

    def get_employee(self, employee_id: int) -> Employee:
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError("Employee not found", code="EmployeeNotFound")
        return employee

    def _optional_id(self, value: Any, field_name: str) -> Optional[int]:
        if value in (None, ""):
            return None
        return parse_int(value, field_name)

    def _assignment(self, data: Mapping[str, Any]) -> dict[str, Any]:
        """Department / outlet / shift columns present in `data`."""
        cols: dict[str, Any] = {}
        if "departmentId" in data:
            # Unknown departments are dropped rather than rejected.
            dept_id = self._optional_id(data.get("departmentId"), "departmentId")
            cols["department_id"] = dept_id if dept_id and self._departments.get_by_id(dept_id) else None
        if "outletId" in data:
            outlet_id = self._optional_id(data.get("outletId"), "outletId")
            if outlet_id is not None and not self._outlets.get_by_id(outlet_id):
                raise NotFoundError("Outlet not found", code="OutletNotFound")
            cols["outlet_id"] = outlet_id
        if "shiftId" in data:
            shift_id = self._optional_id(data.get("shiftId"), "shiftId")
            if shift_id is not None and not self._shifts.get_by_id(shift_id):
                raise NotFoundError("Shift not found", code="ShiftNotFound")
            cols["shift_id"] = shift_id
        return cols

    def create_employee(self, data: Mapping[str, Any]) -> Employee:
        require_fields(data, ("employeeId", "name", "email", "position"))
        cols: dict[str, Any] = {
            "employee_code": require_non_empty(data.get("employeeId"), "employeeId"),
            "name": require_non_empty(data.get("name"), "name"),
            "email": require_non_empty(data.get("email"), "email").lower(),
            "position": require_non_empty(data.get("position"), "position"),
            "phone": optional_text(data.get("phone")),
            "is_active": bool(data.get("isActive", True)),
        }
        if "@" not in cols["email"]:
            raise ValidationError("email is invalid")
        cols.update(self._assignment(data))

        if self._employees.list_by_code_or_email(employee_code=cols["employee_code"], email=cols["email"]):
            raise ConflictError("Employee ID or email already exists", code="DuplicateEmployee")
        try:
            new_id = self._employees.create(cols)
        except DuplicateRecordError:
            raise ConflictError("Employee ID or email already exists", code="DuplicateEmployee")

        logger.info("Employee %s created", cols["employee_code"])
        return self.get_employee(new_id)

    def update_employee(self, employee_id: int, data: Mapping[str, Any]) -> Employee:
        current = self.get_employee(employee_id)
        cols: dict[str, Any] = {}
        if "employeeId" in data:
            cols["employee_code"] = require_non_empty(data.get("employeeId"), "employeeId")
        for field, column in (("name", "name"), ("position", "position")):
            if field in data:
                cols[column] = require_non_empty(data.get(field), field)
        if "email" in data:
            cols["email"] = require_non_empty(data.get("email"), "email").lower()
            if "@" not in cols["email"]:
                raise ValidationError("email is invalid")
        if "phone" in data:
            cols["phone"] = optional_text(data.get("phone"))
        if "isActive" in data:
            cols["is_active"] = bool(data.get("isActive"))
        cols.update(self._assignment(data))

        code = cols.get("employee_code", current.employee_code)
        email = cols.get("email", current.email)
        clashes = self._employees.list_by_code_or_email(employee_code=code, email=email)
        if any(e.id != current.id for e in clashes):
            raise ConflictError("Employee ID or email already exists", code="DuplicateEmployee")

        if cols:
            try:
                self._employees.update(current.id, cols)
            except DuplicateRecordError:
                raise ConflictError("Employee ID or email already exists", code="DuplicateEmployee")
        return self.get_employee(current.id)

    def delete_employee(self, employee_id: int) -> None:
        employee = self.get_employee(employee_id)
        removed = self._employees.delete_with_attendance(employee.id)
        logger.info("Employee %s deleted with %d attendance record(s)", employee.employee_code, removed)

    def register_face(self, employee_id: int, descriptor: Any) -> Employee:
        employee = self.get_employee(employee_id)
        try:
            values = normalize_descriptor(descriptor)
        except DescriptorDecodeError as e:
            raise ValidationError(f"Invalid face descriptor: {e}")

        self._employees.set_face_descriptor(employee.id, descriptor_to_json(values))
        logger.info("Face registered for employee %s (%d values)", employee.employee_code, len(values))
        return self.get_employee(employee.id)
