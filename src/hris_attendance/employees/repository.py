from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from .model import Department, Employee


class EmployeeRepository(Protocol):
    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def list_by_code_or_email(self, *, employee_code: str, email: str) -> Sequence[Employee]:
        raise NotImplementedError

    def list_all(self, *, active_only: bool = False, outlet_id: Optional[int] = None) -> Sequence[Employee]:
        raise NotImplementedError

    def list_with_faces(self) -> Sequence[Employee]:
        """Active employees that have a stored face descriptor."""

        raise NotImplementedError

    def count_active(self) -> int:
        raise NotImplementedError

    def create(self, data: Mapping[str, Any]) -> int:
        raise NotImplementedError

    def update(self, employee_id: int, data: Mapping[str, Any]) -> bool:
        raise NotImplementedError

    def set_face_descriptor(self, employee_id: int, descriptor_json: str) -> bool:
        raise NotImplementedError

    def delete_with_attendance(self, employee_id: int) -> int:
        """Delete the employee and their attendance atomically; returns attendance rows removed."""

        raise NotImplementedError


class DepartmentRepository(Protocol):
    def list_all(self) -> Sequence[Department]:
        raise NotImplementedError

    def get_by_id(self, department_id: int) -> Optional[Department]:
        raise NotImplementedError
