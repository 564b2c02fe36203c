from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Department:
    department_id: int
    name: str
    employee_count: int = 0

    def to_dict(self) -> dict:
        return {"id": self.department_id, "name": self.name, "employeeCount": self.employee_count}


@dataclass(frozen=True)
class Employee:
    """Domain entity: Employee.

    Note: plain data object; `face_descriptor` keeps the raw stored text, it
    is decoded by `faces.descriptor.normalize_descriptor` where needed.
    """

    id: int
    employee_code: str
    name: str
    email: str
    position: str
    phone: Optional[str] = None
    department_id: Optional[int] = None
    outlet_id: Optional[int] = None
    shift_id: Optional[int] = None
    face_descriptor: Optional[str] = None
    is_active: bool = True
    department_name: Optional[str] = None

    @property
    def has_face(self) -> bool:
        return bool(self.face_descriptor)

    def to_dict(self, *, include_descriptor: bool = False) -> dict:
        data = {
            "id": self.id,
            "employeeId": self.employee_code,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "position": self.position,
            "departmentId": self.department_id,
            "department": self.department_name,
            "outletId": self.outlet_id,
            "shiftId": self.shift_id,
            "isActive": self.is_active,
            "faceRegistered": self.has_face,
        }
        if include_descriptor:
            data["faceDescriptor"] = self.face_descriptor
        return data
