import json

import pytest

from hris_attendance.core.enums import AttendanceStatus
from hris_attendance.core.exceptions import ConflictError, NotFoundError, ValidationError


def _payload(**overrides):
    data = {"employeeId": "EMP100", "name": "Sari", "email": "Sari@Example.com", "position": "Barista"}
    data.update(overrides)
    return data


def test_create_employee(store, container):
    store.departments.add(3, "Operations")
    emp = container.employee_service.create_employee(_payload(departmentId=3))

    assert emp.employee_code == "EMP100"
    assert emp.email == "sari@example.com"
    assert emp.department_name == "Operations"
    assert emp.to_dict()["faceRegistered"] is False


def test_unknown_department_is_dropped(container):
    emp = container.employee_service.create_employee(_payload(departmentId=77))
    assert emp.department_id is None


def test_unknown_outlet_is_rejected(container):
    with pytest.raises(NotFoundError):
        container.employee_service.create_employee(_payload(outletId=5))


def test_missing_fields(container):
    with pytest.raises(ValidationError) as exc:
        container.employee_service.create_employee({"name": "x"})
    assert "employeeId" in str(exc.value)


def test_duplicate_code_or_email(container):
    container.employee_service.create_employee(_payload())
    with pytest.raises(ConflictError):
        container.employee_service.create_employee(_payload(email="other@example.com"))
    with pytest.raises(ConflictError):
        container.employee_service.create_employee(_payload(employeeId="EMP101"))


def test_update_employee(store, container):
    a = container.employee_service.create_employee(_payload())
    container.employee_service.create_employee(_payload(employeeId="EMP200", email="b@example.com"))

    updated = container.employee_service.update_employee(a.id, {"position": "Supervisor", "isActive": False})
    assert (updated.position, updated.is_active) == ("Supervisor", False)

    with pytest.raises(ConflictError):
        container.employee_service.update_employee(a.id, {"email": "b@example.com"})


def test_delete_removes_attendance_first(store, container):
    emp = container.employee_service.create_employee(_payload())
    store.attendance.put(emp.id, "2024-03-01", AttendanceStatus.PRESENT)

    container.employee_service.delete_employee(emp.id)

    assert store.attendance.rows == {}
    with pytest.raises(NotFoundError):
        container.employee_service.get_employee(emp.id)


def test_failed_delete_keeps_attendance(store, container):
    emp = container.employee_service.create_employee(_payload())
    store.attendance.put(emp.id, "2024-03-01", AttendanceStatus.PRESENT)
    store.employees.delete_error = RuntimeError("foreign key constraint fails")

    with pytest.raises(RuntimeError):
        container.employee_service.delete_employee(emp.id)

    assert len(store.attendance.rows) == 1
    assert container.employee_service.get_employee(emp.id).id == emp.id


def test_register_face_normalizes_descriptor(store, container):
    emp = container.employee_service.create_employee(_payload())

    updated = container.employee_service.register_face(emp.id, {"0": 0.5, "1": -0.25})

    assert updated.has_face
    assert json.loads(store.employees.rows[emp.id].face_descriptor) == [0.5, -0.25]
    with pytest.raises(ValidationError):
        container.employee_service.register_face(emp.id, "nope")
