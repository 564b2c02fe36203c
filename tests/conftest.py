from __future__ import annotations

import itertools
import threading
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Mapping, Optional, Sequence

import pytest
import pytz
from werkzeug.security import generate_password_hash

from hris_attendance.attendance.model import AttendanceRecord, AttendanceView
from hris_attendance.container import wire_container
from hris_attendance.core.enums import AttendanceStatus, RequestStatus
from hris_attendance.database.mysql_base import DuplicateRecordError
from hris_attendance.employees.model import Department, Employee
from hris_attendance.leaves.model import LeaveRequest, NewLeaveRequest
from hris_attendance.outlets.model import Outlet, Shift, ShiftInput
from hris_attendance.payroll.model import NewIncentive, PayrollIncentive

JAKARTA = pytz.timezone("Asia/Jakarta")


class FrozenClock:
    """Callable clock the services read instead of the wall clock."""

    def __init__(self, now: datetime):
        self.now = now

    def set(self, hour: int, minute: int, second: int = 0) -> None:
        self.now = self.now.replace(hour=hour, minute=minute, second=second)

    def __call__(self) -> datetime:
        return self.now


class InMemoryDepartments:
    def __init__(self):
        self.rows: dict[int, Department] = {}
        self.employees: Optional["InMemoryEmployees"] = None

    def add(self, department_id: int, name: str) -> Department:
        self.rows[department_id] = Department(department_id=department_id, name=name)
        return self.rows[department_id]

    def list_all(self) -> Sequence[Department]:
        out = []
        for d in sorted(self.rows.values(), key=lambda x: x.name):
            count = sum(1 for e in self.employees.rows.values() if e.department_id == d.department_id) if self.employees else 0
            out.append(replace(d, employee_count=count))
        return out

    def get_by_id(self, department_id: int) -> Optional[Department]:
        return self.rows.get(department_id)


class InMemoryEmployees:
    def __init__(self, departments: InMemoryDepartments):
        self.rows: dict[int, Employee] = {}
        self._departments = departments
        self.attendance: Optional["InMemoryAttendance"] = None
        self.delete_error: Optional[Exception] = None
        self._ids = itertools.count(1)

    def _view(self, e: Employee) -> Employee:
        dept = self._departments.get_by_id(e.department_id) if e.department_id else None
        return replace(e, department_name=dept.name if dept else None)

    def add(self, **kwargs) -> Employee:
        new_id = next(self._ids)
        kwargs.setdefault("employee_code", f"EMP{new_id:03d}")
        kwargs.setdefault("name", f"Employee {new_id}")
        kwargs.setdefault("email", f"emp{new_id}@example.com")
        kwargs.setdefault("position", "Staff")
        self.rows[new_id] = Employee(id=new_id, **kwargs)
        return self._view(self.rows[new_id])

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        e = self.rows.get(employee_id)
        return self._view(e) if e else None

    def list_by_code_or_email(self, *, employee_code: str, email: str) -> Sequence[Employee]:
        return [self._view(e) for e in self.rows.values() if e.employee_code == employee_code or e.email == email]

    def list_all(self, *, active_only: bool = False, outlet_id: Optional[int] = None) -> Sequence[Employee]:
        out = [self._view(e) for e in self.rows.values()]
        if active_only:
            out = [e for e in out if e.is_active]
        if outlet_id is not None:
            out = [e for e in out if e.outlet_id == outlet_id]
        return out

    def list_with_faces(self) -> Sequence[Employee]:
        return [self._view(e) for e in self.rows.values() if e.is_active and e.face_descriptor]

    def count_active(self) -> int:
        return sum(1 for e in self.rows.values() if e.is_active)

    def create(self, data: Mapping[str, Any]) -> int:
        for e in self.rows.values():
            if e.employee_code == data["employee_code"] or e.email == data["email"]:
                raise DuplicateRecordError("duplicate employee")
        return self.add(**dict(data)).id

    def update(self, employee_id: int, data: Mapping[str, Any]) -> bool:
        if employee_id not in self.rows:
            return False
        self.rows[employee_id] = replace(self.rows[employee_id], **dict(data))
        return True

    def set_face_descriptor(self, employee_id: int, descriptor_json: str) -> bool:
        return self.update(employee_id, {"face_descriptor": descriptor_json})

    def delete_with_attendance(self, employee_id: int) -> int:
        # Mirrors the single MySQL transaction: attendance is restored when the employee delete fails.
        with self.attendance._lock:
            kept = dict(self.attendance.rows)
            keys = [k for k in self.attendance.rows if k[0] == employee_id]
            for k in keys:
                del self.attendance.rows[k]
            try:
                if self.delete_error is not None:
                    raise self.delete_error
                self.rows.pop(employee_id, None)
            except Exception:
                self.attendance.rows = kept
                raise
            return len(keys)


class InMemoryOutlets:
    def __init__(self):
        self.rows: dict[int, Outlet] = {}
        self.employees: Optional[InMemoryEmployees] = None
        self._ids = itertools.count(1)
        self._shift_ids = itertools.count(1)

    def _shifts(self, outlet_id: int, shifts: Sequence[ShiftInput]) -> tuple[Shift, ...]:
        return tuple(
            Shift(
                shift_id=s.shift_id or next(self._shift_ids),
                outlet_id=outlet_id,
                name=s.name,
                start_time=s.start_time,
                end_time=s.end_time,
            )
            for s in shifts
        )

    def add(self, *, shifts: Sequence[ShiftInput] = (), **kwargs) -> Outlet:
        new_id = next(self._ids)
        kwargs.setdefault("name", f"Outlet {new_id}")
        kwargs.setdefault("radius", 100)
        self.rows[new_id] = Outlet(outlet_id=new_id, shifts=self._shifts(new_id, shifts), **kwargs)
        return self.rows[new_id]

    def get_by_id(self, outlet_id: int) -> Optional[Outlet]:
        return self.rows.get(outlet_id)

    def get_by_name(self, name: str) -> Optional[Outlet]:
        return next((o for o in self.rows.values() if o.name == name), None)

    def list_all(self, *, active_only: bool = False) -> Sequence[Outlet]:
        return [o for o in self.rows.values() if o.is_active or not active_only]

    def create(self, data: Mapping[str, Any], shifts: Sequence[ShiftInput]) -> int:
        return self.add(shifts=shifts, **dict(data)).outlet_id

    def update(self, outlet_id: int, data: Mapping[str, Any], shifts: Optional[Sequence[ShiftInput]] = None) -> bool:
        if outlet_id not in self.rows:
            return False
        outlet = replace(self.rows[outlet_id], **dict(data))
        if shifts is not None:
            outlet = replace(outlet, shifts=self._shifts(outlet_id, shifts))
        self.rows[outlet_id] = outlet
        return True

    def delete_by_id(self, outlet_id: int) -> bool:
        return self.rows.pop(outlet_id, None) is not None

    def count_employees(self, outlet_id: int) -> int:
        if not self.employees:
            return 0
        return sum(1 for e in self.employees.rows.values() if e.outlet_id == outlet_id)


class InMemoryShifts:
    def __init__(self, outlets: InMemoryOutlets):
        self._outlets = outlets

    def get_by_id(self, shift_id: int) -> Optional[Shift]:
        for o in self._outlets.rows.values():
            for s in o.shifts:
                if s.shift_id == shift_id:
                    return s
        return None


class InMemoryAttendance:
    """Thread-safe; the (employee, date) key behaves like the storage unique key."""

    def __init__(self, employees: InMemoryEmployees, outlets: InMemoryOutlets):
        self._lock = threading.Lock()
        self._ids = itertools.count(1)
        self.rows: dict[tuple[int, str], AttendanceRecord] = {}
        self._employees = employees
        self._outlets = outlets

    def put(self, employee_id: int, work_date: str, status: AttendanceStatus, **kwargs) -> AttendanceRecord:
        with self._lock:
            rec = AttendanceRecord(attendance_id=next(self._ids), employee_id=employee_id, work_date=work_date, status=status, **kwargs)
            self.rows[(employee_id, work_date)] = rec
            return rec

    def _by_id(self, attendance_id: int) -> Optional[tuple[tuple[int, str], AttendanceRecord]]:
        return next(((k, r) for k, r in self.rows.items() if r.attendance_id == attendance_id), None)

    def get_for_employee_and_date(self, employee_id: int, work_date: str) -> Optional[AttendanceRecord]:
        with self._lock:
            return self.rows.get((employee_id, work_date))

    def create_clock_in(self, *, employee_id, work_date, clock_in, status, outlet_id=None, location=None, notes=None) -> AttendanceRecord:
        with self._lock:
            if (employee_id, work_date) in self.rows:
                raise DuplicateRecordError("Duplicate entry for key 'uq_attendance_employee_date'")
            rec = AttendanceRecord(
                attendance_id=next(self._ids),
                employee_id=employee_id,
                work_date=work_date,
                status=status,
                outlet_id=outlet_id,
                clock_in=clock_in,
                clock_in_location=location,
                notes=notes,
            )
            self.rows[(employee_id, work_date)] = rec
            return rec

    def fill_clock_in(self, *, attendance_id, clock_in, status, outlet_id=None, location=None, notes=None) -> bool:
        with self._lock:
            found = self._by_id(attendance_id)
            if not found or found[1].clock_in:
                return False
            key, rec = found
            self.rows[key] = replace(rec, clock_in=clock_in, status=status, outlet_id=outlet_id, clock_in_location=location, notes=notes)
            return True

    def update_clock_out(self, *, attendance_id, clock_out, status, location=None) -> bool:
        with self._lock:
            found = self._by_id(attendance_id)
            if not found or found[1].clock_out:
                return False
            key, rec = found
            self.rows[key] = replace(rec, clock_out=clock_out, status=status, clock_out_location=location)
            return True

    def list_views(self, *, work_date=None, start_date=None, end_date=None, employee_id=None, department_id=None, outlet_id=None, limit=None) -> Sequence[AttendanceView]:
        with self._lock:
            records = list(self.rows.values())

        out = []
        for r in records:
            emp = self._employees.get_by_id(r.employee_id)
            if work_date and r.work_date != work_date:
                continue
            if not work_date and start_date and end_date and not start_date <= r.work_date <= end_date:
                continue
            if employee_id is not None and r.employee_id != employee_id:
                continue
            if department_id is not None and emp.department_id != department_id:
                continue
            if outlet_id is not None and emp.outlet_id != outlet_id:
                continue
            outlet = self._outlets.get_by_id(r.outlet_id) if r.outlet_id else None
            out.append(
                AttendanceView(
                    record=r,
                    employee_code=emp.employee_code,
                    employee_name=emp.name,
                    department_name=emp.department_name,
                    outlet_name=outlet.name if outlet else None,
                )
            )
        out.sort(key=lambda v: v.record.clock_in or "")
        out.sort(key=lambda v: v.record.work_date, reverse=True)
        return out[:limit] if limit else out

    def list_for_range(self, *, start_date: str, end_date: str, employee_ids: Sequence[int]) -> Sequence[AttendanceRecord]:
        with self._lock:
            return [r for r in self.rows.values() if r.employee_id in employee_ids and start_date <= r.work_date <= end_date]


class InMemoryIncentives:
    def __init__(self):
        self.rows: dict[int, PayrollIncentive] = {}
        self._ids = itertools.count(1)

    def create(self, data: NewIncentive) -> int:
        new_id = next(self._ids)
        self.rows[new_id] = PayrollIncentive(
            incentive_id=new_id, employee_id=data.employee_id, month=data.month, name=data.name, amount=data.amount, type=data.type
        )
        return new_id

    def get_by_id(self, incentive_id: int) -> Optional[PayrollIncentive]:
        return self.rows.get(incentive_id)

    def list_for_month(self, *, month: str, employee_ids: Sequence[int]) -> Sequence[PayrollIncentive]:
        return [i for i in self.rows.values() if i.month == month and i.employee_id in employee_ids]

    def delete_by_id(self, incentive_id: int) -> bool:
        return self.rows.pop(incentive_id, None) is not None


class InMemoryLeaves:
    def __init__(self, employees: InMemoryEmployees):
        self.rows: dict[int, LeaveRequest] = {}
        self._employees = employees
        self._ids = itertools.count(1)

    def create(self, data: NewLeaveRequest) -> int:
        new_id = next(self._ids)
        emp = self._employees.get_by_id(data.employee_id)
        self.rows[new_id] = LeaveRequest(
            request_id=new_id,
            employee_id=data.employee_id,
            type=data.type,
            start_date=data.start_date,
            end_date=data.end_date,
            reason=data.reason,
            evidence=data.evidence,
            evidence_name=data.evidence_name,
            employee_code=emp.employee_code,
            employee_name=emp.name,
        )
        return new_id

    def get_by_id(self, request_id: int) -> Optional[LeaveRequest]:
        return self.rows.get(request_id)

    def list_requests(self, *, status=None, employee_id=None) -> Sequence[LeaveRequest]:
        out = list(self.rows.values())
        if status:
            out = [x for x in out if x.status == status]
        if employee_id is not None:
            out = [x for x in out if x.employee_id == employee_id]
        return out

    def decide(self, *, request_id: int, status: RequestStatus, admin_notes: Optional[str] = None) -> bool:
        req = self.rows.get(request_id)
        if not req or req.status != RequestStatus.PENDING:
            return False
        self.rows[request_id] = replace(req, status=status, admin_notes=admin_notes)
        return True

    def delete_by_id(self, request_id: int) -> bool:
        return self.rows.pop(request_id, None) is not None


class InMemorySettings:
    def __init__(self):
        self.values: dict[str, str] = {}

    def get_all(self) -> dict[str, str]:
        return dict(self.values)

    def upsert_many(self, values: Mapping[str, str]) -> None:
        self.values.update(values)


@dataclass
class Store:
    departments: InMemoryDepartments
    employees: InMemoryEmployees
    outlets: InMemoryOutlets
    shifts: InMemoryShifts
    attendance: InMemoryAttendance
    incentives: InMemoryIncentives
    leaves: InMemoryLeaves
    settings: InMemorySettings = field(default_factory=InMemorySettings)


@pytest.fixture
def store() -> Store:
    departments = InMemoryDepartments()
    employees = InMemoryEmployees(departments)
    departments.employees = employees
    outlets = InMemoryOutlets()
    outlets.employees = employees
    attendance = InMemoryAttendance(employees, outlets)
    employees.attendance = attendance
    return Store(
        departments=departments,
        employees=employees,
        outlets=outlets,
        shifts=InMemoryShifts(outlets),
        attendance=attendance,
        incentives=InMemoryIncentives(),
        leaves=InMemoryLeaves(employees),
    )


@pytest.fixture
def clock() -> FrozenClock:
    return FrozenClock(JAKARTA.localize(datetime(2024, 3, 4, 9, 0, 0)))


@pytest.fixture
def container(store: Store, clock: FrozenClock):
    return wire_container(
        employees_repo=store.employees,
        departments_repo=store.departments,
        outlets_repo=store.outlets,
        shifts_repo=store.shifts,
        attendance_repo=store.attendance,
        incentives_repo=store.incentives,
        leaves_repo=store.leaves,
        settings_repo=store.settings,
        admin_username="admin",
        admin_password_hash=generate_password_hash("admin123"),
        clock=clock,
    )
