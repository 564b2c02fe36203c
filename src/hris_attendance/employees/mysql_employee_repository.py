from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Department, Employee
from .repository import DepartmentRepository, EmployeeRepository

_SELECT = """
    SELECT e.id, e.employee_code, e.name, e.email, e.phone, e.position,
           e.department_id, e.outlet_id, e.shift_id, e.face_descriptor, e.is_active,
           d.name AS department_name
    FROM employees e
    LEFT JOIN departments d ON d.department_id = e.department_id
"""

# Columns writable through create/update, keyed by Employee field name.
_WRITABLE = ("employee_code", "name", "email", "phone", "position", "department_id", "outlet_id", "shift_id", "is_active")


def _to_employee(r: Dict[str, Any]) -> Employee:
    return Employee(
        id=int(r["id"]),
        employee_code=r["employee_code"],
        name=r["name"],
        email=r["email"],
        phone=r.get("phone"),
        position=r["position"],
        department_id=r.get("department_id"),
        outlet_id=r.get("outlet_id"),
        shift_id=r.get("shift_id"),
        face_descriptor=r.get("face_descriptor"),
        is_active=bool(r.get("is_active", True)),
        department_name=r.get("department_name"),
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE e.id=%s", (employee_id,))
            r = fetchone(cur)
            return _to_employee(r) if r else None

    def list_by_code_or_email(self, *, employee_code: str, email: str) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE e.employee_code=%s OR e.email=%s", (employee_code, email))
            return [_to_employee(r) for r in fetchall(cur)]

    def list_all(self, *, active_only: bool = False, outlet_id: Optional[int] = None) -> Sequence[Employee]:
        clauses = ["1=1"]
        params: list[object] = []
        if active_only:
            clauses.append("e.is_active=1")
        if outlet_id is not None:
            clauses.append("e.outlet_id=%s")
            params.append(int(outlet_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + f" WHERE {' AND '.join(clauses)} ORDER BY e.created_at DESC, e.id DESC", tuple(params))
            return [_to_employee(r) for r in fetchall(cur)]

    def list_with_faces(self) -> Sequence[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE e.is_active=1 AND e.face_descriptor IS NOT NULL ORDER BY e.id")
            return [_to_employee(r) for r in fetchall(cur)]

    def count_active(self) -> int:
        with db_cursor(self._conn_factory, dictionary=False) as (_, cur):
            cur.execute("SELECT COUNT(*) FROM employees WHERE is_active=1")
            (count,) = cur.fetchone()
            return int(count)

    def create(self, data: Mapping[str, Any]) -> int:
        cols = [c for c in _WRITABLE if c in data]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"INSERT INTO employees({', '.join(cols)}) VALUES ({', '.join(['%s'] * len(cols))})",
                tuple(data[c] for c in cols),
            )
            return int(cur.lastrowid)

    def update(self, employee_id: int, data: Mapping[str, Any]) -> bool:
        cols = [c for c in _WRITABLE if c in data]
        if not cols:
            return False
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"UPDATE employees SET {', '.join(f'{c}=%s' for c in cols)} WHERE id=%s",
                (*[data[c] for c in cols], employee_id),
            )
            return cur.rowcount > 0

    def set_face_descriptor(self, employee_id: int, descriptor_json: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE employees SET face_descriptor=%s WHERE id=%s", (descriptor_json, employee_id))
            return cur.rowcount > 0

    def delete_with_attendance(self, employee_id: int) -> int:
        # One transaction: a failed employee delete rolls the attendance delete back too.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM attendance WHERE employee_id=%s", (employee_id,))
            removed = int(cur.rowcount)
            cur.execute("DELETE FROM employees WHERE id=%s", (employee_id,))
            return removed


class MySQLDepartmentRepository(DepartmentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_all(self) -> Sequence[Department]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT d.department_id, d.name, COUNT(e.id) AS employee_count
                FROM departments d
                LEFT JOIN employees e ON e.department_id = d.department_id
                GROUP BY d.department_id, d.name
                ORDER BY d.name ASC
                """
            )
            return [
                Department(department_id=int(r["department_id"]), name=r["name"], employee_count=int(r["employee_count"]))
                for r in fetchall(cur)
            ]

    def get_by_id(self, department_id: int) -> Optional[Department]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT department_id, name FROM departments WHERE department_id=%s", (department_id,))
            r = fetchone(cur)
            return Department(department_id=int(r["department_id"]), name=r["name"]) if r else None
