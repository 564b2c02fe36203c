from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import AttendanceRecord, AttendanceView
from .repository import AttendanceRepository

_COLUMNS = """
    a.attendance_id, a.employee_id, a.outlet_id, a.work_date, a.clock_in, a.clock_out,
    a.clock_in_location, a.clock_out_location, a.status, a.notes
"""


def _to_record(r: Dict[str, Any]) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        employee_id=int(r["employee_id"]),
        outlet_id=r.get("outlet_id"),
        work_date=r["work_date"],
        clock_in=r.get("clock_in"),
        clock_out=r.get("clock_out"),
        clock_in_location=r.get("clock_in_location"),
        clock_out_location=r.get("clock_out_location"),
        status=AttendanceStatus(r["status"]),
        notes=r.get("notes"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_employee_and_date(self, employee_id: int, work_date: str) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM attendance a WHERE a.employee_id=%s AND a.work_date=%s",
                (employee_id, work_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

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
        # The unique key (employee_id, work_date) makes concurrent inserts fail with DuplicateRecordError.
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance(employee_id, outlet_id, work_date, clock_in, clock_in_location, status, notes)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (employee_id, outlet_id, work_date, clock_in, location, status.value, notes),
            )
            attendance_id = int(cur.lastrowid)

        return AttendanceRecord(
            attendance_id=attendance_id,
            employee_id=employee_id,
            outlet_id=outlet_id,
            work_date=work_date,
            clock_in=clock_in,
            clock_in_location=location,
            status=status,
            notes=notes,
        )

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
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance
                SET clock_in=%s, status=%s, outlet_id=%s, clock_in_location=%s, notes=%s
                WHERE attendance_id=%s AND clock_in IS NULL
                """,
                (clock_in, status.value, outlet_id, location, notes, attendance_id),
            )
            return cur.rowcount > 0

    def update_clock_out(
        self,
        *,
        attendance_id: int,
        clock_out: str,
        status: AttendanceStatus,
        location: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance
                SET clock_out=%s, clock_out_location=%s, status=%s
                WHERE attendance_id=%s AND clock_out IS NULL
                """,
                (clock_out, location, status.value, attendance_id),
            )
            return cur.rowcount > 0

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
        clauses = ["1=1"]
        params: list[object] = []

        if work_date:
            clauses.append("a.work_date=%s")
            params.append(work_date)
        elif start_date and end_date:
            clauses.append("a.work_date BETWEEN %s AND %s")
            params.extend([start_date, end_date])
        if employee_id is not None:
            clauses.append("a.employee_id=%s")
            params.append(int(employee_id))
        if department_id is not None:
            clauses.append("e.department_id=%s")
            params.append(int(department_id))
        if outlet_id is not None:
            clauses.append("e.outlet_id=%s")
            params.append(int(outlet_id))

        sql = f"""
            SELECT {_COLUMNS},
                   e.employee_code, e.name AS employee_name,
                   d.name AS department_name, o.name AS outlet_name
            FROM attendance a
            JOIN employees e ON e.id = a.employee_id
            LEFT JOIN departments d ON d.department_id = e.department_id
            LEFT JOIN outlets o ON o.outlet_id = a.outlet_id
            WHERE {" AND ".join(clauses)}
            ORDER BY a.work_date DESC, a.clock_in ASC
        """
        if limit:
            sql += " LIMIT %s"
            params.append(int(limit))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(sql, tuple(params))
            return [
                AttendanceView(
                    record=_to_record(r),
                    employee_code=r["employee_code"],
                    employee_name=r["employee_name"],
                    department_name=r.get("department_name"),
                    outlet_name=r.get("outlet_name"),
                )
                for r in fetchall(cur)
            ]

    def list_for_range(self, *, start_date: str, end_date: str, employee_ids: Sequence[int]) -> Sequence[AttendanceRecord]:
        if not employee_ids:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance a
                WHERE a.work_date BETWEEN %s AND %s AND a.employee_id IN ({in_clause(employee_ids)})
                """,
                (start_date, end_date, *[int(i) for i in employee_ids]),
            )
            return [_to_record(r) for r in fetchall(cur)]
