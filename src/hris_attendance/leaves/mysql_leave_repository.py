from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..core.enums import LeaveType, RequestStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import LeaveRequest, NewLeaveRequest
from .repository import LeaveRepository

_SELECT = """
    SELECT l.request_id, l.employee_id, l.type, l.start_date, l.end_date, l.reason,
           l.evidence, l.evidence_name, l.status, l.admin_notes,
           e.employee_code, e.name AS employee_name
    FROM leave_requests l
    JOIN employees e ON e.id = l.employee_id
"""


def _to_leave(r: Dict[str, Any]) -> LeaveRequest:
    return LeaveRequest(
        request_id=int(r["request_id"]),
        employee_id=int(r["employee_id"]),
        type=LeaveType(r["type"]),
        start_date=r["start_date"],
        end_date=r["end_date"],
        reason=r["reason"],
        status=RequestStatus(r["status"]),
        evidence=r.get("evidence"),
        evidence_name=r.get("evidence_name"),
        admin_notes=r.get("admin_notes"),
        employee_code=r.get("employee_code"),
        employee_name=r.get("employee_name"),
    )


class MySQLLeaveRepository(LeaveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, data: NewLeaveRequest) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO leave_requests(employee_id, type, start_date, end_date, reason, evidence, evidence_name, status)
                VALUES (%s,%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    int(data.employee_id),
                    data.type.value,
                    data.start_date,
                    data.end_date,
                    data.reason,
                    data.evidence,
                    data.evidence_name,
                    RequestStatus.PENDING.value,
                ),
            )
            return int(cur.lastrowid)

    def get_by_id(self, request_id: int) -> Optional[LeaveRequest]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE l.request_id=%s", (int(request_id),))
            r = fetchone(cur)
            return _to_leave(r) if r else None

    def list_requests(
        self,
        *,
        status: Optional[RequestStatus] = None,
        employee_id: Optional[int] = None,
    ) -> Sequence[LeaveRequest]:
        clauses = ["1=1"]
        params: list[object] = []
        if status:
            clauses.append("l.status=%s")
            params.append(status.value)
        if employee_id is not None:
            clauses.append("l.employee_id=%s")
            params.append(int(employee_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + f" WHERE {' AND '.join(clauses)} ORDER BY l.created_at DESC, l.request_id DESC",
                tuple(params),
            )
            return [_to_leave(r) for r in fetchall(cur)]

    def decide(self, *, request_id: int, status: RequestStatus, admin_notes: Optional[str] = None) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE leave_requests SET status=%s, admin_notes=%s WHERE request_id=%s AND status=%s",
                (status.value, admin_notes, int(request_id), RequestStatus.PENDING.value),
            )
            return cur.rowcount > 0

    def delete_by_id(self, request_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM leave_requests WHERE request_id=%s", (int(request_id),))
            return cur.rowcount > 0
