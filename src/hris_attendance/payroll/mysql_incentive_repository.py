from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..core.enums import IncentiveType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import NewIncentive, PayrollIncentive
from .repository import IncentiveRepository

_COLUMNS = "incentive_id, employee_id, month, name, amount, type"


def _to_incentive(r: Dict[str, Any]) -> PayrollIncentive:
    return PayrollIncentive(
        incentive_id=int(r["incentive_id"]),
        employee_id=int(r["employee_id"]),
        month=r["month"],
        name=r["name"],
        amount=float(r["amount"]),
        type=IncentiveType(r["type"]),
    )


class MySQLIncentiveRepository(IncentiveRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(self, data: NewIncentive) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO payroll_incentives(employee_id, month, name, amount, type) VALUES (%s,%s,%s,%s,%s)",
                (int(data.employee_id), data.month, data.name, data.amount, data.type.value),
            )
            return int(cur.lastrowid)

    def get_by_id(self, incentive_id: int) -> Optional[PayrollIncentive]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM payroll_incentives WHERE incentive_id=%s", (int(incentive_id),))
            r = fetchone(cur)
            return _to_incentive(r) if r else None

    def list_for_month(self, *, month: str, employee_ids: Sequence[int]) -> Sequence[PayrollIncentive]:
        if not employee_ids:
            return []
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS} FROM payroll_incentives
                WHERE month=%s AND employee_id IN ({in_clause(employee_ids)})
                ORDER BY incentive_id
                """,
                (month, *[int(i) for i in employee_ids]),
            )
            return [_to_incentive(r) for r in fetchall(cur)]

    def delete_by_id(self, incentive_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM payroll_incentives WHERE incentive_id=%s", (int(incentive_id),))
            return cur.rowcount > 0
