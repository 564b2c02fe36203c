from __future__ import annotations

from typing import Any, Dict, Iterable, Mapping, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, in_clause
from .model import Outlet, Shift, ShiftInput
from .repository import OutletRepository, ShiftRepository

_WRITABLE = ("name", "address", "latitude", "longitude", "radius", "daily_rate", "work_start_time", "work_end_time", "is_active")


def _to_shift(r: Dict[str, Any]) -> Shift:
    return Shift(
        shift_id=int(r["shift_id"]),
        outlet_id=int(r["outlet_id"]),
        name=r["name"],
        start_time=r["start_time"],
        end_time=r["end_time"],
    )


def _to_outlet(r: Dict[str, Any], shifts: Iterable[Shift] = ()) -> Outlet:
    return Outlet(
        outlet_id=int(r["outlet_id"]),
        name=r["name"],
        address=r.get("address"),
        latitude=float(r["latitude"]),
        longitude=float(r["longitude"]),
        radius=int(r["radius"]),
        daily_rate=float(r.get("daily_rate") or 0),
        work_start_time=r["work_start_time"],
        work_end_time=r["work_end_time"],
        is_active=bool(r.get("is_active", True)),
        shifts=tuple(shifts),
        employee_count=int(r.get("employee_count") or 0),
    )


class MySQLOutletRepository(OutletRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _load(self, where: str, params: tuple) -> list[Outlet]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT o.*, (SELECT COUNT(*) FROM employees e WHERE e.outlet_id = o.outlet_id) AS employee_count
                FROM outlets o
                WHERE {where}
                ORDER BY o.created_at DESC, o.outlet_id DESC
                """,
                params,
            )
            rows = fetchall(cur)
            if not rows:
                return []

            ids = [int(r["outlet_id"]) for r in rows]
            cur.execute(
                f"SELECT shift_id, outlet_id, name, start_time, end_time FROM shifts WHERE outlet_id IN ({in_clause(ids)}) ORDER BY shift_id",
                tuple(ids),
            )
            by_outlet: dict[int, list[Shift]] = {}
            for s in fetchall(cur):
                shift = _to_shift(s)
                by_outlet.setdefault(shift.outlet_id, []).append(shift)

            return [_to_outlet(r, by_outlet.get(int(r["outlet_id"]), [])) for r in rows]

    def get_by_id(self, outlet_id: int) -> Optional[Outlet]:
        found = self._load("o.outlet_id=%s", (outlet_id,))
        return found[0] if found else None

    def get_by_name(self, name: str) -> Optional[Outlet]:
        found = self._load("o.name=%s", (name,))
        return found[0] if found else None

    def list_all(self, *, active_only: bool = False) -> Sequence[Outlet]:
        return self._load("o.is_active=1" if active_only else "1=1", ())

    def create(self, data: Mapping[str, Any], shifts: Sequence[ShiftInput]) -> int:
        cols = [c for c in _WRITABLE if c in data]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"INSERT INTO outlets({', '.join(cols)}) VALUES ({', '.join(['%s'] * len(cols))})",
                tuple(data[c] for c in cols),
            )
            outlet_id = int(cur.lastrowid)
            for s in shifts:
                cur.execute(
                    "INSERT INTO shifts(outlet_id, name, start_time, end_time) VALUES (%s,%s,%s,%s)",
                    (outlet_id, s.name, s.start_time, s.end_time),
                )
            return outlet_id

    def update(self, outlet_id: int, data: Mapping[str, Any], shifts: Optional[Sequence[ShiftInput]] = None) -> bool:
        cols = [c for c in _WRITABLE if c in data]
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT outlet_id FROM outlets WHERE outlet_id=%s FOR UPDATE", (outlet_id,))
            if not fetchone(cur):
                return False

            if cols:
                cur.execute(
                    f"UPDATE outlets SET {', '.join(f'{c}=%s' for c in cols)} WHERE outlet_id=%s",
                    (*[data[c] for c in cols], outlet_id),
                )

            if shifts is not None:
                keep = [int(s.shift_id) for s in shifts if s.shift_id]
                if keep:
                    cur.execute(
                        f"DELETE FROM shifts WHERE outlet_id=%s AND shift_id NOT IN ({in_clause(keep)})",
                        (outlet_id, *keep),
                    )
                else:
                    cur.execute("DELETE FROM shifts WHERE outlet_id=%s", (outlet_id,))

                for s in shifts:
                    if s.shift_id:
                        cur.execute(
                            "UPDATE shifts SET name=%s, start_time=%s, end_time=%s WHERE shift_id=%s AND outlet_id=%s",
                            (s.name, s.start_time, s.end_time, int(s.shift_id), outlet_id),
                        )
                    else:
                        cur.execute(
                            "INSERT INTO shifts(outlet_id, name, start_time, end_time) VALUES (%s,%s,%s,%s)",
                            (outlet_id, s.name, s.start_time, s.end_time),
                        )
            return True

    def delete_by_id(self, outlet_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM outlets WHERE outlet_id=%s", (outlet_id,))
            return cur.rowcount > 0

    def count_employees(self, outlet_id: int) -> int:
        with db_cursor(self._conn_factory, dictionary=False) as (_, cur):
            cur.execute("SELECT COUNT(*) FROM employees WHERE outlet_id=%s", (outlet_id,))
            (count,) = cur.fetchone()
            return int(count)


class MySQLShiftRepository(ShiftRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, shift_id: int) -> Optional[Shift]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT shift_id, outlet_id, name, start_time, end_time FROM shifts WHERE shift_id=%s", (shift_id,))
            r = fetchone(cur)
            return _to_shift(r) if r else None
