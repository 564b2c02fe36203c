from __future__ import annotations

from collections import defaultdict
from datetime import datetime, timedelta
from typing import Any, Callable

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import format_date, now_local
from ..core.constants import DEFAULT_RECENT_ATTENDANCE_LIMIT, DEFAULT_TIMEZONE, DEFAULT_WEEKLY_DAYS
from ..core.enums import AttendanceStatus
from ..employees.repository import DepartmentRepository, EmployeeRepository


class DashboardService:
    def __init__(
        self,
        employees: EmployeeRepository,
        departments: DepartmentRepository,
        attendance: AttendanceRepository,
        *,
        timezone: str = DEFAULT_TIMEZONE,
        clock: Callable[[], datetime] | None = None,
    ):
        self._employees = employees
        self._departments = departments
        self._attendance = attendance
        self._clock = clock or (lambda: now_local(timezone))

    def get_stats(self) -> dict[str, Any]:
        today = self._clock().date()
        total = self._employees.count_active()

        first_day = today - timedelta(days=DEFAULT_WEEKLY_DAYS - 1)
        week = self._attendance.list_views(start_date=format_date(first_day), end_date=format_date(today))
        by_day: dict[str, list] = defaultdict(list)
        for v in week:
            by_day[v.record.work_date].append(v.record)

        weekly = []
        for offset in range(DEFAULT_WEEKLY_DAYS):
            day = format_date(first_day + timedelta(days=offset))
            records = by_day[day]
            weekly.append(
                {
                    "date": day,
                    "present": sum(1 for r in records if r.status == AttendanceStatus.PRESENT),
                    "late": sum(1 for r in records if r.status == AttendanceStatus.LATE),
                    "absent": total - len(records),
                }
            )

        today_stats = weekly[-1]
        recent = self._attendance.list_views(limit=DEFAULT_RECENT_ATTENDANCE_LIMIT)

        return {
            "totalEmployees": total,
            "presentToday": today_stats["present"],
            "lateToday": today_stats["late"],
            "absentToday": today_stats["absent"],
            "recentAttendance": [v.to_dict() for v in recent],
            "weeklyData": weekly,
            "departmentBreakdown": [{"name": d.name, "count": d.employee_count} for d in self._departments.list_all()],
        }
