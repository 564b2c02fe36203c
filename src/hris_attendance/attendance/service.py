from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable, Mapping, Optional, Sequence

from ..common.datetime_utils import format_clock, format_date, now_local, parse_iso_date
from ..core.constants import DEFAULT_TIMEZONE
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..database.mysql_base import DuplicateRecordError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..geofence.evaluator import GeoPoint, check_within, resolve_outlet
from ..outlets.model import Outlet
from ..outlets.repository import OutletRepository, ShiftRepository
from ..settings.service import SettingsService
from .factory import AttendanceStrategyFactory
from .model import AttendanceRecord, AttendanceView
from .repository import AttendanceRepository
from .schedule import WorkSchedule, resolve_schedule
from .status import decide_clock_in, decide_clock_out

logger = logging.getLogger(__name__)


class AttendanceService:
    def __init__(
        self,
        attendance: AttendanceRepository,
        employees: EmployeeRepository,
        outlets: OutletRepository,
        shifts: ShiftRepository,
        settings: SettingsService,
        *,
        strategy_factory: AttendanceStrategyFactory | None = None,
        timezone: str = DEFAULT_TIMEZONE,
        clock: Callable[[], datetime] | None = None,
    ):
        self._attendance = attendance
        self._employees = employees
        self._outlets = outlets
        self._shifts = shifts
        self._settings = settings
        self._factory = strategy_factory or AttendanceStrategyFactory()
        self._timezone = timezone
        self._clock = clock or (lambda: now_local(self._timezone))

    def _get_employee(self, employee_id: int) -> Employee:
        employee = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise NotFoundError("Employee not found", code="EmployeeNotFound")
        return employee

    def _get_outlet(self, outlet_id: Optional[int]) -> Optional[Outlet]:
        return self._outlets.get_by_id(outlet_id) if outlet_id else None

    def _schedule(self, employee: Employee, outlet: Optional[Outlet], settings: Optional[Mapping[str, Any]]) -> WorkSchedule:
        shift = self._shifts.get_by_id(employee.shift_id) if employee.shift_id else None
        return resolve_schedule(shift=shift, outlet=outlet, settings=self._settings.effective(settings))

    def clock_in(
        self,
        employee_id: int,
        *,
        location: Optional[GeoPoint] = None,
        settings: Optional[Mapping[str, Any]] = None,
        now: datetime | None = None,
    ) -> AttendanceRecord:
        now = now or self._clock()
        today = format_date(now.date())

        employee = self._get_employee(employee_id)
        existing = self._attendance.get_for_employee_and_date(employee.id, today)
        if existing and existing.clock_in:
            raise ConflictError("Already clocked in today", code="AlreadyClockedIn")

        assigned = self._get_outlet(employee.outlet_id)
        candidates: Sequence[Outlet] = ()
        if assigned is None and location is not None:
            candidates = self._outlets.list_all(active_only=True)
        match = resolve_outlet(assigned, location, candidates)

        schedule = self._schedule(employee, match.outlet, settings)
        decision = decide_clock_in(schedule.start_time, schedule.late_threshold, now, factory=self._factory)

        clock_in = format_clock(now)
        location_text = location.as_text() if location else None
        if existing:
            filled = self._attendance.fill_clock_in(
                attendance_id=existing.attendance_id,
                clock_in=clock_in,
                status=decision.status,
                outlet_id=match.outlet_id,
                location=location_text,
                notes=decision.note,
            )
            if not filled:
                raise ConflictError("Already clocked in today", code="AlreadyClockedIn")
            record = self._attendance.get_for_employee_and_date(employee.id, today)
        else:
            try:
                record = self._attendance.create_clock_in(
                    employee_id=employee.id,
                    work_date=today,
                    clock_in=clock_in,
                    status=decision.status,
                    outlet_id=match.outlet_id,
                    location=location_text,
                    notes=decision.note,
                )
            except DuplicateRecordError:
                raise ConflictError("Already clocked in today", code="AlreadyClockedIn")

        logger.info(
            "Clock-in %s at %s %s (%s, schedule %s from %s, outlet=%s)",
            employee.employee_code,
            today,
            clock_in,
            decision.status.value,
            schedule.start_time,
            schedule.source,
            match.outlet.name if match.outlet else "-",
        )
        return record

    def clock_out(
        self,
        employee_id: int,
        *,
        location: Optional[GeoPoint] = None,
        settings: Optional[Mapping[str, Any]] = None,
        now: datetime | None = None,
    ) -> AttendanceRecord:
        now = now or self._clock()
        today = format_date(now.date())

        employee = self._get_employee(employee_id)
        record = self._attendance.get_for_employee_and_date(employee.id, today)
        if not record or not record.clock_in:
            raise NotFoundError("No clock in record found for today", code="NoClockInFound")
        if record.clock_out:
            raise ConflictError("Already clocked out today", code="AlreadyClockedOut")

        # The clock-in outlet wins over the currently assigned one.
        outlet = self._get_outlet(record.outlet_id or employee.outlet_id)
        if outlet is not None and location is not None:
            check_within(outlet, location)

        schedule = self._schedule(employee, outlet, settings)
        decision = decide_clock_out(schedule.end_time, now, record.status, factory=self._factory)

        clock_out = format_clock(now)
        updated = self._attendance.update_clock_out(
            attendance_id=record.attendance_id,
            clock_out=clock_out,
            status=decision.status,
            location=location.as_text() if location else None,
        )
        if not updated:
            raise ConflictError("Already clocked out today", code="AlreadyClockedOut")

        logger.info("Clock-out %s at %s %s (%s)", employee.employee_code, today, clock_out, decision.status.value)
        return self._attendance.get_for_employee_and_date(employee.id, today)

    def get_today(self, employee_id: Optional[int] = None) -> Optional[AttendanceView] | Sequence[AttendanceView]:
        """One employee's record for today (or None), or everyone's."""
        today = format_date(self._clock().date())
        if employee_id is not None:
            views = self._attendance.list_views(work_date=today, employee_id=int(employee_id))
            return views[0] if views else None
        return self._attendance.list_views(work_date=today)

    def list_attendance(
        self,
        *,
        work_date: Optional[str] = None,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        employee_id: Optional[int] = None,
    ) -> Sequence[AttendanceView]:
        if work_date:
            return self._attendance.list_views(work_date=parse_iso_date(work_date).isoformat(), employee_id=employee_id)
        if start_date and end_date:
            start, end = self._range(start_date, end_date)
            return self._attendance.list_views(start_date=start, end_date=end, employee_id=employee_id)
        return self._attendance.list_views(employee_id=employee_id)

    def report(
        self,
        *,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
        department_id: Optional[int] = None,
        outlet_id: Optional[int] = None,
    ) -> Sequence[AttendanceView]:
        start = end = None
        if start_date and end_date:
            start, end = self._range(start_date, end_date)
        return self._attendance.list_views(
            start_date=start,
            end_date=end,
            department_id=department_id,
            outlet_id=outlet_id,
        )

    @staticmethod
    def _range(start_date: str, end_date: str) -> tuple[str, str]:
        start = parse_iso_date(start_date)
        end = parse_iso_date(end_date)
        if end < start:
            raise ValidationError("endDate must be on or after startDate")
        return start.isoformat(), end.isoformat()
