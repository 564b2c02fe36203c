from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.factory import AttendanceStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .auth.service import AuthService
from .core.constants import DEFAULT_FACE_MATCH_MIN_SCORE, DEFAULT_TIMEZONE
from .dashboard.service import DashboardService
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLDepartmentRepository, MySQLEmployeeRepository
from .employees.repository import DepartmentRepository, EmployeeRepository
from .employees.service import EmployeeService
from .faces.service import FaceService
from .leaves.mysql_leave_repository import MySQLLeaveRepository
from .leaves.repository import LeaveRepository
from .leaves.service import LeaveService
from .outlets.mysql_outlet_repository import MySQLOutletRepository, MySQLShiftRepository
from .outlets.repository import OutletRepository, ShiftRepository
from .outlets.service import OutletService
from .payroll.mysql_incentive_repository import MySQLIncentiveRepository
from .payroll.repository import IncentiveRepository
from .payroll.service import PayrollService
from .settings.mysql_settings_repository import MySQLSettingsRepository
from .settings.repository import SettingsRepository
from .settings.service import SettingsService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    employees_repo: EmployeeRepository
    departments_repo: DepartmentRepository
    outlets_repo: OutletRepository
    shifts_repo: ShiftRepository
    attendance_repo: AttendanceRepository
    incentives_repo: IncentiveRepository
    leaves_repo: LeaveRepository
    settings_repo: SettingsRepository

    auth_service: AuthService
    settings_service: SettingsService
    employee_service: EmployeeService
    outlet_service: OutletService
    attendance_service: AttendanceService
    payroll_service: PayrollService
    leave_service: LeaveService
    face_service: FaceService
    dashboard_service: DashboardService


def wire_container(
    *,
    employees_repo: EmployeeRepository,
    departments_repo: DepartmentRepository,
    outlets_repo: OutletRepository,
    shifts_repo: ShiftRepository,
    attendance_repo: AttendanceRepository,
    incentives_repo: IncentiveRepository,
    leaves_repo: LeaveRepository,
    settings_repo: SettingsRepository,
    admin_username: str,
    admin_password_hash: str,
    timezone: str = DEFAULT_TIMEZONE,
    face_min_score: int = DEFAULT_FACE_MATCH_MIN_SCORE,
    conn: Optional[DatabaseConnection] = None,
    clock=None,
) -> Container:
    """Build the services on top of any repository implementations."""
    settings_service = SettingsService(settings_repo)

    return Container(
        conn=conn,
        employees_repo=employees_repo,
        departments_repo=departments_repo,
        outlets_repo=outlets_repo,
        shifts_repo=shifts_repo,
        attendance_repo=attendance_repo,
        incentives_repo=incentives_repo,
        leaves_repo=leaves_repo,
        settings_repo=settings_repo,
        auth_service=AuthService(admin_username=admin_username, admin_password_hash=admin_password_hash),
        settings_service=settings_service,
        employee_service=EmployeeService(employees_repo, departments_repo, outlets_repo, shifts_repo),
        outlet_service=OutletService(outlets_repo),
        attendance_service=AttendanceService(
            attendance_repo,
            employees_repo,
            outlets_repo,
            shifts_repo,
            settings_service,
            strategy_factory=AttendanceStrategyFactory(),
            timezone=timezone,
            clock=clock,
        ),
        payroll_service=PayrollService(employees_repo, outlets_repo, attendance_repo, incentives_repo),
        leave_service=LeaveService(leaves_repo, employees_repo),
        face_service=FaceService(employees_repo, min_score=face_min_score),
        dashboard_service=DashboardService(employees_repo, departments_repo, attendance_repo, timezone=timezone, clock=clock),
    )


def build_container(
    *,
    db_config: dict,
    admin_username: str,
    admin_password_hash: str,
    timezone: str = DEFAULT_TIMEZONE,
    face_min_score: int = DEFAULT_FACE_MATCH_MIN_SCORE,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return wire_container(
        employees_repo=MySQLEmployeeRepository(conn),
        departments_repo=MySQLDepartmentRepository(conn),
        outlets_repo=MySQLOutletRepository(conn),
        shifts_repo=MySQLShiftRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        incentives_repo=MySQLIncentiveRepository(conn),
        leaves_repo=MySQLLeaveRepository(conn),
        settings_repo=MySQLSettingsRepository(conn),
        admin_username=admin_username,
        admin_password_hash=admin_password_hash,
        timezone=timezone,
        face_min_score=face_min_score,
        conn=conn,
    )
