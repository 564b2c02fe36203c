from hris_attendance.attendance.model import AttendanceRecord
from hris_attendance.core.enums import AttendanceStatus
from hris_attendance.payroll.calculator.daily_rate_calculator import DailyRatePayrollCalculator


def _rec(i, status):
    return AttendanceRecord(attendance_id=i, employee_id=1, work_date=f"2024-03-{i:02d}", status=status)


def test_present_late_and_early_leave_count_absent_does_not():
    calc = DailyRatePayrollCalculator()
    records = [
        _rec(1, AttendanceStatus.PRESENT),
        _rec(2, AttendanceStatus.LATE),
        _rec(3, AttendanceStatus.EARLY_LEAVE),
        _rec(4, AttendanceStatus.ABSENT),
    ]
    assert calc.present_days(records) == 3


def test_basic_salary_is_days_times_rate():
    calc = DailyRatePayrollCalculator()
    assert calc.basic_salary(present_days=3, daily_rate=150_000) == 450_000
    assert calc.basic_salary(present_days=0, daily_rate=150_000) == 0
    assert calc.basic_salary(present_days=5, daily_rate=0) == 0
