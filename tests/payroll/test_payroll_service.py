import pytest

from hris_attendance.core.enums import AttendanceStatus, IncentiveType
from hris_attendance.core.exceptions import NotFoundError, ValidationError


def _rows_by_code(rows):
    return {r.employee_code: r for r in rows}


def test_monthly_payroll_totals(store, container):
    store.departments.add(1, "Operations")
    outlet = store.outlets.add(name="Menteng", latitude=0, longitude=0, daily_rate=100_000)
    emp = store.employees.add(employee_code="E1", outlet_id=outlet.outlet_id, department_id=1)

    for day, status in [(1, "PRESENT"), (2, "LATE"), (3, "EARLY_LEAVE"), (4, "ABSENT")]:
        store.attendance.put(emp.id, f"2024-02-{day:02d}", AttendanceStatus(status))
    store.attendance.put(emp.id, "2024-03-01", AttendanceStatus.PRESENT)

    svc = container.payroll_service
    svc.add_incentive({"employeeId": emp.id, "date": "2024-02", "name": "Bonus", "amount": 50_000})
    svc.add_incentive({"employeeId": emp.id, "date": "2024-02", "name": "Loan", "amount": 20_000, "type": "deduction"})
    svc.add_incentive({"employeeId": emp.id, "date": "2024-03", "name": "Other month", "amount": 999})

    row = _rows_by_code(svc.compute_monthly_payroll("2024-02"))["E1"]

    assert row.present_days == 3
    assert row.basic_salary == 300_000
    assert row.additions == 50_000
    assert row.deductions == 20_000
    assert row.total_pay == 330_000
    assert row.department == "Operations"
    assert row.outlet_name == "Menteng"
    assert len(row.incentives) == 2
    assert row.to_dict()["totalPay"] == 330_000


def test_leap_day_is_inside_february(store, container):
    outlet = store.outlets.add(latitude=0, longitude=0, daily_rate=10)
    emp = store.employees.add(outlet_id=outlet.outlet_id)
    store.attendance.put(emp.id, "2024-02-29", AttendanceStatus.PRESENT)

    (row,) = container.payroll_service.compute_monthly_payroll("2024-02")
    assert row.present_days == 1


def test_december_excludes_next_january(store, container):
    outlet = store.outlets.add(latitude=0, longitude=0, daily_rate=10)
    emp = store.employees.add(outlet_id=outlet.outlet_id)
    store.attendance.put(emp.id, "2024-11-30", AttendanceStatus.PRESENT)
    store.attendance.put(emp.id, "2024-12-01", AttendanceStatus.PRESENT)
    store.attendance.put(emp.id, "2024-12-31", AttendanceStatus.LATE)
    store.attendance.put(emp.id, "2025-01-01", AttendanceStatus.PRESENT)

    (row,) = container.payroll_service.compute_monthly_payroll("2024-12")

    assert row.present_days == 2
    assert row.basic_salary == 20


def test_employee_without_attendance_or_outlet(store, container):
    store.employees.add(employee_code="E9")

    row = _rows_by_code(container.payroll_service.compute_monthly_payroll("2024-12"))["E9"]

    assert (row.present_days, row.basic_salary, row.total_pay) == (0, 0, 0)
    assert (row.department, row.outlet_name, row.daily_rate) == ("-", "-", 0)


def test_deductions_can_make_total_negative(store, container):
    emp = store.employees.add()
    container.payroll_service.add_incentive(
        {"employeeId": emp.id, "date": "2024-05", "name": "Damage", "amount": 10, "type": IncentiveType.DEDUCTION.value}
    )
    (row,) = container.payroll_service.compute_monthly_payroll("2024-05")
    assert row.total_pay == -10


def test_outlet_filter_and_inactive_employees(store, container):
    a = store.outlets.add(latitude=0, longitude=0)
    b = store.outlets.add(latitude=1, longitude=1)
    store.employees.add(employee_code="A", outlet_id=a.outlet_id)
    store.employees.add(employee_code="B", outlet_id=b.outlet_id)
    store.employees.add(employee_code="GONE", outlet_id=a.outlet_id, is_active=False)

    svc = container.payroll_service
    assert set(_rows_by_code(svc.compute_monthly_payroll("2024-01", outlet_id="all"))) == {"A", "B"}
    assert set(_rows_by_code(svc.compute_monthly_payroll("2024-01", outlet_id=str(b.outlet_id)))) == {"B"}


@pytest.mark.parametrize("month", ["2024-13", "2024-2", "Feb 2024", ""])
def test_malformed_month(container, month):
    with pytest.raises(ValidationError):
        container.payroll_service.compute_monthly_payroll(month)


@pytest.mark.parametrize(
    "data",
    [
        {"date": "2024-01", "name": "x", "amount": 1},
        {"employeeId": 1, "date": "2024-1", "name": "x", "amount": 1},
        {"employeeId": 1, "date": "2024-01", "name": "x", "amount": -1},
        {"employeeId": 1, "date": "2024-01", "name": "x", "amount": 1, "type": "BONUS"},
    ],
)
def test_incentive_validation(store, container, data):
    store.employees.add()
    with pytest.raises(ValidationError):
        container.payroll_service.add_incentive(data)


def test_delete_incentive(store, container):
    emp = store.employees.add()
    inc = container.payroll_service.add_incentive({"employeeId": emp.id, "date": "2024-01", "name": "x", "amount": 1})
    assert inc.type == IncentiveType.ADDITION

    container.payroll_service.delete_incentive(inc.incentive_id)
    with pytest.raises(NotFoundError):
        container.payroll_service.delete_incentive(inc.incentive_id)
