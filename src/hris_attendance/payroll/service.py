from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, Mapping, Optional, Sequence

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import month_range, parse_month
from ..common.validators import parse_enum, parse_float, parse_int, require_fields, require_non_empty
from ..core.enums import IncentiveType
from ..core.exceptions import NotFoundError, ValidationError
from ..employees.repository import EmployeeRepository
from ..outlets.repository import OutletRepository
from .calculator.base import PayrollCalculator
from .calculator.daily_rate_calculator import DailyRatePayrollCalculator
from .model import NewIncentive, PayrollIncentive, PayrollRow
from .repository import IncentiveRepository

logger = logging.getLogger(__name__)


class PayrollService:
    def __init__(
        self,
        employees: EmployeeRepository,
        outlets: OutletRepository,
        attendance: AttendanceRepository,
        incentives: IncentiveRepository,
        *,
        calculator: Optional[PayrollCalculator] = None,
    ):
        self._employees = employees
        self._outlets = outlets
        self._attendance = attendance
        self._incentives = incentives
        self._calculator = calculator or DailyRatePayrollCalculator()

    def compute_monthly_payroll(self, month: str, *, outlet_id: Any = None) -> list[PayrollRow]:
        """One row per active employee for a 'YYYY-MM' month.

        `outlet_id` of None or "all" includes every outlet.
        """
        first, last = month_range(month)
        month_key = first.strftime("%Y-%m")
        outlet_filter = None if outlet_id in (None, "", "all") else parse_int(outlet_id, "outletId")

        employees = self._employees.list_all(active_only=True, outlet_id=outlet_filter)
        ids = [e.id for e in employees]
        outlets = {o.outlet_id: o for o in self._outlets.list_all()}

        records_by_employee = defaultdict(list)
        for r in self._attendance.list_for_range(start_date=first.isoformat(), end_date=last.isoformat(), employee_ids=ids):
            records_by_employee[r.employee_id].append(r)

        incentives_by_employee: dict[int, list[PayrollIncentive]] = defaultdict(list)
        for inc in self._incentives.list_for_month(month=month_key, employee_ids=ids):
            incentives_by_employee[inc.employee_id].append(inc)

        rows: list[PayrollRow] = []
        for emp in employees:
            outlet = outlets.get(emp.outlet_id) if emp.outlet_id else None
            daily_rate = float(outlet.daily_rate) if outlet else 0.0
            present_days = self._calculator.present_days(records_by_employee[emp.id])
            basic = self._calculator.basic_salary(present_days=present_days, daily_rate=daily_rate)

            incentives = incentives_by_employee[emp.id]
            additions = sum(i.amount for i in incentives if i.type == IncentiveType.ADDITION)
            deductions = sum(i.amount for i in incentives if i.type == IncentiveType.DEDUCTION)

            rows.append(
                PayrollRow(
                    id=emp.id,
                    employee_code=emp.employee_code,
                    name=emp.name,
                    department=emp.department_name or "-",
                    outlet_name=outlet.name if outlet else "-",
                    daily_rate=daily_rate,
                    present_days=present_days,
                    basic_salary=basic,
                    additions=additions,
                    deductions=deductions,
                    total_pay=basic + additions - deductions,
                    incentives=tuple(incentives),
                )
            )

        logger.info("Payroll %s computed for %d employee(s) (outlet=%s)", month_key, len(rows), outlet_filter or "all")
        return rows

    def add_incentive(self, data: Mapping[str, Any]) -> PayrollIncentive:
        require_fields(data, ("employeeId", "date", "name", "amount"))
        year, month_num = parse_month(str(data["date"]))
        amount = parse_float(data.get("amount"), "amount")
        if amount < 0:
            raise ValidationError("amount must be >= 0")
        inc_type = parse_enum(IncentiveType, data.get("type"), "type", default=IncentiveType.ADDITION)

        employee = self._employees.get_by_id(parse_int(data["employeeId"], "employeeId"))
        if not employee:
            raise NotFoundError("Employee not found", code="EmployeeNotFound")

        incentive_id = self._incentives.create(
            NewIncentive(
                employee_id=employee.id,
                month=f"{year:04d}-{month_num:02d}",
                name=require_non_empty(data.get("name"), "name"),
                amount=amount,
                type=inc_type,
            )
        )
        logger.info("Incentive %s (%s %.2f) added for %s", incentive_id, inc_type.value, amount, employee.employee_code)
        return self._incentives.get_by_id(incentive_id)

    def delete_incentive(self, incentive_id: int) -> None:
        if not self._incentives.delete_by_id(int(incentive_id)):
            raise NotFoundError("Incentive not found", code="IncentiveNotFound")

    def to_rows(self, rows: Sequence[PayrollRow]) -> list[dict]:
        return [r.to_dict() for r in rows]
