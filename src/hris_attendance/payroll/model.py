from __future__ import annotations

from dataclasses import dataclass, field

from ..core.enums import IncentiveType


@dataclass(frozen=True)
class PayrollIncentive:
    """Monthly addition or deduction for one employee."""

    incentive_id: int
    employee_id: int
    month: str
    name: str
    amount: float
    type: IncentiveType = IncentiveType.ADDITION

    def to_dict(self) -> dict:
        return {
            "id": self.incentive_id,
            "employeeId": self.employee_id,
            "date": self.month,
            "name": self.name,
            "amount": self.amount,
            "type": self.type.value,
        }


@dataclass(frozen=True)
class PayrollRow:
    id: int
    employee_code: str
    name: str
    department: str
    outlet_name: str
    daily_rate: float
    present_days: int
    basic_salary: float
    additions: float
    deductions: float
    total_pay: float
    incentives: tuple[PayrollIncentive, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "employeeId": self.employee_code,
            "name": self.name,
            "department": self.department,
            "outletName": self.outlet_name,
            "dailyRate": self.daily_rate,
            "presentDays": self.present_days,
            "basicSalary": self.basic_salary,
            "additions": self.additions,
            "deductions": self.deductions,
            "totalPay": self.total_pay,
            "incentives": [i.to_dict() for i in self.incentives],
        }


@dataclass(frozen=True)
class NewIncentive:
    employee_id: int
    month: str
    name: str
    amount: float
    type: IncentiveType
