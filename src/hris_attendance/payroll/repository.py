from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import NewIncentive, PayrollIncentive


class IncentiveRepository(Protocol):
    def create(self, data: NewIncentive) -> int:
        raise NotImplementedError

    def get_by_id(self, incentive_id: int) -> Optional[PayrollIncentive]:
        raise NotImplementedError

    def list_for_month(self, *, month: str, employee_ids: Sequence[int]) -> Sequence[PayrollIncentive]:
        raise NotImplementedError

    def delete_by_id(self, incentive_id: int) -> bool:
        raise NotImplementedError
