from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import RequestStatus
from .model import LeaveRequest, NewLeaveRequest


class LeaveRepository(Protocol):
    def create(self, data: NewLeaveRequest) -> int:
        raise NotImplementedError

    def get_by_id(self, request_id: int) -> Optional[LeaveRequest]:
        raise NotImplementedError

    def list_requests(
        self,
        *,
        status: Optional[RequestStatus] = None,
        employee_id: Optional[int] = None,
    ) -> Sequence[LeaveRequest]:
        raise NotImplementedError

    def decide(self, *, request_id: int, status: RequestStatus, admin_notes: Optional[str] = None) -> bool:
        """Move a PENDING request to `status`; False if it was not pending."""

        raise NotImplementedError

    def delete_by_id(self, request_id: int) -> bool:
        raise NotImplementedError
