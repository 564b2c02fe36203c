from __future__ import annotations

from enum import Enum


class AttendanceStatus(str, Enum):
    """Attendance status persisted in the attendance table."""

    PRESENT = "PRESENT"
    LATE = "LATE"
    EARLY_LEAVE = "EARLY_LEAVE"
    ABSENT = "ABSENT"


# Statuses that count as a worked day for payroll.
WORKED_STATUSES = frozenset({AttendanceStatus.PRESENT, AttendanceStatus.LATE, AttendanceStatus.EARLY_LEAVE})


class IncentiveType(str, Enum):
    ADDITION = "ADDITION"
    DEDUCTION = "DEDUCTION"


class LeaveType(str, Enum):
    """IZIN is a permitted absence, SAKIT is sick leave."""

    IZIN = "IZIN"
    SAKIT = "SAKIT"


class RequestStatus(str, Enum):
    """Approval flow of a leave request."""

    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
