from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class Shift:
    """Domain entity: a named work window scoped to one outlet."""

    shift_id: int
    outlet_id: int
    name: str
    start_time: str
    end_time: str

    def to_dict(self) -> dict:
        return {
            "id": self.shift_id,
            "outletId": self.outlet_id,
            "name": self.name,
            "startTime": self.start_time,
            "endTime": self.end_time,
        }


@dataclass(frozen=True)
class Outlet:
    """Domain entity: a physical work site with a geofence."""

    outlet_id: int
    name: str
    latitude: float
    longitude: float
    radius: int
    daily_rate: float = 0.0
    work_start_time: str = "09:00"
    work_end_time: str = "17:00"
    address: Optional[str] = None
    is_active: bool = True
    shifts: tuple[Shift, ...] = field(default_factory=tuple)
    employee_count: int = 0

    def to_dict(self) -> dict:
        return {
            "id": self.outlet_id,
            "name": self.name,
            "address": self.address,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "radius": self.radius,
            "dailyRate": self.daily_rate,
            "workStartTime": self.work_start_time,
            "workEndTime": self.work_end_time,
            "isActive": self.is_active,
            "shifts": [s.to_dict() for s in self.shifts],
            "employeeCount": self.employee_count,
        }


@dataclass(frozen=True)
class ShiftInput:
    """Shift row submitted with an outlet; `shift_id` set means update."""

    name: str
    start_time: str
    end_time: str
    shift_id: Optional[int] = None
