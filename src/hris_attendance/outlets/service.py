from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Sequence

from ..common.datetime_utils import parse_hhmm
from ..common.validators import optional_text, parse_float, parse_int, require_fields, require_non_empty
from ..core.constants import DEFAULT_OUTLET_RADIUS_METERS, DEFAULT_WORK_END_TIME, DEFAULT_WORK_START_TIME
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..database.mysql_base import DuplicateRecordError
from .model import Outlet, ShiftInput
from .repository import OutletRepository

logger = logging.getLogger(__name__)


def _hhmm(value: Any, field_name: str) -> str:
    t = parse_hhmm(require_non_empty(value, field_name))
    return f"{t.hour:02d}:{t.minute:02d}"


def _parse_shifts(raw: Any) -> list[ShiftInput]:
    if not isinstance(raw, list):
        raise ValidationError("shifts must be a list")
    shifts = []
    for item in raw:
        if not isinstance(item, Mapping):
            raise ValidationError("Each shift must be an object")
        shift_id = item.get("id")
        shifts.append(
            ShiftInput(
                name=require_non_empty(item.get("name"), "shift name"),
                start_time=_hhmm(item.get("startTime"), "shift startTime"),
                end_time=_hhmm(item.get("endTime"), "shift endTime"),
                shift_id=parse_int(shift_id, "shift id") if shift_id not in (None, "") else None,
            )
        )
    return shifts


def _columns(data: Mapping[str, Any], *, partial: bool) -> dict[str, Any]:
    """Map request fields to outlet columns, applying create-time defaults."""
    cols: dict[str, Any] = {}

    if "name" in data or not partial:
        cols["name"] = require_non_empty(data.get("name"), "name")
    if "address" in data:
        cols["address"] = optional_text(data.get("address"))
    if "latitude" in data or not partial:
        cols["latitude"] = parse_float(data.get("latitude"), "latitude")
    if "longitude" in data or not partial:
        cols["longitude"] = parse_float(data.get("longitude"), "longitude")
    if "radius" in data or not partial:
        cols["radius"] = parse_int(data.get("radius"), "radius", default=DEFAULT_OUTLET_RADIUS_METERS)
        if cols["radius"] <= 0:
            raise ValidationError("radius must be greater than 0")
    if "dailyRate" in data or not partial:
        cols["daily_rate"] = parse_float(data.get("dailyRate"), "dailyRate", default=0.0)
        if cols["daily_rate"] < 0:
            raise ValidationError("dailyRate must be >= 0")
    if "workStartTime" in data or not partial:
        cols["work_start_time"] = _hhmm(data.get("workStartTime") or DEFAULT_WORK_START_TIME, "workStartTime")
    if "workEndTime" in data or not partial:
        cols["work_end_time"] = _hhmm(data.get("workEndTime") or DEFAULT_WORK_END_TIME, "workEndTime")
    if "isActive" in data:
        cols["is_active"] = bool(data.get("isActive"))

    if "latitude" in cols and not -90 <= cols["latitude"] <= 90:
        raise ValidationError("latitude must be between -90 and 90")
    if "longitude" in cols and not -180 <= cols["longitude"] <= 180:
        raise ValidationError("longitude must be between -180 and 180")
    return cols


class OutletService:
    def __init__(self, outlets: OutletRepository):
        self._outlets = outlets

    def list_outlets(self, *, active_only: bool = False) -> Sequence[Outlet]:
        return self._outlets.list_all(active_only=active_only)

    def get_outlet(self, outlet_id: int) -> Outlet:
        outlet = self._outlets.get_by_id(int(outlet_id))
        if not outlet:
            raise NotFoundError("Outlet not found", code="OutletNotFound")
        return outlet

    def create_outlet(self, data: Mapping[str, Any]) -> Outlet:
        require_fields(data, ("name", "latitude", "longitude"))
        cols = _columns(data, partial=False)
        shifts = _parse_shifts(data.get("shifts") or [])

        if self._outlets.get_by_name(cols["name"]):
            raise ConflictError("Outlet name already exists", code="DuplicateOutletName")
        try:
            outlet_id = self._outlets.create(cols, shifts)
        except DuplicateRecordError:
            raise ConflictError("Outlet name already exists", code="DuplicateOutletName")

        logger.info("Outlet %r created (id=%s, radius=%sm)", cols["name"], outlet_id, cols["radius"])
        return self.get_outlet(outlet_id)

    def update_outlet(self, outlet_id: int, data: Mapping[str, Any]) -> Outlet:
        current = self.get_outlet(outlet_id)
        cols = _columns(data, partial=True)
        shifts: Optional[list[ShiftInput]] = _parse_shifts(data["shifts"]) if data.get("shifts") is not None else None

        if "name" in cols and cols["name"] != current.name:
            other = self._outlets.get_by_name(cols["name"])
            if other and other.outlet_id != current.outlet_id:
                raise ConflictError("Outlet name already exists", code="DuplicateOutletName")
        if shifts is not None:
            known = {s.shift_id for s in current.shifts}
            unknown = [s.shift_id for s in shifts if s.shift_id is not None and s.shift_id not in known]
            if unknown:
                raise ValidationError(f"Shift(s) {unknown} do not belong to this outlet")

        try:
            self._outlets.update(current.outlet_id, cols, shifts)
        except DuplicateRecordError:
            raise ConflictError("Outlet name already exists", code="DuplicateOutletName")
        return self.get_outlet(current.outlet_id)

    def delete_outlet(self, outlet_id: int) -> None:
        outlet = self.get_outlet(outlet_id)
        assigned = self._outlets.count_employees(outlet.outlet_id)
        if assigned > 0:
            raise ConflictError(
                f"Cannot delete outlet with {assigned} assigned employee(s). Reassign them first.",
                code="OutletInUse",
            )
        self._outlets.delete_by_id(outlet.outlet_id)
        logger.info("Outlet %r deleted", outlet.name)
