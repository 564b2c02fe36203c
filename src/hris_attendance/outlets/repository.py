from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from .model import Outlet, Shift, ShiftInput


class OutletRepository(Protocol):
    def get_by_id(self, outlet_id: int) -> Optional[Outlet]:
        raise NotImplementedError

    def get_by_name(self, name: str) -> Optional[Outlet]:
        raise NotImplementedError

    def list_all(self, *, active_only: bool = False) -> Sequence[Outlet]:
        raise NotImplementedError

    def create(self, data: Mapping[str, Any], shifts: Sequence[ShiftInput]) -> int:
        raise NotImplementedError

    def update(self, outlet_id: int, data: Mapping[str, Any], shifts: Optional[Sequence[ShiftInput]] = None) -> bool:
        """Update columns; when `shifts` is given it replaces the outlet's shift list."""

        raise NotImplementedError

    def delete_by_id(self, outlet_id: int) -> bool:
        raise NotImplementedError

    def count_employees(self, outlet_id: int) -> int:
        raise NotImplementedError


class ShiftRepository(Protocol):
    def get_by_id(self, shift_id: int) -> Optional[Shift]:
        raise NotImplementedError
