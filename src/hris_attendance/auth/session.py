from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Mapping, Optional


@dataclass(frozen=True)
class AdminSession:
    """Authenticated admin; the Flask cookie only carries `to_dict()`."""

    username: str
    logged_in_at: str

    @classmethod
    def start(cls, username: str, *, now: Optional[datetime] = None) -> "AdminSession":
        return cls(username=username, logged_in_at=(now or datetime.now()).isoformat(timespec="seconds"))

    def to_dict(self) -> dict[str, Any]:
        return {"isAuthenticated": True, "adminUsername": self.username, "loggedInAt": self.logged_in_at}

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> Optional["AdminSession"]:
        if not data or not data.get("isAuthenticated") or not data.get("adminUsername"):
            return None
        return cls(username=str(data["adminUsername"]), logged_in_at=str(data.get("loggedInAt") or ""))
