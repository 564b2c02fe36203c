from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

from ..common.datetime_utils import parse_hhmm
from ..common.validators import parse_int
from ..core.constants import (
    DEFAULT_COMPANY_NAME,
    DEFAULT_LATE_THRESHOLD_MINUTES,
    DEFAULT_WORK_END_TIME,
    DEFAULT_WORK_START_TIME,
)
from ..core.exceptions import ValidationError
from .repository import SettingsRepository

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS: dict[str, Any] = {
    "companyName": DEFAULT_COMPANY_NAME,
    "workStartTime": DEFAULT_WORK_START_TIME,
    "workEndTime": DEFAULT_WORK_END_TIME,
    "lateThreshold": DEFAULT_LATE_THRESHOLD_MINUTES,
}


class SettingsService:
    """Company-wide key/value settings with defaults for missing keys."""

    def __init__(self, settings: SettingsRepository):
        self._settings = settings

    def get_settings(self) -> dict[str, Any]:
        data = dict(DEFAULT_SETTINGS)
        stored = self._settings.get_all()
        data.update({k: v for k, v in stored.items() if v not in (None, "")})
        data["lateThreshold"] = parse_int(data.get("lateThreshold"), "lateThreshold", default=DEFAULT_LATE_THRESHOLD_MINUTES)
        return data

    def effective(self, overrides: Optional[Mapping[str, Any]] = None) -> dict[str, Any]:
        """Stored settings with caller-supplied values layered on top."""
        data = self.get_settings()
        for key, value in (overrides or {}).items():
            if key in DEFAULT_SETTINGS and value not in (None, ""):
                data[key] = value
        return data

    def update_settings(self, values: Mapping[str, Any]) -> dict[str, Any]:
        clean: dict[str, str] = {}
        for key, value in values.items():
            if key not in DEFAULT_SETTINGS or value is None:
                continue
            if key in {"workStartTime", "workEndTime"}:
                parse_hhmm(str(value))
            if key == "lateThreshold":
                minutes = parse_int(value, "lateThreshold")
                if minutes < 0:
                    raise ValidationError("lateThreshold must be >= 0")
                value = minutes
            if key == "companyName" and not str(value).strip():
                raise ValidationError("companyName is required")
            clean[key] = str(value).strip()

        self._settings.upsert_many(clean)
        logger.info("Settings updated: %s", ", ".join(sorted(clean)) or "-")
        return self.get_settings()
