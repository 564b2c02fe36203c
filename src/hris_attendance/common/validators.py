from __future__ import annotations

from typing import Any, Iterable, Mapping

from ..core.exceptions import ValidationError


def require_non_empty(value: str | None, field_name: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_fields(data: Mapping[str, Any], fields: Iterable[str]) -> None:
    missing = [f for f in fields if data.get(f) in (None, "")]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}")


def optional_text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def parse_float(value: Any, field_name: str, *, default: float | None = None) -> float:
    if value in (None, ""):
        if default is None:
            raise ValidationError(f"{field_name} is required")
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")


def parse_int(value: Any, field_name: str, *, default: int | None = None) -> int:
    if value in (None, ""):
        if default is None:
            raise ValidationError(f"{field_name} is required")
        return default
    try:
        return int(float(value))
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be an integer")


def parse_enum(enum_cls, value: Any, field_name: str, *, default=None):
    if value in (None, ""):
        if default is None:
            raise ValidationError(f"{field_name} is required")
        return default
    try:
        return enum_cls(str(value).upper())
    except ValueError:
        allowed = ", ".join(e.value for e in enum_cls)
        raise ValidationError(f"Invalid {field_name}. Must be one of {allowed}")
