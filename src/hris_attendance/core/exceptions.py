from __future__ import annotations

from typing import Any


class DomainError(Exception):
    """Base exception for business rule violations.

    Every domain error is recoverable at the request boundary: it carries the
    HTTP status and a stable error code the controllers render as JSON.
    """

    status_code = 400
    code = "DomainError"

    def __init__(self, message: str, *, code: str | None = None):
        super().__init__(message)
        if code:
            self.code = code

    def payload(self) -> dict[str, Any]:
        return {"success": False, "error": self.code, "message": str(self)}


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    code = "ValidationError"


class NotFoundError(DomainError):
    status_code = 404
    code = "NotFound"


class ConflictError(DomainError):
    """Duplicate clock-in/out, duplicate names or identifiers."""

    code = "Conflict"


class PolicyViolationError(DomainError):
    status_code = 403
    code = "PolicyViolation"


class OutOfRangeError(PolicyViolationError):
    """Raised when a GPS location lies outside an outlet's geofence."""

    code = "OutOfRange"

    def __init__(self, *, distance: int, outlet: str, radius: int):
        super().__init__(f"You are {distance}m away from {outlet}. Maximum allowed: {radius}m.")
        self.distance = distance
        self.outlet = outlet
        self.radius = radius

    def payload(self) -> dict[str, Any]:
        data = super().payload()
        data.update({"distance": self.distance, "outlet": self.outlet, "radius": self.radius})
        return data


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""

    status_code = 401
    code = "AuthenticationError"


class AuthorizationError(DomainError):
    """Raised when the request has no admin session."""

    status_code = 403
    code = "AuthorizationError"
