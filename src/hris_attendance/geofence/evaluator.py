"""Geofence evaluation: Haversine distance and outlet membership."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Optional

from ..core.constants import EARTH_RADIUS_METERS
from ..core.exceptions import OutOfRangeError
from ..outlets.model import Outlet

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GeoPoint:
    lat: float
    lng: float

    def as_text(self) -> str:
        return f"{self.lat},{self.lng}"


@dataclass(frozen=True)
class OutletMatch:
    """Outcome of outlet resolution; `outlet` is None when nothing matched."""

    outlet: Optional[Outlet] = None
    distance: Optional[float] = None

    @property
    def outlet_id(self) -> Optional[int]:
        return self.outlet.outlet_id if self.outlet else None


def distance_meters(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in meters (Haversine)."""
    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_METERS * c


def parse_location(payload: Any) -> Optional[GeoPoint]:
    """Read a `{lat, lng}` mapping; anything unusable means "no location"."""
    if not isinstance(payload, Mapping):
        return None
    lat, lng = payload.get("lat"), payload.get("lng")
    if lat is None or lng is None:
        return None
    try:
        point = GeoPoint(lat=float(lat), lng=float(lng))
    except (TypeError, ValueError):
        return None
    if not (math.isfinite(point.lat) and math.isfinite(point.lng)):
        return None
    return point


def check_within(outlet: Outlet, location: GeoPoint) -> float:
    """Return the distance to `outlet`, raising OutOfRangeError past its radius."""
    distance = distance_meters(location.lat, location.lng, outlet.latitude, outlet.longitude)
    if distance > outlet.radius:
        logger.info("Location %s is %.1fm from outlet %r (radius %sm)", location.as_text(), distance, outlet.name, outlet.radius)
        raise OutOfRangeError(distance=round(distance), outlet=outlet.name, radius=outlet.radius)
    return distance


def resolve_outlet(
    assigned: Optional[Outlet],
    location: Optional[GeoPoint],
    outlets: Iterable[Outlet],
) -> OutletMatch:
    """Pick the outlet an attendance event belongs to.

    - no location: geofencing is skipped entirely
    - assigned outlet: must be within its radius (hard block otherwise)
    - no assigned outlet: nearest active outlet containing the location, or none
    """
    if location is None:
        return OutletMatch()

    if assigned is not None:
        distance = check_within(assigned, location)
        return OutletMatch(outlet=assigned, distance=distance)

    nearest: Optional[Outlet] = None
    nearest_distance: Optional[float] = None
    for outlet in outlets:
        if not outlet.is_active:
            continue
        distance = distance_meters(location.lat, location.lng, outlet.latitude, outlet.longitude)
        if distance <= outlet.radius and (nearest_distance is None or distance < nearest_distance):
            nearest, nearest_distance = outlet, distance

    return OutletMatch(outlet=nearest, distance=nearest_distance)
