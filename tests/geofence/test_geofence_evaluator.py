import pytest

from hris_attendance.core.exceptions import OutOfRangeError, PolicyViolationError
from hris_attendance.geofence.evaluator import GeoPoint, distance_meters, parse_location, resolve_outlet
from hris_attendance.outlets.model import Outlet

# One meter of latitude, in degrees (2 * pi * 6_371_000 / 360 meters per degree).
M = 1 / 111_194.93


def _outlet(outlet_id=1, name="Outlet A", lat=-6.2, lng=106.8, radius=100, **kw):
    return Outlet(outlet_id=outlet_id, name=name, latitude=lat, longitude=lng, radius=radius, **kw)


def test_distance_is_symmetric_and_zero_for_same_point():
    a = (-6.2, 106.8)
    b = (-6.21, 106.83)
    assert distance_meters(*a, *a) == 0
    assert distance_meters(*a, *b) == pytest.approx(distance_meters(*b, *a))
    assert distance_meters(*a, *b) > 0


def test_distance_one_degree_latitude():
    assert distance_meters(0, 0, 1, 0) == pytest.approx(111_194.93, rel=1e-6)


def test_no_location_skips_geofence_even_with_assigned_outlet():
    match = resolve_outlet(_outlet(), None, [])
    assert match.outlet is None


def test_assigned_outlet_out_of_range_reports_distance_and_radius():
    outlet = _outlet(radius=100)
    location = GeoPoint(outlet.latitude + 150 * M, outlet.longitude)

    with pytest.raises(OutOfRangeError) as exc:
        resolve_outlet(outlet, location, [])

    err = exc.value
    assert isinstance(err, PolicyViolationError)
    assert err.distance == 150
    assert err.radius == 100
    assert err.outlet == "Outlet A"
    assert err.payload()["distance"] == 150
    assert "150m away from Outlet A" in str(err)


def test_assigned_outlet_within_range_is_used():
    outlet = _outlet()
    match = resolve_outlet(outlet, GeoPoint(outlet.latitude + 40 * M, outlet.longitude), [])
    assert match.outlet_id == outlet.outlet_id
    assert match.distance == pytest.approx(40, abs=0.5)


def test_nearest_active_outlet_wins_without_assignment():
    far = _outlet(1, "Far", lat=-6.2 + 80 * M)
    near = _outlet(2, "Near", lat=-6.2 + 20 * M)
    inactive = _outlet(3, "Closed", lat=-6.2, is_active=False)

    match = resolve_outlet(None, GeoPoint(-6.2, 106.8), [far, near, inactive])

    assert match.outlet.name == "Near"


def test_exact_tie_keeps_first_outlet():
    a = _outlet(1, "First")
    b = _outlet(2, "Second")
    match = resolve_outlet(None, GeoPoint(-6.2 + 10 * M, 106.8), [a, b])
    assert match.outlet.name == "First"


def test_nothing_in_range_is_not_an_error():
    match = resolve_outlet(None, GeoPoint(-6.2 + 500 * M, 106.8), [_outlet()])
    assert match.outlet is None


@pytest.mark.parametrize(
    "payload",
    [None, {}, {"lat": -6.2}, {"lat": "x", "lng": 1}, {"lat": float("nan"), "lng": 1}, "-6.2,106.8"],
)
def test_parse_location_rejects_unusable_payloads(payload):
    assert parse_location(payload) is None


def test_parse_location_text_form():
    point = parse_location({"lat": "-6.2", "lng": 106.8})
    assert point == GeoPoint(-6.2, 106.8)
    assert point.as_text() == "-6.2,106.8"
