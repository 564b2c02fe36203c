from datetime import datetime

import pytest

from hris_attendance.auth.session import AdminSession
from hris_attendance.core.exceptions import AuthenticationError, ValidationError


def test_settings_defaults(container):
    assert container.settings_service.get_settings() == {
        "companyName": "PT. Example Company",
        "workStartTime": "09:00",
        "workEndTime": "17:00",
        "lateThreshold": 15,
    }


def test_update_settings_persists_known_keys_only(store, container):
    result = container.settings_service.update_settings({"companyName": "Kopi Nusantara", "lateThreshold": "10", "theme": "dark"})

    assert result["companyName"] == "Kopi Nusantara"
    assert result["lateThreshold"] == 10
    assert "theme" not in store.settings.values


@pytest.mark.parametrize("values", [{"workStartTime": "9am"}, {"lateThreshold": -5}, {"companyName": " "}])
def test_update_settings_validation(container, values):
    with pytest.raises(ValidationError):
        container.settings_service.update_settings(values)


def test_effective_settings_layer_caller_values(store, container):
    store.settings.values["workStartTime"] = "08:00"
    effective = container.settings_service.effective({"workEndTime": "20:00", "unknown": 1})
    assert (effective["workStartTime"], effective["workEndTime"]) == ("08:00", "20:00")
    assert "unknown" not in effective


def test_login_success_and_session_round_trip(container):
    session = container.auth_service.login("admin", "admin123", now=datetime(2024, 3, 4, 8, 0))

    data = session.to_dict()
    assert data == {"isAuthenticated": True, "adminUsername": "admin", "loggedInAt": "2024-03-04T08:00:00"}
    assert AdminSession.from_dict(data) == session


@pytest.mark.parametrize("username, password", [("admin", "wrong"), ("root", "admin123")])
def test_login_failure(container, username, password):
    with pytest.raises(AuthenticationError):
        container.auth_service.login(username, password)


def test_session_from_empty_or_unauthenticated_dict():
    assert AdminSession.from_dict(None) is None
    assert AdminSession.from_dict({"isAuthenticated": False, "adminUsername": "admin"}) is None
