from __future__ import annotations

from functools import wraps

from flask import Flask, jsonify, request, session

from ..container import Container
from ..core.exceptions import AuthorizationError
from .session import AdminSession

SESSION_KEY = "admin"


def current_admin() -> AdminSession | None:
    return AdminSession.from_dict(session.get(SESSION_KEY))


def admin_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if current_admin() is None:
            raise AuthorizationError("Admin login required")
        return view(*args, **kwargs)

    return wrapper


def register(app: Flask, container: Container) -> None:
    @app.post("/api/auth/login", endpoint="auth_login")
    def auth_login():
        data = request.get_json(silent=True) or {}
        admin = container.auth_service.login(data.get("username"), data.get("password"))
        session.clear()
        session[SESSION_KEY] = admin.to_dict()
        return jsonify({"success": True, **admin.to_dict()}), 200

    @app.post("/api/auth/logout", endpoint="auth_logout")
    def auth_logout():
        session.pop(SESSION_KEY, None)
        return jsonify({"success": True}), 200

    @app.get("/api/auth/session", endpoint="auth_session")
    def auth_session():
        admin = current_admin()
        if admin is None:
            return jsonify({"isAuthenticated": False, "adminUsername": None}), 200
        return jsonify(admin.to_dict()), 200
