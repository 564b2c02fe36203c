from __future__ import annotations

from flask import Flask, jsonify, request

from ..auth.controller import admin_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.get("/api/settings", endpoint="settings_get")
    def settings_get():
        return jsonify(container.settings_service.get_settings()), 200

    @app.put("/api/settings", endpoint="settings_update")
    @admin_required
    def settings_update():
        data = request.get_json(silent=True) or {}
        return jsonify(container.settings_service.update_settings(data)), 200
