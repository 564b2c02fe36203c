from __future__ import annotations

from flask import Flask, jsonify

from ..auth.controller import admin_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.get("/api/dashboard", endpoint="dashboard_stats")
    @admin_required
    def dashboard_stats():
        return jsonify(container.dashboard_service.get_stats()), 200
