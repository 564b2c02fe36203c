from __future__ import annotations

from flask import Flask, jsonify, request

from ..auth.controller import admin_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    svc = container.outlet_service

    @app.get("/api/outlets", endpoint="outlet_list")
    def outlet_list():
        active_only = request.args.get("active", "").lower() in {"1", "true", "yes"}
        return jsonify([o.to_dict() for o in svc.list_outlets(active_only=active_only)]), 200

    @app.get("/api/outlets/<int:outlet_id>", endpoint="outlet_get")
    def outlet_get(outlet_id: int):
        return jsonify(svc.get_outlet(outlet_id).to_dict()), 200

    @app.post("/api/outlets", endpoint="outlet_create")
    @admin_required
    def outlet_create():
        outlet = svc.create_outlet(request.get_json(silent=True) or {})
        return jsonify(outlet.to_dict()), 201

    @app.put("/api/outlets/<int:outlet_id>", endpoint="outlet_update")
    @admin_required
    def outlet_update(outlet_id: int):
        outlet = svc.update_outlet(outlet_id, request.get_json(silent=True) or {})
        return jsonify(outlet.to_dict()), 200

    @app.delete("/api/outlets/<int:outlet_id>", endpoint="outlet_delete")
    @admin_required
    def outlet_delete(outlet_id: int):
        svc.delete_outlet(outlet_id)
        return jsonify({"success": True}), 200
