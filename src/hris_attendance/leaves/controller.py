from __future__ import annotations

from flask import Flask, jsonify, request

from ..auth.controller import admin_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    svc = container.leave_service

    @app.get("/api/leave-requests", endpoint="leave_list")
    def leave_list():
        employee_id = request.args.get("employeeId", type=int)
        items = svc.list_leaves(status=request.args.get("status"), employee_id=employee_id)
        return jsonify([x.to_dict() for x in items]), 200

    @app.post("/api/leave-requests", endpoint="leave_create")
    def leave_create():
        leave = svc.create_leave(request.get_json(silent=True) or {})
        return jsonify(leave.to_dict()), 201

    @app.get("/api/leave-requests/<int:request_id>", endpoint="leave_get")
    def leave_get(request_id: int):
        return jsonify(svc.get_leave(request_id).to_dict()), 200

    @app.patch("/api/leave-requests/<int:request_id>", endpoint="leave_decide")
    @admin_required
    def leave_decide(request_id: int):
        data = request.get_json(silent=True) or {}
        leave = svc.decide_leave(request_id, status=data.get("status"), admin_notes=data.get("adminNotes"))
        return jsonify(leave.to_dict()), 200

    @app.delete("/api/leave-requests/<int:request_id>", endpoint="leave_delete")
    @admin_required
    def leave_delete(request_id: int):
        svc.delete_leave(request_id)
        return jsonify({"success": True}), 200
