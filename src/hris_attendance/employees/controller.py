from __future__ import annotations

from flask import Flask, jsonify, request

from ..auth.controller import admin_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    svc = container.employee_service

    @app.get("/api/employees", endpoint="employee_list")
    def employee_list():
        active_only = request.args.get("active", "").lower() in {"1", "true", "yes"}
        outlet_id = request.args.get("outletId", type=int)
        items = svc.list_employees(active_only=active_only, outlet_id=outlet_id)
        return jsonify([e.to_dict() for e in items]), 200

    @app.get("/api/employees/<int:employee_id>", endpoint="employee_get")
    def employee_get(employee_id: int):
        return jsonify(svc.get_employee(employee_id).to_dict()), 200

    @app.post("/api/employees", endpoint="employee_create")
    @admin_required
    def employee_create():
        employee = svc.create_employee(request.get_json(silent=True) or {})
        return jsonify(employee.to_dict()), 201

    @app.put("/api/employees/<int:employee_id>", endpoint="employee_update")
    @admin_required
    def employee_update(employee_id: int):
        employee = svc.update_employee(employee_id, request.get_json(silent=True) or {})
        return jsonify(employee.to_dict()), 200

    @app.delete("/api/employees/<int:employee_id>", endpoint="employee_delete")
    @admin_required
    def employee_delete(employee_id: int):
        svc.delete_employee(employee_id)
        return jsonify({"success": True}), 200

    @app.post("/api/employees/<int:employee_id>/face", endpoint="employee_face")
    def employee_face(employee_id: int):
        data = request.get_json(silent=True) or {}
        employee = svc.register_face(employee_id, data.get("descriptor"))
        return jsonify(employee.to_dict()), 200

    @app.get("/api/departments", endpoint="department_list")
    def department_list():
        return jsonify([d.to_dict() for d in svc.list_departments()]), 200
