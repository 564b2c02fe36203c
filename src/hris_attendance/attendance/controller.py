from __future__ import annotations

from flask import Flask, jsonify, request

from ..auth.controller import admin_required
from ..common.validators import parse_int, require_fields
from ..container import Container
from ..geofence.evaluator import parse_location


def _filter_id(value):
    """Query-string id filter where "all" or empty means no filter."""
    if value in (None, "", "all"):
        return None
    return parse_int(value, "id")


def register(app: Flask, container: Container) -> None:
    svc = container.attendance_service

    @app.post("/api/attendance/clock-in", endpoint="attendance_clock_in")
    def attendance_clock_in():
        data = request.get_json(silent=True) or {}
        require_fields(data, ("employeeId",))
        record = svc.clock_in(
            parse_int(data["employeeId"], "employeeId"),
            location=parse_location(data.get("location")),
            settings=data.get("settings") if isinstance(data.get("settings"), dict) else None,
        )
        return jsonify(record.to_dict()), 201

    @app.post("/api/attendance/clock-out", endpoint="attendance_clock_out")
    def attendance_clock_out():
        data = request.get_json(silent=True) or {}
        require_fields(data, ("employeeId",))
        record = svc.clock_out(
            parse_int(data["employeeId"], "employeeId"),
            location=parse_location(data.get("location")),
            settings=data.get("settings") if isinstance(data.get("settings"), dict) else None,
        )
        return jsonify(record.to_dict()), 200

    @app.get("/api/attendance/today", endpoint="attendance_today")
    def attendance_today():
        employee_id = request.args.get("employeeId")
        if employee_id:
            view = svc.get_today(parse_int(employee_id, "employeeId"))
            return jsonify(view.to_dict() if view else None), 200
        return jsonify([v.to_dict() for v in svc.get_today()]), 200

    @app.get("/api/attendance", endpoint="attendance_list")
    @admin_required
    def attendance_list():
        views = svc.list_attendance(
            work_date=request.args.get("date"),
            start_date=request.args.get("startDate"),
            end_date=request.args.get("endDate"),
            employee_id=_filter_id(request.args.get("employeeId")),
        )
        return jsonify([v.to_dict() for v in views]), 200

    @app.get("/api/attendance/report", endpoint="attendance_report")
    @admin_required
    def attendance_report():
        views = svc.report(
            start_date=request.args.get("startDate"),
            end_date=request.args.get("endDate"),
            department_id=_filter_id(request.args.get("departmentId")),
            outlet_id=_filter_id(request.args.get("outletId")),
        )
        return jsonify([v.to_dict() for v in views]), 200
