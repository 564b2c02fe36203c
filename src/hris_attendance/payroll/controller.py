from __future__ import annotations

from flask import Flask, jsonify, request

from ..auth.controller import admin_required
from ..container import Container
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    svc = container.payroll_service

    @app.get("/api/payroll", endpoint="payroll_month")
    @admin_required
    def payroll_month():
        month = (request.args.get("month") or "").strip()
        if not month:
            raise ValidationError("Month parameter (YYYY-MM) is required", code="MissingMonth")
        rows = svc.compute_monthly_payroll(month, outlet_id=request.args.get("outletId"))
        return jsonify(svc.to_rows(rows)), 200

    @app.post("/api/payroll/incentive", endpoint="payroll_incentive_create")
    @admin_required
    def payroll_incentive_create():
        incentive = svc.add_incentive(request.get_json(silent=True) or {})
        return jsonify(incentive.to_dict()), 201

    @app.delete("/api/payroll/incentive/<int:incentive_id>", endpoint="payroll_incentive_delete")
    @admin_required
    def payroll_incentive_delete(incentive_id: int):
        svc.delete_incentive(incentive_id)
        return jsonify({"success": True}), 200
