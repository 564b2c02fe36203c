from __future__ import annotations

from flask import Flask, jsonify, request

from ..container import Container


def register(app: Flask, container: Container) -> None:
    @app.post("/api/faces/identify", endpoint="faces_identify")
    def faces_identify():
        data = request.get_json(silent=True) or {}
        found = container.face_service.identify(data.get("descriptor"))
        return jsonify({"employee": found.employee.to_dict(), "score": found.score, "distance": round(found.distance, 4)}), 200
