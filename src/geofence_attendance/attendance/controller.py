from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import current_employee_ref, employee_required
from ..common.validators import require_coordinate
from ..container import Container


def register(app: Flask, container: Container) -> None:
    attendance = container.attendance_service

    @app.route("/api/attendance/checkin", methods=["POST"], endpoint="attendance_checkin")
    @employee_required
    def attendance_checkin():
        """Check in with the position the device resolved and an optional photo data URL."""

        data = request.get_json(silent=True) or {}
        point = require_coordinate(data.get("lat"), data.get("lng"))
        record = attendance.check_in(current_employee_ref(), point, data.get("photo") or None)
        return jsonify({"success": True, "record": record.as_dict()}), 201

    @app.route("/api/attendance/checkout", methods=["POST"], endpoint="attendance_checkout")
    @employee_required
    def attendance_checkout():
        record = attendance.check_out_employee(current_employee_ref())
        return jsonify({"success": True, "record": record.as_dict()})

    @app.route("/api/attendance/open", methods=["GET"], endpoint="attendance_open")
    @employee_required
    def attendance_open():
        record = attendance.get_open_record(current_employee_ref())
        return jsonify({"success": True, "record": record.as_dict() if record else None})

    @app.route("/api/attendance/history", methods=["GET"], endpoint="attendance_history")
    @employee_required
    def attendance_history():
        limit = request.args.get("limit", default=container.history_limit, type=int)
        records = attendance.history(current_employee_ref(), limit=max(1, min(limit, 200)))
        return jsonify({"success": True, "records": [r.as_dict() for r in records]})
