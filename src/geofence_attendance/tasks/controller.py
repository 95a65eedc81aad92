from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import current_employee_ref, employee_required
from ..container import Container


def register(app: Flask, container: Container) -> None:
    guard = container.task_guard

    @app.route("/api/tasks/status", methods=["GET"], endpoint="task_status_get")
    @employee_required
    def task_status_get():
        employee_ref = current_employee_ref()
        status = guard.get_status(employee_ref)
        return jsonify(
            {
                "success": True,
                "task": status.as_dict(),
                "can_logout": guard.can_logout(employee_ref),
                "task_active": guard.is_task_active(employee_ref),
            }
        )

    @app.route("/api/tasks/status", methods=["POST"], endpoint="task_status_update")
    @employee_required
    def task_status_update():
        data = request.get_json(silent=True) or {}
        employee_ref = current_employee_ref()
        updated = guard.update_status(employee_ref, data.get("status", ""), data.get("task_ref") or None)
        status = guard.get_status(employee_ref)
        return jsonify({"success": updated, "task": status.as_dict()}), 200 if updated else 409

    @app.route("/api/logout/check", methods=["GET"], endpoint="logout_check")
    @employee_required
    def logout_check():
        # Refuse and explain: LogoutBlockedError carries the message shown to the user.
        guard.ensure_can_logout(current_employee_ref())
        return jsonify({"success": True, "can_logout": True})
