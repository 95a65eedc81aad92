from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import employee_required
from ..common.validators import require_coordinate
from ..core.exceptions import ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    zones = container.zone_service

    @app.route("/api/zones", methods=["GET"], endpoint="zones_list")
    @employee_required
    def zones_list():
        only_active = request.args.get("active") in {"1", "true"}
        items = zones.list_active() if only_active else zones.list_all()
        return jsonify({"success": True, "zones": [z.as_dict() for z in items]})

    @app.route("/api/zones", methods=["POST"], endpoint="zones_create")
    @employee_required
    def zones_create():
        data = request.get_json(silent=True) or {}
        zone = zones.create(data.get("name", ""), data.get("vertices") or [])
        return jsonify({"success": True, "zone": zone.as_dict()}), 201

    @app.route("/api/zones/<zone_id>", methods=["PUT"], endpoint="zones_update")
    @employee_required
    def zones_update(zone_id: str):
        data = request.get_json(silent=True) or {}
        zone = zones.update(zone_id, data.get("name", ""), data.get("vertices") or [])
        return jsonify({"success": True, "zone": zone.as_dict()})

    @app.route("/api/zones/<zone_id>", methods=["DELETE"], endpoint="zones_delete")
    @employee_required
    def zones_delete(zone_id: str):
        removed = zones.delete(zone_id)
        return jsonify({"success": True, "deleted": removed})

    @app.route("/api/zones/<zone_id>/active", methods=["POST"], endpoint="zones_set_active")
    @employee_required
    def zones_set_active(zone_id: str):
        data = request.get_json(silent=True) or {}
        if not isinstance(data.get("active"), bool):
            raise ValidationError("'active' must be true or false", zone=zone_id)
        zone = zones.set_active(zone_id, data["active"])
        return jsonify({"success": True, "zone": zone.as_dict()})

    @app.route("/api/geofence/validate", methods=["POST"], endpoint="geofence_validate")
    @employee_required
    def geofence_validate():
        data = request.get_json(silent=True) or {}
        point = require_coordinate(data.get("lat"), data.get("lng"))
        result = container.geofence.validate(point)
        return jsonify({"success": True, **result.as_dict()})
