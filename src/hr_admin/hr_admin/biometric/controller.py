from __future__ import annotations

from flask import Flask, g, jsonify

from ..common.http import login_required, request_data


def register(app: Flask, container) -> None:
    service = container.biometric_service

    @app.route("/biometric/devices/<int:device_id>/fetch-logs", methods=["POST"], endpoint="biometric.fetch_logs")
    @login_required
    def fetch_logs(device_id: int):
        result = service.fetch_logs(g.actor, device_id, request_data())
        return jsonify({"message": "Successfully fetched and saved logs", "log_summary": result.to_dict()})

    @app.route("/biometric/devices/<int:device_id>/clear", methods=["POST"], endpoint="biometric.clear")
    @login_required
    def clear_device(device_id: int):
        service.clear_device(g.actor, device_id)
        return jsonify({"message": "Device attendance logs cleared"})
