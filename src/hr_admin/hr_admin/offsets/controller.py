from __future__ import annotations

from flask import Flask, g, jsonify

from ..common.http import login_required, request_data


def register(app: Flask, container) -> None:
    service = container.offset_bank_service

    @app.route("/offsets/bank/<int:employee_id>", methods=["GET"], endpoint="offsets.bank")
    @login_required
    def offset_bank(employee_id: int):
        bank = service.get_bank(g.actor, employee_id)
        return jsonify({"offset_bank": bank.to_dict()})

    @app.route("/offsets/bank", methods=["POST"], endpoint="offsets.bank_add")
    @login_required
    def offset_bank_add():
        bank = service.add_hours(g.actor, request_data())
        return jsonify({"message": "Hours added to offset bank successfully.", "offset_bank": bank.to_dict()})
