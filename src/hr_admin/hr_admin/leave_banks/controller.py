from __future__ import annotations

from flask import Flask, g, jsonify, request

from ..common.http import login_required, request_data


def register(app: Flask, container) -> None:
    service = container.leave_bank_service

    @app.route("/slvl/bank/<int:employee_id>", methods=["GET"], endpoint="slvl.bank")
    @login_required
    def leave_bank(employee_id: int):
        banks = service.get_bank(g.actor, employee_id, request.args.get("year"))
        return jsonify({"leave_banks": [b.to_dict() for b in banks]})

    @app.route("/slvl/bank", methods=["POST"], endpoint="slvl.bank_add")
    @login_required
    def leave_bank_add():
        bank = service.add_days(g.actor, request_data())
        return jsonify({"message": "Days added to leave bank successfully.", "leave_bank": bank.to_dict()})
