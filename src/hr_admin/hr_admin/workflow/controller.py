from __future__ import annotations

from flask import Flask, g, jsonify, request, send_file

from ..common.http import login_required, request_data, request_ids
from .export import XLSX_MIMETYPE
from .service import parse_filters


def register(app: Flask, container) -> None:
    service = container.approval_service

    def make_views(resource: str):
        def index():
            records = service.list_visible(g.actor, resource, parse_filters(request.args))
            return jsonify({"data": [r.to_dict() for r in records], "count": len(records)})

        def store():
            record = service.submit(g.actor, resource, request_data())
            return jsonify({"message": "Request submitted", "data": record.to_dict()}), 201

        def show(request_id: int):
            record = service.get(g.actor, resource, request_id)
            return jsonify({"data": record.to_dict()})

        def update_status(request_id: int):
            data = request_data()
            record = service.update_status(g.actor, resource, request_id, data.get("status"), data.get("remarks"))
            return jsonify({"message": f"Request {record.status.value.replace('_', ' ')}", "data": record.to_dict()})

        def bulk_update():
            data = request_data()
            result = service.bulk_update(g.actor, resource, request_ids(data), data.get("status"), data.get("remarks"))
            return jsonify({"message": result.summary(), **result.to_dict()})

        def force_approve():
            data = request_data()
            result = service.force_approve(g.actor, resource, request_ids(data), data.get("remarks"))
            return jsonify({"message": result.summary("force approved"), **result.to_dict()})

        def destroy(request_id: int):
            service.delete(g.actor, resource, request_id)
            return jsonify({"message": "Request deleted"})

        def export():
            exported = service.export(g.actor, resource, parse_filters(request.args))
            return send_file(
                exported.content,
                download_name=exported.filename,
                as_attachment=True,
                mimetype=XLSX_MIMETYPE,
            )

        return {
            "index": index,
            "store": store,
            "show": show,
            "update_status": update_status,
            "bulk_update": bulk_update,
            "force_approve": force_approve,
            "destroy": destroy,
            "export": export,
        }

    for key in service.registry.keys():
        views = make_views(key)
        name = key.replace("-", "_")
        base = f"/{key}"

        def add(rule: str, action: str, methods: list) -> None:
            app.add_url_rule(
                rule,
                endpoint=f"{name}.{action}",
                view_func=login_required(views[action]),
                methods=methods,
            )

        add(base, "index", ["GET"])
        add(base, "store", ["POST"])
        add(f"{base}/export", "export", ["GET"])
        add(f"{base}/bulk-update", "bulk_update", ["POST"])
        add(f"{base}/force-approve", "force_approve", ["POST"])
        add(f"{base}/<int:request_id>", "show", ["GET"])
        add(f"{base}/<int:request_id>", "destroy", ["DELETE"])
        add(f"{base}/<int:request_id>/status", "update_status", ["POST"])
