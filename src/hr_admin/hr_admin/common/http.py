from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Dict

from flask import Flask, g, jsonify, request, session

from ..core.constants import NOT_AUTHORIZED_MESSAGE
from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DeviceConnectionError,
    NotFoundError,
    ValidationError,
)

logger = logging.getLogger(__name__)


def request_data() -> Dict[str, Any]:
    """JSON body if there is one, otherwise the posted form."""

    if request.is_json:
        data = request.get_json(silent=True)
        return dict(data) if isinstance(data, dict) else {}
    return request.form.to_dict()


def request_ids(data: Dict[str, Any]) -> Any:
    """Bulk ids from a JSON list or repeated `ids` form fields."""

    if request.is_json:
        return data.get("ids") or []
    return request.form.getlist("ids") or request.form.getlist("ids[]")


def login_required(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        if g.get("actor") is None:
            return jsonify({"error": "Please log in to continue"}), 401
        return view(*args, **kwargs)

    return wrapper


def register_actor_loader(app: Flask, container) -> None:
    @app.before_request
    def load_actor():
        g.actor = None
        user_id = session.get("user_id")
        if user_id is None:
            return None
        try:
            g.actor = container.auth_service.resolve_actor(int(user_id))
        except AuthenticationError:
            session.clear()
        return None


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(ValidationError)
    def validation_error(e: ValidationError):
        return jsonify({"error": str(e), "errors": e.errors}), 422

    @app.errorhandler(AuthenticationError)
    def authentication_error(e: AuthenticationError):
        return jsonify({"error": str(e)}), 401

    @app.errorhandler(AuthorizationError)
    def authorization_error(e: AuthorizationError):
        logger.info("Forbidden %s %s for user %s", request.method, request.path, session.get("user_id"))
        return jsonify({"error": NOT_AUTHORIZED_MESSAGE}), 403

    @app.errorhandler(NotFoundError)
    def not_found_error(e: NotFoundError):
        return jsonify({"error": str(e)}), 404

    @app.errorhandler(DeviceConnectionError)
    def device_error(e: DeviceConnectionError):
        return jsonify({"error": str(e)}), 502

    @app.errorhandler(404)
    def not_found(e):
        return jsonify({"error": "Not found"}), 404

    @app.errorhandler(405)
    def method_not_allowed(e):
        return jsonify({"error": "Method not allowed"}), 405

    @app.errorhandler(500)
    def server_error(e):
        # Flask hands unhandled exceptions here wrapped in InternalServerError.
        original = getattr(e, "original_exception", None)
        if original is not None:
            logger.error("Unhandled error on %s %s", request.method, request.path, exc_info=original)
        return jsonify({"error": "Internal server error"}), 500
