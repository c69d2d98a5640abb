from __future__ import annotations

from datetime import timedelta

from flask import Flask, g, jsonify, session

from ..common.http import login_required, request_data
from ..core.constants import DEFAULT_SESSION_DAYS


def register(app: Flask, container) -> None:
    app.permanent_session_lifetime = timedelta(days=DEFAULT_SESSION_DAYS)

    @app.route("/login", methods=["POST"], endpoint="login")
    def login():
        data = request_data()
        actor = container.auth_service.authenticate(data.get("username", ""), data.get("password", ""))

        session.clear()
        session.permanent = str(data.get("remember_me", "")).lower() in {"1", "true", "on", "yes"}
        session["user_id"] = actor.user_id
        g.actor = actor
        return jsonify({"message": "Logged in", "user": actor.to_dict()})

    @app.route("/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        g.actor = None
        return jsonify({"message": "Logged out"})

    @app.route("/me", methods=["GET"], endpoint="me")
    @login_required
    def me():
        return jsonify({"user": g.actor.to_dict()})
