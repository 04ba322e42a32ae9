from __future__ import annotations

from datetime import timedelta

from flask import Flask, jsonify, redirect, session, url_for

from ..common.web import current_profile_id, error, handle_errors, login_required, payload
from ..container import Container
from ..core.constants import DEFAULT_SESSION_DAYS, WORKFLOW_SESSION_KEY
from ..core.enums import Role
from ..core.exceptions import AuthenticationError


def register(app: Flask, container: Container) -> None:
    @app.route("/auth/login", methods=["POST"], endpoint="login")
    @handle_errors("sign in")
    def login():
        data = payload()
        s_profile = container.auth_service.authenticate(data.get("email", ""), data.get("password", ""))

        container.workflows.discard(session.get(WORKFLOW_SESSION_KEY))
        session.clear()
        session.permanent = bool(data.get("remember_me"))
        app.permanent_session_lifetime = timedelta(days=DEFAULT_SESSION_DAYS)

        session["profile_id"] = s_profile.profile_id
        session["name"] = s_profile.full_name
        session["role"] = s_profile.role.value
        session["default_class_id"] = s_profile.default_class_id

        return jsonify(
            {
                "success": True,
                "message": "Signed in successfully!",
                "profile": {
                    "id": s_profile.profile_id,
                    "full_name": s_profile.full_name,
                    "role": s_profile.role.value,
                    "default_class_id": s_profile.default_class_id,
                },
            }
        )

    @app.route("/auth/logout", methods=["POST"], endpoint="logout")
    def logout():
        container.workflows.discard(session.get(WORKFLOW_SESSION_KEY))
        session.clear()
        return jsonify({"success": True, "message": "Signed out successfully!"})

    @app.route("/me", methods=["GET"], endpoint="me")
    @login_required
    @handle_errors("load profile")
    def me():
        try:
            profile = container.profile_service.resolve(current_profile_id())
        except AuthenticationError as e:
            container.workflows.discard(session.get(WORKFLOW_SESSION_KEY))
            session.clear()
            return error(str(e), 401)

        # Admin edits to role or default class take effect on the next request.
        session["role"] = profile.role.value
        session["default_class_id"] = profile.default_class_id

        return jsonify(
            {
                "profile": profile.to_public(),
                "navigation": container.profile_service.navigation_for(profile),
            }
        )

    @app.route("/dashboard", methods=["GET"], endpoint="dashboard")
    @login_required
    def dashboard():
        if session.get("role") == Role.ADMIN.value:
            return redirect(url_for("admin_dashboard"))
        return redirect(url_for("teacher_dashboard"))
