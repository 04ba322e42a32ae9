from __future__ import annotations

from flask import Flask, jsonify, session, url_for

from ..common.datetime_utils import parse_optional_date, today_local
from ..common.web import current_profile_id, handle_errors, payload, role_required
from ..container import Container
from ..core.constants import WORKFLOW_SESSION_KEY
from ..core.enums import Role
from ..core.exceptions import ValidationError
from .workflow import AttendanceWorkflow


def register(app: Flask, container: Container) -> None:
    teacher_view = role_required(Role.TEACHER, Role.ADMIN, resolve=container.profile_service.resolve)

    def _workflow() -> AttendanceWorkflow:
        key, workflow = container.workflows.get(
            session.get(WORKFLOW_SESSION_KEY), teacher_id=current_profile_id()
        )
        session[WORKFLOW_SESSION_KEY] = key
        return workflow

    def _sheet_body(workflow: AttendanceWorkflow, **extra) -> dict:
        body = {"success": True, "sheet": workflow.sheet.to_public() if workflow.sheet else None}
        body.update(extra)
        return body

    def _saved_message(result) -> str:
        return f"Attendance saved successfully! {result.total} records processed."

    @app.route("/teacher/dashboard", methods=["GET"], endpoint="teacher_dashboard")
    @teacher_view
    @handle_errors("load dashboard data")
    def teacher_dashboard():
        profile = container.profile_service.resolve(current_profile_id())
        classes = container.class_service.list_active()
        recent = container.attendance_service.recent_for_teacher(profile.profile_id)
        return jsonify(
            {
                "profile": profile.to_public(),
                "classes": [c.to_public() for c in classes],
                "recent_attendance": [r.to_public() for r in recent],
            }
        )

    @app.route("/teacher/quick-attendance", methods=["GET"], endpoint="quick_attendance")
    @teacher_view
    @handle_errors("open default class")
    def quick_attendance():
        profile = container.profile_service.resolve(current_profile_id())
        if not profile.default_class_id:
            raise ValidationError("No default class set. Please select a class.")
        return jsonify(
            {
                "class_id": profile.default_class_id,
                "class_name": profile.default_class_name,
                "open": url_for("open_attendance"),
            }
        )

    @app.route("/teacher/classes", methods=["GET"], endpoint="teacher_classes")
    @teacher_view
    @handle_errors("load classes")
    def teacher_classes():
        return jsonify({"classes": [c.to_public() for c in container.class_service.list_active()]})

    @app.route("/teacher/attendance/open", methods=["POST"], endpoint="open_attendance")
    @teacher_view
    @handle_errors("load data")
    def open_attendance():
        data = payload()
        try:
            class_id = int(data.get("class_id") or 0)
        except (TypeError, ValueError):
            raise ValidationError("Class not found")
        if class_id <= 0:
            raise ValidationError("Class not found")
        attendance_date = parse_optional_date(data.get("date"), "Date") or today_local()

        workflow = _workflow()
        confirmation = workflow.open(class_id, attendance_date)
        if confirmation is not None:
            return jsonify(_sheet_body(workflow, success=False, confirmation=confirmation.to_public())), 409
        return jsonify(_sheet_body(workflow))

    @app.route("/teacher/attendance", methods=["GET"], endpoint="current_attendance")
    @teacher_view
    @handle_errors("load data")
    def current_attendance():
        workflow = _workflow()
        workflow.require_sheet()
        return jsonify(_sheet_body(workflow))

    @app.route("/teacher/attendance/entries/<int:student_id>", methods=["POST"], endpoint="set_attendance_entry")
    @teacher_view
    @handle_errors("update attendance")
    def set_attendance_entry(student_id: int):
        data = payload()
        fields = [f for f in ("status", "notes") if f in data]
        if not fields:
            raise ValidationError("Nothing to update")

        workflow = _workflow()
        for field in fields:
            workflow.set_field(student_id, field, data[field])
        return jsonify(_sheet_body(workflow))

    @app.route("/teacher/attendance/bulk", methods=["POST"], endpoint="bulk_attendance")
    @teacher_view
    @handle_errors("mark all students")
    def bulk_attendance():
        confirmation = _workflow().request_bulk_status(payload().get("status"))
        return jsonify({"success": False, "confirmation": confirmation.to_public()}), 409

    @app.route("/teacher/attendance/submit", methods=["POST"], endpoint="submit_attendance")
    @teacher_view
    @handle_errors("save attendance")
    def submit_attendance():
        workflow = _workflow()
        result = workflow.submit()
        return jsonify(
            _sheet_body(workflow, message=_saved_message(result), inserted=result.inserted, updated=result.updated)
        )

    @app.route("/teacher/attendance/confirm/<token>", methods=["POST"], endpoint="confirm_attendance_action")
    @teacher_view
    @handle_errors("complete this action")
    def confirm_attendance_action(token: str):
        workflow = _workflow()
        outcome = workflow.confirm(token)

        extra = {"action": outcome.action.value, "message": outcome.message}
        if outcome.result is not None:
            extra.update(
                message=_saved_message(outcome.result),
                inserted=outcome.result.inserted,
                updated=outcome.result.updated,
            )
        return jsonify(_sheet_body(workflow, **extra))

    @app.route("/teacher/attendance/decline/<token>", methods=["POST"], endpoint="decline_attendance_action")
    @teacher_view
    def decline_attendance_action(token: str):
        workflow = _workflow()
        workflow.decline(token)
        return jsonify(_sheet_body(workflow))
