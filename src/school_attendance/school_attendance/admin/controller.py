from __future__ import annotations

from flask import Flask, jsonify

from ..common.validators import require_enum
from ..common.web import current_profile_id, current_role, handle_errors, optional_int, payload, role_required
from ..container import Container
from ..core.enums import Role


def register(app: Flask, container: Container) -> None:
    admin_view = role_required(Role.ADMIN, resolve=container.profile_service.resolve)

    @app.route("/admin/dashboard", methods=["GET"], endpoint="admin_dashboard")
    @admin_view
    @handle_errors("load dashboard data")
    def admin_dashboard():
        return jsonify({"stats": container.admin_overview_service.overview(current_role=current_role())})

    # Teachers / admins

    @app.route("/admin/teachers", methods=["GET"], endpoint="admin_teachers")
    @admin_view
    @handle_errors("load teachers")
    def admin_teachers():
        profiles = container.profile_admin_service.list_accounts(current_role=current_role())
        return jsonify({"teachers": [p.to_public() for p in profiles]})

    @app.route("/admin/teachers", methods=["POST"], endpoint="create_teacher")
    @admin_view
    @handle_errors("create teacher")
    def create_teacher():
        data = payload()
        role = require_enum(Role, data.get("role") or Role.TEACHER.value, "Role")
        profile_id = container.profile_admin_service.create_account(
            current_role=current_role(),
            email=data.get("email", ""),
            full_name=data.get("full_name", ""),
            password=data.get("password", ""),
            role=role,
            default_class_id=optional_int(data.get("default_class_id")),
        )
        label = "Admin" if role == Role.ADMIN else "Teacher"
        return jsonify({"success": True, "id": profile_id, "message": f"{label} created successfully!"}), 201

    @app.route("/admin/teachers/<int:profile_id>", methods=["POST"], endpoint="update_teacher")
    @admin_view
    @handle_errors("update teacher")
    def update_teacher(profile_id: int):
        data = payload()
        container.profile_admin_service.update_account(
            current_role=current_role(),
            profile_id=profile_id,
            full_name=data.get("full_name", ""),
            role=require_enum(Role, data.get("role") or Role.TEACHER.value, "Role"),
            default_class_id=optional_int(data.get("default_class_id")),
        )
        return jsonify({"success": True, "message": "Teacher updated successfully!"})

    @app.route("/admin/teachers/<int:profile_id>/toggle-status", methods=["POST"], endpoint="toggle_teacher_status")
    @admin_view
    @handle_errors("update teacher")
    def toggle_teacher_status(profile_id: int):
        status = container.profile_admin_service.toggle_status(
            current_role=current_role(),
            current_profile_id=current_profile_id(),
            profile_id=profile_id,
        )
        return jsonify({"success": True, "status": status.value, "message": f"Teacher is now {status.value}"})

    # Classes

    @app.route("/admin/classes", methods=["GET"], endpoint="admin_classes")
    @admin_view
    @handle_errors("load classes")
    def admin_classes():
        classes = container.class_service.list_all(current_role=current_role())
        return jsonify({"classes": [c.to_public() for c in classes]})

    @app.route("/admin/classes", methods=["POST"], endpoint="create_class")
    @admin_view
    @handle_errors("create class")
    def create_class():
        data = payload()
        class_id = container.class_service.create(
            current_role=current_role(),
            name=data.get("name", ""),
            year_level=data.get("year_level"),
            section=data.get("section"),
        )
        return jsonify({"success": True, "id": class_id, "message": "Class created successfully!"}), 201

    @app.route("/admin/classes/<int:class_id>", methods=["POST"], endpoint="update_class")
    @admin_view
    @handle_errors("update class")
    def update_class(class_id: int):
        data = payload()
        container.class_service.update(
            current_role=current_role(),
            class_id=class_id,
            name=data.get("name", ""),
            year_level=data.get("year_level"),
            section=data.get("section"),
        )
        return jsonify({"success": True, "message": "Class updated successfully!"})

    @app.route("/admin/classes/<int:class_id>/toggle-active", methods=["POST"], endpoint="toggle_class_active")
    @admin_view
    @handle_errors("update class")
    def toggle_class_active(class_id: int):
        is_active = container.class_service.toggle_active(current_role=current_role(), class_id=class_id)
        word = "reactivated" if is_active else "deactivated"
        return jsonify({"success": True, "is_active": is_active, "message": f"Class {word} successfully!"})

    # Students

    @app.route("/admin/students", methods=["GET"], endpoint="admin_students")
    @admin_view
    @handle_errors("load students")
    def admin_students():
        students = container.student_service.list_all(current_role=current_role())
        return jsonify({"students": [s.to_public() for s in students]})

    @app.route("/admin/students", methods=["POST"], endpoint="create_student")
    @admin_view
    @handle_errors("create student")
    def create_student():
        data = payload()
        student_id = container.student_service.create(
            current_role=current_role(),
            student_number=data.get("student_number", ""),
            first_name=data.get("first_name", ""),
            last_name=data.get("last_name", ""),
            class_id=data.get("class_id"),
            date_of_birth=data.get("date_of_birth"),
            enrollment_date=data.get("enrollment_date"),
        )
        return jsonify({"success": True, "id": student_id, "message": "Student created successfully!"}), 201

    @app.route("/admin/students/<int:student_id>", methods=["POST"], endpoint="update_student")
    @admin_view
    @handle_errors("update student")
    def update_student(student_id: int):
        data = payload()
        container.student_service.update(
            current_role=current_role(),
            student_id=student_id,
            student_number=data.get("student_number", ""),
            first_name=data.get("first_name", ""),
            last_name=data.get("last_name", ""),
            class_id=data.get("class_id"),
            date_of_birth=data.get("date_of_birth"),
        )
        return jsonify({"success": True, "message": "Student updated successfully!"})

    @app.route("/admin/students/<int:student_id>/toggle-active", methods=["POST"], endpoint="toggle_student_active")
    @admin_view
    @handle_errors("update student status")
    def toggle_student_active(student_id: int):
        is_active = container.student_service.toggle_active(current_role=current_role(), student_id=student_id)
        word = "reactivated" if is_active else "deactivated"
        return jsonify({"success": True, "is_active": is_active, "message": f"Student {word} successfully!"})
