from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from ..common.datetime_utils import parse_optional_date, today_local
from ..common.validators import require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, DuplicateKeyError, ValidationError
from .repository import StudentRepository

logger = logging.getLogger(__name__)

_DUPLICATE_NUMBER = "A student with this number already exists"


def _require_class_id(value) -> int:
    try:
        class_id = int(value)
    except (TypeError, ValueError):
        raise ValidationError("Class is required")
    if class_id <= 0:
        raise ValidationError("Class is required")
    return class_id


class StudentService:
    """Use case: manage student records (admin)."""

    def __init__(self, students: StudentRepository):
        self._students = students

    def list_all(self, *, current_role: Role):
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")
        return self._students.list_all()

    def create(
        self,
        *,
        current_role: Role,
        student_number: str,
        first_name: str,
        last_name: str,
        class_id,
        date_of_birth: Optional[str] = None,
        enrollment_date: Optional[str] = None,
    ) -> int:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")

        student_number = require_non_empty(student_number, "Student number")
        first_name = require_non_empty(first_name, "First name")
        last_name = require_non_empty(last_name, "Last name")
        class_id = _require_class_id(class_id)
        dob = parse_optional_date(date_of_birth, "Date of birth")
        enrolled: date = parse_optional_date(enrollment_date, "Enrollment date") or today_local()

        try:
            student_id = self._students.create_student(
                student_number=student_number,
                first_name=first_name,
                last_name=last_name,
                class_id=class_id,
                enrollment_date=enrolled,
                date_of_birth=dob,
            )
        except DuplicateKeyError:
            raise ValidationError(_DUPLICATE_NUMBER)

        logger.info("created student %s in class %s", student_id, class_id)
        return student_id

    def update(
        self,
        *,
        current_role: Role,
        student_id: int,
        student_number: str,
        first_name: str,
        last_name: str,
        class_id,
        date_of_birth: Optional[str] = None,
    ) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")
        if not self._students.get_by_id(student_id):
            raise ValidationError("Student not found")

        try:
            self._students.update_student(
                student_id=int(student_id),
                student_number=require_non_empty(student_number, "Student number"),
                first_name=require_non_empty(first_name, "First name"),
                last_name=require_non_empty(last_name, "Last name"),
                class_id=_require_class_id(class_id),
                date_of_birth=parse_optional_date(date_of_birth, "Date of birth"),
            )
        except DuplicateKeyError:
            raise ValidationError(_DUPLICATE_NUMBER)

    def toggle_active(self, *, current_role: Role, student_id: int) -> bool:
        """Deactivate or reactivate; students are never hard-deleted."""

        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")

        student = self._students.get_by_id(student_id)
        if not student:
            raise ValidationError("Student not found")

        new_state = not student.is_active
        self._students.set_active(student.student_id, is_active=new_state)
        logger.info("student %s active=%s", student.student_id, new_state)
        return new_state
