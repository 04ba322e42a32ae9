from __future__ import annotations

from ..classes.repository import ClassRepository
from ..core.enums import Role
from ..core.exceptions import AuthorizationError
from ..profiles.repository import ProfileRepository
from ..students.repository import StudentRepository


class AdminOverviewService:
    """Headline counts for the admin dashboard."""

    def __init__(self, profiles: ProfileRepository, classes: ClassRepository, students: StudentRepository):
        self._profiles = profiles
        self._classes = classes
        self._students = students

    def overview(self, *, current_role: Role) -> dict:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")

        profiles = self._profiles.list_all()
        classes = self._classes.list_classes()
        students = self._students.list_all()

        return {
            "total_teachers": sum(1 for p in profiles if p.role == Role.TEACHER and p.is_active),
            "total_admins": sum(1 for p in profiles if p.role == Role.ADMIN and p.is_active),
            "total_classes": sum(1 for c in classes if c.is_active),
            "total_students": sum(1 for s in students if s.is_active),
        }
