from __future__ import annotations

from typing import Optional

from ..common.validators import optional_text, require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ValidationError
from .repository import ClassRepository


def _parse_year_level(value) -> int:
    try:
        year_level = int(value)
    except (TypeError, ValueError):
        raise ValidationError("Year level is required")
    if year_level <= 0:
        raise ValidationError("Year level is required")
    return year_level


class ClassService:
    def __init__(self, classes: ClassRepository):
        self._classes = classes

    def list_active(self):
        return self._classes.list_classes(active_only=True)

    def get_active(self, class_id: int):
        cls = self._classes.get_by_id(int(class_id))
        if not cls or not cls.is_active:
            raise ValidationError("Class not found")
        return cls

    def list_all(self, *, current_role: Role):
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")
        return self._classes.list_classes()

    def create(self, *, current_role: Role, name: str, year_level, section: Optional[str] = None) -> int:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")

        return self._classes.create_class(
            name=require_non_empty(name, "Class name"),
            year_level=_parse_year_level(year_level),
            section=optional_text(section),
        )

    def update(self, *, current_role: Role, class_id: int, name: str, year_level, section: Optional[str]) -> None:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")
        if not self._classes.get_by_id(class_id):
            raise ValidationError("Class not found")

        self._classes.update_class(
            class_id=int(class_id),
            name=require_non_empty(name, "Class name"),
            year_level=_parse_year_level(year_level),
            section=optional_text(section),
        )

    def toggle_active(self, *, current_role: Role, class_id: int) -> bool:
        if current_role != Role.ADMIN:
            raise AuthorizationError("You do not have permission")

        cls = self._classes.get_by_id(class_id)
        if not cls:
            raise ValidationError("Class not found")

        new_state = not cls.is_active
        self._classes.set_active(cls.class_id, is_active=new_state)
        return new_state
