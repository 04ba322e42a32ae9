from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class Student:
    """Domain entity: Student. Soft-deleted through ``is_active``."""

    student_id: int
    student_number: str
    first_name: str
    last_name: str
    class_id: int
    enrollment_date: Optional[date] = None
    date_of_birth: Optional[date] = None
    is_active: bool = True
    class_name: Optional[str] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def to_public(self) -> dict:
        return {
            "id": self.student_id,
            "student_number": self.student_number,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "class_id": self.class_id,
            "class_name": self.class_name,
            "date_of_birth": self.date_of_birth.isoformat() if self.date_of_birth else None,
            "enrollment_date": self.enrollment_date.isoformat() if self.enrollment_date else None,
            "is_active": self.is_active,
        }
