from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import Student


class StudentRepository(Protocol):
    def get_by_id(self, student_id: int) -> Optional[Student]:
        raise NotImplementedError

    def list_roster(self, class_id: int) -> Sequence[Student]:
        """Active students of a class, ordered by last name ascending."""

        raise NotImplementedError

    def list_all(self) -> Sequence[Student]:
        raise NotImplementedError

    def create_student(
        self,
        *,
        student_number: str,
        first_name: str,
        last_name: str,
        class_id: int,
        enrollment_date: date,
        date_of_birth: Optional[date] = None,
    ) -> int:
        raise NotImplementedError

    def update_student(
        self,
        *,
        student_id: int,
        student_number: str,
        first_name: str,
        last_name: str,
        class_id: int,
        date_of_birth: Optional[date],
    ) -> bool:
        raise NotImplementedError

    def set_active(self, student_id: int, *, is_active: bool) -> bool:
        raise NotImplementedError
