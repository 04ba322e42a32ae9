from __future__ import annotations

from datetime import date, datetime

import pytest

from src.school_attendance.school_attendance.attendance.service import AttendanceService
from src.school_attendance.school_attendance.classes.model import SchoolClass
from tests.fakes import InMemoryAttendance, InMemoryClasses, InMemoryStudents, make_student


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 10, 17, 9, 30, 0)


@pytest.fixture
def today(fixed_now) -> date:
    return fixed_now.date()


@pytest.fixture
def alice():
    return make_student(1, "Alice", "Anders")


@pytest.fixture
def bob():
    return make_student(2, "Bob", "Brown")


@pytest.fixture
def roster(alice, bob):
    return [alice, bob]


@pytest.fixture
def classes_repo():
    return InMemoryClasses(
        SchoolClass(class_id=1, name="Year 7 Blue", year_level=7, section="B", student_count=2),
        SchoolClass(class_id=2, name="Year 8 Green", year_level=8, section="G", student_count=1),
    )


@pytest.fixture
def students_repo(alice, bob):
    return InMemoryStudents(
        alice,
        bob,
        make_student(3, "Chloe", "Carter", class_id=2),
        make_student(4, "Dan", "Doyle", active=False),
    )


@pytest.fixture
def attendance_repo():
    return InMemoryAttendance()


@pytest.fixture
def attendance_service(attendance_repo, students_repo, classes_repo, fixed_now):
    return AttendanceService(attendance_repo, students_repo, classes_repo, clock=lambda: fixed_now)
