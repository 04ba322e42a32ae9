from datetime import date

import pytest

from src.school_attendance.school_attendance.admin.service import AdminOverviewService
from src.school_attendance.school_attendance.classes.service import ClassService
from src.school_attendance.school_attendance.core.enums import ProfileStatus, Role
from src.school_attendance.school_attendance.core.exceptions import AuthorizationError, ValidationError
from src.school_attendance.school_attendance.students.service import StudentService
from tests.fakes import InMemoryProfiles, make_profile


def test_overview_counts_only_active_entries(classes_repo, students_repo):
    profiles = InMemoryProfiles(
        make_profile(1, "admin@school.test", role=Role.ADMIN),
        make_profile(10, "t1@school.test"),
        make_profile(11, "t2@school.test", status=ProfileStatus.PAUSED),
    )
    classes_repo.set_active(2, is_active=False)

    stats = AdminOverviewService(profiles, classes_repo, students_repo).overview(current_role=Role.ADMIN)

    assert stats == {"total_teachers": 1, "total_admins": 1, "total_classes": 1, "total_students": 3}


def test_overview_requires_admin(classes_repo, students_repo):
    with pytest.raises(AuthorizationError):
        AdminOverviewService(InMemoryProfiles(), classes_repo, students_repo).overview(current_role=Role.TEACHER)


class TestClassService:
    def test_list_active_hides_deactivated(self, classes_repo):
        svc = ClassService(classes_repo)
        svc.toggle_active(current_role=Role.ADMIN, class_id=2)

        assert [c.class_id for c in svc.list_active()] == [1]
        assert [c.class_id for c in svc.list_all(current_role=Role.ADMIN)] == [1, 2]

    def test_create_validates_year_level(self, classes_repo):
        svc = ClassService(classes_repo)

        with pytest.raises(ValidationError, match="Year level"):
            svc.create(current_role=Role.ADMIN, name="Year 9 Red", year_level="nine")

        cid = svc.create(current_role=Role.ADMIN, name=" Year 9 Red ", year_level="9", section=" ")
        created = classes_repo.get_by_id(cid)
        assert (created.name, created.year_level, created.section) == ("Year 9 Red", 9, None)

    def test_get_active_unknown(self, classes_repo):
        with pytest.raises(ValidationError, match="Class not found"):
            ClassService(classes_repo).get_active(99)

    def test_teachers_cannot_manage_classes(self, classes_repo):
        with pytest.raises(AuthorizationError):
            ClassService(classes_repo).create(current_role=Role.TEACHER, name="X", year_level=1)


class TestStudentService:
    def test_create_defaults_enrollment_to_today(self, students_repo):
        sid = StudentService(students_repo).create(
            current_role=Role.ADMIN,
            student_number="S-0100",
            first_name="Eve",
            last_name="Evans",
            class_id="1",
            date_of_birth="2014-03-02",
        )

        created = students_repo.get_by_id(sid)
        assert created.class_id == 1
        assert created.date_of_birth == date(2014, 3, 2)
        assert created.enrollment_date is not None

    def test_duplicate_student_number(self, students_repo):
        with pytest.raises(ValidationError, match="already exists"):
            StudentService(students_repo).create(
                current_role=Role.ADMIN,
                student_number="S-0001",
                first_name="Eve",
                last_name="Evans",
                class_id=1,
            )

    def test_invalid_date_of_birth(self, students_repo):
        with pytest.raises(ValidationError):
            StudentService(students_repo).create(
                current_role=Role.ADMIN,
                student_number="S-0101",
                first_name="Eve",
                last_name="Evans",
                class_id=1,
                date_of_birth="02/03/2014",
            )

    def test_update_requires_class(self, students_repo):
        with pytest.raises(ValidationError, match="Class is required"):
            StudentService(students_repo).update(
                current_role=Role.ADMIN,
                student_id=1,
                student_number="S-0001",
                first_name="Alice",
                last_name="Anders",
                class_id=None,
            )

    def test_deactivated_students_leave_the_roster(self, students_repo):
        StudentService(students_repo).toggle_active(current_role=Role.ADMIN, student_id=1)

        assert [s.student_id for s in students_repo.list_roster(1)] == [2]
